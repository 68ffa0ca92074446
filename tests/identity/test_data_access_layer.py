import json
import logging
import unittest
import uuid
from unittest.mock import AsyncMock, MagicMock

import asyncpg

from profilevault_common.base_data_access_layer import PersistenceError
from profilevault_common.service_health_enums import \
    ComponentDegradationLevel
from services.identity.data_access_layer import (CapabilityDataAccessLayer,
                                                 EventDataAccessLayer,
                                                 ProfileDataAccessLayer,
                                                 SessionDataAccessLayer)
from services.identity.domain.capability import bootstrap_admin_cap
from services.identity.domain.events import EventLog, ProfileUpdated
from services.identity.domain.profile import (AvatarAssetRef, AvatarUrl,
                                              MembershipTier)
from services.identity.domain.session_store import SessionStore
from services.identity.state_object import StateObject

T0 = 1_700_000_000_000
KEY_A = bytes([0xAA]) * 32


def profile_row(**overrides):
    row = {"id": uuid.uuid4(), "owner": "0xa11ce", "nickname": "alice",
           "bio": "", "avatar_url": None, "avatar_asset_id": None,
           "membership_tier": 1, "is_verified": True,
           "identity_key": bytes(32), "created_at": T0, "updated_at": T0}
    row.update(overrides)
    return row


class DalTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.db = MagicMock()
        self.db.execute = AsyncMock()
        self.db.executemany = AsyncMock()
        self.db.fetch = AsyncMock(return_value=[])
        self.db.fetchrow = AsyncMock(return_value=None)
        self.state = StateObject()
        self.logger = logging.getLogger("test")


class TestProfileDataAccessLayer(DalTestCase):
    async def test_fetch_profile_maps_row(self):
        row = profile_row(avatar_url="https://img/me.png")
        self.db.fetchrow.return_value = row
        dal = ProfileDataAccessLayer(self.db, self.logger, self.state)

        profile = await dal.fetch_profile(row["id"])

        self.assertEqual(profile.id, row["id"])
        self.assertEqual(profile.avatar, AvatarUrl("https://img/me.png"))
        self.assertIs(profile.membership_tier, MembershipTier.PREMIUM)
        self.assertTrue(profile.is_verified)

    async def test_fetch_profile_asset_avatar(self):
        asset_id = uuid.uuid4()
        self.db.fetchrow.return_value = profile_row(avatar_asset_id=asset_id)
        dal = ProfileDataAccessLayer(self.db, self.logger, self.state)

        profile = await dal.fetch_profile(uuid.uuid4())
        self.assertEqual(profile.avatar, AvatarAssetRef(asset_id))

    async def test_fetch_for_update_locks_row(self):
        dal = ProfileDataAccessLayer(self.db, self.logger, self.state)
        self.assertIsNone(await dal.fetch_profile(uuid.uuid4(),
                                                  for_update=True))
        query = self.db.fetchrow.await_args.args[0]
        self.assertTrue(query.rstrip().endswith("FOR UPDATE"))

    async def test_connection_failure_degrades_database(self):
        self.db.fetchrow.side_effect = OSError("refused")
        dal = ProfileDataAccessLayer(self.db, self.logger, self.state)

        with self.assertRaises(PersistenceError):
            await dal.fetch_profile(uuid.uuid4())
        self.assertEqual(self.state.database_health,
                         ComponentDegradationLevel.FULLY_DEGRADED)

    async def test_postgres_error_partly_degrades(self):
        self.db.execute.side_effect = asyncpg.PostgresError("bad")
        dal = ProfileDataAccessLayer(self.db, self.logger, self.state)
        row = profile_row()
        self.db.fetchrow.return_value = row
        profile = await dal.fetch_profile(row["id"])

        with self.assertRaises(PersistenceError):
            await dal.update_profile(profile)
        self.assertEqual(self.state.database_health,
                         ComponentDegradationLevel.PART_DEGRADED)

    async def test_unexpected_error_degrades_service(self):
        self.db.execute.side_effect = RuntimeError("bug")
        dal = ProfileDataAccessLayer(self.db, self.logger, self.state)
        row = profile_row()
        self.db.fetchrow.return_value = row
        profile = await dal.fetch_profile(row["id"])

        with self.assertRaises(PersistenceError):
            await dal.insert_profile(profile)
        self.assertEqual(self.state.service_health,
                         ComponentDegradationLevel.FULLY_DEGRADED)


class TestSessionDataAccessLayer(DalTestCase):
    async def test_fetch_store_with_entries(self):
        store_id = uuid.uuid4()
        self.db.fetchrow.return_value = {"id": store_id, "owner": "0xa11ce",
                                         "session_counter": 3}
        self.db.fetch.return_value = [{"session_pubkey": KEY_A,
                                       "created_at": T0,
                                       "expires_at": T0 + 10}]
        dal = SessionDataAccessLayer(self.db, self.logger, self.state)

        store = await dal.fetch_session_store(store_id)

        self.assertEqual(store.id, store_id)
        self.assertEqual(store.session_counter, 3)
        self.assertEqual(store.get_session(KEY_A).expires_at, T0 + 10)

    async def test_fetch_missing_store(self):
        dal = SessionDataAccessLayer(self.db, self.logger, self.state)
        self.assertIsNone(await dal.fetch_session_store(uuid.uuid4()))
        self.db.fetch.assert_not_awaited()

    async def test_insert_store_writes_entries(self):
        store = SessionStore(owner="0xa11ce")
        store.create_session("0xa11ce", KEY_A, T0, EventLog())
        dal = SessionDataAccessLayer(self.db, self.logger, self.state)

        await dal.insert_session_store(store, T0)
        self.assertEqual(self.db.execute.await_count, 2)

    async def test_delete_nothing_skips_query(self):
        dal = SessionDataAccessLayer(self.db, self.logger, self.state)
        await dal.delete_sessions(uuid.uuid4(), [])
        self.db.execute.assert_not_awaited()

    async def test_delete_sessions(self):
        store_id = uuid.uuid4()
        dal = SessionDataAccessLayer(self.db, self.logger, self.state)
        await dal.delete_sessions(store_id, [KEY_A])
        self.assertEqual(self.db.execute.await_args.args[1:],
                         (store_id, [KEY_A]))


class TestCapabilityDataAccessLayer(DalTestCase):
    async def test_fetch_capability(self):
        cap_id = uuid.uuid4()
        self.db.fetchrow.return_value = {"id": cap_id, "issuer": "0xad",
                                         "holder": "0xb0b",
                                         "created_at": T0}
        dal = CapabilityDataAccessLayer(self.db, self.logger, self.state)

        cap = await dal.fetch_capability(cap_id)
        self.assertEqual((cap.id, cap.holder), (cap_id, "0xb0b"))

    async def test_fetch_unknown_capability(self):
        dal = CapabilityDataAccessLayer(self.db, self.logger, self.state)
        self.assertIsNone(await dal.fetch_capability(uuid.uuid4()))

    async def test_fetch_capability_for_update_locks_row(self):
        dal = CapabilityDataAccessLayer(self.db, self.logger, self.state)
        await dal.fetch_capability(uuid.uuid4(), for_update=True)
        self.assertIn("FOR UPDATE", self.db.fetchrow.await_args.args[0])

    async def test_update_holder(self):
        cap = bootstrap_admin_cap("0xad", T0, False)
        cap.transfer("0xad", "0xb0b")
        dal = CapabilityDataAccessLayer(self.db, self.logger, self.state)

        await dal.update_holder(cap)

        query, cap_id, holder = self.db.execute.await_args.args
        self.assertIn("UPDATE admin_capabilities SET holder", query)
        self.assertEqual((cap_id, holder), (cap.id, "0xb0b"))

    async def test_bootstrap_marker(self):
        dal = CapabilityDataAccessLayer(self.db, self.logger, self.state)
        self.assertFalse(await dal.is_bootstrapped())

        cap = bootstrap_admin_cap("0xad", T0, False)
        self.db.fetchrow.return_value = {"id": 1}
        self.assertTrue(await dal.record_bootstrap(cap))
        self.assertIn("ON CONFLICT (id) DO NOTHING",
                      self.db.fetchrow.await_args.args[0])

        self.db.fetchrow.return_value = None
        self.assertFalse(await dal.record_bootstrap(cap))


class TestEventDataAccessLayer(DalTestCase):
    async def test_append_events(self):
        subject = uuid.uuid4()
        events = EventLog()
        events.emit(ProfileUpdated(subject, "0xa11ce", T0, field="bio"))
        dal = EventDataAccessLayer(self.db, self.logger, self.state)

        await dal.append_events(events)

        query, records = self.db.executemany.await_args.args
        self.assertIn("ON CONFLICT (event_id) DO NOTHING", query)
        self.assertEqual(records[0][1], "ProfileUpdated")
        self.assertEqual(records[0][2], subject)
        self.assertEqual(json.loads(records[0][5]), {"field": "bio"})

    async def test_append_nothing(self):
        dal = EventDataAccessLayer(self.db, self.logger, self.state)
        await dal.append_events(EventLog())
        self.db.executemany.assert_not_awaited()

    async def test_fetch_events_decodes_payload(self):
        event_id = uuid.uuid4()
        self.db.fetch.return_value = [{"event_id": event_id,
                                       "event_type": "ProfileUpdated",
                                       "principal": "0xa11ce",
                                       "timestamp": T0,
                                       "payload": '{"field": "bio"}'}]
        dal = EventDataAccessLayer(self.db, self.logger, self.state)

        events = await dal.fetch_events(uuid.uuid4())
        self.assertEqual(events[0]["event_id"], str(event_id))
        self.assertEqual(events[0]["payload"], {"field": "bio"})


if __name__ == "__main__":
    unittest.main()
