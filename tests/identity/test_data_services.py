import contextlib
import logging
import unittest
import uuid
from http import HTTPStatus
from unittest.mock import AsyncMock, MagicMock

from profilevault_common.base_data_access_layer import PersistenceError
from services.identity.data_services.admin_data_service import \
    AdminDataService
from services.identity.data_services.profile_data_service import \
    ProfileDataService
from services.identity.data_services.session_data_service import \
    SessionDataService
from services.identity.domain.capability import (bootstrap_admin_cap,
                                                 issue_admin_cap)
from services.identity.domain.events import EventLog
from services.identity.domain.profile import (AvatarMetadata,
                                              MembershipTier,
                                              ProfileRecord)
from services.identity.domain.session_store import (SESSION_VALIDITY_MS,
                                                    SessionStore)
from services.identity.state_object import StateObject
from tests.identity.manual_clock import ManualClock

ALICE = "0xa11ce"
BOB = "0xb0b"
ADMIN = "0xad"
T0 = 1_700_000_000_000
IDENTITY_KEY = bytes(range(32))
KEY_A = bytes([0xAA]) * 32
KEY_B = bytes([0xBB]) * 32


@contextlib.asynccontextmanager
async def fake_transaction():
    yield


def make_dal(**methods):
    dal = MagicMock()
    dal.transaction = MagicMock(side_effect=lambda: fake_transaction())
    for name, value in methods.items():
        setattr(dal, name, value)
    return dal


def make_profile(**overrides):
    values = dict(owner=ALICE, nickname="alice", bio="", identity_key=IDENTITY_KEY,
                  created_at=T0, updated_at=T0)
    values.update(overrides)
    return ProfileRecord(**values)


def collected_events(event_dal):
    events = []
    for call in event_dal.append_events.await_args_list:
        events.extend(call.args[0])
    return events


class TestProfileDataService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.profile = make_profile()
        self.profile_dal = make_dal(
            insert_profile=AsyncMock(),
            fetch_profile=AsyncMock(return_value=self.profile),
            update_profile=AsyncMock(),
            insert_avatar_asset=AsyncMock())
        self.session_dal = make_dal(insert_session_store=AsyncMock())
        self.event_dal = make_dal(append_events=AsyncMock(),
                                  fetch_events=AsyncMock(return_value=[]))
        self.clock = ManualClock(T0 + 10)
        self.service = ProfileDataService(self.profile_dal, self.session_dal,
                                          self.event_dal,
                                          logging.getLogger("test"),
                                          self.clock)

    async def test_register_success(self):
        result = await self.service.register(ALICE, "alice", "hi",
                                             IDENTITY_KEY, KEY_A)

        self.assertEqual(result["status"], HTTPStatus.CREATED)
        self.assertEqual(result["profile"]["owner"], ALICE)
        self.assertEqual(result["profile"]["identity_key"],
                         IDENTITY_KEY.hex())
        self.assertEqual(result["session_expires_at"],
                         T0 + 10 + SESSION_VALIDITY_MS)

        self.profile_dal.insert_profile.assert_awaited_once()
        store = self.session_dal.insert_session_store.await_args.args[0]
        self.assertEqual(str(store.id), result["session_store_id"])
        self.assertEqual(store.session_counter, 1)

        kinds = [e.event_type for e in collected_events(self.event_dal)]
        self.assertEqual(kinds, ["UserRegistered", "SessionCreated"])

    async def test_register_invalid_nickname(self):
        result = await self.service.register(ALICE, "", "", IDENTITY_KEY,
                                             KEY_A)
        self.assertEqual(result["status"], HTTPStatus.BAD_REQUEST)
        self.assertEqual(result["error_kind"], "InvalidLengthError")
        self.profile_dal.insert_profile.assert_not_awaited()
        self.event_dal.append_events.assert_not_awaited()

    async def test_register_persistence_failure(self):
        self.session_dal.insert_session_store.side_effect = \
            PersistenceError("boom")
        result = await self.service.register(ALICE, "alice", "",
                                             IDENTITY_KEY, KEY_A)
        self.assertEqual(result["status"], HTTPStatus.SERVICE_UNAVAILABLE)
        self.event_dal.append_events.assert_not_awaited()

    async def test_get_profile(self):
        result = await self.service.get_profile(self.profile.id)
        self.assertEqual(result["status"], HTTPStatus.OK)
        self.assertEqual(result["profile"]["nickname"], "alice")

    async def test_get_profile_not_found(self):
        self.profile_dal.fetch_profile.return_value = None
        result = await self.service.get_profile(uuid.uuid4())
        self.assertEqual(result["status"], HTTPStatus.NOT_FOUND)

    async def test_get_events(self):
        self.event_dal.fetch_events.return_value = [{"event_type": "X"}]
        result = await self.service.get_events(self.profile.id)
        self.assertEqual(result["events"], [{"event_type": "X"}])
        self.event_dal.fetch_events.assert_awaited_once_with(self.profile.id)

    async def test_update_nickname_locks_and_persists(self):
        result = await self.service.update_nickname(ALICE, self.profile.id,
                                                    "alicia")

        self.assertEqual(result["status"], HTTPStatus.OK)
        self.assertEqual(result["profile"]["nickname"], "alicia")
        self.assertEqual(result["profile"]["updated_at"], T0 + 10)
        self.profile_dal.fetch_profile.assert_awaited_once_with(
            self.profile.id, for_update=True)
        self.profile_dal.update_profile.assert_awaited_once_with(self.profile)
        self.assertEqual(len(collected_events(self.event_dal)), 1)

    async def test_update_by_non_owner_forbidden(self):
        result = await self.service.update_bio(BOB, self.profile.id, "pwned")
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)
        self.assertEqual(result["error_kind"], "UnauthorizedError")
        self.profile_dal.update_profile.assert_not_awaited()
        self.event_dal.append_events.assert_not_awaited()

    async def test_update_missing_profile(self):
        self.profile_dal.fetch_profile.return_value = None
        result = await self.service.set_avatar_url(ALICE, uuid.uuid4(),
                                                   "https://x")
        self.assertEqual(result["status"], HTTPStatus.NOT_FOUND)

    async def test_mint_avatar_asset(self):
        self.profile.avatar = None
        result = await self.service.set_avatar_url(ALICE, self.profile.id,
                                                   "https://img/me.png")
        self.assertEqual(result["profile"]["avatar_url"],
                         "https://img/me.png")

        metadata = AvatarMetadata(name="Cat", description="A cat",
                                  image_url="https://img/cat.png")
        result = await self.service.mint_avatar_asset(ALICE, self.profile.id,
                                                      metadata)

        self.assertEqual(result["status"], HTTPStatus.CREATED)
        self.assertIsNone(result["profile"]["avatar_url"])
        self.assertEqual(result["profile"]["avatar_asset_id"],
                         result["asset_id"])
        asset = self.profile_dal.insert_avatar_asset.await_args.args[0]
        self.assertEqual(str(asset.id), result["asset_id"])

    async def test_mint_avatar_asset_by_other(self):
        metadata = AvatarMetadata(name="Cat", description="",
                                  image_url="https://img/cat.png")
        result = await self.service.mint_avatar_asset(BOB, self.profile.id,
                                                      metadata)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)
        self.assertNotIn("asset_id", result)
        self.profile_dal.insert_avatar_asset.assert_not_awaited()


class TestSessionDataService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = SessionStore(owner=ALICE)
        self.store.create_session(ALICE, KEY_A, T0, EventLog())
        self.session_dal = make_dal(
            fetch_session_store=AsyncMock(return_value=self.store),
            insert_session=AsyncMock(),
            delete_sessions=AsyncMock())
        self.event_dal = make_dal(append_events=AsyncMock())
        self.clock = ManualClock(T0 + 1)
        self.service = SessionDataService(self.session_dal, self.event_dal,
                                          logging.getLogger("test"),
                                          self.clock)

    async def test_create_session(self):
        result = await self.service.create_session(ALICE, self.store.id,
                                                   KEY_B)
        self.assertEqual(result["status"], HTTPStatus.CREATED)
        self.assertEqual(result["session_key"], KEY_B.hex())
        self.assertEqual(result["session_counter"], 2)
        self.session_dal.fetch_session_store.assert_awaited_once_with(
            self.store.id, for_update=True)
        self.session_dal.insert_session.assert_awaited_once()

    async def test_create_duplicate_conflict(self):
        result = await self.service.create_session(ALICE, self.store.id,
                                                   KEY_A)
        self.assertEqual(result["status"], HTTPStatus.CONFLICT)
        self.session_dal.insert_session.assert_not_awaited()

    async def test_create_by_non_owner(self):
        result = await self.service.create_session(BOB, self.store.id, KEY_B)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)

    async def test_create_unknown_store(self):
        self.session_dal.fetch_session_store.return_value = None
        result = await self.service.create_session(ALICE, uuid.uuid4(), KEY_B)
        self.assertEqual(result["status"], HTTPStatus.NOT_FOUND)

    async def test_validate_boundary(self):
        self.clock.set(T0 + SESSION_VALIDITY_MS)
        result = await self.service.validate_session(self.store.id, KEY_A)
        self.assertTrue(result["valid"])

        self.clock.advance(1)
        result = await self.service.validate_session(self.store.id, KEY_A)
        self.assertFalse(result["valid"])

    async def test_validate_persistence_failure(self):
        self.session_dal.fetch_session_store.side_effect = \
            PersistenceError("down")
        result = await self.service.validate_session(self.store.id, KEY_A)
        self.assertEqual(result["status"], HTTPStatus.SERVICE_UNAVAILABLE)

    async def test_revoke(self):
        result = await self.service.revoke_session(ALICE, self.store.id,
                                                   KEY_A)
        self.assertTrue(result["revoked"])
        self.session_dal.delete_sessions.assert_awaited_once_with(
            self.store.id, [KEY_A])
        self.event_dal.append_events.assert_awaited_once()

    async def test_revoke_absent_is_noop(self):
        result = await self.service.revoke_session(ALICE, self.store.id,
                                                   KEY_B)
        self.assertEqual(result["status"], HTTPStatus.OK)
        self.assertFalse(result["revoked"])
        self.session_dal.delete_sessions.assert_not_awaited()
        self.event_dal.append_events.assert_not_awaited()

    async def test_cleanup_not_owner_gated(self):
        self.clock.set(T0 + SESSION_VALIDITY_MS + 1)
        result = await self.service.cleanup_expired_sessions(
            self.store.id, [KEY_A, KEY_B])
        self.assertEqual(result["removed"], [KEY_A.hex()])
        self.session_dal.delete_sessions.assert_awaited_once_with(
            self.store.id, [KEY_A])

    async def test_purge_requires_owner(self):
        self.clock.set(T0 + SESSION_VALIDITY_MS + 1)
        result = await self.service.purge_expired_sessions(BOB, self.store.id)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)

        result = await self.service.purge_expired_sessions(ALICE,
                                                           self.store.id)
        self.assertEqual(result["removed"], [KEY_A.hex()])

    async def test_store_events_owner_only(self):
        self.event_dal.fetch_events = AsyncMock(return_value=[])
        result = await self.service.get_events(ALICE, self.store.id)
        self.assertEqual(result["status"], HTTPStatus.OK)
        self.event_dal.fetch_events.assert_awaited_once_with(self.store.id)

        result = await self.service.get_events(BOB, self.store.id)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)

    async def test_summary(self):
        self.clock.set(T0 + SESSION_VALIDITY_MS + 1)
        result = await self.service.get_summary(ALICE, self.store.id)
        self.assertEqual(result["session_counter"], 1)
        self.assertEqual(result["live_sessions"], 0)
        self.assertEqual(result["expired_sessions"], 1)

        result = await self.service.get_summary(BOB, self.store.id)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)


class TestAdminDataService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.root = bootstrap_admin_cap(ADMIN, T0, False)
        self.profile = make_profile()
        self.capability_dal = make_dal(
            fetch_capability=AsyncMock(return_value=self.root),
            insert_capability=AsyncMock(),
            is_bootstrapped=AsyncMock(return_value=False),
            record_bootstrap=AsyncMock(return_value=True))
        self.profile_dal = make_dal(
            fetch_profile=AsyncMock(return_value=self.profile),
            update_profile=AsyncMock())
        self.event_dal = make_dal(append_events=AsyncMock())
        self.state = StateObject()
        self.service = AdminDataService(self.capability_dal,
                                        self.profile_dal, self.event_dal,
                                        self.state,
                                        logging.getLogger("test"),
                                        ManualClock(T0 + 5))

    async def test_bootstrap_first_time(self):
        result = await self.service.bootstrap(ADMIN)
        self.assertEqual(result["status"], HTTPStatus.CREATED)
        self.assertEqual(result["holder"], ADMIN)
        self.assertTrue(self.state.admin_bootstrapped)
        self.capability_dal.insert_capability.assert_awaited_once()

    async def test_bootstrap_already_done(self):
        self.capability_dal.is_bootstrapped.return_value = True
        result = await self.service.bootstrap(ADMIN)
        self.assertEqual(result["status"], HTTPStatus.OK)
        self.assertTrue(self.state.admin_bootstrapped)
        self.capability_dal.insert_capability.assert_not_awaited()

    async def test_bootstrap_lost_race(self):
        self.capability_dal.record_bootstrap.return_value = False
        result = await self.service.bootstrap(ADMIN)
        self.assertEqual(result["status"], HTTPStatus.OK)

    async def test_bootstrap_database_down(self):
        self.capability_dal.is_bootstrapped.side_effect = \
            PersistenceError("down")
        result = await self.service.bootstrap(ADMIN)
        self.assertEqual(result["status"], HTTPStatus.SERVICE_UNAVAILABLE)
        self.assertFalse(self.state.admin_bootstrapped)

    async def test_issue(self):
        result = await self.service.issue_admin_cap(ADMIN, self.root.id, BOB)
        self.assertEqual(result["status"], HTTPStatus.CREATED)
        self.assertEqual(result["issuer"], ADMIN)
        self.assertEqual(result["holder"], BOB)

    async def test_issue_by_non_holder(self):
        result = await self.service.issue_admin_cap(BOB, self.root.id, BOB)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)
        self.capability_dal.insert_capability.assert_not_awaited()

    async def test_issue_unknown_capability(self):
        self.capability_dal.fetch_capability.return_value = None
        result = await self.service.issue_admin_cap(ADMIN, uuid.uuid4(), BOB)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)

    async def test_transfer(self):
        self.capability_dal.update_holder = AsyncMock()
        result = await self.service.transfer_admin_cap(ADMIN, self.root.id,
                                                       BOB)

        self.assertEqual(result["status"], HTTPStatus.OK)
        self.assertEqual(result["holder"], BOB)
        self.capability_dal.fetch_capability.assert_awaited_once_with(
            self.root.id, for_update=True)
        self.capability_dal.update_holder.assert_awaited_once_with(self.root)

        # The previous holder has lost access.
        result = await self.service.set_verified(ADMIN, self.root.id,
                                                 self.profile.id, True)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)
        result = await self.service.set_verified(BOB, self.root.id,
                                                 self.profile.id, True)
        self.assertEqual(result["status"], HTTPStatus.OK)

    async def test_transfer_by_non_holder(self):
        self.capability_dal.update_holder = AsyncMock()
        result = await self.service.transfer_admin_cap(BOB, self.root.id, BOB)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)
        self.assertEqual(self.root.holder, ADMIN)
        self.capability_dal.update_holder.assert_not_awaited()

    async def test_transfer_unknown_capability(self):
        self.capability_dal.fetch_capability.return_value = None
        result = await self.service.transfer_admin_cap(ADMIN, uuid.uuid4(),
                                                       BOB)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)

    async def test_verify(self):
        result = await self.service.set_verified(ADMIN, self.root.id,
                                                 self.profile.id, True)
        self.assertEqual(result["status"], HTTPStatus.OK)
        self.assertTrue(result["profile"]["is_verified"])
        self.profile_dal.update_profile.assert_awaited_once()

    async def test_verify_with_issued_capabilities(self):
        cap_a = issue_admin_cap(self.root, ADMIN, ALICE, T0)
        cap_b = issue_admin_cap(self.root, ADMIN, BOB, T0)

        self.capability_dal.fetch_capability.return_value = cap_a
        result = await self.service.set_verified(ALICE, cap_a.id,
                                                 self.profile.id, True)
        self.assertTrue(result["profile"]["is_verified"])

        self.capability_dal.fetch_capability.return_value = cap_b
        result = await self.service.set_verified(BOB, cap_b.id,
                                                 self.profile.id, False)
        self.assertFalse(result["profile"]["is_verified"])

    async def test_verify_unknown_capability(self):
        self.capability_dal.fetch_capability.return_value = None
        result = await self.service.set_verified(ADMIN, uuid.uuid4(),
                                                 self.profile.id, True)
        self.assertEqual(result["status"], HTTPStatus.FORBIDDEN)
        self.assertFalse(self.profile.is_verified)

    async def test_verify_unknown_profile(self):
        self.profile_dal.fetch_profile.return_value = None
        result = await self.service.set_verified(ADMIN, self.root.id,
                                                 uuid.uuid4(), True)
        self.assertEqual(result["status"], HTTPStatus.NOT_FOUND)

    async def test_membership(self):
        result = await self.service.update_membership_tier(
            ADMIN, self.root.id, self.profile.id, 1)
        self.assertEqual(result["profile"]["membership_tier"], 1)
        self.assertIs(self.profile.membership_tier, MembershipTier.PREMIUM)

    async def test_membership_invalid_tier(self):
        result = await self.service.update_membership_tier(
            ADMIN, self.root.id, self.profile.id, 2)
        self.assertEqual(result["status"], HTTPStatus.BAD_REQUEST)
        self.assertEqual(result["error_kind"], "InvalidEnumValueError")
        self.profile_dal.update_profile.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
