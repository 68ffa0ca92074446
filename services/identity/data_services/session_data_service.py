"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from http import HTTPStatus
import logging
import typing
import uuid
from profilevault_common.base_data_access_layer import PersistenceError
from services.identity.data_access_layer import (EventDataAccessLayer,
                                                 SessionDataAccessLayer)
from services.identity.data_services.results import (identity_error_result,
                                                     not_found_result,
                                                     persistence_failure_result)
from services.identity.domain.authorization import require_owner
from services.identity.domain.clock import Clock
from services.identity.domain.errors import IdentityError
from services.identity.domain.events import EventLog


class SessionDataService:
    """
    Session lifecycle of one store per call: create, validate, revoke and
    expiry cleanup. Mutations lock the store row, so two calls against the
    same store never interleave.
    """

    def __init__(self,
                 session_dal: SessionDataAccessLayer,
                 event_dal: EventDataAccessLayer,
                 logger: logging.Logger,
                 clock: Clock):
        self._session_dal = session_dal
        self._event_dal = event_dal
        self._logger = logger.getChild(__name__)
        self._clock = clock

    async def get_summary(self, caller: str, store_id: uuid.UUID) -> dict:
        """ Owner only overview of a store. """
        try:
            store = await self._session_dal.fetch_session_store(store_id)
            if store is None:
                return not_found_result("Session store")
            require_owner(caller, store.owner)

        except IdentityError as ex:
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        now = self._clock.now_ms()
        live = store.live_count(now)
        return {"session_store_id": str(store.id),
                "owner": store.owner,
                "session_counter": store.session_counter,
                "live_sessions": live,
                "expired_sessions": len(store) - live,
                "status": HTTPStatus.OK}

    async def get_events(self, caller: str, store_id: uuid.UUID) -> dict:
        """ Owner only audit trail of a store, oldest fact first. """
        try:
            store = await self._session_dal.fetch_session_store(store_id)
            if store is None:
                return not_found_result("Session store")
            require_owner(caller, store.owner)

            events = await self._event_dal.fetch_events(store_id)

        except IdentityError as ex:
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        return {"session_store_id": str(store_id),
                "events": events,
                "status": HTTPStatus.OK}

    async def create_session(self, caller: str, store_id: uuid.UUID,
                             session_key: bytes) -> dict:
        events = EventLog()

        try:
            async with self._session_dal.transaction():
                store = await self._session_dal.fetch_session_store(
                    store_id, for_update=True)
                if store is None:
                    return not_found_result("Session store")

                now = self._clock.now_ms()
                entry = store.create_session(caller, session_key, now, events)
                await self._session_dal.insert_session(store, entry, now)
                await self._event_dal.append_events(events)

        except IdentityError as ex:
            self._logger.debug("Session creation on %s rejected: %s",
                               store_id, ex)
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        return {"session_store_id": str(store.id),
                "session_key": entry.session_pubkey.hex(),
                "created_at": entry.created_at,
                "expires_at": entry.expires_at,
                "session_counter": store.session_counter,
                "status": HTTPStatus.CREATED}

    async def validate_session(self, store_id: uuid.UUID,
                               session_key: bytes) -> dict:
        """
        Anyone may validate. An unknown key and an expired key give the
        same answer.
        """
        try:
            store = await self._session_dal.fetch_session_store(store_id)
        except PersistenceError:
            return persistence_failure_result()

        if store is None:
            return not_found_result("Session store")

        valid = store.validate_session(session_key, self._clock.now_ms())
        return {"valid": valid, "status": HTTPStatus.OK}

    async def revoke_session(self, caller: str, store_id: uuid.UUID,
                             session_key: bytes) -> dict:
        events = EventLog()

        try:
            async with self._session_dal.transaction():
                store = await self._session_dal.fetch_session_store(
                    store_id, for_update=True)
                if store is None:
                    return not_found_result("Session store")

                now = self._clock.now_ms()
                revoked = store.revoke_session(caller, session_key, now,
                                               events)
                if revoked:
                    await self._session_dal.delete_sessions(
                        store.id, [bytes(session_key)])
                    await self._event_dal.append_events(events)

        except IdentityError as ex:
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        return {"revoked": revoked, "status": HTTPStatus.OK}

    async def cleanup_expired_sessions(
            self, store_id: uuid.UUID,
            candidate_keys: typing.Sequence[bytes]) -> dict:
        """
        Remove the expired entries among ``candidate_keys``. Not owner
        gated and emits no facts.
        """
        try:
            async with self._session_dal.transaction():
                store = await self._session_dal.fetch_session_store(
                    store_id, for_update=True)
                if store is None:
                    return not_found_result("Session store")

                removed = store.cleanup_expired_sessions(
                    candidate_keys, self._clock.now_ms())
                await self._session_dal.delete_sessions(store.id, removed)

        except PersistenceError:
            return persistence_failure_result()

        return {"removed": [key.hex() for key in removed],
                "status": HTTPStatus.OK}

    async def purge_expired_sessions(self, caller: str,
                                     store_id: uuid.UUID) -> dict:
        """ Owner only: remove every expired entry of the store. """
        try:
            async with self._session_dal.transaction():
                store = await self._session_dal.fetch_session_store(
                    store_id, for_update=True)
                if store is None:
                    return not_found_result("Session store")

                removed = store.purge_expired_sessions(caller,
                                                       self._clock.now_ms())
                await self._session_dal.delete_sessions(store.id, removed)

        except IdentityError as ex:
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        self._logger.info("Purged %d expired session(s) from store %s",
                          len(removed), store_id)
        return {"removed": [key.hex() for key in removed],
                "status": HTTPStatus.OK}
