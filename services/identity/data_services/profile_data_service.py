"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from http import HTTPStatus
import inspect
import logging
import uuid
from profilevault_common.base_data_access_layer import PersistenceError
from services.identity.data_access_layer import (EventDataAccessLayer,
                                                 ProfileDataAccessLayer,
                                                 SessionDataAccessLayer)
from services.identity.data_services.results import (identity_error_result,
                                                     not_found_result,
                                                     persistence_failure_result,
                                                     profile_to_dict)
from services.identity.domain.clock import Clock
from services.identity.domain.errors import IdentityError
from services.identity.domain.events import EventLog
from services.identity.domain.profile import AvatarMetadata, ProfileRecord
from services.identity.domain.registration import register


class ProfileDataService:
    """
    Registration and owner-gated profile changes.

    Each mutating call runs as one transaction: the profile row is locked,
    the change is applied to the loaded record, then the record and the
    facts it produced are written. Any error rolls everything back.
    """

    def __init__(self,
                 profile_dal: ProfileDataAccessLayer,
                 session_dal: SessionDataAccessLayer,
                 event_dal: EventDataAccessLayer,
                 logger: logging.Logger,
                 clock: Clock):
        self._profile_dal = profile_dal
        self._session_dal = session_dal
        self._event_dal = event_dal
        self._logger = logger.getChild(__name__)
        self._clock = clock

    async def register(self, caller: str, nickname: str, bio: str,
                       identity_key: bytes, session_key: bytes) -> dict:
        """
        Handles registration:
         - Validates every field
         - Creates the profile and the session store with its first session
         - Records UserRegistered and SessionCreated
        """
        now = self._clock.now_ms()
        events = EventLog()

        try:
            profile, store = register(caller, nickname, bio, identity_key,
                                      session_key, now, events)

            async with self._profile_dal.transaction():
                await self._profile_dal.insert_profile(profile)
                await self._session_dal.insert_session_store(store, now)
                await self._event_dal.append_events(events)

        except IdentityError as ex:
            self._logger.debug("Registration rejected: %s", ex)
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        self._logger.info("Registered %s (profile %s, session store %s)",
                          caller, profile.id, store.id)

        entry = store.get_session(session_key)
        return {
            "message": "User registered",
            "profile": profile_to_dict(profile),
            "session_store_id": str(store.id),
            "session_expires_at": entry.expires_at,
            "status": HTTPStatus.CREATED
        }

    async def get_profile(self, profile_id: uuid.UUID) -> dict:
        try:
            profile = await self._profile_dal.fetch_profile(profile_id)
        except PersistenceError:
            return persistence_failure_result()

        if profile is None:
            return not_found_result("Profile")

        return {"profile": profile_to_dict(profile), "status": HTTPStatus.OK}

    async def get_events(self, profile_id: uuid.UUID) -> dict:
        """ Audit trail of a profile, oldest fact first. """
        try:
            profile = await self._profile_dal.fetch_profile(profile_id)
            if profile is None:
                return not_found_result("Profile")

            events = await self._event_dal.fetch_events(profile_id)

        except PersistenceError:
            return persistence_failure_result()

        return {"profile_id": str(profile_id),
                "events": events,
                "status": HTTPStatus.OK}

    async def update_nickname(self, caller: str, profile_id: uuid.UUID,
                              nickname: str) -> dict:
        return await self._mutate_profile(
            profile_id,
            lambda profile, now, events: profile.update_nickname(
                caller, nickname, now, events))

    async def update_bio(self, caller: str, profile_id: uuid.UUID,
                         bio: str) -> dict:
        return await self._mutate_profile(
            profile_id,
            lambda profile, now, events: profile.update_bio(
                caller, bio, now, events))

    async def set_avatar_url(self, caller: str, profile_id: uuid.UUID,
                             url: str) -> dict:
        return await self._mutate_profile(
            profile_id,
            lambda profile, now, events: profile.set_avatar_url(
                caller, url, now, events))

    async def mint_avatar_asset(self, caller: str, profile_id: uuid.UUID,
                                metadata: AvatarMetadata) -> dict:
        minted = []

        async def store_asset(profile: ProfileRecord, now: int,
                              events: EventLog) -> None:
            asset = profile.mint_avatar_asset(caller, metadata, now, events)
            await self._profile_dal.insert_avatar_asset(asset)
            minted.append(asset)

        result = await self._mutate_profile(profile_id, store_asset,
                                            success_status=HTTPStatus.CREATED)
        if minted and "error" not in result:
            result["asset_id"] = str(minted[0].id)
        return result

    async def _mutate_profile(self, profile_id: uuid.UUID, mutate,
                              success_status=HTTPStatus.OK) -> dict:
        """
        Run ``mutate(profile, now, events)`` against a locked profile and
        persist the outcome. ``mutate`` may be a coroutine function.
        """
        events = EventLog()

        try:
            async with self._profile_dal.transaction():
                profile = await self._profile_dal.fetch_profile(
                    profile_id, for_update=True)
                if profile is None:
                    return not_found_result("Profile")

                now = self._clock.now_ms()
                outcome = mutate(profile, now, events)
                if inspect.isawaitable(outcome):
                    await outcome

                await self._profile_dal.update_profile(profile)
                await self._event_dal.append_events(events)

        except IdentityError as ex:
            self._logger.debug("Profile %s change rejected: %s",
                               profile_id, ex)
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        return {"profile": profile_to_dict(profile), "status": success_status}
