"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from http import HTTPStatus
import logging
import uuid
from profilevault_common.base_data_access_layer import PersistenceError
from services.identity.data_access_layer import (CapabilityDataAccessLayer,
                                                 EventDataAccessLayer,
                                                 ProfileDataAccessLayer)
from services.identity.data_services.results import (identity_error_result,
                                                     not_found_result,
                                                     persistence_failure_result,
                                                     profile_to_dict)
from services.identity.domain.capability import (bootstrap_admin_cap,
                                                 issue_admin_cap)
from services.identity.domain.clock import Clock
from services.identity.domain.errors import (CapabilityBootstrapError,
                                             IdentityError,
                                             UnauthorizedError)
from services.identity.domain.events import EventLog
from services.identity.state_object import StateObject


class AdminDataService:
    """
    Capability gated operations.

    The capability is looked up by id; an unknown id is reported exactly
    like a capability the caller does not hold, so ids cannot be discovered.
    """

    def __init__(self,
                 capability_dal: CapabilityDataAccessLayer,
                 profile_dal: ProfileDataAccessLayer,
                 event_dal: EventDataAccessLayer,
                 state_object: StateObject,
                 logger: logging.Logger,
                 clock: Clock):
        # pylint: disable=too-many-arguments, too-many-positional-arguments
        self._capability_dal = capability_dal
        self._profile_dal = profile_dal
        self._event_dal = event_dal
        self._state_object = state_object
        self._logger = logger.getChild(__name__)
        self._clock = clock

    async def bootstrap(self, principal: str) -> dict:
        """
        Mint the root capability for ``principal`` unless one was minted
        before. Safe to call on every start.
        """
        try:
            async with self._capability_dal.transaction():
                already = await self._capability_dal.is_bootstrapped()
                capability = bootstrap_admin_cap(principal,
                                                 self._clock.now_ms(),
                                                 already)
                await self._capability_dal.insert_capability(capability)
                if not await self._capability_dal.record_bootstrap(
                        capability):
                    raise CapabilityBootstrapError(
                        "admin capability bootstrapped concurrently")

        except CapabilityBootstrapError:
            self._logger.info("Admin capability already bootstrapped")
            self._state_object.admin_bootstrapped = True
            return {"message": "Admin capability already bootstrapped",
                    "status": HTTPStatus.OK}

        except PersistenceError:
            return persistence_failure_result()

        self._state_object.admin_bootstrapped = True
        self._logger.info("Root admin capability %s minted for %s",
                          capability.id, principal)
        return {"capability_id": str(capability.id),
                "holder": capability.holder,
                "status": HTTPStatus.CREATED}

    async def issue_admin_cap(self, caller: str, capability_id: uuid.UUID,
                              recipient: str) -> dict:
        try:
            async with self._capability_dal.transaction():
                capability = await self._capability_dal.fetch_capability(
                    capability_id)
                new_capability = issue_admin_cap(capability, caller,
                                                 recipient,
                                                 self._clock.now_ms())
                await self._capability_dal.insert_capability(new_capability)

        except IdentityError as ex:
            self._logger.warning("Capability issue by %s rejected: %s",
                                 caller, ex)
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        return {"capability_id": str(new_capability.id),
                "issuer": new_capability.issuer,
                "holder": new_capability.holder,
                "status": HTTPStatus.CREATED}

    async def transfer_admin_cap(self, caller: str, capability_id: uuid.UUID,
                                 recipient: str) -> dict:
        """
        Hand a held capability to ``recipient``. The row is locked so two
        transfers of the same capability cannot both succeed.
        """
        try:
            async with self._capability_dal.transaction():
                capability = await self._capability_dal.fetch_capability(
                    capability_id, for_update=True)
                if capability is None:
                    raise UnauthorizedError("admin capability required")

                capability.transfer(caller, recipient)
                await self._capability_dal.update_holder(capability)

        except IdentityError as ex:
            self._logger.warning("Capability transfer by %s rejected: %s",
                                 caller, ex)
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        return {"capability_id": str(capability.id),
                "holder": capability.holder,
                "status": HTTPStatus.OK}

    async def set_verified(self, caller: str, capability_id: uuid.UUID,
                           profile_id: uuid.UUID, verified: bool) -> dict:
        return await self._gated_profile_change(
            caller, capability_id, profile_id,
            lambda profile, capability, now, events: profile.set_verified(
                capability, caller, verified, now, events))

    async def update_membership_tier(self, caller: str,
                                     capability_id: uuid.UUID,
                                     profile_id: uuid.UUID,
                                     new_tier: int) -> dict:
        return await self._gated_profile_change(
            caller, capability_id, profile_id,
            lambda profile, capability, now, events:
            profile.update_membership_tier(capability, caller, new_tier,
                                           now, events))

    async def _gated_profile_change(self, caller: str,
                                    capability_id: uuid.UUID,
                                    profile_id: uuid.UUID, change) -> dict:
        events = EventLog()

        try:
            async with self._profile_dal.transaction():
                capability = await self._capability_dal.fetch_capability(
                    capability_id)
                if capability is None:
                    raise UnauthorizedError("admin capability required")

                profile = await self._profile_dal.fetch_profile(
                    profile_id, for_update=True)
                if profile is None:
                    return not_found_result("Profile")

                change(profile, capability, self._clock.now_ms(), events)
                await self._profile_dal.update_profile(profile)
                await self._event_dal.append_events(events)

        except IdentityError as ex:
            self._logger.warning("Admin change of profile %s by %s "
                                 "rejected: %s", profile_id, caller, ex)
            return identity_error_result(ex)

        except PersistenceError:
            return persistence_failure_result()

        self._logger.info("Profile %s changed by admin %s", profile_id,
                          caller)
        return {"profile": profile_to_dict(profile), "status": HTTPStatus.OK}
