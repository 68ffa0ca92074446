"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import typing
import uuid
from pydantic import BaseModel, Field
import quart
from profilevault_common.base_api_view import (PRINCIPAL_MAX_LENGTH,
                                               BaseApiView)
from services.identity.data_access_layer import (CapabilityDataAccessLayer,
                                                 EventDataAccessLayer,
                                                 ProfileDataAccessLayer)
from services.identity.data_services.admin_data_service import \
    AdminDataService
from services.identity.state_object import StateObject


# --- Request Models ---
class RecipientRequest(BaseModel):
    recipient: str = Field(..., min_length=1,
                           max_length=PRINCIPAL_MAX_LENGTH)


class CapabilityRequest(BaseModel):
    """
    Request model for capability gated profile changes.

    Attributes:
        capability_id (uuid.UUID): Admin capability presented by the caller.
    """
    capability_id: uuid.UUID


class MembershipRequest(CapabilityRequest):
    """
    Attributes:
        tier (Any): Requested membership tier. Range checking is done by
            the identity core so a bad value maps to InvalidEnumValue.
    """
    tier: typing.Any


class AdminApiView(BaseApiView):
    """
    API view for capability issuance and capability gated profile changes.
    """

    def __init__(self, logger: logging.Logger,
                 state_object: StateObject) -> None:
        self._logger = logger.getChild(__name__)
        self._state_object = state_object

    def _service(self) -> AdminDataService:
        db = quart.g.db
        return AdminDataService(
            CapabilityDataAccessLayer(db, self._logger, self._state_object),
            ProfileDataAccessLayer(db, self._logger, self._state_object),
            EventDataAccessLayer(db, self._logger, self._state_object),
            self._state_object,
            self._logger,
            self._state_object.clock)

    async def issue_capability(self, capability_id: uuid.UUID):
        """
        Mint a new admin capability for a recipient.

        Returns:
            tuple: (JSON response, HTTP status code)
                - 201 Created: capability minted.
                - 403 Forbidden: caller does not hold the capability.
        """
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(RecipientRequest)
        if error:
            return error

        result = await self._service().issue_admin_cap(caller,
                                                       capability_id,
                                                       req.recipient)
        return self._result_response(result)

    async def set_verified(self, profile_id: uuid.UUID, verified: bool):
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(CapabilityRequest)
        if error:
            return error

        result = await self._service().set_verified(
            caller, req.capability_id, profile_id, verified)
        return self._result_response(result)

    async def update_membership_tier(self, profile_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(MembershipRequest)
        if error:
            return error

        result = await self._service().update_membership_tier(
            caller, req.capability_id, profile_id, req.tier)
        return self._result_response(result)

    async def transfer_capability(self, capability_id: uuid.UUID):
        """
        Hand a held admin capability to a recipient.

        Returns:
            tuple: (JSON response, HTTP status code)
                - 200 OK: capability transferred, caller no longer holds it.
                - 403 Forbidden: caller does not hold the capability.
        """
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(RecipientRequest)
        if error:
            return error

        result = await self._service().transfer_admin_cap(caller,
                                                          capability_id,
                                                          req.recipient)
        return self._result_response(result)
