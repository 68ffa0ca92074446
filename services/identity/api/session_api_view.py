"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import typing
import uuid
from pydantic import BaseModel
import quart
from profilevault_common.base_api_view import BaseApiView
from services.identity.api.request_types import HexBytes
from services.identity.data_access_layer import (EventDataAccessLayer,
                                                 SessionDataAccessLayer)
from services.identity.data_services.session_data_service import \
    SessionDataService
from services.identity.state_object import StateObject


# --- Request Models ---
class SessionKeyRequest(BaseModel):
    """
    Request model carrying a single session key.

    Attributes:
        session_key (bytes): Hex encoded 32 byte session public key.
    """
    session_key: HexBytes


class CleanupRequest(BaseModel):
    session_keys: typing.List[HexBytes]


class SessionApiView(BaseApiView):
    """
    API view for the session lifecycle of a session store.
    """

    def __init__(self, logger: logging.Logger,
                 state_object: StateObject) -> None:
        self._logger = logger.getChild(__name__)
        self._state_object = state_object

    def _service(self) -> SessionDataService:
        db = quart.g.db
        return SessionDataService(
            SessionDataAccessLayer(db, self._logger, self._state_object),
            EventDataAccessLayer(db, self._logger, self._state_object),
            self._logger,
            self._state_object.clock)

    async def get_summary(self, store_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        result = await self._service().get_summary(caller, store_id)
        return self._result_response(result)

    async def get_events(self, store_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        result = await self._service().get_events(caller, store_id)
        return self._result_response(result)

    async def create_session(self, store_id: uuid.UUID):
        """
        Add a session key to the store. Owner only.

        Returns:
            tuple: (JSON response, HTTP status code)
                - 201 Created: session added.
                - 403 Forbidden: caller does not own the store.
                - 409 Conflict: key already present.
        """
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(SessionKeyRequest)
        if error:
            return error

        result = await self._service().create_session(caller, store_id,
                                                      req.session_key)
        return self._result_response(result)

    async def validate_session(self, store_id: uuid.UUID):
        req, error = await self._parse_body(SessionKeyRequest)
        if error:
            return error

        result = await self._service().validate_session(store_id,
                                                        req.session_key)
        return self._result_response(result)

    async def revoke_session(self, store_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(SessionKeyRequest)
        if error:
            return error

        result = await self._service().revoke_session(caller, store_id,
                                                      req.session_key)
        return self._result_response(result)

    async def cleanup_expired_sessions(self, store_id: uuid.UUID):
        req, error = await self._parse_body(CleanupRequest)
        if error:
            return error

        result = await self._service().cleanup_expired_sessions(
            store_id, req.session_keys)
        return self._result_response(result)

    async def purge_expired_sessions(self, store_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        result = await self._service().purge_expired_sessions(caller,
                                                              store_id)
        return self._result_response(result)
