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
                                                 ProfileDataAccessLayer,
                                                 SessionDataAccessLayer)
from services.identity.data_services.profile_data_service import \
    ProfileDataService
from services.identity.domain.profile import AvatarMetadata
from services.identity.state_object import StateObject


# --- Request Models ---
class RegisterRequest(BaseModel):
    """
    Request model for registering a new identity.

    Attributes:
        nickname (str): Display nickname, 1 to 50 UTF-8 bytes.
        bio (str): Free text biography, up to 500 UTF-8 bytes.
        identity_key (bytes): Hex encoded 32 byte identity public key.
        session_key (bytes): Hex encoded 32 byte key of the first session.
    """
    nickname: str
    bio: str = ""
    identity_key: HexBytes
    session_key: HexBytes


class NicknameRequest(BaseModel):
    nickname: str


class BioRequest(BaseModel):
    bio: str


class AvatarUrlRequest(BaseModel):
    url: str


class AvatarAssetRequest(BaseModel):
    """
    Metadata of an avatar asset to mint.

    Attributes:
        name (str): Display name of the asset.
        description (str): Free text description.
        image_url (str): Location of the image.
        artist (Optional[str]): Artist credit.
    """
    name: str
    description: str
    image_url: str
    artist: typing.Optional[str] = None


class ProfileApiView(BaseApiView):
    """
    API view for registration and owner-gated profile changes.
    """

    def __init__(self, logger: logging.Logger,
                 state_object: StateObject) -> None:
        self._logger = logger.getChild(__name__)
        self._state_object = state_object

    def _service(self) -> ProfileDataService:
        db = quart.g.db
        return ProfileDataService(
            ProfileDataAccessLayer(db, self._logger, self._state_object),
            SessionDataAccessLayer(db, self._logger, self._state_object),
            EventDataAccessLayer(db, self._logger, self._state_object),
            self._logger,
            self._state_object.clock)

    async def register(self):
        """
        Register a new identity for the calling principal.

        Returns:
            tuple: (JSON response, HTTP status code)
                - 201 Created: profile and session store created.
                - 400 Bad Request: invalid body or field length.
                - 401 Unauthorized: no caller principal.
        """
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(RegisterRequest)
        if error:
            return error

        result = await self._service().register(
            caller, req.nickname, req.bio, req.identity_key, req.session_key)
        return self._result_response(result)

    async def get_profile(self, profile_id: uuid.UUID):
        result = await self._service().get_profile(profile_id)
        return self._result_response(result)

    async def get_events(self, profile_id: uuid.UUID):
        result = await self._service().get_events(profile_id)
        return self._result_response(result)

    async def update_nickname(self, profile_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(NicknameRequest)
        if error:
            return error

        result = await self._service().update_nickname(caller, profile_id,
                                                       req.nickname)
        return self._result_response(result)

    async def update_bio(self, profile_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(BioRequest)
        if error:
            return error

        result = await self._service().update_bio(caller, profile_id,
                                                  req.bio)
        return self._result_response(result)

    async def set_avatar_url(self, profile_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(AvatarUrlRequest)
        if error:
            return error

        result = await self._service().set_avatar_url(caller, profile_id,
                                                      req.url)
        return self._result_response(result)

    async def mint_avatar_asset(self, profile_id: uuid.UUID):
        caller, error = self._caller_principal()
        if error:
            return error

        req, error = await self._parse_body(AvatarAssetRequest)
        if error:
            return error

        metadata = AvatarMetadata(name=req.name,
                                  description=req.description,
                                  image_url=req.image_url,
                                  artist=req.artist)
        result = await self._service().mint_avatar_asset(caller, profile_id,
                                                         metadata)
        return self._result_response(result)
