"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import uuid
from quart import Blueprint
from services.identity.api.profile_api_view import ProfileApiView
from services.identity.state_object import StateObject


def create_blueprint(logger: logging.Logger,
                     state_object: StateObject) -> Blueprint:
    """
    Creates the Quart Blueprint for registration and profile changes.

    Args:
        logger (logging.Logger): A logger instance for logging messages.
        state_object (StateObject): Shared service state.

    Returns:
        Blueprint: A Quart `Blueprint` object containing the routes.
    """
    view = ProfileApiView(logger, state_object)

    blueprint = Blueprint('profile_api', __name__)

    logger.debug("Registering Profile API routes:")

    logger.debug("=> /profiles/register [POST]")

    @blueprint.route("/register", methods=["POST"])
    async def profile_register_request():
        return await view.register()

    logger.debug("=> /profiles/<profile_id> [GET]")

    @blueprint.route("/<uuid:profile_id>", methods=["GET"])
    async def profile_get_request(profile_id: uuid.UUID):
        return await view.get_profile(profile_id)

    logger.debug("=> /profiles/<profile_id>/events [GET]")

    @blueprint.route("/<uuid:profile_id>/events", methods=["GET"])
    async def profile_events_request(profile_id: uuid.UUID):
        return await view.get_events(profile_id)

    logger.debug("=> /profiles/<profile_id>/nickname [POST]")

    @blueprint.route("/<uuid:profile_id>/nickname", methods=["POST"])
    async def profile_nickname_request(profile_id: uuid.UUID):
        return await view.update_nickname(profile_id)

    logger.debug("=> /profiles/<profile_id>/bio [POST]")

    @blueprint.route("/<uuid:profile_id>/bio", methods=["POST"])
    async def profile_bio_request(profile_id: uuid.UUID):
        return await view.update_bio(profile_id)

    logger.debug("=> /profiles/<profile_id>/avatar_url [POST]")

    @blueprint.route("/<uuid:profile_id>/avatar_url", methods=["POST"])
    async def profile_avatar_url_request(profile_id: uuid.UUID):
        return await view.set_avatar_url(profile_id)

    logger.debug("=> /profiles/<profile_id>/avatar_asset [POST]")

    @blueprint.route("/<uuid:profile_id>/avatar_asset", methods=["POST"])
    async def profile_avatar_asset_request(profile_id: uuid.UUID):
        return await view.mint_avatar_asset(profile_id)

    return blueprint
