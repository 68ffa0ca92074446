"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import uuid
from quart import Blueprint
from services.identity.api.session_api_view import SessionApiView
from services.identity.state_object import StateObject


def create_blueprint(logger: logging.Logger,
                     state_object: StateObject) -> Blueprint:
    """
    Creates the Quart Blueprint for session store operations.

    Args:
        logger (logging.Logger): A logger instance for logging messages.
        state_object (StateObject): Shared service state.

    Returns:
        Blueprint: A Quart `Blueprint` object containing the routes.
    """
    view = SessionApiView(logger, state_object)

    blueprint = Blueprint('session_api', __name__)

    logger.debug("Registering Session API routes:")

    logger.debug("=> /sessions/<store_id> [GET]")

    @blueprint.route("/<uuid:store_id>", methods=["GET"])
    async def session_summary_request(store_id: uuid.UUID):
        return await view.get_summary(store_id)

    logger.debug("=> /sessions/<store_id>/events [GET]")

    @blueprint.route("/<uuid:store_id>/events", methods=["GET"])
    async def session_events_request(store_id: uuid.UUID):
        return await view.get_events(store_id)

    logger.debug("=> /sessions/<store_id>/create [POST]")

    @blueprint.route("/<uuid:store_id>/create", methods=["POST"])
    async def session_create_request(store_id: uuid.UUID):
        return await view.create_session(store_id)

    logger.debug("=> /sessions/<store_id>/validate [POST]")

    @blueprint.route("/<uuid:store_id>/validate", methods=["POST"])
    async def session_validate_request(store_id: uuid.UUID):
        return await view.validate_session(store_id)

    logger.debug("=> /sessions/<store_id>/revoke [POST]")

    @blueprint.route("/<uuid:store_id>/revoke", methods=["POST"])
    async def session_revoke_request(store_id: uuid.UUID):
        return await view.revoke_session(store_id)

    logger.debug("=> /sessions/<store_id>/cleanup [POST]")

    @blueprint.route("/<uuid:store_id>/cleanup", methods=["POST"])
    async def session_cleanup_request(store_id: uuid.UUID):
        return await view.cleanup_expired_sessions(store_id)

    logger.debug("=> /sessions/<store_id>/purge [POST]")

    @blueprint.route("/<uuid:store_id>/purge", methods=["POST"])
    async def session_purge_request(store_id: uuid.UUID):
        return await view.purge_expired_sessions(store_id)

    return blueprint
