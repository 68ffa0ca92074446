"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import uuid
from quart import Blueprint
from services.identity.api.admin_api_view import AdminApiView
from services.identity.state_object import StateObject


def create_blueprint(logger: logging.Logger,
                     state_object: StateObject) -> Blueprint:
    """
    Creates the Quart Blueprint for admin capability operations.

    Args:
        logger (logging.Logger): A logger instance for logging messages.
        state_object (StateObject): Shared service state.

    Returns:
        Blueprint: A Quart `Blueprint` object containing the routes.
    """
    view = AdminApiView(logger, state_object)

    blueprint = Blueprint('admin_api', __name__)

    logger.debug("Registering Admin API routes:")

    logger.debug("=> /admin/capabilities/<capability_id>/issue [POST]")

    @blueprint.route("/capabilities/<uuid:capability_id>/issue",
                     methods=["POST"])
    async def admin_issue_capability_request(capability_id: uuid.UUID):
        return await view.issue_capability(capability_id)

    logger.debug("=> /admin/capabilities/<capability_id>/transfer [POST]")

    @blueprint.route("/capabilities/<uuid:capability_id>/transfer",
                     methods=["POST"])
    async def admin_transfer_capability_request(capability_id: uuid.UUID):
        return await view.transfer_capability(capability_id)

    logger.debug("=> /admin/profiles/<profile_id>/verify [POST]")

    @blueprint.route("/profiles/<uuid:profile_id>/verify", methods=["POST"])
    async def admin_verify_request(profile_id: uuid.UUID):
        return await view.set_verified(profile_id, True)

    logger.debug("=> /admin/profiles/<profile_id>/unverify [POST]")

    @blueprint.route("/profiles/<uuid:profile_id>/unverify",
                     methods=["POST"])
    async def admin_unverify_request(profile_id: uuid.UUID):
        return await view.set_verified(profile_id, False)

    logger.debug("=> /admin/profiles/<profile_id>/membership [POST]")

    @blueprint.route("/profiles/<uuid:profile_id>/membership",
                     methods=["POST"])
    async def admin_membership_request(profile_id: uuid.UUID):
        return await view.update_membership_tier(profile_id)

    return blueprint
