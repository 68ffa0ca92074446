"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import quart
from services.identity.state_object import StateObject
from .admin_api import create_blueprint as create_admin_bp
from .health_api import create_blueprint as create_health_bp
from .profile_api import create_blueprint as create_profile_bp
from .session_api import create_blueprint as create_session_bp


def create_routes(logger: logging.Logger,
                  state_object: StateObject) -> quart.Blueprint:
    """
    Create and configure the API route blueprint for the identity service.

    Args:
        logger (logging.Logger): Logger instance for logging within the APIs.
        state_object (StateObject): Shared service state.

    Returns:
        quart.Blueprint: The configured API blueprint with registered
                         sub-routes.
    """
    api_bp = quart.Blueprint("api_routes", __name__)

    api_bp.register_blueprint(create_profile_bp(logger, state_object),
                              url_prefix="/profiles")
    api_bp.register_blueprint(create_session_bp(logger, state_object),
                              url_prefix="/sessions")
    api_bp.register_blueprint(create_admin_bp(logger, state_object),
                              url_prefix="/admin")
    api_bp.register_blueprint(create_health_bp(logger, state_object))

    return api_bp
