"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from .admin_data_service import AdminDataService
from .profile_data_service import ProfileDataService
from .session_data_service import SessionDataService

__all__ = ["AdminDataService", "ProfileDataService", "SessionDataService"]
