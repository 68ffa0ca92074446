"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from .capability_data_access_layer import CapabilityDataAccessLayer
from .event_data_access_layer import EventDataAccessLayer
from .profile_data_access_layer import ProfileDataAccessLayer
from .session_data_access_layer import SessionDataAccessLayer

__all__ = ["CapabilityDataAccessLayer", "EventDataAccessLayer",
           "ProfileDataAccessLayer", "SessionDataAccessLayer"]
