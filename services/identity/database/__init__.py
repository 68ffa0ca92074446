"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from .base import Base
from .profile import AvatarAsset, Profile
from .session import Session, SessionStore
from .admin_capability import AdminCapability, CapabilityBootstrap
from .identity_event import IdentityEvent

__all__ = ["AdminCapability", "AvatarAsset", "Base", "CapabilityBootstrap",
           "IdentityEvent", "Profile", "Session", "SessionStore"]
