"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.

Identity core: profiles, session stores and admin capabilities. Nothing
in this package performs I/O; callers pass the current time and an
``EventLog`` that collects the facts of each operation.
"""
from .capability import AdminCap, bootstrap_admin_cap, issue_admin_cap
from .clock import Clock, SystemClock
from .errors import (CapabilityBootstrapError, DuplicateKeyError,
                     IdentityError, InvalidEnumValueError, InvalidLengthError,
                     UnauthorizedError)
from .events import EventLog
from .profile import (AvatarAsset, AvatarAssetRef, AvatarMetadata, AvatarUrl,
                      MembershipTier, ProfileRecord)
from .registration import register
from .session_store import SESSION_VALIDITY_MS, SessionEntry, SessionStore

__all__ = ["AdminCap", "AvatarAsset", "AvatarAssetRef", "AvatarMetadata",
           "AvatarUrl", "CapabilityBootstrapError", "Clock",
           "DuplicateKeyError", "EventLog", "IdentityError",
           "InvalidEnumValueError", "InvalidLengthError",
           "MembershipTier", "ProfileRecord", "SESSION_VALIDITY_MS",
           "SessionEntry", "SessionStore", "SystemClock",
           "UnauthorizedError", "bootstrap_admin_cap", "issue_admin_cap",
           "register"]
