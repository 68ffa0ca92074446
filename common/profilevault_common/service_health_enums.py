"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from enum import Enum


class ServiceDegradationStatus(Enum):
    """ Overall status reported by the health endpoint """

    HEALTHY = "healthy"

    # A component is partly failing, requests may still succeed
    DEGRADED = "degraded"

    # Identity records cannot be read or written
    CRITICAL = "critical"


class ComponentDegradationLevel(Enum):
    """ Degradation level of a single component (database, service) """

    NONE = "none"
    PART_DEGRADED = "partial"
    FULLY_DEGRADED = "fully_degraded"
