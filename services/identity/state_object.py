"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import time
import typing
from dataclasses import dataclass, field
from profilevault_common.service_health_enums import ComponentDegradationLevel
from services.identity.domain.clock import Clock, SystemClock


@dataclass
class StateObject:
    """
    Runtime state of the identity service, shared by the views and the
    data access layers.

    Attributes:
        service_health (ComponentDegradationLevel): Health of the service.
        service_health_state_str (str): Description of the service health.
        database_health (ComponentDegradationLevel): Health of PostgreSQL.
        database_health_state_str (str): Description of the database
                                         health.
        version (str): Service version string.
        startup_time (int): Unix time the service started.
        admin_bootstrap_principal (Optional[str]): Principal configured to
            receive the root admin capability, None when not configured.
        admin_bootstrapped (bool): True once the root admin capability is
            known to exist.
        clock (Clock): Service clock shared by every request, so time
            handed to the identity core never goes backwards.
    """
    service_health: ComponentDegradationLevel = ComponentDegradationLevel.NONE
    service_health_state_str: str = ""
    database_health: ComponentDegradationLevel = ComponentDegradationLevel.NONE
    database_health_state_str: str = ""
    version: str = ""
    startup_time: int = field(default_factory=lambda: int(time.time()))
    admin_bootstrap_principal: typing.Optional[str] = None
    admin_bootstrapped: bool = False
    clock: Clock = field(default_factory=SystemClock)
