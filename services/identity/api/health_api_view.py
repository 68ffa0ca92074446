"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import http
import json
import logging
import time
from quart import Response
from profilevault_common.base_api_view import BaseApiView
from profilevault_common.service_health_enums import (
    ServiceDegradationStatus,
    ComponentDegradationLevel)
from services.identity.state_object import StateObject


class HealthApiView(BaseApiView):
    """
    Health check of the identity service.

    Reports the degradation level of the database and of the service,
    uptime, version and whether the root admin capability exists.

    Attributes:
        _logger (logging.Logger): Logger instance for recording events.
        _state_object (StateObject): Shared state object containing health
                                     and version info.
    """

    def __init__(self, logger: logging.Logger,
                 state_object: StateObject) -> None:
        self._logger = logger.getChild(__name__)
        self._state_object = state_object

    def _collect_issues(self) -> list:
        issues: list = []

        if self._state_object.database_health != \
                ComponentDegradationLevel.NONE:
            issues.append(
                {"component": "database",
                 "status": self._state_object.database_health.value,
                 "details": self._state_object.database_health_state_str})

        if self._state_object.service_health != \
                ComponentDegradationLevel.NONE:
            issues.append(
                {"component": "service",
                 "status": self._state_object.service_health.value,
                 "details": self._state_object.service_health_state_str})

        return issues

    async def health(self):
        """
        Performs a health check and returns a JSON response with the status.

        Returns:
            quart.Response: JSON response with the overall status, the
                            dependency statuses, current issues (if any),
                            uptime, version and admin bootstrap state.
        """
        uptime: int = int(time.time()) - self._state_object.startup_time
        issues = self._collect_issues()

        if issues:
            status = ServiceDegradationStatus.CRITICAL.value \
                if any(issue["status"] ==
                       ComponentDegradationLevel.FULLY_DEGRADED.value
                       for issue in issues) \
                else ServiceDegradationStatus.DEGRADED.value
        else:
            status = ServiceDegradationStatus.HEALTHY.value

        response: dict = {
            "status": status,
            "dependencies": {
                "database": self._state_object.database_health.value,
                "service": self._state_object.service_health.value
            },
            "issues": issues if issues else None,
            "admin_bootstrapped": self._state_object.admin_bootstrapped,
            "uptime_seconds": uptime,
            "version": self._state_object.version
        }

        return Response(json.dumps(response),
                        status=http.HTTPStatus.OK,
                        content_type="application/json")
