"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import abc
import logging
import asyncpg
from profilevault_common.service_health_enums import \
    ComponentDegradationLevel


class PersistenceError(Exception):
    """
    Raised by a data access layer when the database rejected or failed an
    operation. Raising it inside ``transaction()`` rolls the work back.
    """


class BaseDataAccessLayer(abc.ABC):
    """
    Shared plumbing for the asyncpg backed data access layers.

    Attributes:
        _db: asyncpg connection acquired for the current request.
        _logger (logging.Logger): Child logger for the concrete layer.
        _state_object: Service state whose database health is downgraded
            when a query fails.
    """

    def __init__(self, db, logger: logging.Logger, state_object):
        self._db = db
        self._logger: logging.Logger = logger.getChild(__name__)
        self._state_object = state_object

    def transaction(self):
        """
        Start a transaction on the request connection.

        Returns:
            asyncpg transaction usable as ``async with``.
        """
        return self._db.transaction()

    def _mark_database_healthy(self) -> None:
        if self._state_object.database_health != \
                ComponentDegradationLevel.FULLY_DEGRADED:
            self._state_object.database_health = \
                ComponentDegradationLevel.NONE
            self._state_object.database_health_state_str = \
                "Database operational"

    def _database_failure(self, action: str,
                          ex: Exception) -> PersistenceError:
        """
        Log a failed query, downgrade database health and build the
        exception the caller should raise.

        Args:
            action (str): Short description, e.g. "inserting session".
            ex (Exception): The error raised by asyncpg.

        Returns:
            PersistenceError: Exception chained from ``ex``.
        """
        if isinstance(ex, (asyncpg.PostgresConnectionError, OSError)):
            self._logger.exception("Database unreachable while %s", action)
            level = ComponentDegradationLevel.FULLY_DEGRADED
            details = "Database unreachable"

        elif isinstance(ex, asyncpg.PostgresError):
            self._logger.exception("Database error while %s: %s", action, ex)
            level = ComponentDegradationLevel.PART_DEGRADED
            details = "Database operation failed"

        else:
            self._logger.exception("Unexpected error while %s: %s",
                                   action, ex)
            self._state_object.service_health = \
                ComponentDegradationLevel.FULLY_DEGRADED
            self._state_object.service_health_state_str = \
                "Service experienced unexpected failure"
            return PersistenceError(f"Unexpected error while {action}")

        self._state_object.database_health = level
        self._state_object.database_health_state_str = details
        return PersistenceError(f"{details} while {action}")
