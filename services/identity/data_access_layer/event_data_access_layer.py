"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import json
import typing
import uuid
from profilevault_common.base_data_access_layer import BaseDataAccessLayer
from services.identity.domain.events import IdentityEvent


class EventDataAccessLayer(BaseDataAccessLayer):
    """ Append-only access to the ``identity_events`` audit log. """

    async def append_events(self,
                            events: typing.Iterable[IdentityEvent]) -> None:
        """
        Store facts. A fact whose id is already stored is skipped, so
        replaying a batch does not duplicate the audit trail.
        """
        records = [(event.event_id, event.event_type, event.subject_id,
                    event.principal, event.timestamp,
                    json.dumps(event.payload()))
                   for event in events]
        if not records:
            return

        try:
            await self._db.executemany(
                """
                INSERT INTO identity_events(event_id, event_type, subject_id,
                                            principal, timestamp, payload)
                VALUES ($1, $2, $3, $4, $5, $6::jsonb)
                ON CONFLICT (event_id) DO NOTHING
                """,
                records)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("appending events", ex) from ex

        self._mark_database_healthy()

    async def fetch_events(self, subject_id: uuid.UUID) -> list[dict]:
        """ Facts about ``subject_id`` in the order they were stored. """
        try:
            rows = await self._db.fetch(
                """
                SELECT event_id, event_type, principal, timestamp, payload
                FROM identity_events
                WHERE subject_id = $1
                ORDER BY sequence
                """,
                subject_id)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("fetching events", ex) from ex

        self._mark_database_healthy()

        events = []
        for row in rows:
            payload = row["payload"]
            if isinstance(payload, str):
                payload = json.loads(payload)
            events.append({"event_id": str(row["event_id"]),
                           "event_type": row["event_type"],
                           "principal": row["principal"],
                           "timestamp": row["timestamp"],
                           "payload": payload})
        return events
