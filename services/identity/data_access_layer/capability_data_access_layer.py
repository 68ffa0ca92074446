"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import typing
import uuid
from profilevault_common.base_data_access_layer import BaseDataAccessLayer
from services.identity.domain.capability import (AdminCap,
                                                 _restore_admin_cap)


class CapabilityDataAccessLayer(BaseDataAccessLayer):
    """ Reads and writes admin capabilities and the bootstrap marker. """

    async def fetch_capability(self, cap_id: uuid.UUID,
                               for_update: bool = False) \
            -> typing.Optional[AdminCap]:
        query = """
                SELECT id, issuer, holder, created_at
                FROM admin_capabilities WHERE id = $1
                """
        if for_update:
            query += " FOR UPDATE"

        try:
            row = await self._db.fetchrow(query, cap_id)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("fetching capability", ex) from ex

        self._mark_database_healthy()

        if row is None:
            return None

        return _restore_admin_cap(row["id"], row["issuer"], row["holder"],
                                  row["created_at"])

    async def update_holder(self, capability: AdminCap) -> None:
        try:
            await self._db.execute(
                "UPDATE admin_capabilities SET holder = $2 WHERE id = $1",
                capability.id, capability.holder)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("transferring capability",
                                         ex) from ex

        self._logger.info("Admin capability %s now held by %s",
                          capability.id, capability.holder)
        self._mark_database_healthy()

    async def insert_capability(self, capability: AdminCap) -> None:
        try:
            await self._db.execute(
                """
                INSERT INTO admin_capabilities(id, issuer, holder, created_at)
                VALUES ($1, $2, $3, $4)
                """,
                capability.id, capability.issuer, capability.holder,
                capability.created_at)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("inserting capability", ex) from ex

        self._logger.info("Admin capability %s issued by %s to %s",
                          capability.id, capability.issuer,
                          capability.holder)
        self._mark_database_healthy()

    async def is_bootstrapped(self) -> bool:
        try:
            row = await self._db.fetchrow(
                "SELECT capability_id FROM capability_bootstrap WHERE id = 1")

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("reading bootstrap marker",
                                         ex) from ex

        self._mark_database_healthy()
        return row is not None

    async def record_bootstrap(self, capability: AdminCap) -> bool:
        """
        Write the bootstrap marker for the root capability.

        Returns:
            bool: False if a marker already existed, in which case the
            caller must roll back the capability it inserted.
        """
        try:
            row = await self._db.fetchrow(
                """
                INSERT INTO capability_bootstrap(id, capability_id,
                                                 principal, created_at)
                VALUES (1, $1, $2, $3)
                ON CONFLICT (id) DO NOTHING
                RETURNING id
                """,
                capability.id, capability.holder, capability.created_at)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("writing bootstrap marker",
                                         ex) from ex

        self._mark_database_healthy()
        return row is not None
