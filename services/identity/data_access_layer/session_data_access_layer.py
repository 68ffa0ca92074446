"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import typing
import uuid
from profilevault_common.base_data_access_layer import BaseDataAccessLayer
from services.identity.domain.session_store import SessionEntry, SessionStore


class SessionDataAccessLayer(BaseDataAccessLayer):
    """ Reads and writes ``session_stores`` and ``sessions`` rows. """

    async def insert_session_store(self, store: SessionStore,
                                   now: int) -> None:
        """ Insert a new store together with its initial entries. """
        try:
            await self._db.execute(
                """
                INSERT INTO session_stores(id, owner, session_counter,
                                           created_at, updated_at)
                VALUES ($1, $2, $3, $4, $4)
                """,
                store.id, store.owner, store.session_counter, now)

            for entry in store.sessions.values():
                await self._insert_entry(store.id, entry)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("inserting session store",
                                         ex) from ex

        self._mark_database_healthy()

    async def fetch_session_store(self, store_id: uuid.UUID,
                                  for_update: bool = False) \
            -> typing.Optional[SessionStore]:
        """
        Load a store and all of its entries.

        Args:
            store_id (uuid.UUID): Store to load.
            for_update (bool): Lock the store row for the rest of the
                transaction; the whole store is the unit of mutual
                exclusion.

        Returns:
            SessionStore or None if there is no such store.
        """
        query = ("SELECT id, owner, session_counter FROM session_stores "
                 "WHERE id = $1")
        if for_update:
            query += " FOR UPDATE"

        try:
            row = await self._db.fetchrow(query, store_id)
            if row is None:
                self._mark_database_healthy()
                self._logger.debug("Session store %s not found", store_id)
                return None

            entry_rows = await self._db.fetch(
                """
                SELECT session_pubkey, created_at, expires_at
                FROM sessions WHERE store_id = $1
                """,
                store_id)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("fetching session store",
                                         ex) from ex

        self._mark_database_healthy()

        store = SessionStore(owner=row["owner"], id=row["id"],
                             session_counter=row["session_counter"])
        for entry_row in entry_rows:
            key = bytes(entry_row["session_pubkey"])
            store.sessions[key] = SessionEntry(
                session_pubkey=key,
                created_at=entry_row["created_at"],
                expires_at=entry_row["expires_at"])
        return store

    async def insert_session(self, store: SessionStore, entry: SessionEntry,
                             now: int) -> None:
        """ Persist a newly created entry and the store counter. """
        try:
            await self._insert_entry(store.id, entry)
            await self._db.execute(
                """
                UPDATE session_stores
                SET session_counter = $2, updated_at = $3
                WHERE id = $1
                """,
                store.id, store.session_counter, now)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("inserting session", ex) from ex

        self._mark_database_healthy()

    async def delete_sessions(self, store_id: uuid.UUID,
                              session_pubkeys: typing.Sequence[bytes]) -> None:
        if not session_pubkeys:
            return

        try:
            await self._db.execute(
                """
                DELETE FROM sessions
                WHERE store_id = $1 AND session_pubkey = ANY($2::bytea[])
                """,
                store_id, list(session_pubkeys))

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("deleting sessions", ex) from ex

        self._logger.debug("Removed %d session(s) from store %s",
                           len(session_pubkeys), store_id)
        self._mark_database_healthy()

    async def _insert_entry(self, store_id: uuid.UUID,
                            entry: SessionEntry) -> None:
        await self._db.execute(
            """
            INSERT INTO sessions(store_id, session_pubkey, created_at,
                                 expires_at)
            VALUES ($1, $2, $3, $4)
            """,
            store_id, entry.session_pubkey, entry.created_at,
            entry.expires_at)
