"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import dataclasses
import typing
import uuid
from services.identity.domain.authorization import require_owner
from services.identity.domain.errors import (DuplicateKeyError,
                                             InvalidLengthError)
from services.identity.domain.events import (EventLog,
                                             SessionCreated,
                                             SessionRevoked)

# Validity window of a session: 30 days in milliseconds.
SESSION_VALIDITY_MS: int = 30 * 24 * 60 * 60 * 1000

SESSION_KEY_LENGTH: int = 32


def check_session_key(session_pubkey: bytes) -> bytes:
    """
    Ensure a session public key has the fixed 32 byte length.

    Raises:
        InvalidLengthError: Key is not exactly 32 bytes.
    """
    if len(session_pubkey) != SESSION_KEY_LENGTH:
        raise InvalidLengthError("session_key", len(session_pubkey),
                                 SESSION_KEY_LENGTH, SESSION_KEY_LENGTH)
    return bytes(session_pubkey)


@dataclasses.dataclass(frozen=True)
class SessionEntry:
    """ Metadata of one issued session. """
    session_pubkey: bytes
    created_at: int
    expires_at: int

    def is_live(self, now: int) -> bool:
        return now <= self.expires_at

    def is_expired(self, now: int) -> bool:
        return now > self.expires_at


@dataclasses.dataclass
class SessionStore:
    """
    Sessions of one owner, keyed by session public key.

    ``session_counter`` counts sessions ever created and is never
    decremented when a session is revoked or cleaned up.
    """
    owner: str
    id: uuid.UUID = dataclasses.field(default_factory=uuid.uuid4)
    session_counter: int = 0
    sessions: dict[bytes, SessionEntry] = dataclasses.field(
        default_factory=dict)

    def create_session(self, caller: str, session_pubkey: bytes, now: int,
                       events: EventLog) -> SessionEntry:
        """
        Issue a new session valid until ``now + SESSION_VALIDITY_MS``.

        Re-issuing a key that is still in the store is rejected; the
        caller has to revoke it first.

        Raises:
            UnauthorizedError: ``caller`` does not own the store.
            InvalidLengthError: Key is not 32 bytes.
            DuplicateKeyError: Key already present, store left unchanged.
        """
        require_owner(caller, self.owner)
        session_pubkey = check_session_key(session_pubkey)

        if session_pubkey in self.sessions:
            raise DuplicateKeyError(
                f"session {session_pubkey.hex()} already exists")

        entry = SessionEntry(session_pubkey=session_pubkey,
                             created_at=now,
                             expires_at=now + SESSION_VALIDITY_MS)
        self.sessions[session_pubkey] = entry
        self.session_counter += 1

        events.emit(SessionCreated(self.id, caller, now,
                                   session_pubkey=session_pubkey,
                                   expires_at=entry.expires_at))
        return entry

    def validate_session(self, session_pubkey: bytes, now: int) -> bool:
        """
        True iff the key is present and ``now <= expires_at``.

        Anyone may call this. Unknown and expired keys both give False,
        and expired entries are left in place.
        """
        entry = self.sessions.get(bytes(session_pubkey))
        return entry is not None and entry.is_live(now)

    def revoke_session(self, caller: str, session_pubkey: bytes, now: int,
                       events: EventLog) -> bool:
        """
        Remove a session. Revoking an absent key is a successful no-op
        and emits nothing.

        Returns:
            bool: True if an entry was removed.
        """
        require_owner(caller, self.owner)

        removed = self.sessions.pop(bytes(session_pubkey), None)
        if removed is None:
            return False

        events.emit(SessionRevoked(self.id, caller, now,
                                   session_pubkey=removed.session_pubkey))
        return True

    def cleanup_expired_sessions(self,
                                 candidate_keys: typing.Iterable[bytes],
                                 now: int) -> list[bytes]:
        """
        Remove every candidate key that is present and expired.

        Not owner gated: anyone able to name keys can prune expired ones.
        Live entries and unknown keys are skipped. No fact is emitted.

        Returns:
            list[bytes]: Keys that were removed.
        """
        removed = []
        for key in candidate_keys:
            key = bytes(key)
            entry = self.sessions.get(key)
            if entry is not None and entry.is_expired(now):
                del self.sessions[key]
                removed.append(key)
        return removed

    def purge_expired_sessions(self, caller: str, now: int) -> list[bytes]:
        """
        Owner only: remove every expired entry without a candidate list.
        """
        require_owner(caller, self.owner)
        expired = [key for key, entry in self.sessions.items()
                   if entry.is_expired(now)]
        return self.cleanup_expired_sessions(expired, now)

    def get_session(self, session_pubkey: bytes) -> \
            typing.Optional[SessionEntry]:
        return self.sessions.get(bytes(session_pubkey))

    def live_count(self, now: int) -> int:
        return sum(1 for entry in self.sessions.values() if entry.is_live(now))

    def __len__(self) -> int:
        return len(self.sessions)

    def __contains__(self, session_pubkey) -> bool:
        return bytes(session_pubkey) in self.sessions
