"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from services.identity.domain.errors import UnauthorizedError
from services.identity.domain.events import EventLog, UserRegistered
from services.identity.domain.profile import (ProfileRecord,
                                              check_bio,
                                              check_identity_key,
                                              check_nickname)
from services.identity.domain.session_store import (SessionStore,
                                                    check_session_key)


def register(caller: str, nickname: str, bio: str, identity_key: bytes,
             initial_session_key: bytes, now: int,
             events: EventLog) -> tuple[ProfileRecord, SessionStore]:
    """
    Create the profile and session store of a new user, both owned by
    ``caller``. The store starts with one session for
    ``initial_session_key``.

    Every field is validated before anything is built, so a failure
    produces neither record and no facts.

    Raises:
        UnauthorizedError: No caller principal.
        InvalidLengthError: Nickname, bio or one of the keys is out of
            bounds.
    """
    if not caller:
        raise UnauthorizedError("registration requires a caller principal")

    check_nickname(nickname)
    check_bio(bio)
    identity_key = check_identity_key(identity_key)
    initial_session_key = check_session_key(initial_session_key)

    profile = ProfileRecord(owner=caller,
                            nickname=nickname,
                            bio=bio,
                            identity_key=identity_key,
                            created_at=now,
                            updated_at=now)
    store = SessionStore(owner=caller)

    events.emit(UserRegistered(profile.id, caller, now,
                               session_store_id=store.id,
                               nickname=nickname))
    store.create_session(caller, initial_session_key, now, events)

    return profile, store
