"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.

The two authorization gates. An operation uses exactly one of them:
``require_owner`` for self-service changes, ``require_capability`` for
trust-sensitive ones.
"""
from services.identity.domain.capability import require_capability
from services.identity.domain.errors import UnauthorizedError

__all__ = ["require_capability", "require_owner"]


def require_owner(caller: str, owner: str) -> None:
    """
    Ownership gate: the caller must be the record owner.

    Raises:
        UnauthorizedError: ``caller`` is not ``owner``.
    """
    if not caller or caller != owner:
        raise UnauthorizedError("caller does not own this record")
