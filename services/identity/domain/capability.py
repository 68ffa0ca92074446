"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.

Admin capabilities.

An ``AdminCap`` is a bearer token: holding one is the only proof needed
for verification and membership changes. Any holder can mint further
capabilities for anyone, and there is no revocation. The very first
capability comes from a one-time bootstrap.
"""
import uuid
from services.identity.domain.errors import (CapabilityBootstrapError,
                                             UnauthorizedError)

# Only code in this module holds the key that constructs capabilities.
_MINT_KEY = object()


class AdminCap:
    """
    Opaque admin capability.

    Attributes:
        id (uuid.UUID): Stable identifier of this capability.
        issuer (str): Principal that minted it.
        holder (str): Principal currently holding it.
        created_at (int): Mint time in milliseconds.
    """
    __slots__ = ["_id", "_issuer", "_holder", "_created_at"]

    def __init__(self, mint_key, cap_id: uuid.UUID, issuer: str,
                 holder: str, created_at: int):
        if mint_key is not _MINT_KEY:
            raise TypeError("AdminCap can only be minted by the capability "
                            "authority")
        self._id = cap_id
        self._issuer = issuer
        self._holder = holder
        self._created_at = created_at

    @property
    def id(self) -> uuid.UUID:
        return self._id

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def holder(self) -> str:
        return self._holder

    @property
    def created_at(self) -> int:
        return self._created_at

    def transfer(self, caller: str, recipient: str) -> None:
        """
        Hand the capability to ``recipient``; ``caller`` loses it.

        Raises:
            UnauthorizedError: ``caller`` does not hold the capability.
            ValueError: ``recipient`` is empty.
        """
        require_capability(self, caller)
        if not recipient:
            raise ValueError("recipient must not be empty")
        self._holder = recipient

    def __copy__(self):
        raise TypeError("AdminCap cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("AdminCap cannot be copied")

    def __repr__(self) -> str:
        return f"AdminCap(id={self._id}, holder={self._holder!r})"


def require_capability(capability, caller: str) -> None:
    """
    Capability gate: the caller must present an admin capability it
    currently holds. The issuer is never inspected, so any held
    capability authorises any gated operation on any profile.

    Raises:
        UnauthorizedError: No capability, or not held by ``caller``.
    """
    if not isinstance(capability, AdminCap):
        raise UnauthorizedError("admin capability required")

    if not caller or capability.holder != caller:
        raise UnauthorizedError("admin capability not held by caller")


def bootstrap_admin_cap(principal: str, now: int,
                        already_bootstrapped: bool) -> AdminCap:
    """
    Mint the root capability for ``principal``. Happens once per
    deployment.

    Raises:
        CapabilityBootstrapError: A root capability was already minted.
        ValueError: ``principal`` is empty.
    """
    if already_bootstrapped:
        raise CapabilityBootstrapError("admin capability already "
                                       "bootstrapped")
    if not principal:
        raise ValueError("bootstrap principal must not be empty")

    return AdminCap(_MINT_KEY, uuid.uuid4(), principal, principal, now)


def issue_admin_cap(capability: AdminCap, caller: str, recipient: str,
                    now: int) -> AdminCap:
    """
    Mint a new capability with ``issuer = caller`` held by ``recipient``.

    Raises:
        UnauthorizedError: ``caller`` does not hold ``capability``.
        ValueError: ``recipient`` is empty.
    """
    require_capability(capability, caller)
    if not recipient:
        raise ValueError("recipient must not be empty")

    return AdminCap(_MINT_KEY, uuid.uuid4(), caller, recipient, now)


def _restore_admin_cap(cap_id: uuid.UUID, issuer: str, holder: str,
                       created_at: int) -> AdminCap:
    """
    Rebuild a capability previously minted and persisted by this
    service. Reserved for the capability data access layer.
    """
    return AdminCap(_MINT_KEY, cap_id, issuer, holder, created_at)
