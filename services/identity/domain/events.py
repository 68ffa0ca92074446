"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.

Immutable facts emitted by identity operations. Every fact names the
record it is about (``subject_id``), the principal that caused it and the
time it happened, so the audit trail can be rebuilt from facts alone.
"""
import dataclasses
import typing
import uuid


@dataclasses.dataclass(frozen=True)
class IdentityEvent:
    """ Base fact. Concrete facts add their own fields. """
    subject_id: uuid.UUID
    principal: str
    timestamp: int
    event_id: uuid.UUID = dataclasses.field(default_factory=uuid.uuid4,
                                            kw_only=True)

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def payload(self) -> dict:
        """
        JSON compatible view of the fact specific fields. Bytes are hex
        encoded, UUIDs become strings.
        """
        base = {f.name for f in dataclasses.fields(IdentityEvent)}
        payload = {}
        for field in dataclasses.fields(self):
            if field.name in base:
                continue
            payload[field.name] = _jsonable(getattr(self, field.name))
        return payload


def _jsonable(value: typing.Any) -> typing.Any:
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, uuid.UUID):
        return str(value)
    if hasattr(value, "value"):
        return value.value
    return value


@dataclasses.dataclass(frozen=True)
class UserRegistered(IdentityEvent):
    session_store_id: uuid.UUID
    nickname: str


@dataclasses.dataclass(frozen=True)
class ProfileUpdated(IdentityEvent):
    field: str


@dataclasses.dataclass(frozen=True)
class AvatarMinted(IdentityEvent):
    asset_id: uuid.UUID
    name: str
    image_url: str


@dataclasses.dataclass(frozen=True)
class SessionCreated(IdentityEvent):
    session_pubkey: bytes
    expires_at: int


@dataclasses.dataclass(frozen=True)
class SessionRevoked(IdentityEvent):
    session_pubkey: bytes


@dataclasses.dataclass(frozen=True)
class VerificationStatusChanged(IdentityEvent):
    is_verified: bool


@dataclasses.dataclass(frozen=True)
class MembershipChanged(IdentityEvent):
    old_tier: int
    new_tier: int


class EventLog:
    """
    Append-only sink the operations emit facts into. Facts of one
    operation are persisted together with the records it changed.
    """

    def __init__(self):
        self._events: list[IdentityEvent] = []

    def emit(self, event: IdentityEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> tuple:
        return tuple(self._events)

    def of_type(self, event_class: type) -> list:
        return [e for e in self._events if isinstance(e, event_class)]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(tuple(self._events))
