"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from sqlalchemy import BigInteger, Column, Identity, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from profilevault_common.base_api_view import PRINCIPAL_MAX_LENGTH
from .base import Base


class IdentityEvent(Base):
    """
    Append-only audit log of identity facts.

    Attributes:
        sequence (int): Insertion order.
        event_id (UUID): Fact identifier; inserting the same fact twice
            is ignored.
        event_type (str): e.g. "SessionCreated".
        subject_id (UUID): Profile or session store the fact is about.
        principal (str): Principal that caused the fact.
        timestamp (int): Milliseconds when it happened.
        payload (dict): Fact specific fields.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "identity_events"

    sequence = Column(BigInteger, Identity(), primary_key=True)
    event_id = Column(UUID(as_uuid=True), unique=True, nullable=False)
    event_type = Column(String(64), nullable=False)
    subject_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    principal = Column(String(PRINCIPAL_MAX_LENGTH), nullable=False)
    timestamp = Column(BigInteger, nullable=False)
    payload = Column(JSONB, nullable=False)
