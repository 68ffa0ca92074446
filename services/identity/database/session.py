"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import uuid
from sqlalchemy import BigInteger, Column, ForeignKey, LargeBinary, String
from sqlalchemy.dialects.postgresql import UUID
from profilevault_common.base_api_view import PRINCIPAL_MAX_LENGTH
from .base import Base
from .created_updated_timestamp_mixin import CreatedUpdatedTimestampMixin


class SessionStore(CreatedUpdatedTimestampMixin, Base):
    """
    SQLAlchemy model of a user's session store.

    Attributes:
        id (UUID): Primary key.
        owner (str): Principal administering the store.
        session_counter (int): Sessions ever created; never decremented.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "session_stores"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(PRINCIPAL_MAX_LENGTH), nullable=False, index=True)
    session_counter = Column(BigInteger, nullable=False, default=0)


class Session(Base):
    """
    SQLAlchemy model of one session entry.

    The composite primary key makes a session public key unique within
    its store.

    Attributes:
        store_id (UUID): Owning session store. Entries go with the store.
        session_pubkey (bytes): 32 byte session public key.
        created_at (int): Issue time in milliseconds.
        expires_at (int): ``created_at`` plus the 30 day validity window.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "sessions"

    store_id = Column(UUID(as_uuid=True),
                      ForeignKey("session_stores.id", ondelete="CASCADE"),
                      primary_key=True)
    session_pubkey = Column(LargeBinary(32), primary_key=True)
    created_at = Column(BigInteger, nullable=False)
    expires_at = Column(BigInteger, nullable=False, index=True)
