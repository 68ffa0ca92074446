"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import uuid
from sqlalchemy import (BigInteger, CheckConstraint, Column, ForeignKey,
                        SmallInteger, String)
from sqlalchemy.dialects.postgresql import UUID
from profilevault_common.base_api_view import PRINCIPAL_MAX_LENGTH
from .base import Base


class AdminCapability(Base):
    """
    SQLAlchemy model of a minted admin capability.

    Rows are never deleted: capabilities cannot be revoked.

    Attributes:
        id (UUID): Primary key.
        issuer (str): Principal that minted the capability.
        holder (str): Principal currently holding it.
        created_at (int): Mint time in milliseconds.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "admin_capabilities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    issuer = Column(String(PRINCIPAL_MAX_LENGTH), nullable=False)
    holder = Column(String(PRINCIPAL_MAX_LENGTH), nullable=False, index=True)
    created_at = Column(BigInteger, nullable=False)


class CapabilityBootstrap(Base):
    """
    Single row marker written when the root capability is minted.

    Attributes:
        id (int): Always 1, enforced by a check constraint.
        capability_id (UUID): The root capability.
        principal (str): Principal the root capability was minted for.
        created_at (int): Bootstrap time in milliseconds.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "capability_bootstrap"

    id = Column(SmallInteger, primary_key=True, default=1)
    capability_id = Column(UUID(as_uuid=True),
                           ForeignKey("admin_capabilities.id"),
                           nullable=False)
    principal = Column(String(PRINCIPAL_MAX_LENGTH), nullable=False)
    created_at = Column(BigInteger, nullable=False)

    __table_args__ = (
        CheckConstraint("id = 1", name="ck_capability_bootstrap_single_row"),
    )
