"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import uuid
from sqlalchemy import (BigInteger, Boolean, CheckConstraint, Column, ForeignKey,
                        LargeBinary, SmallInteger, String, Text)
from sqlalchemy.dialects.postgresql import UUID
from profilevault_common.base_api_view import PRINCIPAL_MAX_LENGTH
from .base import Base
from .created_updated_timestamp_mixin import CreatedUpdatedTimestampMixin


class Profile(CreatedUpdatedTimestampMixin, Base):
    """
    SQLAlchemy model of a user's identity profile.

    Attributes:
        id (UUID): Primary key, bound at registration.
        owner (str): Principal that registered the profile.
        nickname (str): 1 to 50 UTF-8 bytes.
        bio (str): Up to 500 UTF-8 bytes.
        avatar_url (str): External avatar picture, if that variant is set.
        avatar_asset_id (UUID): Avatar asset, if that variant is set. Not
            a foreign key: the asset may be transferred or deleted.
        membership_tier (int): 0 = Free, 1 = Premium.
        is_verified (bool): Set by capability holders only.
        identity_key (bytes): 32 byte external identity public key.

    Table constraints:
        ck_profiles_single_avatar: at most one avatar variant is set.
        ck_profiles_membership_tier: tier is 0 or 1.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(PRINCIPAL_MAX_LENGTH), nullable=False, index=True)
    nickname = Column(Text, nullable=False)
    bio = Column(Text, nullable=False, default="")
    avatar_url = Column(Text)
    avatar_asset_id = Column(UUID(as_uuid=True))
    membership_tier = Column(SmallInteger, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    identity_key = Column(LargeBinary(32), nullable=False)

    __table_args__ = (
        CheckConstraint("avatar_url IS NULL OR avatar_asset_id IS NULL",
                        name="ck_profiles_single_avatar"),
        CheckConstraint("membership_tier IN (0, 1)",
                        name="ck_profiles_membership_tier"),
    )


class AvatarAsset(Base):
    """
    SQLAlchemy model of a minted avatar asset.

    Attributes:
        id (UUID): Primary key.
        owner (str): Current owner of the asset.
        profile_id (UUID): Profile the asset was minted for.
        image_url (str): Location of the image.
        name (str): Display name.
        description (str): Free text description.
        artist (str): Optional artist credit.
        created_at (int): Mint time in milliseconds.
    """
    # pylint: disable=too-few-public-methods
    __tablename__ = "avatar_assets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner = Column(String(PRINCIPAL_MAX_LENGTH), nullable=False, index=True)
    profile_id = Column(UUID(as_uuid=True),
                        ForeignKey("profiles.id", ondelete="SET NULL"))
    image_url = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    artist = Column(Text)
    created_at = Column(BigInteger, nullable=False)
