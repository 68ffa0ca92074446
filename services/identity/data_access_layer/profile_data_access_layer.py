"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import typing
import uuid
from profilevault_common.base_data_access_layer import BaseDataAccessLayer
from services.identity.domain.profile import (AvatarAsset,
                                              AvatarAssetRef,
                                              AvatarUrl,
                                              MembershipTier,
                                              ProfileRecord)

_PROFILE_COLUMNS = """
    id, owner, nickname, bio, avatar_url, avatar_asset_id, membership_tier,
    is_verified, identity_key, created_at, updated_at
"""


def profile_from_row(row) -> ProfileRecord:
    """ Build a ``ProfileRecord`` from a ``profiles`` row. """
    if row["avatar_asset_id"] is not None:
        avatar = AvatarAssetRef(row["avatar_asset_id"])
    elif row["avatar_url"] is not None:
        avatar = AvatarUrl(row["avatar_url"])
    else:
        avatar = None

    return ProfileRecord(id=row["id"],
                         owner=row["owner"],
                         nickname=row["nickname"],
                         bio=row["bio"],
                         identity_key=bytes(row["identity_key"]),
                         created_at=row["created_at"],
                         updated_at=row["updated_at"],
                         avatar=avatar,
                         membership_tier=MembershipTier(
                             row["membership_tier"]),
                         is_verified=row["is_verified"])


class ProfileDataAccessLayer(BaseDataAccessLayer):
    """ Reads and writes ``profiles`` and ``avatar_assets`` rows. """

    async def insert_profile(self, profile: ProfileRecord) -> None:
        try:
            await self._db.execute(
                """
                INSERT INTO profiles(id, owner, nickname, bio, avatar_url,
                                     avatar_asset_id, membership_tier,
                                     is_verified, identity_key, created_at,
                                     updated_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
                """,
                profile.id, profile.owner, profile.nickname, profile.bio,
                profile.avatar_url, profile.avatar_asset_id,
                int(profile.membership_tier), profile.is_verified,
                profile.identity_key, profile.created_at, profile.updated_at)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("inserting profile", ex) from ex

        self._logger.info("Created profile %s for %s", profile.id,
                          profile.owner)
        self._mark_database_healthy()

    async def fetch_profile(self, profile_id: uuid.UUID,
                            for_update: bool = False) \
            -> typing.Optional[ProfileRecord]:
        """
        Load a profile.

        Args:
            profile_id (uuid.UUID): Profile to load.
            for_update (bool): Lock the row until the enclosing transaction
                ends, serialising concurrent mutations.

        Returns:
            ProfileRecord or None if there is no such profile.
        """
        query = f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE id = $1"
        if for_update:
            query += " FOR UPDATE"

        try:
            row = await self._db.fetchrow(query, profile_id)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("fetching profile", ex) from ex

        self._mark_database_healthy()

        if row is None:
            self._logger.debug("Profile %s not found", profile_id)
            return None

        return profile_from_row(row)

    async def update_profile(self, profile: ProfileRecord) -> None:
        """ Write back every mutable column of ``profile``. """
        try:
            await self._db.execute(
                """
                UPDATE profiles
                SET nickname = $2, bio = $3, avatar_url = $4,
                    avatar_asset_id = $5, membership_tier = $6,
                    is_verified = $7, updated_at = $8
                WHERE id = $1
                """,
                profile.id, profile.nickname, profile.bio,
                profile.avatar_url, profile.avatar_asset_id,
                int(profile.membership_tier), profile.is_verified,
                profile.updated_at)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("updating profile", ex) from ex

        self._mark_database_healthy()

    async def insert_avatar_asset(self, asset: AvatarAsset) -> None:
        try:
            await self._db.execute(
                """
                INSERT INTO avatar_assets(id, owner, profile_id, image_url,
                                          name, description, artist,
                                          created_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                """,
                asset.id, asset.owner, asset.profile_id, asset.image_url,
                asset.name, asset.description, asset.artist,
                asset.created_at)

        except Exception as ex:  # pylint: disable=broad-exception-caught
            raise self._database_failure("inserting avatar asset",
                                         ex) from ex

        self._logger.info("Minted avatar asset %s for profile %s",
                          asset.id, asset.profile_id)
        self._mark_database_healthy()
