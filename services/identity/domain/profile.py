"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import dataclasses
import enum
import typing
import uuid
from services.identity.domain.authorization import (require_capability,
                                                    require_owner)
from services.identity.domain.errors import (InvalidEnumValueError,
                                             InvalidLengthError)
from services.identity.domain.events import (AvatarMinted,
                                             EventLog,
                                             MembershipChanged,
                                             ProfileUpdated,
                                             VerificationStatusChanged)

NICKNAME_MIN_LENGTH = 1
NICKNAME_MAX_LENGTH = 50
BIO_MIN_LENGTH = 0
BIO_MAX_LENGTH = 500
IDENTITY_KEY_LENGTH = 32


def text_length(value: str) -> int:
    """ Length in UTF-8 code units. """
    return len(value.encode("utf-8"))


def check_nickname(nickname: str) -> str:
    length = text_length(nickname)
    if not NICKNAME_MIN_LENGTH <= length <= NICKNAME_MAX_LENGTH:
        raise InvalidLengthError("nickname", length,
                                 NICKNAME_MIN_LENGTH, NICKNAME_MAX_LENGTH)
    return nickname


def check_bio(bio: str) -> str:
    length = text_length(bio)
    if not BIO_MIN_LENGTH <= length <= BIO_MAX_LENGTH:
        raise InvalidLengthError("bio", length, BIO_MIN_LENGTH,
                                 BIO_MAX_LENGTH)
    return bio


def check_identity_key(identity_key: bytes) -> bytes:
    if len(identity_key) != IDENTITY_KEY_LENGTH:
        raise InvalidLengthError("identity_key", len(identity_key),
                                 IDENTITY_KEY_LENGTH, IDENTITY_KEY_LENGTH)
    return bytes(identity_key)


class MembershipTier(enum.IntEnum):
    """ Membership tier; the wire value is the integer. """
    FREE = 0
    PREMIUM = 1

    @classmethod
    def from_value(cls, value: int) -> "MembershipTier":
        """
        Raises:
            InvalidEnumValueError: ``value`` is not a known tier.
        """
        # bool is an int subclass but never a tier
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidEnumValueError(f"unknown membership tier {value!r}")
        try:
            return cls(value)
        except ValueError as ex:
            raise InvalidEnumValueError(
                f"unknown membership tier {value!r}") from ex


@dataclasses.dataclass(frozen=True)
class AvatarUrl:
    """ Avatar hosted elsewhere. """
    url: str


@dataclasses.dataclass(frozen=True)
class AvatarAssetRef:
    """ Avatar backed by an owned avatar asset record. """
    asset_id: uuid.UUID


# At most one avatar kind can be set; None means no avatar.
Avatar = typing.Union[AvatarUrl, AvatarAssetRef, None]


@dataclasses.dataclass(frozen=True)
class AvatarMetadata:
    name: str
    description: str
    image_url: str
    artist: typing.Optional[str] = None


@dataclasses.dataclass(frozen=True)
class AvatarAsset:
    """
    Collectible avatar image. The profile keeps only its id, so the asset
    may later be transferred or deleted without touching the profile.
    """
    owner: str
    profile_id: uuid.UUID
    image_url: str
    name: str
    description: str
    created_at: int
    artist: typing.Optional[str] = None
    id: uuid.UUID = dataclasses.field(default_factory=uuid.uuid4)


@dataclasses.dataclass
class ProfileRecord:
    """
    Identity attributes of one user.

    ``owner``, ``identity_key``, ``id`` and ``created_at`` never change.
    ``is_verified`` and ``membership_tier`` are only changed through the
    capability gated methods. ``updated_at`` never decreases.
    """
    owner: str
    nickname: str
    bio: str
    identity_key: bytes
    created_at: int
    updated_at: int
    avatar: Avatar = None
    membership_tier: MembershipTier = MembershipTier.FREE
    is_verified: bool = False
    id: uuid.UUID = dataclasses.field(default_factory=uuid.uuid4)

    @property
    def avatar_url(self) -> typing.Optional[str]:
        return self.avatar.url if isinstance(self.avatar, AvatarUrl) \
            else None

    @property
    def avatar_asset_id(self) -> typing.Optional[uuid.UUID]:
        return self.avatar.asset_id \
            if isinstance(self.avatar, AvatarAssetRef) else None

    def _touch(self, now: int) -> None:
        self.updated_at = max(self.updated_at, now)

    def _set_avatar(self, avatar: Avatar, now: int) -> None:
        # Single write site of the avatar variant.
        self.avatar = avatar
        self._touch(now)

    # ---- owner gated ----

    def update_nickname(self, caller: str, nickname: str, now: int,
                        events: EventLog) -> None:
        require_owner(caller, self.owner)
        self.nickname = check_nickname(nickname)
        self._touch(now)
        events.emit(ProfileUpdated(self.id, caller, now, field="nickname"))

    def update_bio(self, caller: str, bio: str, now: int,
                   events: EventLog) -> None:
        require_owner(caller, self.owner)
        self.bio = check_bio(bio)
        self._touch(now)
        events.emit(ProfileUpdated(self.id, caller, now, field="bio"))

    def set_avatar_url(self, caller: str, url: str, now: int,
                       events: EventLog) -> None:
        """ Use an external picture; any avatar asset reference is dropped. """
        require_owner(caller, self.owner)
        self._set_avatar(AvatarUrl(url), now)
        events.emit(ProfileUpdated(self.id, caller, now, field="picture_url"))

    def mint_avatar_asset(self, caller: str, metadata: AvatarMetadata,
                          now: int, events: EventLog) -> AvatarAsset:
        """
        Create an avatar asset owned by the profile owner and point the
        profile at it, dropping any avatar URL.
        """
        require_owner(caller, self.owner)

        asset = AvatarAsset(owner=self.owner,
                            profile_id=self.id,
                            image_url=metadata.image_url,
                            name=metadata.name,
                            description=metadata.description,
                            artist=metadata.artist,
                            created_at=now)
        self._set_avatar(AvatarAssetRef(asset.id), now)

        events.emit(ProfileUpdated(self.id, caller, now, field="picture_nft"))
        events.emit(AvatarMinted(self.id, caller, now,
                                 asset_id=asset.id,
                                 name=asset.name,
                                 image_url=asset.image_url))
        return asset

    # ---- capability gated ----

    def set_verified(self, capability, caller: str, verified: bool,
                     now: int, events: EventLog) -> None:
        require_capability(capability, caller)
        self.is_verified = bool(verified)
        self._touch(now)
        events.emit(VerificationStatusChanged(self.id, caller, now,
                                              is_verified=self.is_verified))

    def update_membership_tier(self, capability, caller: str, new_tier: int,
                               now: int, events: EventLog) -> None:
        require_capability(capability, caller)
        tier = MembershipTier.from_value(new_tier)

        old_tier = self.membership_tier
        self.membership_tier = tier
        self._touch(now)
        events.emit(MembershipChanged(self.id, caller, now,
                                      old_tier=int(old_tier),
                                      new_tier=int(tier)))
