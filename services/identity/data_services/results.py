"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.

Result dictionaries returned by the data services. Every result carries
an HTTP ``status``; the views strip it from the JSON body.
"""
from http import HTTPStatus
from services.identity.domain.errors import (DuplicateKeyError,
                                             IdentityError,
                                             InvalidEnumValueError,
                                             InvalidLengthError,
                                             UnauthorizedError)
from services.identity.domain.profile import ProfileRecord

ERROR_STATUS = {
    UnauthorizedError: HTTPStatus.FORBIDDEN,
    InvalidLengthError: HTTPStatus.BAD_REQUEST,
    InvalidEnumValueError: HTTPStatus.BAD_REQUEST,
    DuplicateKeyError: HTTPStatus.CONFLICT,
}


def identity_error_result(ex: IdentityError) -> dict:
    status = HTTPStatus.BAD_REQUEST
    for error_class, error_status in ERROR_STATUS.items():
        if isinstance(ex, error_class):
            status = error_status
            break

    return {"error": str(ex),
            "error_kind": type(ex).__name__,
            "status": status}


def not_found_result(what: str) -> dict:
    return {"error": f"{what} not found", "status": HTTPStatus.NOT_FOUND}


def persistence_failure_result() -> dict:
    return {"error": "Service unavailable",
            "status": HTTPStatus.SERVICE_UNAVAILABLE}


def profile_to_dict(profile: ProfileRecord) -> dict:
    """ Public JSON view of a profile. """
    return {
        "profile_id": str(profile.id),
        "owner": profile.owner,
        "nickname": profile.nickname,
        "bio": profile.bio,
        "avatar_url": profile.avatar_url,
        "avatar_asset_id": str(profile.avatar_asset_id)
        if profile.avatar_asset_id else None,
        "membership_tier": int(profile.membership_tier),
        "membership_tier_name": profile.membership_tier.name.lower(),
        "is_verified": profile.is_verified,
        "identity_key": profile.identity_key.hex(),
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
    }
