"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from sqlalchemy import BigInteger, Column


class CreatedUpdatedTimestampMixin:
    """
    SQLAlchemy mixin adding creation and last update timestamps.

    Both columns hold Unix milliseconds taken from the service clock
    when the operation ran, not database defaults, so the stored values
    match the timestamps carried by the emitted facts.

    Attributes:
        created_at (int): Milliseconds at creation. Cannot be null.
        updated_at (int): Milliseconds of the last mutation. Never lower
            than ``created_at``.
    """
    # pylint: disable=too-few-public-methods
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)
