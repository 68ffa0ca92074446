"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""


class IdentityError(Exception):
    """
    Base class of every error raised by the identity core. An operation
    raising one of these has not changed any record.
    """


class UnauthorizedError(IdentityError):
    """ Ownership or capability check failed. """


class InvalidLengthError(IdentityError):
    """ A nickname, bio or key field is outside its allowed length. """

    def __init__(self, field: str, length: int, minimum: int, maximum: int):
        super().__init__(f"{field} length {length} outside "
                         f"[{minimum}, {maximum}]")
        self.field = field
        self.length = length
        self.minimum = minimum
        self.maximum = maximum


class InvalidEnumValueError(IdentityError):
    """ Value is not a recognised member of an enumeration. """


class DuplicateKeyError(IdentityError):
    """ A session with this public key already exists in the store. """


class CapabilityBootstrapError(IdentityError):
    """ The root admin capability has already been minted. """
