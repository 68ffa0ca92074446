"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import typing
from pydantic import BeforeValidator


def _hex_to_bytes(value: typing.Any) -> bytes:
    if isinstance(value, bytes):
        return value

    if not isinstance(value, str):
        raise ValueError("expected a hex encoded string")

    text = value[2:] if value.lower().startswith("0x") else value
    try:
        return bytes.fromhex(text)
    except ValueError as ex:
        raise ValueError("invalid hex encoding") from ex


# Hex string on the wire, raw bytes in the request model. Length checks
# are left to the identity core so they surface as InvalidLength errors.
HexBytes = typing.Annotated[bytes, BeforeValidator(_hex_to_bytes)]
