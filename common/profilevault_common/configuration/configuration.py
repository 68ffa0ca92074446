"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import configparser
import os
import typing
from profilevault_common.configuration.configuration_setup import (
    ConfigItemDataType,
    ConfigurationSetup,
    ConfigurationSetupItem)

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def _to_bool(value: typing.Any) -> bool:
    if isinstance(value, bool):
        return value

    lowered = str(value).strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False

    raise ValueError(f"'{value}' is not a boolean")


def _to_uint(value: typing.Any) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(f"'{value}' is negative")
    return number


class Configuration:
    """
    Reads a service configuration described by a ``ConfigurationSetup``.

    Every item is looked up first in the environment (``SECTION_ITEM``,
    upper case), then in the optional INI file, and finally falls back to
    the item's default value.
    """

    _CONVERTERS: dict[ConfigItemDataType,
                      typing.Callable[[typing.Any], typing.Any]] = {
        ConfigItemDataType.BOOLEAN: _to_bool,
        ConfigItemDataType.FLOAT: float,
        ConfigItemDataType.INT: int,
        ConfigItemDataType.STRING: str,
        ConfigItemDataType.UNSIGNED_INT: _to_uint,
    }

    def __init__(self):
        self._parser = configparser.ConfigParser()
        self._config_file: typing.Optional[str] = None
        self._has_config_file: bool = False
        self._config_file_required: bool = False
        self._layout: typing.Optional[ConfigurationSetup] = None
        self._config_items: dict[str, dict[str, typing.Any]] = {}

    def configure(self,
                  layout: ConfigurationSetup,
                  config_file: typing.Optional[str] = None,
                  file_required: bool = False) -> None:
        """
        Configure the parser with schema and optional file.

        Args:
            layout: Schema definition of configuration (required).
            config_file: Path to config file (optional).
            file_required: Whether file must exist and be readable.
        """
        if layout is None:
            raise ValueError("Configuration layout cannot be None.")

        self._config_file = config_file
        self._config_file_required = file_required
        self._layout = layout

    def process_config(self) -> None:
        """
        Read the file (if any) and resolve every item of the layout.

        Raises:
            RuntimeError: ``configure`` was not called.
            ValueError: The file is unreadable/invalid, a required item is
                missing or a value does not match its declared type.
        """
        if self._layout is None:
            raise RuntimeError("Configuration layout must be set before "
                               "processing.")

        if self._config_file:
            try:
                files_read = self._parser.read(self._config_file)
            except configparser.Error as ex:
                raise ValueError(
                    f"[ConfigError] Failed to parse file '{self._config_file}'"
                    f": {ex}") from ex

            if not files_read and self._config_file_required:
                raise ValueError(
                    f"[ConfigError] Required config file '{self._config_file}'"
                    " could not be opened.")

            self._has_config_file = bool(files_read)

        for section_name in self._layout.get_sections():
            section = self._config_items.setdefault(section_name, {})
            for item in self._layout.get_section(section_name):
                section[item.item_name] = self._read_item(section_name, item)

    def get_entry(self, section: str, item: str) -> typing.Any:
        """
        Get a parsed configuration value.

        Raises:
            ValueError: If section or item not found.
        """
        try:
            return self._config_items[section][item]
        except KeyError as ex:
            raise ValueError(
                f"[ConfigError] Invalid key '{section}::{item}'") from ex

    def _lookup_value(self, section: str,
                      item: ConfigurationSetupItem) -> typing.Any:
        value = os.getenv(f"{section}_{item.item_name}".upper())

        if value is None and self._has_config_file:
            value = self._parser.get(section, item.item_name, fallback=None)

        return value if value is not None else item.default_value

    def _read_item(self, section: str,
                   item: ConfigurationSetupItem) -> typing.Any:
        converter = self._CONVERTERS.get(item.item_type)
        if converter is None:
            raise ValueError(f"[ConfigError] Unsupported type "
                             f"'{item.item_type}' for "
                             f"'{section}::{item.item_name}'")

        value = self._lookup_value(section, item)
        if value is None:
            if item.is_required:
                raise ValueError(f"[ConfigError] Missing required "
                                 f"'{section}::{item.item_name}'")
            return None

        try:
            value = converter(value)
        except (ValueError, TypeError) as ex:
            raise ValueError(
                f"[ConfigError] '{section}::{item.item_name}' has invalid "
                f"{item.item_type.value} '{value}'") from ex

        if item.valid_values and value not in item.valid_values:
            raise ValueError(
                f"[ConfigError] '{section}::{item.item_name}' has invalid "
                f"value '{value}', expected one of {item.valid_values}")

        return value
