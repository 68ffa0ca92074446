"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import asyncio
import os
from profilevault_common import __version__
from profilevault_common.configuration.configuration import Configuration
from profilevault_common.base_microservice_application \
    import BaseMicroserviceApplication
from profilevault_common.logging_consts import create_console_logger
from services.identity.api import create_routes
from services.identity.configuration_layout import CONFIGURATION_LAYOUT
from services.identity.data_access_layer import (CapabilityDataAccessLayer,
                                                 EventDataAccessLayer,
                                                 ProfileDataAccessLayer)
from services.identity.data_services.admin_data_service import \
    AdminDataService
from services.identity.state_object import StateObject


class Application(BaseMicroserviceApplication):
    """ ProfileVault Identity Service """

    def __init__(self, quart_instance):
        super().__init__()
        self._quart_instance = quart_instance
        self._config = None
        self._state_object: StateObject = StateObject()

        self._logger = create_console_logger(__name__)

    @property
    def state_object(self) -> StateObject:
        """ Runtime state shared with the views. """
        return self._state_object

    async def _initialise(self) -> bool:
        self._logger.info("ProfileVault Identity Microservice %s",
                          __version__)

        # Acceptable values
        truths: set = {"1", "true", "yes", "on"}
        falses: set = {"0", "false", "no", "off"}

        config_file = os.getenv("PROFILEVAULT_IDENTITY_CONFIG_FILE", None)
        raw_required = os.getenv("PROFILEVAULT_IDENTITY_CONFIG_FILE_REQUIRED",
                                 "false").strip().lower()

        if raw_required in truths:
            config_file_required: bool = True
        elif raw_required in falses:
            config_file_required: bool = False
        else:
            print(f"[FATAL ERROR] Invalid value for "
                  f"PROFILEVAULT_IDENTITY_CONFIG_FILE_REQUIRED: "
                  f"'{raw_required}'", flush=True)
            return False

        if not config_file and config_file_required:
            print("[FATAL ERROR] Configuration file missing!", flush=True)
            return False

        self._config = Configuration()
        self._config.configure(CONFIGURATION_LAYOUT,
                               config_file,
                               config_file_required)

        try:
            self._config.process_config()

        except ValueError as ex:
            self._logger.critical("Configuration error : %s", ex)
            return False

        self._logger.setLevel(self._config.get_entry("logging", "log_level"))

        self._display_configuration_details()

        self._state_object.version = __version__
        self._state_object.admin_bootstrap_principal = \
            self._config.get_entry("admin", "bootstrap_principal") or None

        self._quart_instance.register_blueprint(
            create_routes(self._logger, self._state_object))

        return True

    async def bootstrap_admin(self, db_pool) -> bool:
        """
        Mint the root admin capability for the configured principal.

        Does nothing when no principal is configured. Calling it on every
        start is safe, only the first call of a deployment mints.

        Args:
            db_pool (asyncpg.pool.Pool): Pool to take a connection from.

        Returns:
            bool: False if the capability could not be recorded.
        """
        principal = self._state_object.admin_bootstrap_principal
        if not principal:
            self._logger.info("No admin bootstrap principal configured")
            return True

        async with db_pool.acquire() as db:
            service = AdminDataService(
                CapabilityDataAccessLayer(db, self._logger,
                                          self._state_object),
                ProfileDataAccessLayer(db, self._logger, self._state_object),
                EventDataAccessLayer(db, self._logger, self._state_object),
                self._state_object,
                self._logger,
                self._state_object.clock)
            result = await service.bootstrap(principal)

        if "error" in result:
            self._logger.critical("Admin capability bootstrap failed: %s",
                                  result["error"])
            return False

        return True

    async def _main_loop(self) -> None:
        """ Abstract method for main application. """
        await asyncio.sleep(0.1)

    async def _shutdown(self):
        """ Shutdown logic. """

    def _display_configuration_details(self):
        self._logger.info("Configuration")
        self._logger.info("=============")
        self._logger.info("[logging]")
        self._logger.info("=> Logging log level              : %s",
                          self._config.get_entry("logging", "log_level"))
        self._logger.info("[admin]")
        self._logger.info("=> Bootstrap principal            : %s",
                          self._config.get_entry("admin",
                                                 "bootstrap_principal"))
