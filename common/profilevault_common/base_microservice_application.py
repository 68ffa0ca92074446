"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import abc
import asyncio
import logging
import typing


class BaseMicroserviceApplication(abc.ABC):
    """
    Lifecycle shared by every ProfileVault service.

    A service is initialised once, then ``run`` polls ``_main_loop`` until
    the shutdown event is set, and finally ``stop`` calls ``_shutdown``
    exactly once before flagging ``shutdown_complete``.
    """
    __slots__ = ["_is_initialised", "_logger", "_shutdown_complete",
                 "_shutdown_event", "_stopped"]

    # Seconds slept between two iterations of the main loop.
    LOOP_INTERVAL: float = 0.1

    def __init__(self):
        self._is_initialised: bool = False
        self._logger: typing.Optional[logging.Logger] = None
        self._shutdown_event: asyncio.Event = asyncio.Event()
        self._shutdown_complete: asyncio.Event = asyncio.Event()
        self._stopped: bool = False

    @property
    def logger(self) -> logging.Logger:
        """ Logger instance used by the service. """
        return self._logger

    @logger.setter
    def logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def is_initialised(self) -> bool:
        """ True once ``initialise`` has succeeded. """
        return self._is_initialised

    @property
    def shutdown_event(self) -> asyncio.Event:
        """
        Event set when the service is asked to stop. Background tasks
        check it to leave their loops.
        """
        return self._shutdown_event

    @property
    def shutdown_complete(self) -> asyncio.Event:
        """ Event set after ``_shutdown`` has finished. """
        return self._shutdown_complete

    async def initialise(self) -> bool:
        """
        Initialise the service.

        Returns:
            bool: True when ``_initialise`` succeeded. On failure the
            service is stopped before returning False.
        """
        if await self._initialise() is True:
            self._is_initialised = True
            return True

        await self.stop()
        return False

    async def run(self) -> None:
        """
        Drive ``_main_loop`` until shutdown is requested.
        """
        if not self._is_initialised:
            self._logger.warning("Service is not initialised, not entering "
                                 "the run loop.")
            return

        self._logger.info("Service entering main loop.")

        try:
            while not self._shutdown_event.is_set():
                await self._main_loop()
                await asyncio.sleep(self.LOOP_INTERVAL)

        except asyncio.CancelledError:
            self._logger.debug("Service run loop cancelled.")
            raise

        finally:
            self._logger.info("Leaving service run loop...")
            await self.stop()

    async def stop(self) -> None:
        """
        Stop the service. Repeated calls are ignored once the shutdown
        has completed.
        """
        if self._stopped:
            return
        self._stopped = True

        self._logger.info("Stopping service...")
        self._shutdown_event.set()

        await self._shutdown()
        self._shutdown_complete.set()

        self._logger.info("Service shutdown complete.")

    async def _initialise(self) -> bool:
        """
        Service specific initialisation.

        Returns:
            bool: True => Successful, False => Unsuccessful.
        """
        return True

    @abc.abstractmethod
    async def _main_loop(self) -> None:
        """ One iteration of the service main loop. """

    @abc.abstractmethod
    async def _shutdown(self):
        """ Service specific shutdown. """
