"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import logging
import sys

LOGGING_DATETIME_FORMAT_STRING = "%Y-%m-%d %H:%M:%S"
LOGGING_DEFAULT_LOG_LEVEL = logging.DEBUG
LOGGING_LOG_FORMAT_STRING = "%(asctime)s [%(levelname)s] %(message)s"


def create_console_logger(name: str) -> logging.Logger:
    """
    Build a logger writing to stdout with the service log format.

    Calling this more than once for the same name does not stack
    additional console handlers.

    Args:
        name (str): Logger name, normally the module ``__name__``.

    Returns:
        logging.Logger: Logger set to ``LOGGING_DEFAULT_LOG_LEVEL``.
    """
    logger = logging.getLogger(name)

    has_console = any(isinstance(handler, logging.StreamHandler) and
                      getattr(handler, "stream", None) is sys.stdout
                      for handler in logger.handlers)
    if not has_console:
        log_format = logging.Formatter(LOGGING_LOG_FORMAT_STRING,
                                       LOGGING_DATETIME_FORMAT_STRING)
        console_stream = logging.StreamHandler(sys.stdout)
        console_stream.setFormatter(log_format)
        logger.addHandler(console_stream)

    logger.setLevel(LOGGING_DEFAULT_LOG_LEVEL)
    logger.propagate = True
    return logger
