"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""

# Attribute checked by the request hooks before acquiring a connection.
NOT_USING_DB_ATTRIBUTE = "_not_using_db"


def route_not_using_db(func):
    """
    Mark a route handler as not requiring database access.

    The ``before_request`` hook of a service skips acquiring a pooled
    connection for handlers carrying this mark, so endpoints such as the
    health check keep answering while the database is down.

    Args:
        func (Callable): The route handler function to decorate.

    Returns:
        Callable: The same function, marked.
    """
    setattr(func, NOT_USING_DB_ATTRIBUTE, True)
    return func


def is_route_not_using_db(func) -> bool:
    """ True if ``func`` was decorated with ``route_not_using_db``. """
    return bool(getattr(func, NOT_USING_DB_ATTRIBUTE, False))
