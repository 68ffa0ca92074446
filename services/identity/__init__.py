"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
import asyncio
import os
import random
from quart import g, Quart, request
import asyncpg
from profilevault_common.route_decorators import is_route_not_using_db
from services.identity.application import Application


# Quart application instance
app = Quart(__name__)

SERVICE_APP: Application = Application(app)


class DatabaseConfig:
    """
    Database connection settings of the identity service, read from the
    environment.

    Attributes:
        DB_USER (str): `PROFILEVAULT_IDENTITY_DB_USER`, defaults to
            "__INVALID__".
        DB_PASSWORD (str): `PROFILEVAULT_IDENTITY_DB_PASSWORD`, defaults to
            "__INVALID__".
        DB_NAME (str): `PROFILEVAULT_IDENTITY_DB_NAME`, defaults to
            "__INVALID__".
        DB_HOST (str): `PROFILEVAULT_IDENTITY_DB_HOST`, defaults to
            "127.0.0.1".
        DB_PORT (int): `PROFILEVAULT_IDENTITY_DB_PORT`, defaults to 5432.
    """
    # pylint: disable=too-few-public-methods
    DB_USER = os.getenv("PROFILEVAULT_IDENTITY_DB_USER", "__INVALID__")
    DB_PASSWORD = os.getenv("PROFILEVAULT_IDENTITY_DB_PASSWORD",
                            "__INVALID__")
    DB_NAME = os.getenv("PROFILEVAULT_IDENTITY_DB_NAME", "__INVALID__")
    DB_HOST = os.getenv("PROFILEVAULT_IDENTITY_DB_HOST", "127.0.0.1")
    DB_PORT = int(os.getenv("PROFILEVAULT_IDENTITY_DB_PORT", "5432"))


async def cancel_background_tasks():
    """
    Cancel and await the application's background task, if it exists.

    The task is stored on the global ``app`` object under the attribute
    ``background_task``. The ``asyncio.CancelledError`` raised by the
    cancelled task is suppressed.
    """
    task = getattr(app, "background_task", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


@app.before_serving
async def startup() -> None:
    """
    Code executed before Quart has begun serving http requests.

    returns:
        None
    """
    if not await SERVICE_APP.initialise():
        os._exit(1)

    app.db_pool = await create_db_pool(DatabaseConfig)

    if not await SERVICE_APP.bootstrap_admin(app.db_pool):
        await app.db_pool.close()
        os._exit(1)

    app.background_task = asyncio.create_task(SERVICE_APP.run())


@app.after_serving
async def shutdown() -> None:
    """
    Code executed after Quart has stopped serving http requests.

    returns:
        None
    """
    SERVICE_APP.shutdown_event.set()

    if app is not None:
        await cancel_background_tasks()

    await app.db_pool.close()


@app.before_request
async def acquire_connection():
    """
    Acquire a database connection from the pool before handling a request
    and store it in ``g.db``.

    Handlers marked with ``route_not_using_db`` are skipped.

    Returns:
        tuple | None: A 503 JSON error if acquiring a connection timed
            out, otherwise ``None`` to continue request processing.
    """
    view_func = app.view_functions.get(request.endpoint)
    if is_route_not_using_db(view_func):
        return None

    try:
        g.db = await app.db_pool.acquire(timeout=2.0)

    except asyncio.TimeoutError:
        return {"error": "Service unavailable"}, 503

    return None


@app.after_request
async def release_connection(response):
    """
    Release the database connection stored in ``g.db`` back to the pool.

    Args:
        response (quart.wrappers.Response): The response object generated
            by the request handler.

    Returns:
        quart.wrappers.Response: The same response object, unchanged.
    """
    db = getattr(g, "db", None)
    if db is not None:
        await app.db_pool.release(db)
    return response


async def create_db_pool(config,
                         retries: int=5,
                         base_delay: float=1.0
                         ) -> asyncpg.pool.Pool:
    """
    Create and return an asyncpg connection pool with retries and error
    handling.

    Retry-able errors are retried with exponential backoff and jitter.
    Authentication failures and a missing database are not retried. If
    no pool can be created the background tasks are cancelled and the
    process exits.

    Args:
        config (DatabaseConfig): Database connection parameters.
        retries (int, optional): Maximum number of attempts. Defaults to 5.
        base_delay (float, optional): Base delay (in seconds) for the
            exponential backoff. Defaults to 1.0.

    Returns:
        asyncpg.pool.Pool: A connection pool instance if successfully created.
    """
    for attempt in range(1, retries + 1):
        try:
            pool = await asyncpg.create_pool(
                user=config.DB_USER,
                password=config.DB_PASSWORD,
                database=config.DB_NAME,
                host=config.DB_HOST,
                port=config.DB_PORT,
                min_size=1,
                max_size=10,
                timeout=5.0
            )

            print(f"[INFO] Connected to database {config.DB_NAME} "
                  f"on {config.DB_HOST}:{config.DB_PORT} (attempt {attempt})",
                  flush=True)

            return pool

        except asyncpg.InvalidPasswordError:
            print("[FATAL] Database authentication failed (check user/"
                  "password).", flush=True)
            break

        except asyncpg.InvalidCatalogNameError:
            print(f"[FATAL] Database '{config.DB_NAME}' does not exist.",
                  flush=True)
            break

        except asyncpg.CannotConnectNowError:
            print("[FATAL] Database is starting up or cannot accept "
                  "connections right now.", flush=True)

        except asyncio.TimeoutError:
            print("[FATAL] Database connection timed out.", flush=True)

        except OSError as ex:
            print(f"[FATAL] Database network/connection error: {ex}",
                  flush=True)

        except asyncpg.PostgresError as ex:
            print(f"[FATAL] Database general Postgres error: {ex}",
                  flush=True)

        delay = base_delay * (2 ** (attempt - 1))
        jitter = random.uniform(0, 0.3 * delay)
        wait_time = delay + jitter

        if attempt < retries:
            print(f"[INFO] Retrying database connection in "
                  f"{wait_time:.1f}s...", flush=True)
            await asyncio.sleep(wait_time)
            continue

        print("[FATAL] All database retries exhausted. Could not connect!",
              flush=True)
        break

    if app is not None:
        await cancel_background_tasks()

    os._exit(1)
