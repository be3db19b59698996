# manages the connection to the local key-value store
import asyncio
import os
from contextlib import asynccontextmanager

import aiosqlite

from utils import config
from utils.logger import get_logger

_logger = get_logger(__name__)

DB_PATH = config.DB_PATH

# path the kv table was last created in; tests point DB_PATH elsewhere
_initialized_for = None
_init_lock = asyncio.Lock()


async def _init_db(conn: aiosqlite.Connection) -> None:
    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv
        (
            key   TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
        """
    )
    await conn.commit()


@asynccontextmanager
async def connect() -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection.

    Creates the parent directory and the kv table on first use.
    """
    global _initialized_for
    parent = os.path.dirname(DB_PATH)
    if parent and not os.path.isdir(parent):
        os.makedirs(parent, exist_ok=True)

    conn = await aiosqlite.connect(DB_PATH)

    if _initialized_for != DB_PATH:
        async with _init_lock:
            if _initialized_for != DB_PATH:
                _logger.debug(f"Initializing key-value store at {DB_PATH}")
                await _init_db(conn)
                _initialized_for = DB_PATH
    try:
        yield conn
    finally:
        await conn.close()
