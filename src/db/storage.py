# src/db/storage.py
# small async key-value API over the kv table, used for session and language
from __future__ import annotations

import json
from typing import Any, Optional

from db.database import connect


async def get_item(key: str) -> Optional[str]:
    """Return the stored string for key, or None."""
    async with connect() as conn:
        cur = await conn.execute("SELECT value FROM kv WHERE key = ?;", (key,))
        row = await cur.fetchone()
        await cur.close()
    return row[0] if row else None


async def set_item(key: str, value: str) -> None:
    async with connect() as conn:
        await conn.execute(
            """
            INSERT INTO kv(key, value)
            VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value;
            """,
            (key, value),
        )
        await conn.commit()


async def remove_item(key: str) -> None:
    async with connect() as conn:
        await conn.execute("DELETE FROM kv WHERE key = ?;", (key,))
        await conn.commit()


async def get_json(key: str) -> Optional[Any]:
    """Decode a JSON entry; a corrupt entry reads as missing."""
    raw = await get_item(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


async def set_json(key: str, value: Any) -> None:
    await set_item(key, json.dumps(value))
