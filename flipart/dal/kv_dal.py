"""Async Data Access Layer for the KV table.

Provides `KeyValueDAL`, a string-valued key-value store compatible with
`flipart.utils.database_init.AsyncDatabaseInitializer`.
"""

from __future__ import annotations

from typing import Optional

from flipart.utils.database_init import AsyncDatabaseInitializer


class KeyValueDAL:
    """Data access layer for whole-value KV records.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def get(self, key: str) -> Optional[str]:
        """Return the stored string for `key`, or None if absent."""
        async with self._db.connection() as conn:
            cur = await conn.execute("SELECT value FROM KV WHERE key = ?", (key,))
            row = await cur.fetchone()
            return row[0] if row else None

    async def put(self, key: str, value: str) -> None:
        """Overwrite the value stored under `key`."""
        async with self._db.connection() as conn:
            await conn.execute(
                "INSERT OR REPLACE INTO KV (key, value) VALUES (?, ?)",
                (key, value),
            )
            await conn.commit()

    async def delete(self, key: str) -> bool:
        """Delete `key`. Returns True if a row was removed."""
        async with self._db.connection() as conn:
            cur = await conn.execute("DELETE FROM KV WHERE key = ?", (key,))
            await conn.commit()
            return cur.rowcount > 0
