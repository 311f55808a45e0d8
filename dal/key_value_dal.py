"""Async Data Access Layer for the KEY_VALUE table.

Values are opaque strings; callers serialize JSON themselves. The static
`read`/`write` helpers operate on an open connection so that callers can
perform a read-modify-write inside a single connection.
"""

from __future__ import annotations

import time
from typing import Optional

import aiosqlite

from utils.database_init import AsyncDatabaseInitializer


class KeyValueDAL:
    """String-keyed access to persisted values."""

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def get(self, key: str) -> Optional[str]:
        """Return the stored value for `key`, or None if absent."""
        async with self._db.connection() as conn:
            return await self.read(conn, key)

    async def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under `key`."""
        async with self._db.connection() as conn:
            await self.write(conn, key, value)
            await conn.commit()

    async def delete(self, key: str) -> bool:
        """Delete `key`. Returns True if a row was removed."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM KEY_VALUE WHERE key = ?", (key,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    @staticmethod
    async def read(conn: aiosqlite.Connection, key: str) -> Optional[str]:
        cur = await conn.execute("SELECT value FROM KEY_VALUE WHERE key = ?", (key,))
        row = await cur.fetchone()
        return row[0] if row else None

    @staticmethod
    async def write(conn: aiosqlite.Connection, key: str, value: str) -> None:
        await conn.execute(
            "INSERT INTO KEY_VALUE (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
            (key, value, int(time.time())),
        )
