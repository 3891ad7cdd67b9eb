"""SQLite key-value store adapter.

Implements KeyValueStorePort using SQLite with aiosqlite for async access.
Holds the announcement cache, the last-fetch timestamp and the seen
marker with zero operational overhead.
"""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from rounds_quiz.core.ports import KeyValueStorePort

logger = logging.getLogger(__name__)


class SQLiteKeyValueStore(KeyValueStorePort):
    """SQLite-backed key-value store with connection pooling and async access.

    Strings are stored UTF-8 encoded in the same BLOB column as raw blobs.
    """

    def __init__(self, db_path: str, pool_size: int = 2):
        """Initialize SQLite store with connection pooling.

        Args:
            db_path: Path to SQLite database file.
            pool_size: Number of connections to maintain in the pool.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._pool: list[aiosqlite.Connection] = []
        self._pool_lock = asyncio.Lock()
        self._schema_lock = asyncio.Lock()
        self._pool_size = pool_size
        self._schema_initialized = False

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get a connection from the pool or create a new one."""
        async with self._pool_lock:
            if self._pool:
                return self._pool.pop()
        return await aiosqlite.connect(str(self.db_path))

    async def _return_connection(self, conn: aiosqlite.Connection) -> None:
        """Return a connection to the pool."""
        async with self._pool_lock:
            if len(self._pool) < self._pool_size:
                self._pool.append(conn)
                return
        await conn.close()

    async def close_pool(self) -> None:
        """Close all pooled connections."""
        async with self._pool_lock:
            for conn in self._pool:
                await conn.close()
            self._pool.clear()

    async def _init_schema(self) -> None:
        """Initialize database schema on first use.

        Only runs once per instance. Subsequent calls are no-ops.
        """
        async with self._schema_lock:
            if self._schema_initialized:
                return

            conn = await self._get_connection()
            try:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value BLOB NOT NULL,
                        updated_at TIMESTAMP NOT NULL
                    )
                    """
                )
                await conn.commit()
                self._schema_initialized = True
                logger.debug(f"Key-value schema ready at {self.db_path}")
            finally:
                await self._return_connection(conn)

    async def _get(self, key: str) -> bytes | None:
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = await cursor.fetchone()
            if row is None:
                return None
            value = row[0]
            return value.encode("utf-8") if isinstance(value, str) else bytes(value)
        finally:
            await self._return_connection(conn)

    async def _set(self, key: str, value: bytes) -> None:
        await self._init_schema()

        conn = await self._get_connection()
        try:
            await conn.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, datetime.now(timezone.utc).isoformat()),
            )
            await conn.commit()
        finally:
            await self._return_connection(conn)

    async def get_string(self, key: str) -> str | None:
        """Return the string stored under key, or None if absent."""
        value = await self._get(key)
        return None if value is None else value.decode("utf-8")

    async def set_string(self, key: str, value: str) -> None:
        """Store a string under key."""
        await self._set(key, value.encode("utf-8"))

    async def get_blob(self, key: str) -> bytes | None:
        """Return the blob stored under key, or None if absent."""
        return await self._get(key)

    async def set_blob(self, key: str, value: bytes) -> None:
        """Store a blob under key."""
        await self._set(key, value)

    async def remove(self, key: str) -> None:
        """Remove key if present."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            await conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            await conn.commit()
        finally:
            await self._return_connection(conn)
