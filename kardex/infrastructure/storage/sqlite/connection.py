"""
Async SQLite access for the movement log, built on aiosqlite.

Ledger queries only read, so they draw from a pool of connections opened
with ``query_only`` set. Seeding writes go through a single writer
connection serialized by a lock, matching SQLite's one-writer model.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from kardex.config import get_logger, get_settings

logger = get_logger(__name__)


class ConnectionPool:
    """Read-only connection pool plus one serialized writer for a movement database."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._readers: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._reader_connections: list[aiosqlite.Connection] = []
        self._writer: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()
        self._init_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._writer is not None

    async def initialize(self) -> None:
        """Open the writer, then pool_size read-only connections."""
        async with self._init_lock:
            if self.initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            # journal_mode persists in the file; set it once from the writer
            writer = await self._open()
            await writer.execute("PRAGMA journal_mode=WAL")
            await writer.execute("PRAGMA synchronous=NORMAL")

            for _ in range(self.pool_size):
                reader = await self._open()
                await reader.execute("PRAGMA query_only=ON")
                self._reader_connections.append(reader)
                await self._readers.put(reader)

            self._writer = writer
            logger.info(
                "movement_db_opened",
                db_path=str(self.db_path),
                readers=self.pool_size,
            )

    async def _open(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def read(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a read-only connection; any write on it fails."""
        if not self.initialized:
            await self.initialize()

        conn = await self._readers.get()
        try:
            yield conn
        finally:
            self._readers.put_nowait(conn)

    @asynccontextmanager
    async def write(self) -> AsyncIterator[aiosqlite.Connection]:
        """Hold the writer for one transaction: commit on success, roll back on error."""
        if not self.initialized:
            await self.initialize()

        async with self._write_lock:
            conn = self._writer
            assert conn is not None
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                logger.warning("movement_write_rolled_back", db_path=str(self.db_path))
                raise

    async def close(self) -> None:
        """Close the writer and every reader."""
        async with self._init_lock:
            for conn in self._reader_connections:
                await conn.close()
            self._reader_connections.clear()
            self._readers = asyncio.Queue(maxsize=self.pool_size)
            if self._writer is not None:
                await self._writer.close()
                self._writer = None
            logger.info("movement_db_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global pool from storage settings."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def read_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Borrow a read-only connection from the global pool."""
    pool = await get_pool()
    async with pool.read() as conn:
        yield conn


@asynccontextmanager
async def write_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Run one write transaction on the global writer."""
    pool = await get_pool()
    async with pool.write() as conn:
        yield conn
