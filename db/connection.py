"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.

A `Database` is built once at startup and handed to every repository, so tests
can pass an isolated or mocked handle instead. Blocking psycopg2 calls are run
in worker threads, hence the ThreadedConnectionPool. The worker pool is sized to
max_conn, so callers queue for a connection instead of exhausting the pool.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Sequence

import psycopg2
from psycopg2 import pool, extras

from utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """Handle on a pool of PostgreSQL connections."""

    def __init__(self, dsn: str, min_conn: int = 1, max_conn: int = 5):
        self.dsn = dsn
        self.min_conn = min_conn
        self.max_conn = max_conn
        self._pool: pool.ThreadedConnectionPool | None = None
        self._executor: ThreadPoolExecutor | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        """
        Initialize the connection pool.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        try:
            self._pool = pool.ThreadedConnectionPool(self.min_conn, self.max_conn, self.dsn)
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def get_connection(self):
        """
        Check a connection out of the pool.

        Raises:
            RuntimeError: If the pool has not been opened.
            psycopg2.pool.PoolError: If every connection is already in use.
        """
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call open() first.")
        return self._pool.getconn()

    def release_connection(self, conn) -> None:
        """Return a connection to the pool."""
        if self._pool is not None:
            self._pool.putconn(conn)

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Borrow a connection for the duration of a `with` block."""
        conn = self.get_connection()
        try:
            yield conn
        finally:
            self.release_connection(conn)

    def execute(self, sql: Any, params: Optional[Sequence] = None) -> list[dict]:
        """
        Run a single statement on a borrowed connection and commit it.

        Args:
            sql: Query text or a psycopg2.sql composable.
            params: Positional parameters for the %s placeholders.

        Returns:
            The result rows as dicts keyed by column name, or [] when the
            statement produces no result set.
        """
        with self.connection() as conn:
            try:
                with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                    cur.execute(sql, params)
                    rows = cur.fetchall() if cur.description is not None else []
                conn.commit()
                return [dict(row) for row in rows]
            except Exception:
                conn.rollback()
                raise

    async def query(self, sql: Any, params: Optional[Sequence] = None) -> list[dict]:
        """Awaitable form of `execute`; the statement runs in a worker thread."""
        return await self.run(self.execute, sql, params)

    async def run(self, func: Callable, *args) -> Any:
        """
        Run a blocking function that manages its own connection in a worker thread.

        At most max_conn functions run at once, each holding at most one
        connection; the rest wait for a free worker.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_conn, thread_name_prefix="db")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    def ping(self) -> bool:
        """Connectivity check. Returns True if `SELECT 1` succeeds."""
        try:
            self.open()
            with self.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1;")
                    cur.fetchone()
                conn.rollback()
            return True
        except (psycopg2.Error, RuntimeError) as e:
            logger.error(f"Database connectivity check failed: {e}")
            return False
