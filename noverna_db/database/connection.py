"""
Database connection management module.

This module owns the process-wide connection pool: creation and
verification at startup, connection acquisition and release, readiness
tracking and shutdown.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from psycopg import AsyncConnection, AsyncRawCursor
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool, PoolClosed, PoolTimeout

from ..constants import VERIFY_QUERY
from ..errors import AcquisitionTimeoutError, NotReadyError
from ..models import DatabaseConfig, PoolInfo
from ..utils.logging import log_pool_event
from .config import build_conninfo

logger = logging.getLogger(__name__)

POOL_NAME = "noverna_db"


class ConnectionPoolManager:
    """
    Readiness-gated owner of an AsyncConnectionPool.

    Pooled connections run in autocommit mode, return rows as dicts and
    accept native ``$N`` placeholders.
    """

    def __init__(self, pool_factory: Callable[..., AsyncConnectionPool] = AsyncConnectionPool):
        self._pool_factory = pool_factory
        self._pool: Optional[AsyncConnectionPool] = None
        self._ready = False
        # Created on first use so it binds to the loop that runs the pool
        self._lock: Optional[asyncio.Lock] = None

    def is_ready(self) -> bool:
        """Return True once the pool has been verified and until shutdown."""
        return self._ready and self._pool is not None

    async def initialize(self, config: DatabaseConfig) -> bool:
        """
        Create the pool and verify it with one round-trip.

        Args:
            config: Database configuration settings

        Returns:
            True if the pool is ready, False if creation or verification failed
        """
        async with self._get_lock():
            if self.is_ready():
                logger.warning("Connection pool already initialized, ignoring repeated initialize")
                return True

            timeout = config.connection_timeout_ms / 1000
            pool = None
            try:
                logger.info(f"Creating database connection pool: {config.mask()}")
                pool = self._pool_factory(
                    build_conninfo(config),
                    min_size=1,
                    max_size=config.max_connections,
                    timeout=timeout,
                    max_idle=config.idle_timeout_ms / 1000,
                    kwargs={
                        "autocommit": True,
                        "row_factory": dict_row,
                        "cursor_factory": AsyncRawCursor,
                    },
                    name=POOL_NAME,
                    open=False,
                )
                await pool.open(wait=True, timeout=timeout)

                connection = await pool.getconn(timeout=timeout)
                try:
                    await connection.execute(VERIFY_QUERY)
                finally:
                    await pool.putconn(connection)

            except Exception as e:
                self._ready = False
                log_pool_event("failed", detail=str(e), logger=logger)
                logger.error(f"Failed to connect to PostgreSQL: {e}")
                if pool is not None:
                    try:
                        await pool.close()
                    except Exception as close_error:
                        logger.warning(f"Error closing half-initialized pool: {close_error}")
                return False

            self._pool = pool
            self._ready = True
            log_pool_event("initialized", stats=self._stats(), logger=logger)
            logger.info("PostgreSQL connection established successfully")
            return True

    async def acquire(self) -> AsyncConnection:
        """
        Take exclusive use of one pooled connection.

        Raises:
            NotReadyError: If the pool is not initialized or already closed
            AcquisitionTimeoutError: If the pool stayed exhausted past the timeout
        """
        pool = self._require_pool()
        try:
            connection = await pool.getconn()
        except PoolTimeout as e:
            raise AcquisitionTimeoutError(f"Timed out waiting for a database connection: {e}") from e
        except PoolClosed as e:
            raise NotReadyError("Database pool is closed") from e
        logger.debug("Retrieved database connection from pool")
        return connection

    async def release(self, connection: AsyncConnection) -> None:
        """Return a connection to the pool; closes it if the pool is gone."""
        if connection is None:
            return

        pool = self._pool
        if pool is None:
            await connection.close()
            logger.debug("Pool already closed, closed released connection")
            return

        await pool.putconn(connection)
        logger.debug("Returned database connection to pool")

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """Scoped acquisition: the connection is released on every exit path."""
        connection = await self.acquire()
        try:
            yield connection
        finally:
            await self.release(connection)

    def pool_info(self) -> Optional[PoolInfo]:
        """Return current pool counters, or None when no pool exists."""
        if self._pool is None:
            return None
        stats = self._stats()
        return PoolInfo(
            total=stats.get("pool_size", 0),
            idle=stats.get("pool_available", 0),
            waiting=stats.get("requests_waiting", 0),
        )

    async def shutdown(self) -> None:
        """Close every pooled connection and clear readiness. Safe to repeat."""
        async with self._get_lock():
            pool, self._pool = self._pool, None
            self._ready = False

            if pool is None:
                logger.debug("Connection pool is None, nothing to close")
                return

            try:
                logger.info("Closing database connection pool")
                await pool.close()
                log_pool_event("closed", logger=logger)
                logger.info("PostgreSQL connection closed")
            except Exception as e:
                logger.error(f"Error closing database connection pool: {str(e)}")

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def _require_pool(self) -> AsyncConnectionPool:
        if not self.is_ready():
            raise NotReadyError()
        return self._pool

    def _stats(self) -> dict:
        return self._pool.get_stats() if self._pool is not None else {}
