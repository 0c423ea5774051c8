"""
Transaction coordination.

A unit of work runs on one dedicated connection between BEGIN and exactly
one of COMMIT or ROLLBACK. The connection goes back to the pool on every
exit path, and the handle given to the unit of work stops working as soon
as the unit of work returns.

Transactions do not nest: starting another transaction inside a unit of
work borrows a second, independent connection.
"""

import logging
import time
from typing import Any, Awaitable, Callable, List, Mapping, Optional, TypeVar

import psycopg
from psycopg import AsyncConnection

from ..errors import NotReadyError, TransactionError
from ..utils.logging import log_transaction_outcome
from .connection import ConnectionPoolManager
from .operations import (
    execute_statement,
    fetch_rows,
    first_column,
    report_failures,
    with_returning_id,
)
from .translator import translate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionConnection:
    """Connection handle passed to a unit of work."""

    def __init__(self, connection: AsyncConnection, strict_params: bool = False):
        self._connection = connection
        self._strict_params = strict_params
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def connection(self) -> AsyncConnection:
        """The underlying psycopg connection, for statements the helpers don't cover."""
        self._check_active()
        return self._connection

    def expire(self) -> None:
        self._active = False

    def _check_active(self) -> None:
        if not self._active:
            raise TransactionError("Transaction connection used after its unit of work returned")

    async def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[dict]:
        self._check_active()
        with report_failures("transaction.query", sql, params, logger):
            prepared = translate(sql, params, strict=self._strict_params)
            return await fetch_rows(self._connection, prepared.text, prepared.values)

    async def single(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Optional[dict]:
        rows = await self.query(sql, params)
        return rows[0] if rows else None

    async def scalar(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return first_column(await self.single(sql, params))

    async def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        self._check_active()
        with report_failures("transaction.execute", sql, params, logger):
            prepared = translate(sql, params, strict=self._strict_params)
            return await execute_statement(self._connection, prepared.text, prepared.values)

    async def insert(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        row = await self.single(with_returning_id(sql), params)
        return row.get("id") if row else None


class TransactionCoordinator:
    """Runs units of work inside BEGIN/COMMIT/ROLLBACK on a dedicated connection."""

    def __init__(self, pool: ConnectionPoolManager, strict_params: bool = False):
        self._pool = pool
        self._strict_params = strict_params

    async def run(self, unit_of_work: Callable[[TransactionConnection], Awaitable[T]]) -> T:
        """
        Execute a unit of work atomically.

        Args:
            unit_of_work: Coroutine function receiving a TransactionConnection

        Returns:
            Whatever the unit of work returned, after COMMIT succeeded

        Raises:
            NotReadyError: If the pool is not ready (nothing is acquired)
            TransactionError: If BEGIN or COMMIT fails (after ROLLBACK)
            Exception: Anything the unit of work raised, unchanged (after ROLLBACK)
        """
        if not self._pool.is_ready():
            raise NotReadyError()

        started = time.monotonic()
        connection = await self._pool.acquire()
        handle = TransactionConnection(connection, strict_params=self._strict_params)
        try:
            try:
                await connection.execute("BEGIN")
            except psycopg.Error as e:
                await self._rollback(connection)
                log_transaction_outcome("rolled_back", time.monotonic() - started, e, logger=logger)
                raise TransactionError(f"BEGIN failed: {e}") from e

            try:
                result = await unit_of_work(handle)
            except BaseException as e:
                # Includes cancellation of the awaiting task
                handle.expire()
                await self._rollback(connection)
                log_transaction_outcome("rolled_back", time.monotonic() - started, e, logger=logger)
                raise

            handle.expire()
            try:
                await connection.execute("COMMIT")
            except psycopg.Error as e:
                await self._rollback(connection)
                log_transaction_outcome("rolled_back", time.monotonic() - started, e, logger=logger)
                raise TransactionError(f"COMMIT failed: {e}") from e

            log_transaction_outcome("committed", time.monotonic() - started, logger=logger)
            return result
        finally:
            handle.expire()
            await self._pool.release(connection)

    async def _rollback(self, connection: AsyncConnection) -> None:
        """Issue ROLLBACK; a failure here is logged and never masks the original error."""
        try:
            await connection.execute("ROLLBACK")
        except psycopg.Error as e:
            logger.error(f"Transaction rollback failed: {e}")
