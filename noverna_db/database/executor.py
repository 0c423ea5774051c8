"""
Pooled statement execution.

Every operation checks readiness first, translates named parameters,
borrows a connection for exactly one statement and hands it back.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..errors import NotReadyError
from .connection import ConnectionPoolManager
from .operations import (
    build_batch_insert,
    execute_statement,
    fetch_rows,
    first_column,
    report_failures,
    with_returning_id,
)
from .translator import translate

logger = logging.getLogger(__name__)

TABLE_EXISTS_SQL = (
    "SELECT COUNT(*) FROM information_schema.tables WHERE table_name = :table_name"
)


class QueryExecutor:
    """Runs single statements against the pool."""

    def __init__(self, pool: ConnectionPoolManager, strict_params: bool = False):
        self._pool = pool
        self._strict_params = strict_params

    def _ensure_ready(self) -> None:
        if not self._pool.is_ready():
            raise NotReadyError()

    async def query_all(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[dict]:
        """Return every row produced by the statement."""
        self._ensure_ready()
        with report_failures("query", sql, params, logger):
            prepared = translate(sql, params, strict=self._strict_params)
            async with self._pool.connection() as connection:
                return await fetch_rows(connection, prepared.text, prepared.values)

    async def query_one(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Optional[dict]:
        """Return the first row, or None when the statement produced none."""
        rows = await self.query_all(sql, params)
        return rows[0] if rows else None

    async def query_scalar(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Return the first column of the first row, or None."""
        return first_column(await self.query_one(sql, params))

    async def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Run an INSERT/UPDATE/DELETE and return the affected row count."""
        self._ensure_ready()
        with report_failures("execute", sql, params, logger):
            prepared = translate(sql, params, strict=self._strict_params)
            async with self._pool.connection() as connection:
                return await execute_statement(connection, prepared.text, prepared.values)

    async def update(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Alias of execute."""
        return await self.execute(sql, params)

    async def insert(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Run an INSERT and return the generated ``id``.

        ``RETURNING id`` is appended unless the statement already has a
        RETURNING clause; a custom clause without an ``id`` column yields None.
        """
        row = await self.query_one(with_returning_id(sql), params)
        return row.get("id") if row else None

    async def raw_query(self, sql: str, values: Optional[Sequence[Any]] = None) -> List[dict]:
        """Run already-positional SQL; values are bound exactly as given."""
        self._ensure_ready()
        with report_failures("raw_query", sql, values, logger):
            async with self._pool.connection() as connection:
                return await fetch_rows(connection, sql, list(values) if values else None)

    async def prepared_query(
        self,
        name: str,
        sql: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[dict]:
        """Like query_all, but the statement is prepared server-side."""
        self._ensure_ready()
        with report_failures(f"prepare:{name}", sql, params, logger):
            prepared = translate(sql, params, strict=self._strict_params)
            async with self._pool.connection() as connection:
                return await fetch_rows(connection, prepared.text, prepared.values, prepare=True)

    async def batch_insert(
        self,
        table: str,
        columns: Sequence[str],
        rows: Iterable[Sequence[Any]],
    ) -> int:
        """
        Insert many rows with one statement.

        Returns:
            Affected row count; 0 for an empty ``rows`` without any round-trip
        """
        self._ensure_ready()

        columns = list(columns)
        rows = list(rows)
        if not rows:
            return 0

        with report_failures("insert_batch", f"INSERT INTO {table}", {"columns": list(columns), "rows": len(rows)}, logger):
            statement = build_batch_insert(table, columns, rows)

        with report_failures("insert_batch", statement.text, statement.values, logger):
            async with self._pool.connection() as connection:
                return await execute_statement(connection, statement.text, statement.values)

    async def table_exists(self, table_name: str) -> bool:
        """Return True if a table with this name is visible in information_schema."""
        count = await self.query_scalar(TABLE_EXISTS_SQL, {"table_name": table_name})
        return (count or 0) > 0
