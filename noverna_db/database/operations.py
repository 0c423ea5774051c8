"""
Database operations module.

This module runs single statements on an acquired connection and builds
the statement text for the insert helpers. Both the pooled executor and
transaction handles go through these functions.
"""

import logging
import re
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence

import psycopg
from psycopg import AsyncConnection

from ..errors import DatabaseError, QueryExecutionError
from ..models import TranslatedQuery
from ..utils.logging import log_query_failure
from .translator import check_param_value
from .utils import classify_database_error, validate_identifier

logger = logging.getLogger(__name__)

_RETURNING = re.compile(r"\breturning\b", re.IGNORECASE)


async def fetch_rows(
    connection: AsyncConnection,
    text: str,
    values: Optional[Sequence[Any]] = None,
    prepare: Optional[bool] = None,
) -> List[dict]:
    """
    Run a statement and return every row it produced, in server order.

    Statements without a result set return an empty list.
    """
    cursor = await connection.execute(text, values or None, prepare=prepare)
    if cursor.description is None:
        return []
    return await cursor.fetchall()


async def execute_statement(
    connection: AsyncConnection,
    text: str,
    values: Optional[Sequence[Any]] = None,
) -> int:
    """Run a statement and return the affected row count (0 when not reported)."""
    cursor = await connection.execute(text, values or None)
    rowcount = cursor.rowcount
    return rowcount if rowcount and rowcount > 0 else 0


def first_column(row: Optional[dict]) -> Any:
    """Value of the first column of a row; None for no row or no columns."""
    if not row:
        return None
    return next(iter(row.values()))


def with_returning_id(sql: str) -> str:
    """Append ``RETURNING id`` unless the statement already returns something."""
    if _RETURNING.search(sql):
        return sql
    return sql.rstrip().rstrip(";").rstrip() + " RETURNING id"


def build_batch_insert(
    table: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> TranslatedQuery:
    """
    Build one multi-row INSERT with a positional group per row.

    Args:
        table: Target table, optionally schema-qualified
        columns: Column names, in value order
        rows: One value sequence per row, each len(columns) long

    Returns:
        TranslatedQuery with the flattened values

    Raises:
        ValueError: On invalid identifiers or rows of the wrong width
    """
    if not validate_identifier(table):
        raise ValueError(f"Invalid table name: {table!r}")
    if not columns:
        raise ValueError("Batch insert needs at least one column")
    for column in columns:
        if not validate_identifier(column):
            raise ValueError(f"Invalid column name: {column!r}")

    width = len(columns)
    groups = []
    values: List[Any] = []
    for row_index, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(
                f"Row {row_index} has {len(row)} values, expected {width}"
            )
        for column, value in zip(columns, row):
            check_param_value(column, value)
        offset = row_index * width
        groups.append("(" + ", ".join(f"${offset + i + 1}" for i in range(width)) + ")")
        values.extend(row)

    text = f"INSERT INTO {table} ({', '.join(columns)}) VALUES {', '.join(groups)}"
    return TranslatedQuery(text=text, values=values)


@contextmanager
def report_failures(
    operation: str,
    sql: str,
    params: Any,
    log: Optional[logging.Logger] = None,
) -> Iterator[None]:
    """
    Log failures of the enclosed statement with its text and parameters.

    Driver errors are re-raised as QueryExecutionError chained to the
    original; errors from this package propagate unchanged.
    """
    log = log or logger
    try:
        yield
    except psycopg.Error as e:
        error_type = classify_database_error(e)
        log_query_failure(operation, sql, params, e, error_type, logger=log)
        raise QueryExecutionError(
            f"{operation} failed: {e}",
            sql=sql,
            params=params,
            error_type=error_type,
        ) from e
    except (DatabaseError, ValueError) as e:
        log_query_failure(operation, sql, params, e, classify_database_error(e), logger=log)
        raise
