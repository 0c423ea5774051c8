"""
Logging utilities for the noverna database layer.

This module provides centralized logging configuration and structured
event records so that failures can be reproduced from the log alone.
"""

import json
import logging
import time
from typing import Any, Optional


def setup_logging(verbose: bool = False):
    """Setup logging configuration with appropriate level and format."""
    level = logging.DEBUG if verbose else logging.INFO
    format_string = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    logging.basicConfig(level=level, format=format_string, datefmt="%Y-%m-%d %H:%M:%S")

    # Set specific logger levels
    logging.getLogger("psycopg").setLevel(logging.WARNING)  # Reduce driver noise
    logging.getLogger("psycopg.pool").setLevel(logging.WARNING)  # Reduce pool housekeeping noise


def _dumps(record: dict) -> str:
    # Parameters may hold bytes, datetimes, decimals
    return json.dumps(record, ensure_ascii=False, default=str)


def log_query_failure(
    operation: str,
    sql: str,
    params: Any,
    error: BaseException,
    error_type: str,
    timestamp: Optional[float] = None,
    logger: Optional[logging.Logger] = None
):
    """
    Log a structured record for a failed statement.

    The record carries the statement text and the parameters exactly as the
    caller supplied them, so the failing call can be replayed.

    Args:
        operation: Name of the executor operation (query, execute, ...)
        sql: Statement text as supplied by the caller
        params: Named mapping or positional values as supplied by the caller
        error: The exception raised by the driver or pool
        error_type: Classification ("permanent", "transient", "systemic")
        timestamp: Failure timestamp (defaults to current time)
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if timestamp is None:
        timestamp = time.time()

    failure_record = {
        "event_type": "query_failure",
        "timestamp": timestamp,
        "operation": operation,
        "sql": sql,
        "params": params,
        "error_class": type(error).__name__,
        "error_type": error_type,
        "error_message": str(error),
    }

    logger.error(f"QUERY_FAILURE: {_dumps(failure_record)}")


def log_transaction_outcome(
    outcome: str,
    duration: float,
    error: Optional[BaseException] = None,
    timestamp: Optional[float] = None,
    logger: Optional[logging.Logger] = None
):
    """
    Log a structured record for a finished transaction.

    Args:
        outcome: "committed" or "rolled_back"
        duration: Seconds between acquiring the connection and the outcome
        error: Failure that caused a rollback, if any
        timestamp: Outcome timestamp (defaults to current time)
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if timestamp is None:
        timestamp = time.time()

    transaction_record = {
        "event_type": "transaction",
        "timestamp": timestamp,
        "outcome": outcome,
        "duration_seconds": round(duration, 3),
        "success": outcome == "committed",
    }
    if error is not None:
        transaction_record["error_class"] = type(error).__name__
        transaction_record["error_message"] = str(error)

    if outcome == "committed":
        logger.debug(f"TRANSACTION: {_dumps(transaction_record)}")
    else:
        logger.warning(f"TRANSACTION: {_dumps(transaction_record)}")


def log_pool_event(
    event: str,
    stats: Optional[dict] = None,
    detail: Optional[str] = None,
    logger: Optional[logging.Logger] = None
):
    """
    Log a structured connection pool lifecycle record.

    Args:
        event: "initialized", "failed" or "closed"
        stats: Pool counters at the time of the event
        detail: Free-form context (error text, target description)
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    pool_record = {
        "event_type": "pool",
        "timestamp": time.time(),
        "event": event,
        "stats": stats or {},
    }
    if detail:
        pool_record["detail"] = detail

    if event == "failed":
        logger.error(f"POOL_EVENT: {_dumps(pool_record)}")
    else:
        logger.info(f"POOL_EVENT: {_dumps(pool_record)}")
