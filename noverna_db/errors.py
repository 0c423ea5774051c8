"""
Error types raised by the database core.

The core always raises these to its direct caller; only the host boundary
(see ``noverna_db.bridge``) turns them into sentinel return values.
"""

from typing import Any, Optional


class DatabaseError(Exception):
    """Base class for every error raised by this package."""
    pass


class ConfigError(DatabaseError):
    """Raised when configuration validation fails."""
    pass


class NotReadyError(DatabaseError):
    """Raised when an operation runs before initialization succeeded or after shutdown."""

    def __init__(self, message: str = "Database is not connected"):
        super().__init__(message)


class TranslationError(DatabaseError):
    """Raised when a named-parameter query cannot be bound."""
    pass


class AcquisitionTimeoutError(DatabaseError):
    """Raised when no pooled connection became available in time."""
    pass


class QueryExecutionError(DatabaseError):
    """
    Raised when the server rejects or fails a statement.

    Attributes:
        sql: Statement text as supplied by the caller
        params: Parameters as supplied by the caller
        error_type: "permanent", "transient" or "systemic"
    """

    def __init__(
        self,
        message: str,
        sql: str = "",
        params: Optional[Any] = None,
        error_type: str = "transient",
    ):
        super().__init__(message)
        self.sql = sql
        self.params = params
        self.error_type = error_type


class TransactionError(DatabaseError):
    """Raised when BEGIN/COMMIT fails or an expired transaction handle is used."""
    pass


__all__ = [
    "DatabaseError",
    "ConfigError",
    "NotReadyError",
    "TranslationError",
    "AcquisitionTimeoutError",
    "QueryExecutionError",
    "TransactionError",
]
