#!/usr/bin/env python3
"""
Database package for the noverna database layer.

This package provides named-parameter translation, connection pool
management, pooled statement execution and transaction coordination.
"""

from .config import (
    validate_database_url,
    create_database_config,
    database_config_from_schema,
    build_conninfo,
)

from .translator import (
    translate,
)

from .connection import (
    ConnectionPoolManager,
)

from .executor import (
    QueryExecutor,
)

from .transaction import (
    TransactionCoordinator,
    TransactionConnection,
)

from .service import (
    Database,
)

from .operations import (
    build_batch_insert,
    with_returning_id,
)

from .utils import (
    classify_database_error,
    validate_identifier,
)

__all__ = [
    # Configuration
    "validate_database_url",
    "create_database_config",
    "database_config_from_schema",
    "build_conninfo",
    # Translation
    "translate",
    # Connection management
    "ConnectionPoolManager",
    # Execution
    "QueryExecutor",
    "TransactionCoordinator",
    "TransactionConnection",
    "Database",
    # Statement builders
    "build_batch_insert",
    "with_returning_id",
    # Utilities
    "classify_database_error",
    "validate_identifier",
]
