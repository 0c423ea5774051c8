#!/usr/bin/env python3
"""
Noverna Database Package

A PostgreSQL access layer for a scripting host: pooled async connections,
named-parameter queries and transactional execution, published to the host
through a small export table.

This package provides both a command-line interface and a programmatic API.
"""

__version__ = "1.0.0"
__author__ = "Noverna"
__description__ = (
    "Pooled PostgreSQL access with named parameters for scripting hosts"
)
__license__ = "MIT"
__maintainer__ = "Noverna"
__email__ = "support@example.com"
__url__ = "https://github.com/example/noverna-db"
__status__ = "Production"

# Import models for public API
from .models import (
    DatabaseConfig,
    PoolInfo,
    TranslatedQuery,
)

# Import errors for public API
from .errors import (
    DatabaseError,
    NotReadyError,
    TranslationError,
    AcquisitionTimeoutError,
    QueryExecutionError,
    TransactionError,
    ConfigError,
)

# Import constants for public API
from .constants import (
    EXIT_SUCCESS,
    EXIT_CONFIG_ERROR,
    EXIT_DATABASE_UNAVAILABLE,
    EXIT_QUERY_FAILED,
    EXIT_INTERRUPTED,
    EXIT_UNEXPECTED_ERROR,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_IDLE_TIMEOUT_MS,
    DEFAULT_CONNECTION_TIMEOUT_MS,
)

# Import database functionality for public API
from .database import (
    Database,
    ConnectionPoolManager,
    QueryExecutor,
    TransactionCoordinator,
    TransactionConnection,
    translate,
    create_database_config,
    validate_database_url,
)

# Import host boundary for public API
from .bridge import (
    DatabaseExports,
    ExportRegistry,
)

# Import CLI functionality for public API
from .cli import (
    main,
    create_argument_parser,
)

# Import utilities for public API
from .utils import (
    setup_logging,
)

# Public API exports
__all__ = [
    # Package metadata
    "__version__",
    "__author__",
    "__description__",
    # Data models
    "DatabaseConfig",
    "PoolInfo",
    "TranslatedQuery",
    # Errors
    "DatabaseError",
    "NotReadyError",
    "TranslationError",
    "AcquisitionTimeoutError",
    "QueryExecutionError",
    "TransactionError",
    "ConfigError",
    # Constants
    "EXIT_SUCCESS",
    "EXIT_CONFIG_ERROR",
    "EXIT_DATABASE_UNAVAILABLE",
    "EXIT_QUERY_FAILED",
    "EXIT_INTERRUPTED",
    "EXIT_UNEXPECTED_ERROR",
    "DEFAULT_MAX_CONNECTIONS",
    "DEFAULT_IDLE_TIMEOUT_MS",
    "DEFAULT_CONNECTION_TIMEOUT_MS",
    # Database
    "Database",
    "ConnectionPoolManager",
    "QueryExecutor",
    "TransactionCoordinator",
    "TransactionConnection",
    "translate",
    "create_database_config",
    "validate_database_url",
    # Host boundary
    "DatabaseExports",
    "ExportRegistry",
    # CLI functions
    "main",
    "create_argument_parser",
    # Utilities
    "setup_logging",
]
