#!/usr/bin/env python3
"""
Database Models

This module contains data structures related to database configuration,
pool statistics and translated queries.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import List, NamedTuple, Optional, Union
from uuid import UUID

from ..constants import (
    DEFAULT_DB_HOST,
    DEFAULT_DB_PORT,
    DEFAULT_DB_NAME,
    DEFAULT_DB_USER,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_IDLE_TIMEOUT_MS,
    DEFAULT_CONNECTION_TIMEOUT_MS,
)

# Value kinds that may be bound to a query parameter
ParamValue = Union[
    None, bool, int, float, Decimal, str, bytes, bytearray, memoryview,
    datetime, date, time, UUID,
]

SUPPORTED_PARAM_TYPES = (
    type(None), bool, int, float, Decimal, str, bytes, bytearray, memoryview,
    datetime, date, time, UUID,
)


class DatabaseConfig(NamedTuple):
    """
    Database configuration settings.

    Attributes:
        host: Server host name
        port: Server port
        database: Database name
        user: Login role
        password: Login password
        max_connections: Upper bound on live pooled connections
        idle_timeout_ms: Idle time after which a pooled connection is closed
        connection_timeout_ms: Maximum wait for a pooled connection
        url: Optional postgresql:// URL; takes precedence over the discrete fields
    """

    host: str = DEFAULT_DB_HOST
    port: int = DEFAULT_DB_PORT
    database: str = DEFAULT_DB_NAME
    user: str = DEFAULT_DB_USER
    password: str = ""
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    idle_timeout_ms: int = DEFAULT_IDLE_TIMEOUT_MS
    connection_timeout_ms: int = DEFAULT_CONNECTION_TIMEOUT_MS
    url: Optional[str] = None

    def mask(self) -> dict:
        """Return a dictionary safe for logging (credentials hidden)."""
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "password": "***" if self.password else None,
            "max_connections": self.max_connections,
            "idle_timeout_ms": self.idle_timeout_ms,
            "connection_timeout_ms": self.connection_timeout_ms,
            "url": "***" if self.url else None,
        }


class PoolInfo(NamedTuple):
    """
    Snapshot of connection pool counters.

    Attributes:
        total: Connections currently open (idle and in use)
        idle: Connections waiting in the pool
        waiting: Callers queued for a connection
    """

    total: int
    idle: int
    waiting: int


class TranslatedQuery(NamedTuple):
    """
    A statement rewritten to positional placeholders.

    ``$N`` in ``text`` binds ``values[N - 1]``.
    """

    text: str
    values: List[ParamValue]
