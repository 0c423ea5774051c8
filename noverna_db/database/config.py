"""
Database configuration management module.

This module handles database configuration creation, URL validation,
and conninfo rendering for database connections.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from psycopg.conninfo import make_conninfo

from ..config.schema import ConfigSchema
from ..models import DatabaseConfig
from ..constants import (
    DEFAULT_DB_HOST,
    DEFAULT_DB_PORT,
    DEFAULT_DB_NAME,
    DEFAULT_DB_USER,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_IDLE_TIMEOUT_MS,
    DEFAULT_CONNECTION_TIMEOUT_MS,
)

logger = logging.getLogger(__name__)


def validate_database_url(url: str) -> bool:
    """
    Validate that a database URL has the correct format.

    Args:
        url: Database URL to validate

    Returns:
        True if URL format is valid, False otherwise
    """
    if not url:
        return False

    try:
        parsed = urlparse(url)

        if not parsed.scheme:
            logger.error("Database URL missing scheme (e.g., postgresql://)")
            return False

        if parsed.scheme not in ["postgresql", "postgres"]:
            logger.error(
                f"Database URL scheme '{parsed.scheme}' not supported. Use 'postgresql://' or 'postgres://'"
            )
            return False

        if not parsed.hostname:
            logger.error("Database URL missing hostname")
            return False

        if not parsed.username:
            logger.error("Database URL missing username")
            return False

        if not parsed.path or parsed.path == "/":
            logger.error("Database URL missing database name")
            return False

        return True

    except (TypeError, ValueError) as e:
        logger.error(f"Invalid database URL format: {str(e)}")
        return False


def create_database_config(
    host: str = DEFAULT_DB_HOST,
    port: int = DEFAULT_DB_PORT,
    database: str = DEFAULT_DB_NAME,
    user: str = DEFAULT_DB_USER,
    password: str = "",
    max_connections: Optional[int] = None,
    idle_timeout_ms: Optional[int] = None,
    connection_timeout_ms: Optional[int] = None,
    url: Optional[str] = None,
) -> Optional[DatabaseConfig]:
    """
    Create a database configuration with validation.

    Args:
        host: Database server host
        port: Database server port
        database: Database name
        user: Login role
        password: Login password
        max_connections: Pool size bound (default: DEFAULT_MAX_CONNECTIONS)
        idle_timeout_ms: Idle connection lifetime (default: DEFAULT_IDLE_TIMEOUT_MS)
        connection_timeout_ms: Acquisition wait (default: DEFAULT_CONNECTION_TIMEOUT_MS)
        url: Optional URL overriding the discrete connection fields

    Returns:
        DatabaseConfig object or None if validation fails
    """
    if url is not None and not validate_database_url(url):
        return None

    final_max_connections = (
        max_connections if max_connections is not None else DEFAULT_MAX_CONNECTIONS
    )
    final_idle_timeout = (
        idle_timeout_ms if idle_timeout_ms is not None else DEFAULT_IDLE_TIMEOUT_MS
    )
    final_connection_timeout = (
        connection_timeout_ms
        if connection_timeout_ms is not None
        else DEFAULT_CONNECTION_TIMEOUT_MS
    )

    if url is None:
        if not host:
            logger.error("Database host must not be empty")
            return None
        if not database:
            logger.error("Database name must not be empty")
            return None
        if not user:
            logger.error("Database user must not be empty")
            return None
        if not 1 <= port <= 65535:
            logger.error(f"Database port must be between 1 and 65535, got {port}")
            return None

    if final_max_connections < 1:
        logger.error(f"Max connections must be at least 1, got {final_max_connections}")
        return None

    if final_idle_timeout < 1000:
        logger.error(
            f"Idle timeout must be at least 1000 ms, got {final_idle_timeout}"
        )
        return None

    if final_connection_timeout < 1:
        logger.error(
            f"Connection timeout must be at least 1 ms, got {final_connection_timeout}"
        )
        return None

    return DatabaseConfig(
        host=host,
        port=port,
        database=database,
        user=user,
        password=password,
        max_connections=final_max_connections,
        idle_timeout_ms=final_idle_timeout,
        connection_timeout_ms=final_connection_timeout,
        url=url,
    )


def database_config_from_schema(config: ConfigSchema) -> Optional[DatabaseConfig]:
    """Build a DatabaseConfig from loaded application configuration."""
    return create_database_config(
        host=config.db_host,
        port=config.db_port,
        database=config.db_name,
        user=config.db_user,
        password=config.db_password,
        max_connections=config.max_connections,
        idle_timeout_ms=config.idle_timeout_ms,
        connection_timeout_ms=config.connection_timeout_ms,
        url=config.db_url,
    )


def build_conninfo(config: DatabaseConfig) -> str:
    """Render the libpq connection string for a configuration."""
    if config.url:
        return config.url
    return make_conninfo(
        host=config.host,
        port=config.port,
        dbname=config.database,
        user=config.user,
        password=config.password or None,
    )
