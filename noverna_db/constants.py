#!/usr/bin/env python3
"""
Application Constants

This module contains all configuration defaults and exit codes used
throughout the noverna database layer.
"""

# Exit codes for different failure modes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 3
EXIT_DATABASE_UNAVAILABLE = 4
EXIT_QUERY_FAILED = 5
EXIT_INTERRUPTED = 130  # Conventional exit code for Ctrl+C
EXIT_UNEXPECTED_ERROR = 10

# Connection target defaults
DEFAULT_DB_HOST = "localhost"
DEFAULT_DB_PORT = 5432
DEFAULT_DB_NAME = "noverna"
DEFAULT_DB_USER = "postgres"

# Connection pool defaults
DEFAULT_MAX_CONNECTIONS = 20
DEFAULT_IDLE_TIMEOUT_MS = 30000
DEFAULT_CONNECTION_TIMEOUT_MS = 2000

# Statement issued once at startup to prove the pool can reach the server
VERIFY_QUERY = "SELECT NOW()"

# Name the host knows this resource by
RESOURCE_NAME = "noverna-database"
