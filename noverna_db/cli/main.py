"""
CLI main application module.

This module contains the main application entry point: it loads
configuration, runs one statement (or a connectivity check) and prints
the result as JSON.
"""

import asyncio
import json
import logging
import sys
from argparse import Namespace
from typing import Any, Dict, Optional

from ..constants import (
    EXIT_SUCCESS,
    EXIT_CONFIG_ERROR,
    EXIT_DATABASE_UNAVAILABLE,
    EXIT_QUERY_FAILED,
    EXIT_INTERRUPTED,
    EXIT_UNEXPECTED_ERROR,
)
from ..config import ConfigError, ConfigLoader, ConfigSchema
from ..database import Database, database_config_from_schema
from ..errors import DatabaseError
from ..models import DatabaseConfig
from ..utils import setup_logging
from .parser import create_argument_parser, parse_params

logger = logging.getLogger(__name__)

# --mode value -> Database method taking (sql, params)
MODE_METHODS = {
    "query": "query",
    "single": "single",
    "scalar": "scalar",
    "execute": "execute",
    "insert": "insert",
}


async def run_command(
    args: Namespace,
    db_config: DatabaseConfig,
    params: Optional[Dict[str, Any]] = None,
    database: Optional[Database] = None,
) -> int:
    """
    Initialize the database, run the requested operation and shut down.

    Args:
        args: Parsed CLI arguments
        db_config: Validated database configuration
        params: Named parameters for the statement
        database: Database service to use (a new one by default)

    Returns:
        Process exit code
    """
    database = database or Database()

    if not await database.initialize(db_config):
        logger.error("Database is unavailable. Please check your configuration.")
        return EXIT_DATABASE_UNAVAILABLE

    try:
        if args.check:
            info = database.pool_info()
            result = info._asdict() if info is not None else None
        elif args.mode == "table-exists":
            result = await database.table_exists(args.sql)
        else:
            method = getattr(database, MODE_METHODS[args.mode])
            result = await method(args.sql, params or None)
    except DatabaseError as e:
        logger.error(f"{args.mode} failed: {e}")
        return EXIT_QUERY_FAILED
    finally:
        await database.shutdown()

    print(json.dumps(result, indent=2, default=str))
    return EXIT_SUCCESS


def main(argv=None):
    """Main entry point for the script."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    if not args.check and not args.sql:
        parser.error("a SQL statement (or table name for --mode table-exists) is required unless --check is given")

    try:
        params = parse_params(args.param)
    except ValueError as e:
        parser.error(str(e))

    try:
        config = ConfigLoader.load(schema=ConfigSchema, cli_args=args)
        db_config = database_config_from_schema(config)
        if db_config is None:
            raise ConfigError("Invalid database configuration")
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        exit_code = asyncio.run(run_command(args, db_config, params))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C)")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        sys.exit(EXIT_UNEXPECTED_ERROR)

    if exit_code != EXIT_SUCCESS:
        sys.exit(exit_code)
