"""
Schema-driven configuration loader.

This module provides a ConfigLoader that uses the configuration schema
to automatically load, validate, and merge configuration from multiple sources.
"""

import logging
import os
import typing
from typing import Dict, Any, Optional, Mapping
from argparse import ArgumentParser, Namespace

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigError
from .schema import ConfigSchema


logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and validates configuration using a schema-driven approach."""

    @staticmethod
    def load(
        schema: type[ConfigSchema] = ConfigSchema,
        settings: Optional[Mapping[str, Any]] = None,
        cli_args: Optional[Namespace] = None,
        env_file: Optional[str] = ".env.local",
    ) -> ConfigSchema:
        """
        Load configuration from all sources with precedence handling.

        Loading order (lowest to highest priority):
        1. Schema defaults
        2. .env.local file (if it exists)
        3. OS environment variables
        4. Host settings store (e.g. the host's convars)
        5. CLI arguments (highest priority)

        Args:
            schema: The configuration schema class to use
            settings: Key-value settings provided by the host runtime
            cli_args: Parsed CLI arguments (if available)
            env_file: Dotenv file to read, None to skip

        Returns:
            Validated configuration instance

        Raises:
            ConfigError: If configuration validation fails
        """
        config_dict: Dict[str, Any] = {}

        # Step 1: Load from .env.local file if available
        if env_file:
            _load_from_dotenv_file(env_file)

        # Step 2: Load from environment variables based on schema
        for field_name, extra in _field_extras(schema):
            env_var = extra.get("env_var")
            if env_var:
                env_value = os.getenv(env_var)
                if env_value is not None:
                    # Strip whitespace; empty strings fall back to the default
                    stripped = env_value.strip()
                    if stripped:
                        config_dict[field_name] = stripped

        # Step 3: Apply host settings
        if settings:
            for field_name, extra in _field_extras(schema):
                key = extra.get("setting")
                if key in settings and settings[key] is not None:
                    value = settings[key]
                    if isinstance(value, str):
                        stripped = value.strip()
                        if stripped:
                            config_dict[field_name] = stripped
                    else:
                        config_dict[field_name] = value

        # Step 4: Apply CLI arguments (highest priority)
        if cli_args:
            for field_name, extra in _field_extras(schema):
                cli_arg = extra.get("cli_arg")
                if cli_arg and hasattr(cli_args, cli_arg):
                    cli_value = getattr(cli_args, cli_arg)
                    if cli_value is not None:
                        if isinstance(cli_value, str):
                            stripped = cli_value.strip()
                            if stripped:
                                config_dict[field_name] = stripped
                            else:
                                # Treat explicit empty string as an override to clear the value
                                config_dict[field_name] = None
                        else:
                            config_dict[field_name] = cli_value

        # Drop explicit clears so the schema default applies
        config_dict = {k: v for k, v in config_dict.items() if v is not None}

        # Step 5: Create and validate the configuration
        try:
            config = schema(**config_dict)
            logger.debug("Configuration loaded and validated successfully")
            return config
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = error["loc"][0] if error["loc"] else "config"
                msg = error["msg"]
                field_info = schema.model_fields.get(field)
                extra = field_info.json_schema_extra if field_info and field_info.json_schema_extra else {}
                env_var = extra.get("env_var", str(field).upper())
                errors.append(f"{env_var}: {msg}")

            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {err}" for err in errors)
            raise ConfigError(error_msg) from e

    @staticmethod
    def generate_cli_parser(
        schema: type[ConfigSchema] = ConfigSchema,
        description: str = "Run a query against the noverna PostgreSQL database",
    ) -> ArgumentParser:
        """
        Generate an ArgumentParser from the configuration schema.

        Args:
            schema: The configuration schema class
            description: Parser description

        Returns:
            Configured ArgumentParser
        """
        parser = ArgumentParser(
            description=description,
            epilog="""
Examples:
  noverna-db --check
  noverna-db "SELECT * FROM users WHERE id = :id" --mode single --param id=5
  noverna-db "UPDATE users SET name = :name WHERE id = :id" --mode execute \\
      --param name=Alice --param id=5
            """,
        )

        # Add CLI-only arguments that don't map to config
        parser.add_argument(
            "sql",
            nargs="?",
            help="SQL statement using :name placeholders",
        )
        parser.add_argument(
            "--mode",
            choices=["query", "single", "scalar", "execute", "insert", "table-exists"],
            default="query",
            help="Export to run the statement through (default: query)",
        )
        parser.add_argument(
            "--param",
            action="append",
            default=[],
            metavar="NAME=VALUE",
            help="Bind a named parameter; repeat for several (values are JSON or plain text)",
        )
        parser.add_argument(
            "--check",
            action="store_true",
            help="Only verify connectivity and print pool information",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Enable verbose logging (DEBUG level)",
        )

        # Add schema-based arguments
        for field_name, extra in _field_extras(schema):
            field_info = schema.model_fields[field_name]
            cli_arg = extra.get("cli_arg")
            if not cli_arg:
                continue

            arg_name = f"--{cli_arg.replace('_', '-')}"

            kwargs = {
                "help": field_info.description or f"Override {extra.get('env_var', field_name.upper())} env var",
                "default": None,  # Don't set schema defaults here - let the loader handle it
                "dest": cli_arg,
            }

            # Unwrap Optional[X] to X
            field_type = field_info.annotation
            if typing.get_origin(field_type) is typing.Union:
                non_none_args = [arg for arg in typing.get_args(field_type) if arg is not type(None)]
                if len(non_none_args) == 1:
                    field_type = non_none_args[0]

            if field_type == int:
                kwargs["type"] = int
            elif field_type == float:
                kwargs["type"] = float

            parser.add_argument(arg_name, **kwargs)

        return parser


def _field_extras(schema: type[ConfigSchema]):
    """Yield (field name, json_schema_extra) for every schema field."""
    for field_name, field_info in schema.model_fields.items():
        yield field_name, field_info.json_schema_extra or {}


def _load_from_dotenv_file(path: str) -> None:
    """Load values from a dotenv file without overriding the environment."""
    if os.path.exists(path):
        load_dotenv(path, override=False)
        logger.debug(f"Loaded configuration from {path} file")
    else:
        logger.debug(f"{path} file not found, skipping")
