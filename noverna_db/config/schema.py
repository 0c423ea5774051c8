"""
Configuration schema definition using Pydantic.

This module defines the declarative configuration schema that serves as
the single source of truth for all configuration in the application.
Every field names the environment variable, the host setting key and the
CLI argument it can be read from.
"""

from typing import Optional, Any
from pydantic import BaseModel, Field, field_validator

from ..constants import (
    DEFAULT_DB_HOST,
    DEFAULT_DB_PORT,
    DEFAULT_DB_NAME,
    DEFAULT_DB_USER,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_IDLE_TIMEOUT_MS,
    DEFAULT_CONNECTION_TIMEOUT_MS,
)


class ConfigSchema(BaseModel):
    """
    Declarative configuration schema.

    This is the single source of truth for all application configuration.
    Each field can be set via host settings, environment variables or CLI
    arguments.
    """

    # Connection target
    db_host: str = Field(
        DEFAULT_DB_HOST,
        description="Database server host",
        json_schema_extra={
            "env_var": "NOVERNA_DB_HOST",
            "setting": "noverna_db_host",
            "cli_arg": "db_host",
        }
    )

    db_port: int = Field(
        DEFAULT_DB_PORT,
        ge=1,
        le=65535,
        description="Database server port",
        json_schema_extra={
            "env_var": "NOVERNA_DB_PORT",
            "setting": "noverna_db_port",
            "cli_arg": "db_port",
        }
    )

    db_name: str = Field(
        DEFAULT_DB_NAME,
        min_length=1,
        description="Database name",
        json_schema_extra={
            "env_var": "NOVERNA_DB_NAME",
            "setting": "noverna_db_name",
            "cli_arg": "db_name",
        }
    )

    db_user: str = Field(
        DEFAULT_DB_USER,
        min_length=1,
        description="Database login role",
        json_schema_extra={
            "env_var": "NOVERNA_DB_USER",
            "setting": "noverna_db_user",
            "cli_arg": "db_user",
        }
    )

    db_password: str = Field(
        "",
        description="Database login password",
        json_schema_extra={
            "env_var": "NOVERNA_DB_PASSWORD",
            "setting": "noverna_db_password",
            "cli_arg": "db_password",
        }
    )

    db_url: Optional[str] = Field(
        None,
        description="Full postgresql:// URL, overrides host/port/name/user/password",
        json_schema_extra={
            "env_var": "NOVERNA_DB_URL",
            "setting": "noverna_db_url",
            "cli_arg": "db_url",
        }
    )

    # Pool policy
    max_connections: int = Field(
        DEFAULT_MAX_CONNECTIONS,
        ge=1,
        description="Maximum number of pooled connections",
        json_schema_extra={
            "env_var": "NOVERNA_DB_MAX_CONNECTIONS",
            "setting": "noverna_db_max_connections",
            "cli_arg": "max_connections",
        }
    )

    idle_timeout_ms: int = Field(
        DEFAULT_IDLE_TIMEOUT_MS,
        ge=1000,
        description="Milliseconds an idle pooled connection is kept open",
        json_schema_extra={
            "env_var": "NOVERNA_DB_IDLE_TIMEOUT",
            "setting": "noverna_db_idle_timeout",
            "cli_arg": "idle_timeout",
        }
    )

    connection_timeout_ms: int = Field(
        DEFAULT_CONNECTION_TIMEOUT_MS,
        ge=1,
        description="Milliseconds to wait for a pooled connection",
        json_schema_extra={
            "env_var": "NOVERNA_DB_CONNECTION_TIMEOUT",
            "setting": "noverna_db_connection_timeout",
            "cli_arg": "connection_timeout",
        }
    )

    @field_validator('db_url', mode='before')
    @classmethod
    def blank_url_is_none(cls, v: Any) -> Optional[str]:
        """Treat an empty URL as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    model_config = {
        "validate_assignment": True,
        "extra": "forbid"
    }
