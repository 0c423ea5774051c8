"""
Configuration management for the noverna database layer.

This module provides centralized configuration handling with support for
host settings, environment variables, .env files, and CLI overrides.

Uses a schema-driven approach with Pydantic for validation.
"""

from ..errors import ConfigError
from .schema import ConfigSchema
from .loader import ConfigLoader

__all__ = ["ConfigError", "ConfigSchema", "ConfigLoader"]
