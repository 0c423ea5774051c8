#!/usr/bin/env python3
"""
Data Models Module

This module contains all data structures and type definitions used
throughout the noverna database layer.
"""

from .database import (
    DatabaseConfig,
    PoolInfo,
    TranslatedQuery,
    ParamValue,
    SUPPORTED_PARAM_TYPES,
)

__all__ = [
    "DatabaseConfig",
    "PoolInfo",
    "TranslatedQuery",
    "ParamValue",
    "SUPPORTED_PARAM_TYPES",
]
