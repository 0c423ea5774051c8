#!/usr/bin/env python3
"""
CLI package for the noverna database layer.

This package provides command-line interface components including
argument parsing and the main application flow.
"""

from .parser import (
    create_argument_parser,
    parse_params,
)

from .main import (
    main,
    run_command,
)

__all__ = [
    # Argument parsing
    "create_argument_parser",
    "parse_params",
    # Main application flow
    "main",
    "run_command",
]
