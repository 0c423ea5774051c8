"""
Host boundary for the noverna database layer.

This package publishes database operations to the scripting host and
converts every core failure into a sentinel return value.
"""

from .registry import ExportRegistry
from .exports import DatabaseExports

__all__ = ["ExportRegistry", "DatabaseExports"]
