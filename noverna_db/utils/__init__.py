"""
Utilities module for the noverna database layer.

This module provides shared utility functions organized by concern:
- Logging utilities for consistent logging setup
- Structured event records for query, transaction and pool events
"""

# Logging utilities
from .logging import (
    setup_logging,
    log_query_failure,
    log_transaction_outcome,
    log_pool_event,
)

__all__ = [
    "setup_logging",
    "log_query_failure",
    "log_transaction_outcome",
    "log_pool_event",
]
