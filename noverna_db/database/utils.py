"""
Database utilities module.

This module provides utility functions for database operations including
error classification and SQL identifier validation.
"""

import re

# SQLSTATE classes (first two characters) and full codes
_PERMANENT_SQLSTATE_CLASSES = ("22", "23", "42")
_SYSTEMIC_SQLSTATE_CLASSES = ("28", "3D")
_SYSTEMIC_SQLSTATES = ("42501",)  # insufficient_privilege
_TRANSIENT_SQLSTATE_CLASSES = ("08", "40", "53", "57")

# Plain or schema-qualified identifier
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")


def classify_database_error(exception: BaseException) -> str:
    """
    Classify database errors into permanent, transient, or systemic categories.

    The SQLSTATE carried by driver errors decides when present; otherwise
    the message text is matched against known indicators.

    Args:
        exception: Database exception to classify

    Returns:
        Error type: "permanent", "transient", or "systemic"
    """
    sqlstate = getattr(exception, "sqlstate", None)
    if sqlstate:
        if sqlstate in _SYSTEMIC_SQLSTATES:
            return "systemic"
        sqlstate_class = sqlstate[:2]
        if sqlstate_class in _SYSTEMIC_SQLSTATE_CLASSES:
            return "systemic"
        if sqlstate_class in _PERMANENT_SQLSTATE_CLASSES:
            return "permanent"
        if sqlstate_class in _TRANSIENT_SQLSTATE_CLASSES:
            return "transient"

    error_str = str(exception).lower()

    # Permanent errors - retrying the same statement cannot help
    permanent_indicators = [
        "syntax error",
        "constraint violation",
        "foreign key constraint",
        "check constraint",
        "not null violation",
        "duplicate key",
        "does not exist",
        "invalid input syntax",
    ]

    # Systemic errors - configuration or credentials are wrong
    systemic_indicators = [
        "authentication failed",
        "permission denied",
        "role does not exist",
        "database does not exist",
        "ssl required",
        "password authentication failed",
    ]

    # Checked first: several share "does not exist" with the permanent list
    for indicator in systemic_indicators:
        if indicator in error_str:
            return "systemic"

    for indicator in permanent_indicators:
        if indicator in error_str:
            return "permanent"

    # Default to transient
    # Includes: connection timeout, temporary network issues, deadlocks, etc.
    return "transient"


def validate_identifier(name: str) -> bool:
    """
    Check that a table or column name can be interpolated into SQL.

    Args:
        name: Identifier, optionally schema-qualified (``schema.table``)

    Returns:
        True if the name is a plain identifier, False otherwise
    """
    return isinstance(name, str) and bool(_IDENTIFIER.match(name))
