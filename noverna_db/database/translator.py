"""
Named-parameter translation.

Rewrites ``:name`` placeholders into PostgreSQL positional placeholders
(``$1``, ``$2``, ...) and collects the bound values in slot order. Each
distinct name gets one slot, numbered by first appearance; repeated names
reuse their slot.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from ..errors import TranslationError
from ..models import TranslatedQuery, SUPPORTED_PARAM_TYPES

logger = logging.getLogger(__name__)

# A colon followed by ASCII word characters; "::" casts are not placeholders
PLACEHOLDER_PATTERN = re.compile(r"(?<!:):([A-Za-z0-9_]+)")


def translate(
    sql: str,
    params: Optional[Mapping[str, Any]] = None,
    strict: bool = False,
) -> TranslatedQuery:
    """
    Translate a named-parameter statement into a positional one.

    Args:
        sql: Statement text using ``:name`` placeholders
        params: Mapping of placeholder name to value
        strict: Raise instead of binding None for names missing from params

    Returns:
        TranslatedQuery whose ``$N`` binds ``values[N - 1]``. Without params
        the text is returned unchanged with no values.

    Raises:
        TranslationError: On unsupported value kinds, a non-mapping params
            argument, or (strict only) a name missing from params
    """
    if not params:
        return TranslatedQuery(text=sql, values=[])

    if not isinstance(params, Mapping):
        raise TranslationError(
            f"Named parameters must be a mapping, got {type(params).__name__}"
        )

    values: List[Any] = []
    slots: Dict[str, int] = {}

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in slots:
            if name in params:
                value = params[name]
                check_param_value(name, value)
            elif strict:
                raise TranslationError(f"Missing value for parameter ':{name}'")
            else:
                logger.debug(f"Parameter ':{name}' not supplied, binding NULL")
                value = None
            values.append(value)
            slots[name] = len(values)
        return f"${slots[name]}"

    text = PLACEHOLDER_PATTERN.sub(_replace, sql)
    return TranslatedQuery(text=text, values=values)


def check_param_value(name: str, value: Any) -> None:
    """Reject values outside the supported kinds."""
    if not isinstance(value, SUPPORTED_PARAM_TYPES):
        raise TranslationError(
            f"Unsupported value for parameter ':{name}': {type(value).__name__}"
        )
