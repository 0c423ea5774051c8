"""
CLI argument parser module.

The parser is generated from the configuration schema; ``--param``
values are decoded here.
"""

import json
from typing import Any, Dict, Iterable

from ..config.loader import ConfigLoader


def create_argument_parser():
    """
    Create and configure the argument parser.

    This uses the schema-driven ConfigLoader to automatically
    generate the parser from the configuration schema.
    """
    return ConfigLoader.generate_cli_parser()


def parse_params(pairs: Iterable[str]) -> Dict[str, Any]:
    """
    Decode repeated ``NAME=VALUE`` arguments into a parameter mapping.

    Values that parse as JSON (numbers, true/false, null, quoted strings)
    are bound with that type; anything else is bound as text.

    Raises:
        ValueError: If an argument has no ``=`` or an empty name
    """
    params: Dict[str, Any] = {}
    for pair in pairs:
        name, sep, raw = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Invalid parameter '{pair}', expected NAME=VALUE")
        try:
            params[name] = json.loads(raw)
        except json.JSONDecodeError:
            params[name] = raw
    return params
