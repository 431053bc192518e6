"""
Parsing helpers for untyped request values.
JSON bodies and query strings arrive as Any; these coerce or return None.
"""

import re
from typing import Any, Optional

_INTEGER = re.compile(r"^[+-]?\d{1,30}$")

# Largest value a Postgres bigint column holds
MAX_ID = 2 ** 63 - 1


def parse_int(value: Any) -> Optional[int]:
    """Integer from an int, an integral float, or a string of digits. Else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER.match(value.strip()):
        return int(value.strip())
    return None


def parse_id(value: Any) -> Optional[int]:
    """Row id in [1, MAX_ID], or None."""
    parsed = parse_int(value)
    if parsed is None or not 1 <= parsed <= MAX_ID:
        return None
    return parsed


def clean_str(value: Any, max_length: int) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()[:max_length]


def clamp_limit(value: Any, default: int, maximum: int) -> int:
    """Page size in [1, maximum]; unparsable input falls back to default."""
    limit = parse_int(value)
    if limit is None:
        return default
    return min(maximum, max(1, limit))
