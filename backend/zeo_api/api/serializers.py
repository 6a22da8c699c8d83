"""
Response shaping: SQLite stores flags as 0/1, clients get true/false.
"""

from typing import Any

BOOLEAN_FIELDS = frozenset({"featured", "is_active"})


def to_public(obj: Any) -> Any:
    """Recursively convert 0/1 flag columns to booleans (lists and nested dicts included)."""
    if isinstance(obj, list):
        return [to_public(item) for item in obj]
    if isinstance(obj, dict):
        converted = {}
        for key, value in obj.items():
            if key in BOOLEAN_FIELDS and value in (0, 1) and not isinstance(value, bool):
                converted[key] = bool(value)
            else:
                converted[key] = to_public(value)
        return converted
    return obj
