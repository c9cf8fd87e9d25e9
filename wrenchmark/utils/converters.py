"""Type conversion utilities for safely handling data from CSV/database.

This module is the single source of truth for safe type conversion.
All other modules should import from here instead of defining their own.
"""

from typing import Any


def safe_float(val: Any, default: float = 0.0) -> float:
    """Safely convert a value to float.

    Args:
        val: Value to convert (can be str, int, float, None, etc.)
        default: Value to return if conversion fails

    Returns:
        Converted float or default value

    Examples:
        >>> safe_float("649")
        649.0
        >>> safe_float(None)
        0.0
        >>> safe_float("n/a", default=-1.0)
        -1.0
    """
    if val is None or val == "":
        return default
    try:
        return float(val)
    except (ValueError, TypeError):
        return default


def optional_float(val: Any) -> float | None:
    """Convert to float, keeping missing or unparseable values as None."""
    if val is None or val == "":
        return None
    try:
        return float(val)
    except (ValueError, TypeError):
        return None


def optional_int(val: Any) -> int | None:
    """Convert to int, keeping missing or unparseable values as None."""
    if val is None or val == "":
        return None
    try:
        return int(float(val))
    except (ValueError, TypeError):
        return None


def is_present(val: Any) -> bool:
    """True for a value that counts as known data (non-empty, non-zero)."""
    if val is None or val == "":
        return False
    if isinstance(val, bool):
        return val
    if isinstance(val, (int, float)):
        return val != 0
    return True
