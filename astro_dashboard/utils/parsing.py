"""Numeric coercion for values read from the trading database.

PostgreSQL NUMERIC columns come back as ``Decimal`` (or as strings from some
views) and may be NULL. These helpers turn them into floats without ever
letting NaN or infinity through.
"""
import logging
import math
from typing import Any, Optional

logger = logging.getLogger("parsing")


def to_optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Discarding malformed numeric value: {value!r}")
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_float(value: Any, default: float = 0.0) -> float:
    number = to_optional_float(value)
    return default if number is None else number


def to_positive_or_none(value: Any) -> Optional[float]:
    """Keep only strictly positive numbers; zero, negatives and junk become None."""
    number = to_optional_float(value)
    if number is None or number <= 0:
        return None
    return number


def to_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        number = to_optional_float(value)
        return default if number is None else int(number)


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("t", "true", "1", "yes")
    return bool(value)


__all__ = ["to_optional_float", "to_float", "to_positive_or_none", "to_int", "to_bool"]
