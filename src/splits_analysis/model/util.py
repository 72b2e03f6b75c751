"""Null/NaN-aware numeric helpers and course-detail parsing.

Times are plain seconds.  ``None`` means "not recorded" (a missed punch),
``float('nan')`` means "recorded but found to be invalid".  These helpers keep
the two apart.
"""

from __future__ import annotations

import math
import re

MIN_COURSE_LENGTH_METRES = 500
"""Course lengths at or above this value are taken to be in metres."""

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_not_null(value) -> bool:
    return value is not None


def is_nan_strict(value) -> bool:
    """Return True only for a floating-point NaN (``None`` is not NaN)."""
    return isinstance(value, float) and math.isnan(value)


def is_not_null_nor_nan(value) -> bool:
    return value is not None and not is_nan_strict(value)


def add_if_not_null(a, b):
    """Return ``a + b``, or ``None`` if either operand is ``None``."""
    return None if a is None or b is None else a + b


def subtract_if_not_null(a, b):
    """Return ``a - b``, or ``None`` if either operand is ``None``."""
    return None if a is None or b is None else a - b


def js_round(value: float) -> int:
    """Round half up, so ``js_round(2.5) == 3`` and ``js_round(-2.5) == -2``."""
    return math.floor(value + 0.5)


def parse_course_length(text: str) -> float | None:
    """Parse a course length, returning kilometres.

    A comma may be used as the decimal separator.  Values of 500 or more are
    assumed to be in metres and are converted.
    """
    match = re.match(r"^\s*([+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?)", text.replace(",", ".", 1))
    if match is None:
        return None
    length = float(match.group(1))
    if not math.isfinite(length):
        return None
    if length >= MIN_COURSE_LENGTH_METRES:
        length /= 1000
    return length


def parse_course_climb(text: str) -> int | None:
    """Parse a course climb in metres, or ``None`` if *text* has no number."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None
