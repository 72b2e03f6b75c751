"""Formatting and parsing of seconds-based time values."""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal

from splits_analysis.model.util import is_nan_strict, js_round

NULL_TIME_PLACEHOLDER = "-----"
NAN_TIME_PLACEHOLDER = "???"

_TIME_PATTERN = re.compile(r"^(-?)((?:\d+:)?\d+:\d\d(?:[,.]\d{1,10})?)$")


def _two_digits(value: int) -> str:
    return f"{value:02d}"


def _format_seconds(secs: float, precision: int | None) -> str:
    if precision is not None:
        quantum = Decimal(1).scaleb(-precision)
        return str(Decimal(repr(secs)).quantize(quantum, rounding=ROUND_HALF_UP))
    rounded = js_round(secs * 100) / 100
    return f"{rounded:.2f}".rstrip("0").rstrip(".")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def format_time(seconds: float | None, precision: int | None = None) -> str:
    """Format *seconds* as ``[h:]mm:ss``.

    ``None`` gives :data:`NULL_TIME_PLACEHOLDER` and NaN gives ``"???"``.
    Fractional seconds are shown to *precision* places if given, otherwise
    to at most two places.  The value is rounded before it is split into
    hours, minutes and seconds, so ``59.996`` formats as ``"01:00"``.
    """
    if seconds is None:
        return NULL_TIME_PLACEHOLDER
    if is_nan_strict(seconds):
        return NAN_TIME_PLACEHOLDER

    result = ""
    if seconds < 0:
        result = "-"
        seconds = -seconds

    if precision is None:
        seconds = js_round(seconds * 100) / 100
    else:
        quantum = Decimal(1).scaleb(-precision)
        seconds = float(Decimal(repr(seconds)).quantize(quantum, rounding=ROUND_HALF_UP))

    hours = math.floor(seconds / 3600)
    mins = math.floor(seconds / 60) % 60
    secs = seconds % 60
    if hours > 0:
        result += f"{hours}:"

    result += _two_digits(mins) + ":"
    if secs < 10:
        result += "0"
    return result + _format_seconds(secs, precision)


def format_time_of_day(seconds: float) -> str:
    """Format seconds since midnight as ``HH:MM:SS``, wrapping past 24 hours."""
    hours = math.floor((seconds / 3600) % 24)
    mins = math.floor(seconds / 60) % 60
    secs = math.floor(seconds % 60)
    return f"{_two_digits(hours)}:{_two_digits(mins)}:{_two_digits(secs)}"


def parse_time(text: str) -> float | None:
    """Parse ``[h:]m:ss[.fff]`` into seconds.

    Either ``.`` or ``,`` may be used as the decimal separator, and a
    leading ``-`` negates the whole value.  Anything unrecognised is
    treated as a missed split and gives ``None``.
    """
    match = _TIME_PATTERN.match(text.strip())
    if not match:
        return None

    sign, body = match.groups()
    total = 0.0
    for part in body.replace(",", ".").split(":"):
        total = total * 60 + float(part)
    return -total if sign else total
