"""Exception types raised by the splits model."""

from __future__ import annotations


class InvalidDataError(ValueError):
    """Raised when timing data is malformed or self-contradictory.

    Examples: empty time lists, a cumulative-time list not starting at zero,
    classes with different control counts merged into one set, or a control
    index out of range.
    """
