"""Common controls across the legs of a relay."""

from __future__ import annotations

from collections import Counter

from splits_analysis.model.errors import InvalidDataError


def determine_common_controls(leg_controls_lists: list[list[str]], leg_description: str) -> list[str]:
    """Return the controls visited on every leg, in the order of the first leg.

    Raises
    ------
    InvalidDataError
        If no legs are given, a leg visits a control twice, or the common
        controls are visited in a different order on some leg.
    """
    if not leg_controls_lists:
        raise InvalidDataError("Cannot determine the list of common controls of an empty list")

    counts: Counter[str] = Counter()
    for leg_controls in leg_controls_lists:
        if len(set(leg_controls)) != len(leg_controls):
            duplicate = next(c for c, n in Counter(leg_controls).items() if n > 1)
            raise InvalidDataError(
                f"Cannot determine common controls because {leg_description} contains duplicated control {duplicate}"
            )
        counts.update(leg_controls)

    leg_count = len(leg_controls_lists)
    common = [c for c in leg_controls_lists[0] if counts[c] == leg_count]

    for leg_controls in leg_controls_lists[1:]:
        common_here = [c for c in leg_controls if counts[c] == leg_count]
        if len(common_here) != len(common):
            raise InvalidDataError("Unexpectedly didn't get the same number of common controls for all legs")
        for expected, actual in zip(common, common_here):
            if expected != actual:
                raise InvalidDataError(f"Inconsistent ordering for control {expected} in {leg_description}")

    return common
