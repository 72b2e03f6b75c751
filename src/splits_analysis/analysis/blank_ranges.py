"""Blank ranges in time lists, and filling them in for display."""

from __future__ import annotations

from collections.abc import Sequence

from splits_analysis.model.util import is_nan_strict, is_not_null_nor_nan

DEFAULT_CONTROL_SPLIT = 180
"""Seconds assumed for an interior control when nothing better is known."""

DEFAULT_FINISH_SPLIT = 60
"""Seconds assumed for the finish split when nothing better is known."""


def get_blank_ranges(times: Sequence[float | None], include_end: bool) -> list[dict[str, int]]:
    """Return ``{"start", "end"}`` pairs around each run of missing or NaN times.

    ``start`` and ``end`` are the indexes of the valid times either side of
    the run.  A run reaching the end of *times* is only reported when
    *include_end* is set.
    """
    ranges: list[dict[str, int]] = []
    start = 1
    while start + 1 < len(times):
        if is_not_null_nor_nan(times[start]):
            start += 1
            continue

        end = start
        while end + 1 < len(times) and not is_not_null_nor_nan(times[end + 1]):
            end += 1

        if end + 1 < len(times) or include_end:
            ranges.append({"start": start - 1, "end": end + 1})

        start = end + 1

    return ranges


def fill_blank_ranges_in_cumulative_times(cum_times: Sequence[float | None]) -> list[float | None]:
    """Return a copy of *cum_times* with gaps filled in.

    Interior gaps are interpolated linearly.  Trailing NaN times are
    extrapolated using the default splits.
    """
    filled = list(cum_times)
    for blank in get_blank_ranges(filled, include_end=False):
        time_before = filled[blank["start"]]
        time_after = filled[blank["end"]]
        per_control = (time_after - time_before) / (blank["end"] - blank["start"])
        for index in range(blank["start"] + 1, blank["end"]):
            filled[index] = time_before + (index - blank["start"]) * per_control

    last_nan_index = len(filled)
    while last_nan_index > 0 and is_nan_strict(filled[last_nan_index - 1]):
        last_nan_index -= 1

    if last_nan_index > 0:
        for index in range(last_nan_index, len(filled)):
            default = DEFAULT_FINISH_SPLIT if index == len(filled) - 1 else DEFAULT_CONTROL_SPLIT
            filled[index] = filled[index - 1] + default

    return filled
