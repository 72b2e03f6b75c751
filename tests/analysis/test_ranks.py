"""Tests for ranking and blank-range helpers."""

from __future__ import annotations

import math

import pytest

from splits_analysis.analysis.blank_ranges import fill_blank_ranges_in_cumulative_times, get_blank_ranges
from splits_analysis.analysis.ranks import get_competition_ranks, get_ranks

NAN = float("nan")


class TestRanks:
    def test_dense_ranks(self):
        """Tied times share a rank; the next time takes the next rank."""
        assert get_ranks([197, 197, 209]) == [1, 1, 2]

    def test_missing_and_nan_unranked(self):
        assert get_ranks([209, None, 197, NAN, 197]) == [2, None, 1, None, 1]

    def test_competition_ranks_skip_after_tie(self):
        assert get_competition_ranks([197, 197, 209]) == [1, 1, 3]

    def test_competition_ranks_missing_and_nan_unranked(self):
        assert get_competition_ranks([209, None, 197, NAN, 197]) == [3, None, 1, None, 1]

    def test_empty(self):
        assert get_ranks([]) == []
        assert get_competition_ranks([]) == []


class TestBlankRanges:
    def test_no_blanks(self):
        assert get_blank_ranges([0, 65, 286, 470], include_end=False) == []

    def test_interior_run(self):
        """Each range is bounded by the valid times either side."""
        assert get_blank_ranges([0, 65, None, NAN, 286, 470], include_end=False) == [{"start": 1, "end": 4}]

    def test_trailing_run_only_with_include_end(self):
        times = [0, 65, None, None]
        assert get_blank_ranges(times, include_end=False) == []
        assert get_blank_ranges(times, include_end=True) == [{"start": 1, "end": 4}]

    def test_two_runs(self):
        times = [0, None, 100, NAN, 300]
        assert get_blank_ranges(times, include_end=False) == [{"start": 0, "end": 2}, {"start": 2, "end": 4}]


class TestFillBlankRanges:
    def test_interior_gap_interpolated(self):
        filled = fill_blank_ranges_in_cumulative_times([0, 65, None, None, 286])
        assert filled == pytest.approx([0, 65, 65 + 221 / 3, 65 + 2 * 221 / 3, 286])

    def test_trailing_nan_extrapolated_with_defaults(self):
        """Interior controls take 180 seconds and the finish 60."""
        assert fill_blank_ranges_in_cumulative_times([0, 65, NAN, NAN]) == [0, 65, 245, 305]

    def test_input_not_modified(self):
        times = [0, 65, NAN, 286]
        fill_blank_ranges_in_cumulative_times(times)
        assert math.isnan(times[2])
