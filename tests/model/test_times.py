"""Tests for time formatting and parsing."""

from __future__ import annotations

import pytest

from splits_analysis.model.times import (
    NAN_TIME_PLACEHOLDER,
    NULL_TIME_PLACEHOLDER,
    format_time,
    format_time_of_day,
    parse_time,
)


class TestFormatTime:
    def test_none_gives_placeholder(self):
        """A missing time is shown as the null placeholder."""
        assert format_time(None) == NULL_TIME_PLACEHOLDER

    def test_nan_gives_question_marks(self):
        """A dubious time is shown as '???'."""
        assert format_time(float("nan")) == NAN_TIME_PLACEHOLDER

    def test_zero(self):
        assert format_time(0) == "00:00"

    def test_minutes_and_seconds(self):
        assert format_time(65) == "01:05"

    def test_fractional_seconds_keep_two_places(self):
        """Fractional seconds are shown to at most two places."""
        assert format_time(3.25) == "00:03.25"

    def test_precision_rounds_half_up(self):
        """With a precision, fractional seconds round half up."""
        assert format_time(3.25, 1) == "00:03.3"

    def test_hours_shown_when_non_zero(self):
        assert format_time(3600) == "1:00:00"
        assert format_time(2 * 3600 + 5 * 60 + 7) == "2:05:07"

    def test_negative_time(self):
        """Negative times get a leading minus sign."""
        assert format_time(-61) == "-01:01"

    def test_rounding_carries_into_minutes(self):
        assert format_time(59.996) == "01:00"
        assert format_time(119.999) == "02:00"

    def test_rounding_to_precision_carries_into_minutes(self):
        assert format_time(59.96, 1) == "01:00.0"

    def test_rounding_carries_into_hours(self):
        assert format_time(3599.999) == "1:00:00"


class TestFormatTimeOfDay:
    def test_morning(self):
        assert format_time_of_day(10 * 3600) == "10:00:00"

    def test_wraps_past_midnight(self):
        """Hours are taken modulo 24."""
        assert format_time_of_day(25 * 3600 + 61) == "01:01:01"


class TestParseTime:
    def test_minutes_and_seconds(self):
        assert parse_time("01:05") == pytest.approx(65)

    def test_hours(self):
        assert parse_time("1:00:00") == pytest.approx(3600)

    def test_surrounding_whitespace_ignored(self):
        assert parse_time("  3:25.5 ") == pytest.approx(205.5)

    def test_comma_decimal_separator(self):
        """A comma is accepted as the decimal separator."""
        assert parse_time("3:25,5") == pytest.approx(205.5)

    def test_unrecognised_text_is_missing(self):
        """Anything that is not a time is a missed split."""
        assert parse_time("mp") is None
        assert parse_time("") is None

    def test_single_digit_seconds_rejected(self):
        assert parse_time("1:2") is None

    def test_leading_minus_negates_whole_value(self):
        assert parse_time("-1:30") == pytest.approx(-90)
        assert parse_time("-1:00:30") == pytest.approx(-3630)

    def test_minus_inside_value_rejected(self):
        assert parse_time("1:-30") is None
