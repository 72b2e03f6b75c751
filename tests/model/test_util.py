"""Tests for the null/NaN-aware numeric helpers."""

from __future__ import annotations

import math

import pytest

from splits_analysis.model.util import (
    add_if_not_null,
    is_nan_strict,
    is_not_null,
    is_not_null_nor_nan,
    js_round,
    parse_course_climb,
    parse_course_length,
    subtract_if_not_null,
)

NAN = float("nan")


class TestNullAndNaN:
    def test_none_is_not_nan(self):
        """None and NaN are different states."""
        assert is_nan_strict(None) is False
        assert is_not_null(None) is False

    def test_nan(self):
        assert is_nan_strict(NAN) is True
        assert is_not_null(NAN) is True
        assert is_not_null_nor_nan(NAN) is False

    def test_number(self):
        assert is_nan_strict(0) is False
        assert is_not_null_nor_nan(0) is True


class TestArithmetic:
    def test_add(self):
        assert add_if_not_null(3, 4) == 7
        assert add_if_not_null(None, 4) is None
        assert add_if_not_null(3, None) is None

    def test_subtract(self):
        assert subtract_if_not_null(7, 4) == 3
        assert subtract_if_not_null(None, 4) is None

    def test_nan_propagates(self):
        """NaN is a value, so it propagates rather than becoming None."""
        assert math.isnan(add_if_not_null(NAN, 4))
        assert math.isnan(subtract_if_not_null(7, NAN))

    def test_js_round_half_up(self):
        assert js_round(2.5) == 3
        assert js_round(-2.5) == -2
        assert js_round(2.4) == 2


class TestCourseDetails:
    def test_length_in_kilometres(self):
        assert parse_course_length("4.5") == pytest.approx(4.5)

    def test_length_with_comma(self):
        assert parse_course_length("4,5") == pytest.approx(4.5)

    def test_length_in_metres_is_converted(self):
        """Lengths of 500 or more are metres."""
        assert parse_course_length("4500") == pytest.approx(4.5)

    def test_length_not_a_number(self):
        assert parse_course_length("long") is None

    def test_climb(self):
        assert parse_course_climb("140") == 140
        assert parse_course_climb("140m") == 140
        assert parse_course_climb("none") is None
