"""Tests for determine_common_controls."""

from __future__ import annotations

import pytest

from splits_analysis.model.common_controls import determine_common_controls
from splits_analysis.model.errors import InvalidDataError


class TestCommonControls:
    def test_single_leg(self):
        assert determine_common_controls([["235", "212", "189"]], "leg 1") == ["235", "212", "189"]

    def test_controls_on_every_leg_kept_in_order(self):
        legs = [
            ["235", "212", "189", "110"],
            ["235", "140", "189", "110"],
            ["235", "212", "155", "189", "110"],
        ]
        assert determine_common_controls(legs, "team A") == ["235", "189", "110"]

    def test_no_common_controls(self):
        assert determine_common_controls([["235"], ["212"]], "team A") == []

    def test_empty_list_rejected(self):
        with pytest.raises(InvalidDataError):
            determine_common_controls([], "team A")

    def test_duplicated_control_rejected(self):
        with pytest.raises(InvalidDataError, match="duplicated control 212"):
            determine_common_controls([["235", "212", "212"], ["235", "212"]], "team A")

    def test_inconsistent_order_rejected(self):
        with pytest.raises(InvalidDataError, match="Inconsistent ordering"):
            determine_common_controls([["235", "212"], ["212", "235"]], "team A")
