"""Tests for CourseClass."""

from __future__ import annotations

import pytest

from splits_analysis.model.course import Course
from splits_analysis.model.course_class import CourseClass
from splits_analysis.model.errors import InvalidDataError
from splits_analysis.model.owners import Competitor
from splits_analysis.model.result import Result


def make_result(splits, start, order=1, name="John Smith") -> Result:
    return Result.from_split_times(order, start, splits, Competitor(name))


def make_class(*results, name="Test") -> CourseClass:
    return CourseClass(name, 3, list(results))


def john(splits=(65, 221, 209, 100)) -> Result:
    return make_result(list(splits), 10 * 3600, 1, "John Smith")


def fred(splits=(81, 197, 212, 106)) -> Result:
    return make_result(list(splits), 10 * 3600 + 30 * 60, 2, "Fred Brown")


class TestCourseClass:
    def test_results_told_class_name(self):
        result = john()
        make_class(result, name="M21E")
        assert result.class_name == "M21E"

    def test_is_empty(self):
        assert make_class().is_empty()
        assert not make_class(john()).is_empty()

    def test_dubious_data_flag(self):
        course_class = make_class(john())
        assert not course_class.has_dubious_data
        course_class.record_has_dubious_data()
        assert course_class.has_dubious_data

    def test_team_class_offsets(self):
        """Leg offsets count each leg's controls plus its finish."""
        result = make_result([65, 221, 209, 100, 61, 193], 36000)
        course_class = CourseClass("Relay", 5, [result])
        course_class.set_is_team_class([3, 1])
        assert course_class.is_team_class
        assert course_class.offsets == [0, 4]
        assert result.offsets == [0, 4]

    def test_set_course(self):
        course_class = make_class(john())
        course = Course("A", [course_class], 4.1, 140, ["235", "212", "189"])
        course_class.set_course(course)
        assert course_class.course is course


class TestFastestSplit:
    def test_fastest_split(self):
        assert make_class(john(), fred()).get_fastest_split_to(3) == {"split": 209, "name": "John Smith"}

    def test_fastest_split_ignores_missing_times(self):
        course_class = make_class(john(), fred((81, 197, None, 106)))
        assert course_class.get_fastest_split_to(3) == {"split": 209, "name": "John Smith"}

    def test_no_fastest_split_when_everyone_mispunched(self):
        course_class = make_class(john((65, 221, None, 100)), fred((81, 197, None, 106)))
        assert course_class.get_fastest_split_to(3) is None

    def test_no_fastest_split_in_empty_class(self):
        assert make_class().get_fastest_split_to(3) is None

    @pytest.mark.parametrize("control", [0, 5, "2"])
    def test_control_out_of_range_rejected(self, control):
        with pytest.raises(InvalidDataError):
            make_class(john()).get_fastest_split_to(control)

    def test_time_losses_determined_for_each_result(self):
        first, second = john(), fred()
        make_class(first, second).determine_time_losses()
        assert len(first.time_losses) == 4
        assert len(second.time_losses) == 4


class TestResultsInTimeRange:
    def test_results_at_control_in_range(self):
        """Clock time at a control is start time plus cumulative time."""
        course_class = make_class(john(), fred())
        matching = course_class.get_results_at_control_in_time_range(2, 36000, 37000)
        assert matching == [{"name": "John Smith", "time": 36000 + 286}]

    def test_results_without_start_time_skipped(self):
        course_class = make_class(make_result([65, 221, 209, 100], None))
        assert course_class.get_results_at_control_in_time_range(2, 0, 100000) == []

    def test_control_out_of_range_rejected(self):
        with pytest.raises(InvalidDataError):
            make_class(john()).get_results_at_control_in_time_range(5, 0, 100000)
