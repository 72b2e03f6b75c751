"""Orienteering results data model and time utilities."""

from splits_analysis.model.common_controls import determine_common_controls
from splits_analysis.model.course import FINISH, INTERMEDIATE, START, Course
from splits_analysis.model.course_class import CourseClass
from splits_analysis.model.errors import InvalidDataError
from splits_analysis.model.event import Event
from splits_analysis.model.owners import Competitor, Team
from splits_analysis.model.result import (
    Result,
    compare_results,
    cum_times_from_split_times,
    result_sort_key,
    split_times_from_cum_times,
)
from splits_analysis.model.times import (
    NULL_TIME_PLACEHOLDER,
    format_time,
    format_time_of_day,
    parse_time,
)

__all__ = [
    "FINISH",
    "INTERMEDIATE",
    "NULL_TIME_PLACEHOLDER",
    "START",
    "Competitor",
    "Course",
    "CourseClass",
    "Event",
    "InvalidDataError",
    "Result",
    "Team",
    "compare_results",
    "cum_times_from_split_times",
    "determine_common_controls",
    "format_time",
    "format_time_of_day",
    "parse_time",
    "result_sort_key",
    "split_times_from_cum_times",
]
