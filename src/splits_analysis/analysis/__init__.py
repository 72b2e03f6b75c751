"""Data repair, ranking and comparison of class results."""

from splits_analysis.analysis.age_class_set import AgeClassSet
from splits_analysis.analysis.blank_ranges import (
    fill_blank_ranges_in_cumulative_times,
    get_blank_ranges,
)
from splits_analysis.analysis.chart_types import (
    CHART_TYPES,
    PERCENT_BEHIND,
    POSITION_AFTER_LEG,
    RACE_GRAPH,
    RESULTS_TABLE,
    SPLIT_POSITION,
    SPLITS_GRAPH,
    ChartType,
    get_chart_type,
)
from splits_analysis.analysis.course_class_set import ChartData, CourseClassSet
from splits_analysis.analysis.data_repair import (
    Repairer,
    prepare_event,
    repair_event_data,
    transfer_result_data,
)
from splits_analysis.analysis.ranks import get_competition_ranks, get_ranks

__all__ = [
    "CHART_TYPES",
    "PERCENT_BEHIND",
    "POSITION_AFTER_LEG",
    "RACE_GRAPH",
    "RESULTS_TABLE",
    "SPLITS_GRAPH",
    "SPLIT_POSITION",
    "AgeClassSet",
    "ChartData",
    "ChartType",
    "CourseClassSet",
    "Repairer",
    "fill_blank_ranges_in_cumulative_times",
    "get_blank_ranges",
    "get_chart_type",
    "get_competition_ranks",
    "get_ranks",
    "prepare_event",
    "repair_event_data",
    "transfer_result_data",
]
