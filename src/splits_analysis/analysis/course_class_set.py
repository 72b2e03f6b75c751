"""Comparison of the results of one or more classes over the same controls.

A :class:`CourseClassSet` merges the results of its classes into a single
sorted list, ranks everyone at every control, and answers the queries the
charts and tables need: fastest and winner reference times, fastest splits
to a control, and chart series.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from splits_analysis.analysis.blank_ranges import (
    DEFAULT_CONTROL_SPLIT,
    DEFAULT_FINISH_SPLIT,
    fill_blank_ranges_in_cumulative_times,
    get_blank_ranges,
)
from splits_analysis.analysis.chart_types import ChartType
from splits_analysis.analysis.ranks import get_ranks
from splits_analysis.model.course import Course
from splits_analysis.model.course_class import CourseClass
from splits_analysis.model.errors import InvalidDataError
from splits_analysis.model.result import Result, result_sort_key
from splits_analysis.model.util import is_nan_strict, is_not_null_nor_nan

# ---------------------------------------------------------------------------
# Chart data container
# ---------------------------------------------------------------------------


@dataclass
class ChartData:
    """Everything a chart needs to draw the selected results."""

    data_columns: list[dict]
    """One ``{"x": reference_time, "ys": [value per selected result]}`` per control."""

    result_names: list[str]

    num_controls: int | None

    x_extent: list[float | None]
    """``[min, max]`` of the reference times."""

    y_extent: list[float]
    """``[min, max]`` of the plotted values; never degenerate."""

    dubious_times_info: list[list[dict[str, int]]] = field(default_factory=list)
    """Per selected result, index ranges to draw as dubious."""

    def to_dict(self) -> dict:
        return {
            "data_columns": self.data_columns,
            "result_names": self.result_names,
            "num_controls": self.num_controls,
            "x_extent": self.x_extent,
            "y_extent": self.y_extent,
            "dubious_times_info": self.dubious_times_info,
        }


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _merge_results(classes: Sequence[CourseClass]) -> list[Result]:
    """Return all starters of *classes*, sorted."""
    if not classes:
        return []

    expected_controls = classes[0].num_controls
    all_results: list[Result] = []
    for course_class in classes:
        if course_class.num_controls != expected_controls:
            raise InvalidDataError(
                f"Cannot merge classes with {expected_controls} and {course_class.num_controls} controls"
            )
        all_results.extend(r for r in course_class.results if not r.is_non_starter)

    all_results.sort(key=result_sort_key)
    return all_results


def _valid_values(values) -> list[float]:
    return [v for v in values if is_not_null_nor_nan(v)]


def _min_or_none(values) -> float | None:
    valid = _valid_values(values)
    return min(valid) if valid else None


def _max_or_none(values) -> float | None:
    valid = _valid_values(values)
    return max(valid) if valid else None


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not is_nan_strict(value)


def _split_sort_key(control_idx: int):
    def key(result: Result):
        split = result.get_split_time_to(control_idx)
        total = result.total_time
        return (split is None, split if split is not None else 0, total is None, total if total is not None else 0)

    return key


# ---------------------------------------------------------------------------
# CourseClassSet
# ---------------------------------------------------------------------------


class CourseClassSet:
    """A set of classes compared together.

    Ranks are computed once, on construction, and written onto the results.
    Build a new set (from fresh results) rather than re-ranking the same
    results through a second set.

    Args:
        classes: Classes to compare; all must have the same number of controls.

    Raises
    ------
    InvalidDataError
        If the classes differ in their number of controls.
    """

    def __init__(self, classes: list[CourseClass]) -> None:
        self.all_results = _merge_results(classes)
        self.classes = classes
        self.num_controls: int | None = classes[0].num_controls if classes else None
        self.compute_ranks()

    def __repr__(self) -> str:
        return f"CourseClassSet({[c.name for c in self.classes]!r}, {len(self.all_results)} results)"

    # ------------------------------------------------------------------
    # Simple queries
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return len(self.all_results) == 0

    def get_course(self) -> Course | None:
        return self.classes[0].course if self.classes else None

    def get_primary_class_name(self) -> str | None:
        return self.classes[0].name if self.classes else None

    def get_num_classes(self) -> int:
        return len(self.classes)

    def has_dubious_data(self) -> bool:
        return any(c.has_dubious_data for c in self.classes)

    def has_team_data(self) -> bool:
        return bool(self.classes) and all(c.is_team_class for c in self.classes)

    def get_leg_count(self) -> int | None:
        """Return the number of relay legs, or ``None`` unless all classes agree."""
        leg_count = None
        for course_class in self.classes:
            if not course_class.is_team_class:
                return None
            this_count = len(course_class.numbers_of_controls)
            if leg_count is None:
                leg_count = this_count
            elif leg_count != this_count:
                return None
        return leg_count

    # ------------------------------------------------------------------
    # Reference times
    # ------------------------------------------------------------------

    def get_winner_cum_times(self) -> list[float] | None:
        """Return the winner's cumulative times with gaps filled, or ``None``."""
        if not self.all_results:
            return None
        winner = self.all_results[0]
        return fill_blank_ranges_in_cumulative_times(winner.cum_times) if winner.completed() else None

    def get_fastest_cum_times(self) -> list[float] | None:
        return self.get_fastest_cum_times_plus_percentage(0)

    def get_fastest_cum_times_plus_percentage(self, percent: float) -> list[float] | None:
        """Return the cumulative times of a synthetic runner with every fastest split.

        Each fastest split is scaled by ``1 + percent / 100``.  Controls with
        no valid split from anyone are estimated from the shortest gap in
        some result's times that covers them, or from default splits.
        Returns ``None`` if the set has no classes.
        """
        if self.num_controls is None:
            return None

        ratio = 1 + percent / 100

        fastest_splits: list[float | None] = [0]
        for control_idx in range(1, self.num_controls + 2):
            fastest = None
            for result in self.all_results:
                split = result.get_split_time_to(control_idx)
                if is_not_null_nor_nan(split) and (fastest is None or split < fastest):
                    fastest = split
            fastest_splits.append(fastest)

        if any(s is None for s in fastest_splits):
            self._fill_fastest_splits_from_result_gaps(fastest_splits)

        for index, split in enumerate(fastest_splits):
            if split is None:
                fastest_splits[index] = DEFAULT_FINISH_SPLIT if index == len(fastest_splits) - 1 else DEFAULT_CONTROL_SPLIT

        cum_times = [0]
        for split in fastest_splits[1:]:
            cum_times.append(cum_times[-1] + split * ratio)
        return cum_times

    def _fill_fastest_splits_from_result_gaps(self, fastest_splits: list[float | None]) -> None:
        result_ranges = []
        for result in self.all_results:
            for blank in get_blank_ranges(result.get_all_cumulative_times(), include_end=False):
                result_ranges.append(
                    {
                        "start": blank["start"],
                        "end": blank["end"],
                        "size": blank["end"] - blank["start"],
                        "overall_split": result.get_cumulative_time_to(blank["end"])
                        - result.get_cumulative_time_to(blank["start"]),
                    }
                )

        for fastest_range in get_blank_ranges(fastest_splits, include_end=True):
            min_size = None
            min_overall_split = None
            for covering in result_ranges:
                if not (covering["start"] <= fastest_range["start"] and fastest_range["end"] <= covering["end"] + 1):
                    continue
                if min_size is None or covering["size"] < min_size:
                    min_size = covering["size"]
                    min_overall_split = None
                if min_overall_split is None or covering["overall_split"] < min_overall_split:
                    min_overall_split = covering["overall_split"]

            if min_size is not None and min_overall_split is not None:
                for index in range(fastest_range["start"] + 1, fastest_range["end"]):
                    fastest_splits[index] = min_overall_split / min_size

    def get_cumulative_times_for_result(self, result_index: int) -> list[float]:
        """Return a result's cumulative times with gaps filled, for display."""
        return fill_blank_ranges_in_cumulative_times(self.all_results[result_index].get_all_cumulative_times())

    # ------------------------------------------------------------------
    # Ranking
    # ------------------------------------------------------------------

    def compute_ranks(self) -> None:
        """Rank every result at every control and store the ranks on the results.

        A result with no cumulative rank at the previous control keeps a
        ``None`` cumulative rank from then on, unless it is marked OK despite
        missing times.
        """
        if not self.all_results:
            return

        controls = range(1, self.num_controls + 2)
        split_ranks: list[list[int | None]] = [[None] for _ in self.all_results]
        cum_ranks: list[list[int | None]] = [[None] for _ in self.all_results]

        for control in controls:
            ranks = get_ranks([r.get_split_time_to(control) for r in self.all_results])
            for idx, rank in enumerate(ranks):
                split_ranks[idx].append(rank)

        for control in controls:
            cum_times_here = []
            for idx, result in enumerate(self.all_results):
                if control > 1 and cum_ranks[idx][control - 1] is None and not result.is_ok_despite_missing_times:
                    cum_times_here.append(None)
                else:
                    cum_times_here.append(result.get_cumulative_time_to(control))
            for idx, rank in enumerate(get_ranks(cum_times_here)):
                cum_ranks[idx].append(rank)

        for idx, result in enumerate(self.all_results):
            result.set_split_and_cumulative_ranks(split_ranks[idx], cum_ranks[idx])

    def get_fastest_splits_to(
        self,
        num_splits: int,
        control_idx: int,
        selected_leg_index: int | None = None,
    ) -> list[dict]:
        """Return up to *num_splits* ``{"name", "split"}`` records of the fastest splits to a control.

        Only results that completed and have a valid split are considered;
        equal splits are ordered by total time.

        Raises
        ------
        InvalidDataError
            If *num_splits* is not a positive number or *control_idx* is out
            of range.
        """
        if not _is_number(num_splits) or num_splits <= 0:
            raise InvalidDataError("The number of splits must be a positive integer")
        if not _is_number(control_idx) or control_idx <= 0 or control_idx > self.num_controls + 1:
            raise InvalidDataError(f"Control {control_idx!r} out of range")
        if not float(control_idx).is_integer():
            raise InvalidDataError(f"Control {control_idx!r} is not a whole number")
        control_idx = int(control_idx)

        eligible = [
            r for r in self.all_results
            if r.completed() and not is_nan_strict(r.get_split_time_to(control_idx))
        ]
        eligible.sort(key=_split_sort_key(control_idx))
        return [
            {"name": r.get_owner_name_for_leg(selected_leg_index), "split": r.get_split_time_to(control_idx)}
            for r in eligible[: int(num_splits)]
        ]

    # ------------------------------------------------------------------
    # Chart data
    # ------------------------------------------------------------------

    def _slice_for_leg_index(self, data: Sequence, leg_index: int | None) -> list:
        if self.has_team_data() and leg_index is not None:
            length = self.classes[0].numbers_of_controls[leg_index] + 2
            offset = self.classes[0].offsets[leg_index]
            return list(data[offset : offset + length])
        return list(data)

    def get_chart_data(
        self,
        reference_cum_times: Sequence[float],
        current_indexes: Sequence[int],
        chart_type: ChartType,
        leg_index: int | None = None,
    ) -> ChartData:
        """Return the chart data for the results at *current_indexes*.

        Args:
            reference_cum_times: Reference the results are compared against.
            current_indexes: Indexes into :attr:`all_results` to plot.
            chart_type: How to turn each result into a series.
            leg_index: For relay sets, the leg to show; ``None`` for all.

        Raises
        ------
        TypeError
            If any of the first three arguments is ``None``.
        """
        if reference_cum_times is None:
            raise TypeError("reference_cum_times undefined or missing")
        if current_indexes is None:
            raise TypeError("current_indexes undefined or missing")
        if chart_type is None:
            raise TypeError("chart_type undefined or missing")
        if chart_type.data_selector is None:
            raise ValueError(f"Chart type {chart_type.name!r} has no chart data")

        result_data = [chart_type.data_selector(r, reference_cum_times) for r in self.all_results]
        selected = [result_data[index] for index in current_indexes]

        reference = list(reference_cum_times)
        if self.has_team_data() and leg_index is not None:
            selected = [self._slice_for_leg_index(d, leg_index) for d in selected]
            reference = self._slice_for_leg_index(reference, leg_index)
            num_controls = self.classes[0].numbers_of_controls[leg_index]
            offset = self.classes[0].offsets[leg_index]
        else:
            num_controls = self.num_controls
            offset = 0

        x_extent = [_min_or_none(reference), _max_or_none(reference)]

        if not current_indexes:
            if self.is_empty():
                y_min, y_max = 0, 60
            else:
                y_min, y_max = _min_or_none(result_data[0]), _max_or_none(result_data[0])
        else:
            y_min = _min_or_none(v for series in selected for v in series)
            y_max = _max_or_none(v for series in selected for v in series)

        if y_min is None or y_max is None:
            y_min, y_max = 0, 60
        elif abs(y_max - y_min) < 1e-8:
            y_max = y_min + 1

        start_adjust = 1 if chart_type.skip_start else 0
        dubious_times_info = []
        for index in current_indexes:
            pairs = chart_type.indexes_around_omitted_times_func(self.all_results[index])
            in_leg = [
                {"start": p["start"] - offset, "end": p["end"] - offset}
                for p in pairs
                if p["start"] >= offset and p["end"] <= offset + num_controls + 1
            ]
            dubious_times_info.append(
                [
                    {"start": p["start"] - start_adjust, "end": p["end"] - start_adjust}
                    for p in in_leg
                    if p["start"] >= start_adjust
                ]
            )

        if chart_type.skip_start:
            reference = reference[1:]
            selected = [series[1:] for series in selected]

        columns = list(zip(*selected))
        data_columns = [{"x": x, "ys": list(ys)} for x, ys in zip(reference, columns)]
        result_names = [self.all_results[index].get_owner_name_for_leg(leg_index) for index in current_indexes]

        return ChartData(
            data_columns=data_columns,
            result_names=result_names,
            num_controls=num_controls,
            x_extent=x_extent,
            y_extent=[y_min, y_max],
            dubious_times_info=dubious_times_info,
        )
