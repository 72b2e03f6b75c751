"""Legacy comparison of individual competitors across age classes.

:class:`AgeClassSet` predates :class:`~splits_analysis.analysis.course_class_set.CourseClassSet`
and is kept for callers that still use it.  It handles individual results
only, and keeps its own conventions:

* every result is kept, non-starters included, and disqualification does
  not affect the order;
* ranks are standard competition ranks (``1, 1, 3``);
* the fastest cumulative times are ``None`` if any control has no valid
  split from anyone.
"""

from __future__ import annotations

import functools
from collections.abc import Sequence

from splits_analysis.analysis.blank_ranges import fill_blank_ranges_in_cumulative_times
from splits_analysis.analysis.chart_types import ChartType
from splits_analysis.analysis.course_class_set import ChartData
from splits_analysis.analysis.ranks import get_competition_ranks
from splits_analysis.model.course import Course
from splits_analysis.model.course_class import CourseClass
from splits_analysis.model.errors import InvalidDataError
from splits_analysis.model.result import Result
from splits_analysis.model.util import is_nan_strict, is_not_null_nor_nan


def _compare_competitors(a: Result, b: Result) -> int:
    if a.total_time == b.total_time:
        return a.order - b.order
    if a.total_time is None:
        return 0 if b.total_time is None else 1
    if b.total_time is None:
        return -1
    return -1 if a.total_time < b.total_time else 1


def _merge_competitors(age_classes: Sequence[CourseClass]) -> list[Result]:
    if not age_classes:
        raise InvalidDataError("Cannot create an AgeClassSet from an empty set of competitors")

    expected_controls = age_classes[0].num_controls
    competitors: list[Result] = []
    for age_class in age_classes:
        if age_class.num_controls != expected_controls:
            raise InvalidDataError(
                f"Cannot merge age classes with {expected_controls} and {age_class.num_controls} controls"
            )
        competitors.extend(age_class.results)

    competitors.sort(key=functools.cmp_to_key(_compare_competitors))
    return competitors


def _extent(values) -> tuple[float | None, float | None]:
    valid = [v for v in values if is_not_null_nor_nan(v)]
    return (min(valid), max(valid)) if valid else (None, None)


class AgeClassSet:
    """The currently selected age classes.

    Raises
    ------
    InvalidDataError
        If *age_classes* is empty or the classes differ in their number of
        controls.
    """

    def __init__(self, age_classes: list[CourseClass]) -> None:
        self.all_competitors = _merge_competitors(age_classes)
        self.age_classes = age_classes
        self.num_controls = age_classes[0].num_controls
        self.compute_ranks()

    def is_empty(self) -> bool:
        return len(self.all_competitors) == 0

    def get_course(self) -> Course | None:
        return self.age_classes[0].course

    def get_primary_class_name(self) -> str:
        return self.age_classes[0].name

    def get_num_classes(self) -> int:
        return len(self.age_classes)

    def has_dubious_data(self) -> bool:
        return any(c.has_dubious_data for c in self.age_classes)

    def get_winner_cum_times(self) -> list[float] | None:
        if not self.all_competitors:
            return None
        winner = self.all_competitors[0]
        return fill_blank_ranges_in_cumulative_times(winner.cum_times) if winner.completed() else None

    def get_fastest_cum_times(self) -> list[float] | None:
        return self.get_fastest_cum_times_plus_percentage(0)

    def get_fastest_cum_times_plus_percentage(self, percent: float) -> list[float] | None:
        """Return the fastest-split runner's cumulative times plus *percent*.

        Returns ``None`` if any control has no valid split from any competitor.
        """
        ratio = 1 + percent / 100
        fastest_cum_times = [0]
        for control_idx in range(1, self.num_controls + 2):
            splits = [c.get_split_time_to(control_idx) for c in self.all_competitors]
            valid = [s for s in splits if is_not_null_nor_nan(s)]
            if not valid:
                return None
            fastest_cum_times.append(fastest_cum_times[-1] + min(valid) * ratio)
        return fastest_cum_times

    def get_cumulative_times_for_competitor(self, competitor_index: int) -> list[float]:
        return fill_blank_ranges_in_cumulative_times(self.all_competitors[competitor_index].get_all_cumulative_times())

    def compute_ranks(self) -> None:
        """Rank the competitors at each control.

        Once a competitor has no cumulative rank, every later cumulative
        rank is ``None`` too.
        """
        controls = range(1, self.num_controls + 2)
        split_ranks = [[None] for _ in self.all_competitors]
        cum_ranks = [[None] for _ in self.all_competitors]

        for control in controls:
            ranks = get_competition_ranks([c.get_split_time_to(control) for c in self.all_competitors])
            for idx, rank in enumerate(ranks):
                split_ranks[idx].append(rank)

        for control in controls:
            cum_times_here = [
                None if control > 1 and cum_ranks[idx][control - 1] is None else comp.get_cumulative_time_to(control)
                for idx, comp in enumerate(self.all_competitors)
            ]
            for idx, rank in enumerate(get_competition_ranks(cum_times_here)):
                cum_ranks[idx].append(rank)

        for idx, competitor in enumerate(self.all_competitors):
            competitor.set_split_and_cumulative_ranks(split_ranks[idx], cum_ranks[idx])

    def get_fastest_splits_to(self, num_splits: int, control_idx: int) -> list[tuple[float, str]]:
        """Return up to *num_splits* ``(split, name)`` pairs, fastest first."""
        if not isinstance(num_splits, (int, float)) or isinstance(num_splits, bool) or num_splits <= 0:
            raise InvalidDataError("The number of splits must be a positive integer")
        if (
            not isinstance(control_idx, (int, float))
            or isinstance(control_idx, bool)
            or control_idx <= 0
            or control_idx > self.num_controls + 1
        ):
            raise InvalidDataError(f"Control {control_idx!r} out of range")
        if not float(control_idx).is_integer():
            raise InvalidDataError(f"Control {control_idx!r} is not a whole number")
        control_idx = int(control_idx)

        competitors = [
            c for c in self.all_competitors
            if c.completed() and not is_nan_strict(c.get_split_time_to(control_idx))
        ]
        # Missing splits (OK-despite-missing competitors) go last.
        competitors.sort(
            key=lambda c: (
                c.get_split_time_to(control_idx) is None,
                c.get_split_time_to(control_idx) or 0,
                c.total_time,
            )
        )
        return [(c.get_split_time_to(control_idx), c.owner.name) for c in competitors[: int(num_splits)]]

    def get_chart_data(
        self,
        reference_cum_times: Sequence[float],
        current_indexes: Sequence[int],
        chart_type: ChartType,
    ) -> ChartData:
        """Return chart data for the competitors at *current_indexes*.

        Raises
        ------
        InvalidDataError
            If the set has no competitors.
        TypeError
            If any argument is ``None``.
        """
        if self.is_empty():
            raise InvalidDataError("Cannot return chart data when there is no data")
        if reference_cum_times is None:
            raise TypeError("reference_cum_times undefined or missing")
        if current_indexes is None:
            raise TypeError("current_indexes undefined or missing")
        if chart_type is None:
            raise TypeError("chart_type undefined or missing")

        competitor_data = [chart_type.data_selector(c, reference_cum_times) for c in self.all_competitors]
        selected = [competitor_data[index] for index in current_indexes]

        x_min, x_max = _extent(reference_cum_times)
        if not current_indexes:
            y_min, y_max = _extent(competitor_data[0])
        else:
            y_min, y_max = _extent(v for series in selected for v in series)
        if y_min is None:
            y_min, y_max = 0, 60
        elif y_max == y_min:
            y_max = y_min + 1

        adjust = 1 if chart_type.skip_start else 0
        dubious_times_info = [
            [
                {"start": pair["start"] - adjust, "end": pair["end"] - adjust}
                for pair in chart_type.indexes_around_omitted_times_func(self.all_competitors[index])
                if pair["start"] >= adjust
            ]
            for index in current_indexes
        ]

        x_data = list(reference_cum_times)[adjust:]
        columns = list(zip(*(series[adjust:] for series in selected)))
        return ChartData(
            data_columns=[{"x": x, "ys": list(ys)} for x, ys in zip(x_data, columns)],
            result_names=[self.all_competitors[index].owner.name for index in current_indexes],
            num_controls=self.num_controls,
            x_extent=[x_min, x_max],
            y_extent=[y_min, y_max],
            dubious_times_info=dubious_times_info,
        )
