"""The kinds of chart that can be drawn from a class set.

Each :class:`ChartType` says how to turn one result into a plotted series
(``data_selector``), whether the start point is plotted (``skip_start``) and
which index ranges of a result should be drawn as dubious.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from splits_analysis.model.result import Result

DataSelector = Callable[[Result, Sequence[float]], list]
OmittedIndexesFunc = Callable[[Result], list[dict[str, int]]]


def _seconds_to_minutes(seconds: float | None) -> float | None:
    return None if seconds is None else seconds / 60


def _splits_graph_data(result: Result, reference_cum_times: Sequence[float]) -> list:
    return [_seconds_to_minutes(t) for t in result.get_cum_times_adjusted_to_reference(reference_cum_times)]


def _race_graph_data(result: Result, reference_cum_times: Sequence[float]) -> list:
    adjusted = result.get_cum_times_adjusted_to_reference_with_start_added(reference_cum_times)
    return [_seconds_to_minutes(t) for t in adjusted]


def _cumulative_ranks(result: Result, reference_cum_times: Sequence[float]) -> list:
    return list(result.cum_ranks)


def _split_ranks(result: Result, reference_cum_times: Sequence[float]) -> list:
    return list(result.split_ranks)


def _percents_behind(result: Result, reference_cum_times: Sequence[float]) -> list:
    return result.get_split_percents_behind_reference_cum_times(reference_cum_times)


def _omitted_cumulative(result: Result) -> list[dict[str, int]]:
    return result.get_control_indexes_around_omitted_cumulative_times()


def _omitted_splits(result: Result) -> list[dict[str, int]]:
    return result.get_control_indexes_around_omitted_split_times()


def _no_omitted(result: Result) -> list[dict[str, int]]:
    return []


@dataclass(frozen=True)
class ChartType:
    """How a chart selects, labels and marks up result data."""

    key: str
    """Short identifier used by the web API and command line."""

    name: str
    """Display name."""

    data_selector: DataSelector | None
    """Maps ``(result, reference_cum_times)`` to the plotted series, one value per control."""

    skip_start: bool
    """True if the start (index 0) is not plotted."""

    y_axis_label: str | None

    is_race_graph: bool

    is_results_table: bool

    min_viewable_control: int
    """First control index worth showing for this chart."""

    indexes_around_omitted_times_func: OmittedIndexesFunc
    """Returns the index ranges of a result to draw as dubious."""


SPLITS_GRAPH = ChartType(
    key="splits_graph",
    name="Splits graph",
    data_selector=_splits_graph_data,
    skip_start=False,
    y_axis_label="Time loss (min)",
    is_race_graph=False,
    is_results_table=False,
    min_viewable_control=1,
    indexes_around_omitted_times_func=_omitted_cumulative,
)

RACE_GRAPH = ChartType(
    key="race_graph",
    name="Race graph",
    data_selector=_race_graph_data,
    skip_start=False,
    y_axis_label="Time",
    is_race_graph=True,
    is_results_table=False,
    min_viewable_control=0,
    indexes_around_omitted_times_func=_omitted_cumulative,
)

POSITION_AFTER_LEG = ChartType(
    key="position_after_leg",
    name="Position after leg",
    data_selector=_cumulative_ranks,
    skip_start=True,
    y_axis_label="Position",
    is_race_graph=False,
    is_results_table=False,
    min_viewable_control=1,
    indexes_around_omitted_times_func=_omitted_cumulative,
)

SPLIT_POSITION = ChartType(
    key="split_position",
    name="Split position",
    data_selector=_split_ranks,
    skip_start=True,
    y_axis_label="Position",
    is_race_graph=False,
    is_results_table=False,
    min_viewable_control=1,
    indexes_around_omitted_times_func=_omitted_splits,
)

PERCENT_BEHIND = ChartType(
    key="percent_behind",
    name="Percent behind",
    data_selector=_percents_behind,
    skip_start=False,
    y_axis_label="Percent behind",
    is_race_graph=False,
    is_results_table=False,
    min_viewable_control=1,
    indexes_around_omitted_times_func=_omitted_splits,
)

RESULTS_TABLE = ChartType(
    key="results_table",
    name="Results table",
    data_selector=None,
    skip_start=False,
    y_axis_label=None,
    is_race_graph=False,
    is_results_table=True,
    min_viewable_control=1,
    indexes_around_omitted_times_func=_no_omitted,
)

CHART_TYPES: dict[str, ChartType] = {
    chart_type.key: chart_type
    for chart_type in (SPLITS_GRAPH, RACE_GRAPH, POSITION_AFTER_LEG, SPLIT_POSITION, PERCENT_BEHIND, RESULTS_TABLE)
}


def get_chart_type(key: str) -> ChartType:
    """Return the chart type registered under *key*.

    Raises
    ------
    ValueError
        If *key* is not a known chart type.
    """
    try:
        return CHART_TYPES[key]
    except KeyError:
        raise ValueError(f"Unknown chart type {key!r}; expected one of {sorted(CHART_TYPES)}") from None
