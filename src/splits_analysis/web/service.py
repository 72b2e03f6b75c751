"""AnalysisService: builds the model from an event document and runs the engine."""

from __future__ import annotations

import logging
import math

from splits_analysis.analysis.chart_types import get_chart_type
from splits_analysis.analysis.course_class_set import CourseClassSet
from splits_analysis.analysis.data_repair import prepare_event
from splits_analysis.model.course import Course
from splits_analysis.model.course_class import CourseClass
from splits_analysis.model.errors import InvalidDataError
from splits_analysis.model.event import Event
from splits_analysis.model.owners import Competitor, Team
from splits_analysis.model.result import Result
from splits_analysis.reporting.aggregator import ClassReportAggregator
from splits_analysis.reporting.formatter import MarkdownFormatter
from splits_analysis.reporting.llm_client import CommentaryClient
from splits_analysis.reporting.models import ClassReport
from splits_analysis.web.schemas import (
    AnalyzeRequest,
    ChartRequest,
    ClassPayload,
    EventPayload,
    ReportRequest,
    ResultPayload,
)

_logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Encoding helpers
# ---------------------------------------------------------------------------


def encode_time(value):
    """Return *value* with NaN replaced by the string ``"NaN"``."""
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    return value


def encode_times(values):
    return None if values is None else [encode_time(v) for v in values]


# ---------------------------------------------------------------------------
# Model building
# ---------------------------------------------------------------------------


def _apply_flags(result: Result, payload: ResultPayload) -> None:
    if payload.ok_despite_missing_times:
        result.set_ok_despite_missing_times()
    if payload.non_competitive:
        result.set_non_competitive()
    if payload.non_starter:
        result.set_non_starter()
    if payload.non_finisher:
        result.set_non_finisher()
    if payload.disqualified:
        result.disqualify()
    if payload.over_max_time:
        result.set_over_max_time()


def _build_individual(order: int, payload: ResultPayload) -> Result:
    owner = Competitor(payload.name, payload.club)
    if payload.cum_times is not None:
        result = Result.from_original_cum_times(order, payload.start_time, list(payload.cum_times), owner)
    elif payload.split_times is not None:
        result = Result.from_split_times(order, payload.start_time, list(payload.split_times), owner)
    else:
        raise InvalidDataError(f"Result {payload.name!r} has no cumulative times, split times or legs")
    _apply_flags(result, payload)
    return result


def _build_result(order: int, payload: ResultPayload) -> Result:
    if payload.legs is None:
        return _build_individual(order, payload)

    legs = [_build_individual(order, leg) for leg in payload.legs]
    return Result.create_team_result(order, legs, Team(payload.name, payload.club))


def _build_class(payload: ClassPayload) -> CourseClass:
    results = [_build_result(order, r) for order, r in enumerate(payload.results, 1)]
    expected_times = payload.num_controls + 2
    for result in results:
        if len(result.original_cum_times) != expected_times:
            raise InvalidDataError(
                f"Result {result.owner.name!r} in class {payload.name!r} has "
                f"{len(result.original_cum_times)} times, expected {expected_times}"
            )

    course_class = CourseClass(payload.name, payload.num_controls, results)
    if payload.leg_controls is not None:
        course_class.set_is_team_class(list(payload.leg_controls))
    return course_class


def build_event(payload: EventPayload) -> Event:
    """Build an :class:`Event` from an event document.

    Raises
    ------
    InvalidDataError
        If a result has no times, the wrong number of times, or a course
        names an unknown class.
    """
    classes = [_build_class(c) for c in payload.classes]
    class_map = {c.name: c for c in classes}

    courses = []
    for course_payload in payload.courses:
        unknown = [n for n in course_payload.class_names if n not in class_map]
        if unknown:
            raise InvalidDataError(f"Course {course_payload.name!r} names unknown class(es) {unknown}")
        course_classes = [class_map[n] for n in course_payload.class_names]
        course = Course(
            course_payload.name,
            course_classes,
            course_payload.length,
            course_payload.climb,
            course_payload.controls,
        )
        for course_class in course_classes:
            course_class.set_course(course)
        courses.append(course)

    return Event(classes, courses)


def _select_classes(event: Event, class_names: list[str]) -> list[CourseClass]:
    class_map = {c.name: c for c in event.classes}
    missing = [n for n in class_names if n not in class_map]
    if missing:
        raise InvalidDataError(f"Unknown class name(s): {missing}")
    if not class_names:
        raise InvalidDataError("At least one class name is required")
    return [class_map[n] for n in class_names]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AnalysisService:
    """Runs repair, ranking, charts and reports for the Web API.

    Parameters
    ----------
    llm_client:
        Optional commentary client for testing injection.  If None a default
        :class:`CommentaryClient` is created on first use.
    """

    def __init__(self, llm_client: CommentaryClient | None = None) -> None:
        self._llm = llm_client

    def _prepare(self, payload: EventPayload, repair: bool | None) -> Event:
        event = prepare_event(build_event(payload), repair)
        _logger.info(
            "Analysing event: %d class(es), %d result(s)",
            len(event.classes),
            sum(len(c.results) for c in event.classes),
        )
        return event

    def analyze(self, req: AnalyzeRequest) -> dict:
        """Return per-class reference times, ranks, time losses and fastest splits."""
        event = self._prepare(req.event, req.repair)

        classes = []
        for course_class in event.classes:
            class_set = CourseClassSet([course_class])
            fastest_splits = [
                [
                    {"name": rec["name"], "split": encode_time(rec["split"])}
                    for rec in class_set.get_fastest_splits_to(req.fastest_splits_count, control)
                ]
                for control in range(1, course_class.num_controls + 2)
            ]
            classes.append(
                {
                    "class_name": course_class.name,
                    "num_controls": course_class.num_controls,
                    "has_dubious_data": course_class.has_dubious_data,
                    "fastest_cum_times": encode_times(class_set.get_fastest_cum_times()),
                    "winner_cum_times": encode_times(class_set.get_winner_cum_times()),
                    "fastest_splits": fastest_splits,
                    "results": [
                        {
                            "name": r.owner.name,
                            "class_name": r.class_name,
                            "total_time": encode_time(r.total_time),
                            "cum_times": encode_times(r.cum_times),
                            "split_times": encode_times(r.split_times),
                            "cum_ranks": r.cum_ranks,
                            "split_ranks": r.split_ranks,
                            "time_losses": encode_times(r.time_losses),
                        }
                        for r in class_set.all_results
                    ],
                }
            )

        return {"classes": classes, "warnings": list(event.warnings)}

    def chart(self, req: ChartRequest) -> dict:
        """Return chart data for the selected classes.

        Raises
        ------
        ValueError
            For an unknown chart type or one without chart data.
        InvalidDataError
            For unknown classes, out-of-range indexes, or a missing reference.
        """
        chart_type = get_chart_type(req.chart_type)
        if chart_type.data_selector is None:
            raise ValueError(f"Chart type {req.chart_type!r} has no chart data")

        event = self._prepare(req.event, req.repair)
        class_set = CourseClassSet(_select_classes(event, req.class_names))

        if req.reference == "winner":
            reference = class_set.get_winner_cum_times()
        elif req.reference == "fastest":
            reference = class_set.get_fastest_cum_times()
        else:
            reference = class_set.get_fastest_cum_times_plus_percentage(req.reference)
        if reference is None:
            raise InvalidDataError(f"No {req.reference!r} reference times for {req.class_names}")

        indexes = list(range(len(class_set.all_results))) if req.indexes is None else req.indexes
        out_of_range = [i for i in indexes if not 0 <= i < len(class_set.all_results)]
        if out_of_range:
            raise InvalidDataError(f"Result index(es) out of range: {out_of_range}")

        data = class_set.get_chart_data(reference, indexes, chart_type, req.leg_index).to_dict()
        data["data_columns"] = [
            {"x": encode_time(col["x"]), "ys": encode_times(col["ys"])} for col in data["data_columns"]
        ]
        data["x_extent"] = encode_times(data["x_extent"])
        return data

    def report(self, req: ReportRequest) -> tuple[ClassReport, str]:
        """Return ``(report, markdown)`` for the selected classes."""
        event = self._prepare(req.event, req.repair)
        class_set = CourseClassSet(_select_classes(event, req.class_names))
        report = ClassReportAggregator().aggregate(class_set)

        if req.commentary:
            llm = self._llm if self._llm is not None else CommentaryClient()
            report = llm.analyze(report)

        return report, MarkdownFormatter().format(report)
