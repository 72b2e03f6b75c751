"""Class report aggregation."""

from __future__ import annotations

from splits_analysis.analysis.course_class_set import CourseClassSet
from splits_analysis.analysis.ranks import get_ranks
from splits_analysis.model.result import Result
from splits_analysis.model.util import is_not_null_nor_nan
from splits_analysis.reporting.models import ClassReport, ControlCell, ResultLine


def _status_text(result: Result) -> str:
    if result.is_non_competitive:
        return "n/c"
    if result.is_disqualified:
        return "dsq"
    if result.is_non_starter:
        return "dns"
    if result.is_non_finisher:
        return "dnf"
    if result.is_over_max_time:
        return "over"
    if not result.completed():
        return "mp"
    return ""


def _control_cells(result: Result, num_controls: int) -> list[ControlCell]:
    return [
        ControlCell(
            cum_time=result.get_cumulative_time_to(control),
            split_time=result.get_split_time_to(control),
            cum_rank=result.get_cumulative_rank_to(control),
            split_rank=result.get_split_rank_to(control),
            time_loss=result.get_time_loss_at(control),
            dubious=result.is_cumulative_time_dubious(control),
        )
        for control in range(1, num_controls + 2)
    ]


def _total_time_loss(result: Result) -> float | None:
    if result.time_losses is None or not all(is_not_null_nor_nan(loss) for loss in result.time_losses):
        return None
    return sum(result.time_losses)


class ClassReportAggregator:
    """Turn a ranked :class:`CourseClassSet` into a :class:`ClassReport`.

    Positions rank the finish times of completed competitive results only,
    with equal times sharing a position.  Non-competitive results never
    take a position or push anyone down.
    """

    def aggregate(self, course_class_set: CourseClassSet) -> ClassReport:
        """Build a :class:`ClassReport` from *course_class_set*.

        Time losses must already have been determined (see
        :func:`~splits_analysis.analysis.data_repair.prepare_event`) for
        the loss columns to be filled in.
        """
        num_controls = course_class_set.num_controls or 0
        course = course_class_set.get_course()
        control_codes = list(course.controls) if course is not None and course.has_controls() else []

        positions = get_ranks([
            result.get_cumulative_time_to(num_controls + 1)
            if result.completed() and not result.is_non_competitive
            else None
            for result in course_class_set.all_results
        ])

        lines: list[ResultLine] = []
        for result, position in zip(course_class_set.all_results, positions):
            lines.append(
                ResultLine(
                    position=position,
                    name=result.owner.name,
                    club=getattr(result.owner, "club", ""),
                    total_time=result.total_time,
                    status=_status_text(result),
                    controls=_control_cells(result, num_controls),
                    total_time_loss=_total_time_loss(result),
                )
            )

        winner = course_class_set.all_results[0] if course_class_set.all_results else None
        return ClassReport(
            class_names=[c.name for c in course_class_set.classes],
            course_name=course.name if course is not None else None,
            num_controls=num_controls,
            control_codes=control_codes,
            results=lines,
            fastest_cum_times=course_class_set.get_fastest_cum_times(),
            winner_name=winner.owner.name if winner is not None and winner.completed() else None,
        )
