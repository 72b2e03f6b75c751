"""Detection and removal of impossible cumulative times.

Source data sometimes contains duplicate punches (the same cumulative time
recorded at two consecutive controls) or times that go backwards.  Repair
copies each result's original cumulative times, replaces the offending
values with NaN and stores the outcome as the result's repaired track.  The
original track is never modified.
"""

from __future__ import annotations

import logging
import os

from splits_analysis.model.course_class import CourseClass
from splits_analysis.model.errors import InvalidDataError
from splits_analysis.model.event import Event
from splits_analysis.model.result import Result, Time
from splits_analysis.model.util import is_not_null_nor_nan

_logger = logging.getLogger(__name__)

MAX_FINISH_SPLIT_MINS_ADDED = 5
"""A finish this many minutes or more before the last control is absurd."""

_NAN = float("nan")


def get_first_non_ascending_indexes(cum_times: list[Time]) -> tuple[int, int] | None:
    """Return ``(first, second)`` indexes of the first pair of numeric times not ascending.

    Missing and NaN times are skipped.  Returns ``None`` if the numeric
    times are strictly ascending.
    """
    if len(cum_times) == 0 or cum_times[0] != 0:
        raise InvalidDataError("cumulative times array does not start with a zero cumulative time")

    last_numeric_index = 0
    for index in range(1, len(cum_times)):
        time = cum_times[index]
        if is_not_null_nor_nan(time):
            if time <= cum_times[last_numeric_index]:
                return last_numeric_index, index
            last_numeric_index = index
    return None


class Repairer:
    """Repair the results of one class at a time.

    ``made_any_changes`` records whether the class being repaired had any
    time replaced.
    """

    def __init__(self) -> None:
        self.made_any_changes = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def repair_result(self, result: Result) -> None:
        """Compute and store the repaired track of *result*."""
        cum_times = list(result.original_cum_times)

        self.remove_cumulative_times_equal_to_previous(cum_times)
        cum_times = self.remove_cumulative_times_causing_negative_splits(cum_times)

        if not result.completed():
            self.remove_finish_time_if_absurd(cum_times)

        result.set_repaired_cumulative_times(cum_times)

    def repair_course_class(self, course_class: CourseClass) -> None:
        self.made_any_changes = False
        for result in course_class.results:
            self.repair_result(result)

        if self.made_any_changes:
            course_class.record_has_dubious_data()
            _logger.info("Class %s: dubious times replaced", course_class.name)

    def repair_event_data(self, event: Event) -> None:
        for course_class in event.classes:
            self.repair_course_class(course_class)

    # ------------------------------------------------------------------
    # Repair stages
    # ------------------------------------------------------------------

    def remove_cumulative_times_equal_to_previous(self, cum_times: list[Time]) -> None:
        """Replace, in place, interior times equal to the previous recorded time."""
        last_cum_time = cum_times[0]
        for index in range(1, len(cum_times) - 1):
            time = cum_times[index]
            if time is None:
                continue
            if time == last_cum_time:
                _logger.debug("Time %s at control %d repeats the previous time", time, index)
                cum_times[index] = _NAN
                self.made_any_changes = True
            else:
                last_cum_time = time

    def remove_cumulative_times_causing_negative_splits(self, cum_times: list[Time]) -> list[Time]:
        """Return *cum_times* with times that make splits negative replaced by NaN.

        For each non-ascending pair (the second not being the finish), try in
        turn: blanking the second time, blanking the first, blanking the
        first and the one before it.  The first attempt that moves the next
        non-ascending pair past the current one is kept; if none does, stop.
        """
        non_asc = get_first_non_ascending_indexes(cum_times)
        while non_asc is not None and non_asc[1] + 1 < len(cum_times):
            first, second = non_asc
            progress = False

            for attempt in (1, 2, 3):
                if attempt == 3 and (first == 1 or not is_not_null_nor_nan(cum_times[first - 1])):
                    continue

                adjusted = list(cum_times)
                if attempt == 1:
                    adjusted[second] = _NAN
                elif attempt == 2:
                    adjusted[first] = _NAN
                else:
                    adjusted[first] = _NAN
                    adjusted[first - 1] = _NAN

                next_non_asc = get_first_non_ascending_indexes(adjusted)
                if next_non_asc is None or next_non_asc[0] > second:
                    _logger.debug("Removed non-ascending time(s) near controls %d and %d", first, second)
                    progress = True
                    cum_times = adjusted
                    self.made_any_changes = True
                    non_asc = next_non_asc
                    break

            if not progress:
                break

        return cum_times

    def remove_finish_time_if_absurd(self, cum_times: list[Time]) -> None:
        """Replace, in place, a finish time well before the last control time."""
        finish_time = cum_times[-1]
        last_control_time = cum_times[-2]
        if (
            is_not_null_nor_nan(finish_time)
            and is_not_null_nor_nan(last_control_time)
            and finish_time <= last_control_time - MAX_FINISH_SPLIT_MINS_ADDED * 60
        ):
            _logger.debug("Finish time %s is absurd against last control %s", finish_time, last_control_time)
            cum_times[-1] = _NAN
            self.made_any_changes = True


# ---------------------------------------------------------------------------
# Module-level entry points
# ---------------------------------------------------------------------------


def repair_event_data(event: Event) -> None:
    """Repair every class of *event*."""
    Repairer().repair_event_data(event)


def transfer_result_data(event: Event) -> None:
    """Set each result's repaired track to a copy of its original track."""
    for course_class in event.classes:
        for result in course_class.results:
            result.set_repaired_cumulative_times(list(result.get_all_original_cumulative_times()))


def repair_enabled() -> bool:
    """Return the ``SPLITS_REPAIR_DATA`` setting (on unless ``0``/``false``/``no``)."""
    return os.environ.get("SPLITS_REPAIR_DATA", "1").strip().lower() not in ("0", "false", "no")


def prepare_event(event: Event, repair: bool | None = None) -> Event:
    """Repair (or transfer) the event's data, then determine time losses.

    Args:
        event: The event to prepare; modified in place and returned.
        repair: Whether to repair; defaults to :func:`repair_enabled`.
    """
    if repair is None:
        repair = repair_enabled()

    if repair:
        repair_event_data(event)
    else:
        transfer_result_data(event)

    event.determine_time_losses()
    _logger.info(
        "Prepared event with %d class(es) (%s)",
        len(event.classes),
        "repaired" if repair else "transferred",
    )
    return event
