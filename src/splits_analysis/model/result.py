"""A single competitor's or team's timing record.

A :class:`Result` carries two time tracks:

* the *original* track, exactly as read from the source data, and
* the *repaired* track (``cum_times`` / ``split_times``), which data repair
  derives from the original track by replacing impossible values with NaN.

All indexes are control indexes: 0 is the start, ``num_controls + 1`` the
finish.  Split index ``i`` is the leg ending at control ``i + 1``.
"""

from __future__ import annotations

import functools
from collections.abc import Sequence

from splits_analysis.model.errors import InvalidDataError
from splits_analysis.model.owners import Competitor, Team
from splits_analysis.model.util import (
    add_if_not_null,
    is_nan_strict,
    js_round,
    subtract_if_not_null,
)

Time = float | None
"""A time in seconds, ``None`` (missing) or NaN (dubious)."""


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def split_times_from_cum_times(cum_times: Sequence[Time]) -> list[Time]:
    """Return the split times between consecutive cumulative times.

    Raises
    ------
    InvalidDataError
        If *cum_times* is not a list, is empty, has fewer than two entries
        or does not start with zero.
    """
    if not isinstance(cum_times, (list, tuple)):
        raise InvalidDataError(f"Cumulative times must be a list, got {type(cum_times).__name__}")
    if len(cum_times) == 0:
        raise InvalidDataError("Cumulative times list must not be empty")
    if cum_times[0] != 0:
        raise InvalidDataError(f"Cumulative times must start at zero, got {cum_times[0]!r}")
    if len(cum_times) == 1:
        raise InvalidDataError("Cumulative times must contain at least the start and the finish")

    return [subtract_if_not_null(cum_times[i + 1], cum_times[i]) for i in range(len(cum_times) - 1)]


def cum_times_from_split_times(split_times: Sequence[Time]) -> list[Time]:
    """Return cumulative times for *split_times*, starting with zero.

    Once a split is missing, every later cumulative time is missing too.
    """
    if not isinstance(split_times, (list, tuple)):
        raise InvalidDataError(f"Split times must be a list, got {type(split_times).__name__}")
    if len(split_times) == 0:
        raise InvalidDataError("Split times list must not be empty")

    cum_times: list[Time] = [0]
    for split in split_times:
        cum_times.append(add_if_not_null(cum_times[-1], split))
    return cum_times


def compare_results(a: Result, b: Result) -> int:
    """Three-way comparison used to order results within a class.

    Disqualified results sort last; otherwise lower total time first, results
    with no total time after all timed ones, ties broken by ``order``.
    """
    if a.is_disqualified != b.is_disqualified:
        return 1 if a.is_disqualified else -1
    if a.total_time == b.total_time:
        return a.order - b.order
    if a.total_time is None:
        return 0 if b.total_time is None else 1
    if b.total_time is None:
        return -1
    return -1 if a.total_time < b.total_time else 1


result_sort_key = functools.cmp_to_key(compare_results)


def _calculate_offsets(results: Sequence[Result]) -> list[Time]:
    """Return the time offset at which each leg of a team starts."""
    offsets: list[Time] = [0]
    for index, result in enumerate(results[:-1]):
        last_offset = offsets[-1]
        next_result = results[index + 1]
        if last_offset is not None and result.total_time is not None:
            offsets.append(last_offset + result.total_time)
        elif next_result.start_time is not None and results[0].start_time is not None:
            offsets.append(next_result.start_time - results[0].start_time)
        else:
            offsets.append(None)
    return offsets


def _team_cum_times(results: Sequence[Result], offsets: Sequence[Time], attr: str) -> list[Time]:
    times: list[Time] = [0]
    for result, offset in zip(results, offsets):
        times.extend(add_if_not_null(offset, t) for t in getattr(result, attr)[1:])
    return times


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


class Result:
    """Timing record for one competitor or team.

    Prefer the factory class methods (:meth:`from_cum_times`,
    :meth:`from_original_cum_times`, :meth:`from_split_times`,
    :meth:`create_team_result`) to calling the constructor directly.

    Args:
        order: Position of this result in the source data; used only to
            break ties when sorting.
        start_time: Start time in seconds since midnight, or ``None``.
        original_split_times: Split times as read.
        original_cum_times: Cumulative times as read, starting with 0.
        owner: The :class:`Competitor` or :class:`Team` who ran.
    """

    def __init__(
        self,
        order: int,
        start_time: float | None,
        original_split_times: list[Time],
        original_cum_times: list[Time],
        owner: Competitor | Team,
    ) -> None:
        if not isinstance(order, int) or isinstance(order, bool):
            raise InvalidDataError(f"Result order must be an integer, got {order!r}")
        if start_time is not None and not _is_number(start_time):
            raise InvalidDataError(f"Start time must be a number or None, got {start_time!r}")

        self.order = order
        self.start_time = start_time
        self.owner = owner

        self.is_ok_despite_missing_times = False
        self.is_non_competitive = False
        self.is_non_starter = False
        self.is_non_finisher = False
        self.is_disqualified = False
        self.is_over_max_time = False

        self.original_split_times = original_split_times
        self.original_cum_times = original_cum_times
        self.split_times: list[Time] | None = None
        self.cum_times: list[Time] | None = None

        self.split_ranks: list[int | None] | None = None
        self.cum_ranks: list[int | None] | None = None
        self.time_losses: list[float | None] | None = None

        self.class_name: str | None = None
        self.offsets: list[int] | None = None

        if original_cum_times is None or any(t is None for t in original_cum_times):
            self.total_time: Time = None
        else:
            self.total_time = original_cum_times[-1]

    def __repr__(self) -> str:
        return f"Result(order={self.order}, owner={self.owner.name!r}, total_time={self.total_time!r})"

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_original_cum_times(
        cls,
        order: int,
        start_time: float | None,
        cum_times: list[Time],
        owner: Competitor | Team,
    ) -> Result:
        """Create a result whose repaired track is set later by repair or transfer."""
        split_times = split_times_from_cum_times(cum_times)
        return cls(order, start_time, split_times, list(cum_times), owner)

    @classmethod
    def from_cum_times(
        cls,
        order: int,
        start_time: float | None,
        cum_times: list[Time],
        owner: Competitor | Team,
    ) -> Result:
        """Create a result whose repaired track equals its original track."""
        result = cls.from_original_cum_times(order, start_time, cum_times, owner)
        result.split_times = list(result.original_split_times)
        result.cum_times = list(result.original_cum_times)
        return result

    @classmethod
    def from_split_times(
        cls,
        order: int,
        start_time: float | None,
        split_times: list[Time],
        owner: Competitor | Team,
    ) -> Result:
        """Create a result from split times, keeping the splits as given."""
        cum_times = cum_times_from_split_times(split_times)
        result = cls(order, start_time, list(split_times), cum_times, owner)
        result.split_times = list(split_times)
        result.cum_times = list(cum_times)
        return result

    @classmethod
    def create_team_result(cls, order: int, results: Sequence[Result], owner: Team) -> Result:
        """Combine the results of each leg of a relay into one team result.

        Raises
        ------
        InvalidDataError
            If fewer than two leg results are given.
        """
        if len(results) < 2:
            raise InvalidDataError("Team results can only be created from at least two other results")

        offsets = _calculate_offsets(results)
        owner.set_members([r.owner for r in results])

        original_cum_times = _team_cum_times(results, offsets, "original_cum_times")
        team_result = cls.from_original_cum_times(order, results[0].start_time, original_cum_times, owner)
        if all(r.cum_times is not None for r in results):
            team_result.cum_times = _team_cum_times(results, offsets, "cum_times")
            team_result.split_times = split_times_from_cum_times(team_result.cum_times)

        team_result.determine_aggregate_status(results)
        return team_result

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def set_ok_despite_missing_times(self) -> None:
        """Mark the result as OK even with missing controls, so it gets a total time."""
        self.is_ok_despite_missing_times = True
        if self.original_cum_times is not None:
            self.total_time = self.original_cum_times[-1]

    def set_non_competitive(self) -> None:
        self.is_non_competitive = True

    def set_non_starter(self) -> None:
        self.is_non_starter = True

    def set_non_finisher(self) -> None:
        self.is_non_finisher = True

    def disqualify(self) -> None:
        self.is_disqualified = True

    def set_over_max_time(self) -> None:
        self.is_over_max_time = True

    def set_class_name(self, class_name: str) -> None:
        self.class_name = class_name

    def set_offsets(self, offsets: list[int]) -> None:
        """Record the control-index offset at which each relay leg starts."""
        self.offsets = offsets

    def set_repaired_cumulative_times(self, cum_times: list[Time]) -> None:
        self.cum_times = cum_times
        self.split_times = split_times_from_cum_times(cum_times)

    def completed(self) -> bool:
        """Return True if the result has a total time and is neither DSQ nor over time."""
        return self.total_time is not None and not self.is_disqualified and not self.is_over_max_time

    def has_any_times(self) -> bool:
        return any(t is not None for t in self.original_cum_times[1:])

    def lacks_start_time(self) -> bool:
        """Return True if there are times but no start time to anchor them."""
        return self.start_time is None and any(t is not None for t in self.split_times)

    def determine_aggregate_status(self, results: Sequence[Result]) -> None:
        """Derive a team's status from the statuses of its legs."""
        if any(r.is_disqualified for r in results):
            self.is_disqualified = True
            return

        if all(r.is_non_starter for r in results):
            self.is_non_starter = True
            return

        ok_index = -1
        while ok_index + 1 < len(results):
            next_result = results[ok_index + 1]
            if next_result.is_non_starter or next_result.is_non_finisher or not next_result.completed():
                break
            ok_index += 1

        dns_index = len(results)
        while dns_index > 0 and results[dns_index - 1].is_non_starter:
            dns_index -= 1

        if ok_index < len(results) - 1:
            if ok_index + 1 == dns_index:
                self.is_non_finisher = True
                return
            if ok_index + 2 == dns_index and results[ok_index + 1].is_non_finisher:
                self.is_non_finisher = True
                return

        if any(r.is_over_max_time for r in results):
            self.is_over_max_time = True
            return

        if any(r.is_non_competitive for r in results):
            self.is_non_competitive = True

        if any(r.is_ok_despite_missing_times for r in results):
            self.set_ok_despite_missing_times()

    # ------------------------------------------------------------------
    # Per-control queries
    # ------------------------------------------------------------------

    def get_split_time_to(self, control_index: int) -> Time:
        return 0 if control_index == 0 else self.split_times[control_index - 1]

    def get_original_split_time_to(self, control_index: int) -> Time:
        if self.is_non_starter:
            return None
        return 0 if control_index == 0 else self.original_split_times[control_index - 1]

    def is_split_time_dubious(self, control_index: int) -> bool:
        """Return True if repair changed the split time to *control_index*."""
        return (
            control_index > 0
            and self.original_split_times[control_index - 1] != self.split_times[control_index - 1]
        )

    def get_cumulative_time_to(self, control_index: int) -> Time:
        return self.cum_times[control_index]

    def get_original_cumulative_time_to(self, control_index: int) -> Time:
        return None if self.is_non_starter else self.original_cum_times[control_index]

    def is_cumulative_time_dubious(self, control_index: int) -> bool:
        return self.original_cum_times[control_index] != self.cum_times[control_index]

    def get_split_rank_to(self, control_index: int) -> int | None:
        return None if self.split_ranks is None else self.split_ranks[control_index]

    def get_cumulative_rank_to(self, control_index: int) -> int | None:
        return None if self.cum_ranks is None else self.cum_ranks[control_index]

    def get_time_loss_at(self, control_index: int) -> float | None:
        if control_index == 0 or self.time_losses is None:
            return None
        return self.time_losses[control_index - 1]

    def get_all_cumulative_times(self) -> list[Time] | None:
        return self.cum_times

    def get_all_original_cumulative_times(self) -> list[Time]:
        return self.original_cum_times

    def get_all_split_times(self) -> list[Time] | None:
        return self.split_times

    def get_owner_name_for_leg(self, leg_index: int | None) -> str:
        """Return the leg runner's name for a team, else the owner's name."""
        members = getattr(self.owner, "members", None)
        if members and leg_index is not None:
            return members[leg_index].name
        return self.owner.name

    # ------------------------------------------------------------------
    # Ranks and time losses
    # ------------------------------------------------------------------

    def set_split_and_cumulative_ranks(
        self,
        split_ranks: list[int | None],
        cum_ranks: list[int | None],
    ) -> None:
        """Store ranks computed by the owning class set.

        Ranks may only be written once; building a second class set over the
        same results must use fresh result objects.

        Raises
        ------
        InvalidDataError
            If either list does not start with ``None`` or ranks were
            already written.
        """
        if split_ranks[0] is not None or cum_ranks[0] is not None:
            raise InvalidDataError("Split and cumulative ranks arrays must both start with None")
        if self.split_ranks is not None or self.cum_ranks is not None:
            raise InvalidDataError(f"Ranks have already been computed for {self.owner.name!r}")

        self.split_ranks = split_ranks
        self.cum_ranks = cum_ranks

    def determine_time_losses(self, fastest_split_times: Sequence[Time]) -> None:
        """Estimate the time lost at each control relative to *fastest_split_times*.

        Each split is divided by the fastest split to give a ratio; the median
        ratio measures overall pace.  The loss at a control is the split minus
        the fastest split scaled by that median.  Only results that
        completed get time losses.

        Raises
        ------
        InvalidDataError
            If the number of fastest splits does not match, or any is NaN.
        """
        if not self.completed():
            return

        if len(fastest_split_times) != len(self.split_times):
            raise InvalidDataError(
                f"Cannot determine time loss with {len(self.split_times)} split times "
                f"using {len(fastest_split_times)} fastest splits"
            )
        if any(is_nan_strict(f) for f in fastest_split_times):
            raise InvalidDataError("Cannot determine time loss when there is a NaN value in the fastest splits")

        if (
            any(f is None or f == 0 for f in fastest_split_times)
            or self.is_ok_despite_missing_times
            or any(is_nan_strict(s) for s in self.split_times)
        ):
            self.time_losses = [float("nan")] * len(self.split_times)
            return

        ratios = sorted(s / f for s, f in zip(self.split_times, fastest_split_times))
        middle = len(ratios) // 2
        if len(ratios) % 2 == 1:
            median = ratios[middle]
        else:
            median = (ratios[middle - 1] + ratios[middle]) / 2

        self.time_losses = [
            js_round(s - f * median) for s, f in zip(self.split_times, fastest_split_times)
        ]

    # ------------------------------------------------------------------
    # Reference adjustment
    # ------------------------------------------------------------------

    def _check_reference(self, reference_cum_times: Sequence[Time], purpose: str) -> None:
        if len(reference_cum_times) != len(self.cum_times):
            raise InvalidDataError(
                f"Cannot {purpose} because the numbers of times are different "
                f"({len(self.cum_times)} and {len(reference_cum_times)})"
            )
        if any(t is None for t in reference_cum_times):
            raise InvalidDataError(f"Cannot {purpose} because a None value is in the reference data")

    def get_cum_times_adjusted_to_reference(self, reference_cum_times: Sequence[Time]) -> list[Time]:
        """Return this result's cumulative times minus *reference_cum_times*."""
        self._check_reference(reference_cum_times, "adjust cumulative times")
        return [subtract_if_not_null(t, ref) for t, ref in zip(self.cum_times, reference_cum_times)]

    def get_cum_times_adjusted_to_reference_with_start_added(
        self, reference_cum_times: Sequence[Time]
    ) -> list[Time]:
        """As :meth:`get_cum_times_adjusted_to_reference`, shifted by the start time."""
        adjusted = self.get_cum_times_adjusted_to_reference(reference_cum_times)
        return [add_if_not_null(t, self.start_time) for t in adjusted]

    def get_split_percents_behind_reference_cum_times(
        self, reference_cum_times: Sequence[Time]
    ) -> list[float | None]:
        """Return how far, in percent, each split is behind the reference split."""
        self._check_reference(reference_cum_times, "determine percentages-behind")

        percents: list[float | None] = [0]
        for index, split in enumerate(self.split_times):
            if split is None:
                percents.append(None)
                continue
            reference_split = reference_cum_times[index + 1] - reference_cum_times[index]
            if reference_split > 0:
                percents.append(100 * (split - reference_split) / reference_split)
            else:
                percents.append(None)
        return percents

    # ------------------------------------------------------------------
    # Crossing and omitted-time queries
    # ------------------------------------------------------------------

    def crosses(self, other: Result, selected_leg_index: int | None = None) -> bool:
        """Return True if this result is both ahead of and behind *other* on the clock.

        Only controls where both results have a time are compared.  With a
        leg index, only the controls of that relay leg are compared.
        """
        if len(other.cum_times) != len(self.cum_times):
            raise InvalidDataError("Two results with different numbers of controls cannot cross")

        if selected_leg_index is None or self.offsets is None:
            start_index, end_index = 0, len(self.cum_times)
        else:
            start_index = self.offsets[selected_leg_index]
            if selected_leg_index + 1 == len(self.offsets):
                end_index = len(self.cum_times)
            else:
                end_index = self.offsets[selected_leg_index + 1] + 1

        this_start = self.start_time if self.start_time is not None else 0
        other_start = other.start_time if other.start_time is not None else 0

        before_other = after_other = False
        for index in range(start_index, end_index):
            this_time = self.cum_times[index]
            other_time = other.cum_times[index]
            if this_time is None or other_time is None:
                continue
            if this_start + this_time < other_start + other_time:
                before_other = True
            elif this_start + this_time > other_start + other_time:
                after_other = True

        return before_other and after_other

    def is_time_omitted(self, time: Time) -> bool:
        """Return True for NaN, and for ``None`` on an OK-despite-missing result."""
        return is_nan_strict(time) or (self.is_ok_despite_missing_times and time is None)

    def get_indexes_around_omitted_times(self, times: Sequence[Time]) -> list[dict[str, int]]:
        """Return ``{"start", "end"}`` pairs bracketing each run of omitted times.

        Runs at the end of *times*, or with a missing time on either side,
        are not reported.
        """
        ranges: list[dict[str, int]] = []
        start = 1
        while start + 1 < len(times):
            if not self.is_time_omitted(times[start]):
                start += 1
                continue

            end = start
            while end + 1 < len(times) and self.is_time_omitted(times[end + 1]):
                end += 1

            if end + 1 < len(times) and times[start - 1] is not None and times[end + 1] is not None:
                ranges.append({"start": start - 1, "end": end + 1})

            start = end + 1

        return ranges

    def get_control_indexes_around_omitted_cumulative_times(self) -> list[dict[str, int]]:
        return self.get_indexes_around_omitted_times(self.cum_times)

    def get_control_indexes_around_omitted_split_times(self) -> list[dict[str, int]]:
        return self.get_indexes_around_omitted_times([0] + list(self.split_times))
