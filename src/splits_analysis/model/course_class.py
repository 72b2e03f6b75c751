"""A class: the results of everyone who ran one course in one category."""

from __future__ import annotations

from typing import TYPE_CHECKING

from splits_analysis.model.errors import InvalidDataError
from splits_analysis.model.result import Result
from splits_analysis.model.util import is_not_null_nor_nan

if TYPE_CHECKING:
    from splits_analysis.model.course import Course


class CourseClass:
    """A named group of results over the same number of controls.

    Args:
        name: Class name, e.g. ``"M21E"``.
        num_controls: Number of controls, excluding start and finish.
        results: Results in this class; each is told the class name.
    """

    def __init__(self, name: str, num_controls: int, results: list[Result]) -> None:
        self.name = name
        self.num_controls = num_controls
        self.results = results
        self.numbers_of_controls: list[int] | None = None
        self.offsets: list[int] | None = None
        self.course: Course | None = None
        self.has_dubious_data = False
        self.is_team_class = False
        for result in results:
            result.set_class_name(name)

    def __repr__(self) -> str:
        return f"CourseClass({self.name!r}, {self.num_controls}, {len(self.results)} results)"

    def record_has_dubious_data(self) -> None:
        self.has_dubious_data = True

    def set_is_team_class(self, numbers_of_controls: list[int]) -> None:
        """Mark this as a relay class with the given number of controls per leg."""
        self.is_team_class = True
        self.numbers_of_controls = numbers_of_controls
        self.offsets = [0]
        for index in range(1, len(numbers_of_controls)):
            self.offsets.append(self.offsets[index - 1] + numbers_of_controls[index - 1] + 1)
        for result in self.results:
            result.set_offsets(self.offsets)

    def determine_time_losses(self) -> None:
        """Compute each result's time losses against this class's fastest splits."""
        fastest_splits = []
        for control_idx in range(1, self.num_controls + 2):
            split_rec = self.get_fastest_split_to(control_idx)
            fastest_splits.append(None if split_rec is None else split_rec["split"])

        for result in self.results:
            result.determine_time_losses(fastest_splits)

    def is_empty(self) -> bool:
        return len(self.results) == 0

    def set_course(self, course: Course) -> None:
        self.course = course

    def _check_control(self, control_idx, lowest: int) -> None:
        if (
            not isinstance(control_idx, int)
            or isinstance(control_idx, bool)
            or not lowest <= control_idx <= self.num_controls + 1
        ):
            raise InvalidDataError(
                f"Control {control_idx!r} out of range for a class with {self.num_controls} control(s)"
            )

    def get_fastest_split_to(self, control_idx: int) -> dict | None:
        """Return ``{"split", "name"}`` of the fastest valid split to a control.

        Returns ``None`` if nobody has a valid split to it.
        """
        self._check_control(control_idx, 1)

        fastest: Result | None = None
        fastest_split = None
        for result in self.results:
            split = result.get_split_time_to(control_idx)
            if is_not_null_nor_nan(split) and (fastest_split is None or split < fastest_split):
                fastest_split = split
                fastest = result

        if fastest is None:
            return None
        return {"split": fastest_split, "name": fastest.owner.name}

    def get_results_at_control_in_time_range(
        self,
        control_num: int,
        interval_start: float,
        interval_end: float,
    ) -> list[dict]:
        """Return ``{"name", "time"}`` for results at a control within a clock-time interval."""
        self._check_control(control_num, 0)

        matching = []
        for result in self.results:
            cum_time = result.get_cumulative_time_to(control_num)
            if cum_time is None or result.start_time is None:
                continue
            time_at_control = cum_time + result.start_time
            if interval_start <= time_at_control <= interval_end:
                matching.append({"name": result.owner.name, "time": time_at_control})
        return matching
