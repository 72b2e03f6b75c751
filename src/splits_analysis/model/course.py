"""A course: a sequence of control codes run by one or more classes."""

from __future__ import annotations

from splits_analysis.model.course_class import CourseClass
from splits_analysis.model.errors import InvalidDataError

START = "__START__"
FINISH = "__FINISH__"
INTERMEDIATE = "__INTERMEDIATE__"


class Course:
    """A course and the classes that ran it.

    Args:
        name: Course name.
        classes: Classes running this course.
        length: Length in kilometres, or ``None`` if unknown.
        climb: Climb in metres, or ``None`` if unknown.
        controls: Control codes excluding start and finish, or ``None`` if
            the codes are not known.
    """

    START = START
    FINISH = FINISH
    INTERMEDIATE = INTERMEDIATE

    def __init__(
        self,
        name: str,
        classes: list[CourseClass],
        length: float | None,
        climb: int | None,
        controls: list[str] | None,
    ) -> None:
        self.name = name
        self.classes = classes
        self.length = length
        self.climb = climb
        self.controls = controls

    def __repr__(self) -> str:
        return f"Course({self.name!r}, {len(self.classes)} classes)"

    def get_other_classes(self, course_class: CourseClass) -> list[CourseClass]:
        """Return the classes on this course other than *course_class*."""
        others = [c for c in self.classes if c is not course_class]
        if len(others) == len(self.classes):
            raise InvalidDataError("Course.get_other_classes: given class is not in this course")
        return others

    def get_num_classes(self) -> int:
        return len(self.classes)

    def has_controls(self) -> bool:
        return self.controls is not None

    def get_control_code(self, control_num: int) -> str:
        if control_num == 0:
            return START
        if 1 <= control_num <= len(self.controls):
            return self.controls[control_num - 1]
        if control_num == len(self.controls) + 1:
            return FINISH
        raise InvalidDataError(f"Cannot get control code of control {control_num} because it is out of range")

    def uses_leg(self, start_code: str, end_code: str) -> bool:
        return self.get_leg_number(start_code, end_code) >= 0

    def get_leg_number(self, start_code: str, end_code: str) -> int:
        """Return the control number at the end of the given leg, or -1 if absent."""
        if self.controls is None:
            return -1

        if start_code == START and end_code == FINISH:
            return 1 if not self.controls else -1
        if start_code == START:
            return 1 if self.controls and self.controls[0] == end_code else -1
        if end_code == FINISH:
            return len(self.controls) + 1 if self.controls and self.controls[-1] == start_code else -1

        for control_idx in range(1, len(self.controls)):
            if self.controls[control_idx - 1] == start_code and self.controls[control_idx] == end_code:
                return control_idx + 1
        return -1

    def get_fastest_splits_for_leg(self, start_code: str, end_code: str) -> list[dict]:
        """Return the fastest split on a leg for each class, as ``{"name", "class_name", "split"}``."""
        leg_number = self.get_leg_number(start_code, end_code)
        if leg_number < 0:
            start = "start" if start_code in (START, INTERMEDIATE) else start_code
            end = "end" if end_code in (FINISH, INTERMEDIATE) else end_code
            raise InvalidDataError(f"Leg from {start} to {end} not found in course {self.name}")

        fastest_splits = []
        for course_class in self.classes:
            class_fastest = course_class.get_fastest_split_to(leg_number)
            if class_fastest is not None:
                fastest_splits.append(
                    {"name": class_fastest["name"], "class_name": course_class.name, "split": class_fastest["split"]}
                )
        return fastest_splits

    def get_results_at_control_in_time_range(
        self,
        control_code: str,
        interval_start: float,
        interval_end: float,
    ) -> list[dict]:
        """Return results at a control within a clock-time interval.

        A control code may occur more than once on a course; every visit is
        considered.
        """
        if self.controls is None:
            return []
        if control_code == START:
            return self._results_at_control_num(0, interval_start, interval_end)
        if control_code == FINISH:
            return self._results_at_control_num(len(self.controls) + 1, interval_start, interval_end)

        matching = []
        for index, code in enumerate(self.controls):
            if code == control_code:
                matching.extend(self._results_at_control_num(index + 1, interval_start, interval_end))
        return matching

    def _results_at_control_num(self, control_num: int, interval_start: float, interval_end: float) -> list[dict]:
        matching = []
        for course_class in self.classes:
            for rec in course_class.get_results_at_control_in_time_range(control_num, interval_start, interval_end):
                matching.append({"name": rec["name"], "time": rec["time"], "class_name": course_class.name})
        return matching

    def has_control(self, control_code: str) -> bool:
        return self.controls is not None and control_code in self.controls

    def get_next_controls(self, control_code: str) -> list[str]:
        """Return the control code(s) that follow *control_code* on this course."""
        if self.controls is None:
            raise InvalidDataError("Course has no controls")
        if control_code == FINISH:
            raise InvalidDataError("Cannot fetch next control after the finish")
        if control_code == START:
            return [self.controls[0] if self.controls else FINISH]

        next_controls = []
        for index, code in enumerate(self.controls):
            if code == control_code:
                next_controls.append(FINISH if index == len(self.controls) - 1 else self.controls[index + 1])

        if not next_controls:
            raise InvalidDataError(f"Control {control_code!r} not found on course {self.name}")
        return next_controls
