"""An event: all the classes and courses of one competition."""

from __future__ import annotations

from splits_analysis.model.course import START, Course
from splits_analysis.model.course_class import CourseClass


class Event:
    """Classes, courses and any warnings raised while reading the data."""

    def __init__(
        self,
        classes: list[CourseClass],
        courses: list[Course],
        warnings: list[str] | None = None,
    ) -> None:
        self.classes = classes
        self.courses = courses
        self.warnings = warnings if warnings is not None else []

    def determine_time_losses(self) -> None:
        for course_class in self.classes:
            course_class.determine_time_losses()

    def needs_repair(self) -> bool:
        """Return True if any result has not yet had its repaired track set."""
        return any(
            result.get_all_cumulative_times() is None
            for course_class in self.classes
            for result in course_class.results
        )

    def get_fastest_splits_for_leg(self, start_code: str, end_code: str) -> list[dict]:
        """Return per-class fastest splits on a leg across all courses, fastest first."""
        fastest_splits = []
        for course in self.courses:
            if course.uses_leg(start_code, end_code):
                fastest_splits.extend(course.get_fastest_splits_for_leg(start_code, end_code))
        fastest_splits.sort(key=lambda rec: rec["split"])
        return fastest_splits

    def get_results_at_control_in_time_range(
        self,
        control_code: str,
        interval_start: float,
        interval_end: float,
    ) -> list[dict]:
        results = []
        for course in self.courses:
            results.extend(course.get_results_at_control_in_time_range(control_code, interval_start, interval_end))
        results.sort(key=lambda rec: rec["time"])
        return results

    def get_next_controls_after(self, control_code: str) -> list[dict]:
        """Return ``{"course", "next_controls"}`` for each course visiting *control_code*."""
        courses = self.courses
        if control_code != START:
            courses = [c for c in courses if c.has_control(control_code)]
        return [{"course": c, "next_controls": c.get_next_controls(control_code)} for c in courses]
