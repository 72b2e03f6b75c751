"""Reporting data models."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field


@dataclass
class Highlight:
    """A single notable observation about one result at one control.

    Args:
        result_name: Whose result this is about.
        control_index: Control index (``num_controls + 1`` is the finish).
        severity: ``'high'``, ``'medium'``, or ``'low'``.
        text: Human-readable description.
    """

    result_name: str
    control_index: int
    severity: str
    text: str


@dataclass
class ControlCell:
    """One result's times and ranks at one control."""

    cum_time: float | None
    split_time: float | None
    cum_rank: int | None = None
    split_rank: int | None = None
    time_loss: float | None = None
    dubious: bool = False
    """True if data repair changed the cumulative time here."""


@dataclass
class ResultLine:
    """One row of a class results table.

    ``position`` is ``None`` for results that did not complete and for
    non-competitive results; ``status`` is the short status text shown in
    its place (``"n/c"``, ``"mp"``, ``"dnf"``, ``"dsq"``, ``"dns"``,
    ``"over"``) or empty.
    """

    position: int | None
    name: str
    club: str
    total_time: float | None
    status: str
    controls: list[ControlCell] = field(default_factory=list)
    total_time_loss: float | None = None


@dataclass
class ClassReport:
    """Results and highlights for one class set.

    ``results`` are in finishing order.  ``highlights`` and ``summary``
    are filled in by the commentary client.
    """

    class_names: list[str]
    course_name: str | None
    num_controls: int
    control_codes: list[str]
    results: list[ResultLine]
    fastest_cum_times: list[float] | None = None
    winner_name: str | None = None
    highlights: list[Highlight] = field(default_factory=list)
    summary: str = ""

    @property
    def title(self) -> str:
        return ", ".join(self.class_names)

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict, with NaN times as the string ``"NaN"``."""
        return _encode_nan(dataclasses.asdict(self))


def _encode_nan(value):
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    if isinstance(value, dict):
        return {k: _encode_nan(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_encode_nan(v) for v in value]
    return value
