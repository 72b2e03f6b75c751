"""Pydantic request/response schemas for the Web API.

Times are seconds.  In responses a time is a number, ``null`` (not
recorded) or the string ``"NaN"`` (removed as dubious).
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, Field

TimeValue = Union[float, str, None]


# ---------------------------------------------------------------------------
# Event document
# ---------------------------------------------------------------------------


class ResultPayload(BaseModel):
    """One result: give ``cum_times`` (starting with 0), ``split_times``, or ``legs`` for a team."""

    name: str
    club: str = ""
    start_time: float | None = None
    cum_times: list[float | None] | None = None
    split_times: list[float | None] | None = None
    legs: list[ResultPayload] | None = None
    ok_despite_missing_times: bool = False
    non_competitive: bool = False
    non_starter: bool = False
    non_finisher: bool = False
    disqualified: bool = False
    over_max_time: bool = False


class ClassPayload(BaseModel):
    name: str
    num_controls: int
    results: list[ResultPayload] = Field(default_factory=list)
    leg_controls: list[int] | None = None
    """Number of controls on each relay leg; set only for team classes."""


class CoursePayload(BaseModel):
    name: str
    class_names: list[str]
    length: float | None = None
    climb: int | None = None
    controls: list[str] | None = None


class EventPayload(BaseModel):
    classes: list[ClassPayload]
    courses: list[CoursePayload] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class AnalyzeRequest(BaseModel):
    event: EventPayload
    repair: bool | None = None
    fastest_splits_count: int = 3


class ChartRequest(BaseModel):
    event: EventPayload
    class_names: list[str]
    chart_type: str = "splits_graph"
    indexes: list[int] | None = None
    """Indexes of the results to plot, in class-set order; all if omitted."""
    reference: Union[Literal["fastest", "winner"], float] = "fastest"
    """``fastest``, ``winner``, or a percentage to add to the fastest times."""
    leg_index: int | None = None
    repair: bool | None = None


class ReportRequest(BaseModel):
    event: EventPayload
    class_names: list[str]
    commentary: bool = True
    repair: bool | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    status: str
    version: str


class FastestSplit(BaseModel):
    name: str
    split: TimeValue


class ResultAnalysis(BaseModel):
    name: str
    class_name: str | None
    total_time: TimeValue
    cum_times: list[TimeValue]
    split_times: list[TimeValue]
    cum_ranks: list[int | None]
    split_ranks: list[int | None]
    time_losses: list[TimeValue] | None


class ClassAnalysis(BaseModel):
    class_name: str
    num_controls: int
    has_dubious_data: bool
    fastest_cum_times: list[TimeValue] | None
    winner_cum_times: list[TimeValue] | None
    fastest_splits: list[list[FastestSplit]]
    """Per control from the first control to the finish."""
    results: list[ResultAnalysis]


class AnalyzeResponse(BaseModel):
    classes: list[ClassAnalysis]
    warnings: list[str] = Field(default_factory=list)


class IndexRange(BaseModel):
    start: int
    end: int


class ChartColumn(BaseModel):
    x: TimeValue
    ys: list[TimeValue]


class ChartResponse(BaseModel):
    data_columns: list[ChartColumn]
    result_names: list[str]
    num_controls: int | None
    x_extent: list[TimeValue]
    y_extent: list[float]
    dubious_times_info: list[list[IndexRange]]


class HighlightModel(BaseModel):
    result_name: str
    control_index: int
    severity: str
    text: str


class ReportResponse(BaseModel):
    title: str
    markdown: str
    summary: str
    highlights: list[HighlightModel]
