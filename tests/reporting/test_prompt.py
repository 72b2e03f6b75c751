"""Tests for PromptBuilder."""

from __future__ import annotations

from splits_analysis.reporting.models import ClassReport, ControlCell, ResultLine
from splits_analysis.reporting.prompt import PromptBuilder, estimate_tokens

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _line(position, name, total, losses, status="") -> ResultLine:
    cells = [ControlCell(cum_time=None, split_time=None, time_loss=loss) for loss in losses]
    return ResultLine(position, name, "", total, status, cells)


def _make_report(results=None) -> ClassReport:
    if results is None:
        results = [
            _line(1, "John Smith", 595, [-2, 19, 5, -3]),
            _line(2, "Fred Brown", 596, [12, -12, 1, 0]),
            _line(None, "Sam Green", None, [float("nan")] * 4, status="mp"),
        ]
    return ClassReport(["M21"], "A", 3, [], results)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_system_prompt_demands_json():
    assert "JSON" in PromptBuilder().system_prompt


def test_prompt_contains_class_and_results():
    prompt = PromptBuilder().build(_make_report())
    assert "Results for M21 (3 controls)" in prompt
    assert "[1] John Smith: total 09:55" in prompt
    assert "[mp] Sam Green: total -----" in prompt


def test_prompt_lists_only_positive_losses():
    prompt = PromptBuilder().build(_make_report())
    assert "losses 2:+19s, 3:+5s" in prompt
    assert "losses 1:+12s, 3:+1s" in prompt
    assert "-12s" not in prompt


def test_prompt_limited_to_leading_results():
    results = [_line(i, f"Runner {i}", 600 + i, [0, 0, 0, 0]) for i in range(1, 13)]
    prompt = PromptBuilder().build(_make_report(results))
    assert "Runner 10" in prompt
    assert "Runner 11" not in prompt


def test_build_messages():
    builder = PromptBuilder()
    system_prompt, user_prompt = builder.build_messages(_make_report())
    assert system_prompt == builder.system_prompt
    assert "John Smith" in user_prompt


def test_estimate_tokens():
    assert estimate_tokens("abcd" * 10) == 10
    assert estimate_tokens("") == 0
