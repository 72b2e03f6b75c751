"""Tests for CommentaryClient, response parsing, and fallback commentary."""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock, patch

from splits_analysis.reporting.llm_client import (
    CommentaryClient,
    fallback_commentary,
    parse_llm_response,
)
from splits_analysis.reporting.models import ClassReport, ControlCell, ResultLine

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _line(position, name, total, losses, status="") -> ResultLine:
    cells = [ControlCell(cum_time=None, split_time=None, time_loss=loss) for loss in losses]
    return ResultLine(position, name, "", total, status, cells)


def _make_report() -> ClassReport:
    return ClassReport(
        class_names=["M21"],
        course_name="A",
        num_controls=3,
        control_codes=[],
        results=[
            _line(1, "John Smith", 595, [-2, 19, 5, -3]),
            _line(2, "Fred Brown", 596, [12, -12, 1, 0]),
            _line(3, "Bill Jones", 663, [5, -11, 75, 5]),
            _line(None, "Sam Green", None, [None] * 4, status="mp"),
        ],
        winner_name="John Smith",
    )


def _make_openai_response(content: str, prompt_tokens: int = 100, completion_tokens: int = 50):
    mock = MagicMock()
    mock.choices[0].message.content = content
    mock.usage.prompt_tokens = prompt_tokens
    mock.usage.completion_tokens = completion_tokens
    mock.usage.total_tokens = prompt_tokens + completion_tokens
    return mock


# ---------------------------------------------------------------------------
# parse_llm_response tests
# ---------------------------------------------------------------------------


def test_parse_llm_response_valid():
    raw = json.dumps({
        "summary": "John Smith won narrowly.",
        "highlights": [
            {"result_name": "Bill Jones", "control_index": 3, "severity": "high", "text": "Big loss."},
            {"result_name": "John Smith", "control_index": 2, "severity": "low", "text": "Hesitated."},
        ],
    })
    summary, highlights = parse_llm_response(raw)
    assert summary == "John Smith won narrowly."
    assert len(highlights) == 2
    assert highlights[0].result_name == "Bill Jones"
    assert highlights[0].control_index == 3
    assert highlights[1].severity == "low"


def test_parse_llm_response_invalid_json_returns_empty():
    assert parse_llm_response("not json {{") == ("", [])


def test_parse_llm_response_missing_fields_returns_empty():
    summary, highlights = parse_llm_response(json.dumps({"highlights": [{"result_name": "x"}]}))
    assert summary == ""
    assert highlights == []


def test_parse_llm_response_invalid_severity_normalized_to_medium():
    raw = json.dumps({
        "summary": "ok",
        "highlights": [{"result_name": "x", "control_index": 1, "severity": "EXTREME", "text": "y"}],
    })
    _, highlights = parse_llm_response(raw)
    assert highlights[0].severity == "medium"


# ---------------------------------------------------------------------------
# fallback_commentary tests
# ---------------------------------------------------------------------------


def test_fallback_summary_names_winner_and_margin():
    summary, _ = fallback_commentary(_make_report())
    assert summary == "John Smith won M21 in 09:55, 00:01 ahead of Fred Brown."


def test_fallback_highlights_biggest_loss_per_result():
    _, highlights = fallback_commentary(_make_report())
    assert [(h.result_name, h.control_index, h.severity) for h in highlights] == [
        ("Bill Jones", 3, "high"),
        ("John Smith", 2, "low"),
        ("Fred Brown", 1, "low"),
    ]
    assert highlights[0].text == "Lost about 01:15 at control 3."


def test_fallback_when_nobody_completed():
    report = ClassReport(["M21"], None, 3, [], [_line(None, "Sam Green", None, [None] * 4, status="mp")])
    assert fallback_commentary(report) == ("No competitor completed M21.", [])


# ---------------------------------------------------------------------------
# CommentaryClient tests (mocked)
# ---------------------------------------------------------------------------


def test_client_disabled_without_key(monkeypatch):
    monkeypatch.delenv("SPLITS_LLM_API_KEY", raising=False)
    client = CommentaryClient()
    assert not client.enabled
    assert client.generate("sys", "user") == ("", {})


def test_disabled_client_uses_fallback(monkeypatch):
    monkeypatch.delenv("SPLITS_LLM_API_KEY", raising=False)
    report = CommentaryClient().analyze(_make_report())
    assert report.summary.startswith("John Smith won M21")
    assert report.highlights[0].result_name == "Bill Jones"


def test_generate_success_returns_text_and_usage():
    with patch("splits_analysis.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        payload = json.dumps({"summary": "ok", "highlights": []})
        mock_client.chat.completions.create.return_value = _make_openai_response(
            payload, prompt_tokens=80, completion_tokens=40
        )

        client = CommentaryClient(api_key="test-key")
        text, usage = client.generate("sys", "user")

    assert text == payload
    assert usage == {"prompt_tokens": 80, "completion_tokens": 40, "total_tokens": 120}


def test_generate_logs_usage(caplog):
    with patch("splits_analysis.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        mock_client.chat.completions.create.return_value = _make_openai_response(
            "{}", prompt_tokens=50, completion_tokens=20
        )

        with caplog.at_level(logging.INFO, logger="splits_analysis.reporting.llm_client"):
            client = CommentaryClient(api_key="test-key")
            client.generate("sys", "user")

    assert any("50" in r.message and "20" in r.message for r in caplog.records)


def test_generate_api_error_returns_empty():
    with patch("splits_analysis.reporting.llm_client.OpenAI") as MockOpenAI:
        from openai import OpenAIError

        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        mock_client.chat.completions.create.side_effect = OpenAIError("server error")

        client = CommentaryClient(api_key="test-key")
        text, usage = client.generate("sys", "user")

    assert text == ""
    assert usage == {}


def test_analyze_applies_commentary_from_llm():
    with patch("splits_analysis.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        payload = json.dumps({
            "summary": "A one-second win.",
            "highlights": [
                {"result_name": "Bill Jones", "control_index": 3, "severity": "high", "text": "Lost 75s."},
                {"result_name": "Nobody", "control_index": 1, "severity": "low", "text": "Made up."},
            ],
        })
        mock_client.chat.completions.create.return_value = _make_openai_response(payload)

        report = CommentaryClient(api_key="test-key").analyze(_make_report())

    assert report.summary == "A one-second win."
    assert [h.result_name for h in report.highlights] == ["Bill Jones"]


def test_analyze_falls_back_on_api_failure():
    with patch("splits_analysis.reporting.llm_client.OpenAI") as MockOpenAI:
        from openai import OpenAIError

        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        mock_client.chat.completions.create.side_effect = OpenAIError("down")

        report = CommentaryClient(api_key="test-key").analyze(_make_report())

    assert report.summary.startswith("John Smith won M21")
    assert len(report.highlights) == 3


def test_analyze_falls_back_on_unparseable_reply():
    with patch("splits_analysis.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        mock_client.chat.completions.create.return_value = _make_openai_response("Sorry, I can't help.")

        report = CommentaryClient(api_key="test-key").analyze(_make_report())

    assert report.summary.startswith("John Smith won M21")
