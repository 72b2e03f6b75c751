"""POST /api/analyze."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from tests.web.conftest import make_event


def test_analyze_success(client):
    resp = client.post("/api/analyze", json={"event": make_event(), "repair": True})
    assert resp.status_code == 200
    data = resp.json()
    assert data["warnings"] == []
    m21 = data["classes"][0]
    assert m21["class_name"] == "M21"
    assert m21["num_controls"] == 3
    assert not m21["has_dubious_data"]
    assert m21["fastest_cum_times"] == [0, 65, 262, 461, 561]
    assert m21["winner_cum_times"] == [0, 65, 286, 495, 595]
    assert [r["name"] for r in m21["results"]] == ["John Smith", "Fred Brown", "Bill Jones"]


def test_analyze_ranks(client):
    resp = client.post("/api/analyze", json={"event": make_event(), "repair": True})
    john = resp.json()["classes"][0]["results"][0]
    assert john["cum_ranks"] == [None, 1, 2, 3, 1]
    assert john["split_ranks"] == [None, 1, 3, 2, 1]
    assert len(john["time_losses"]) == 4


def test_analyze_fastest_splits(client):
    resp = client.post("/api/analyze", json={"event": make_event(), "fastest_splits_count": 2})
    fastest_splits = resp.json()["classes"][0]["fastest_splits"]
    assert len(fastest_splits) == 4
    assert fastest_splits[2] == [
        {"name": "Bill Jones", "split": 199},
        {"name": "John Smith", "split": 209},
    ]


def test_analyze_dubious_times_encoded(client):
    """Times removed by repair come back as the string "NaN"."""
    event = make_event()
    event["classes"][0]["results"][1]["cum_times"] = [0, 81, 81, 490, 596]
    resp = client.post("/api/analyze", json={"event": event, "repair": True})
    m21 = resp.json()["classes"][0]
    assert m21["has_dubious_data"]
    fred = next(r for r in m21["results"] if r["name"] == "Fred Brown")
    assert fred["cum_times"][2] == "NaN"
    assert fred["time_losses"] == ["NaN"] * 4


def test_analyze_without_repair_keeps_times(client):
    event = make_event()
    event["classes"][0]["results"][1]["cum_times"] = [0, 81, 81, 490, 596]
    resp = client.post("/api/analyze", json={"event": event, "repair": False})
    m21 = resp.json()["classes"][0]
    assert not m21["has_dubious_data"]
    fred = next(r for r in m21["results"] if r["name"] == "Fred Brown")
    assert fred["cum_times"] == [0, 81, 81, 490, 596]


def test_analyze_wrong_number_of_times_returns_422(client):
    event = make_event()
    event["classes"][0]["results"][0]["cum_times"] = [0, 65, 286, 595]
    resp = client.post("/api/analyze", json={"event": event})
    assert resp.status_code == 422


def test_analyze_value_error_returns_422(client):
    mock_svc = MagicMock()
    mock_svc.analyze.side_effect = ValueError("bad times")
    with patch("splits_analysis.web.app.AnalysisService", return_value=mock_svc):
        resp = client.post("/api/analyze", json={"event": make_event()})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "bad times"


def test_analyze_unexpected_error_returns_500(client):
    mock_svc = MagicMock()
    mock_svc.analyze.side_effect = RuntimeError("boom")
    with patch("splits_analysis.web.app.AnalysisService", return_value=mock_svc):
        resp = client.post("/api/analyze", json={"event": make_event()})
    assert resp.status_code == 500


def test_analyze_missing_required_field_returns_422(client):
    resp = client.post("/api/analyze", json={"repair": True})
    assert resp.status_code == 422
