"""Shared fixtures for web tests."""

from __future__ import annotations

import copy

import pytest
from fastapi.testclient import TestClient

from splits_analysis.web.app import app

_EVENT = {
    "classes": [
        {
            "name": "M21",
            "num_controls": 3,
            "results": [
                {"name": "John Smith", "club": "Sunny Club", "start_time": 36000, "cum_times": [0, 65, 286, 495, 595]},
                {"name": "Fred Brown", "start_time": 36060, "cum_times": [0, 81, 278, 490, 596]},
                {"name": "Bill Jones", "start_time": 36120, "cum_times": [0, 78, 287, 486, 603]},
            ],
        }
    ],
    "courses": [
        {"name": "A", "class_names": ["M21"], "length": 4.1, "climb": 140, "controls": ["235", "212", "189"]}
    ],
}


@pytest.fixture
def client():
    """FastAPI test client."""
    with TestClient(app) as c:
        yield c


def make_event() -> dict:
    """Build an event document with one three-control class of three results."""
    return copy.deepcopy(_EVENT)


def make_relay_event() -> dict:
    """Build an event document with one two-leg relay class."""
    return {
        "classes": [
            {
                "name": "Relay",
                "num_controls": 3,
                "leg_controls": [1, 1],
                "results": [
                    {
                        "name": "Team A",
                        "legs": [
                            {"name": "Ann", "start_time": 36000, "cum_times": [0, 60, 160]},
                            {"name": "Alan", "cum_times": [0, 70, 160]},
                        ],
                    },
                    {
                        "name": "Team B",
                        "legs": [
                            {"name": "Beth", "start_time": 36000, "cum_times": [0, 50, 170]},
                            {"name": "Bob", "cum_times": [0, 80, 180]},
                        ],
                    },
                ],
            }
        ]
    }
