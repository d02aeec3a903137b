from __future__ import annotations

from itertools import permutations

import pytest

from conftest import make_event
from quadrant_planner.domain import EventDetails
from quadrant_planner.orchestrator import EMPTY_SCHEDULE, describe_schedule
from quadrant_planner.orchestrator.schedule import format_time, importance_label, urgency_label


def test_empty_schedule_sentence():
    assert describe_schedule([]) == EMPTY_SCHEDULE


def test_orders_by_importance_then_urgency_for_any_input_order():
    events = [
        make_event("evt_a", "Alpha", importance=0.9, urgency=0.1),
        make_event("evt_b", "Bravo", importance=0.5, urgency=0.9),
        make_event("evt_c", "Charlie", importance=0.5, urgency=0.3),
        make_event("evt_d", "Delta", importance=0.1, urgency=1.0),
    ]
    expected = ["Alpha", "Bravo", "Charlie", "Delta"]

    for ordering in permutations(events):
        text = describe_schedule(ordering)
        positions = [text.index(f"[{name}]") for name in expected]
        assert positions == sorted(positions)
        assert "1. [Alpha]" in text
        assert "4. [Delta]" in text


@pytest.mark.parametrize(
    "value,label",
    [(0.95, "very high"), (0.8, "very high"), (0.6, "high"), (0.45, "medium"), (0.2, "low"), (0.19, "very low")],
)
def test_five_level_buckets(value, label):
    assert importance_label(value) == label
    assert urgency_label(value) == label


def test_event_line_contents():
    event = make_event(
        "evt_a",
        "Project report",
        importance=0.85,
        urgency=0.3,
        start_time="2025-06-20 14:00",
        end_time="2025-06-20 16:00",
        details=EventDetails(location="Room A", notes="slides\ndemo", estimated_hours=2),
    )

    line = describe_schedule([event]).splitlines()[2]

    assert line.startswith("1. [Project report]")
    assert "time: 2025-06-20 (Friday) 14:00 to 2025-06-20 (Friday) 16:00" in line
    assert "importance: very high, urgency: low" in line
    assert "location: Room A" in line
    assert "estimated: 2 hours" in line
    assert 'notes: "slides\\ndemo"' in line


def test_priority_distribution_summary():
    events = [
        make_event("evt_a", "High", importance=0.9, urgency=0.8),
        make_event("evt_b", "Medium", importance=0.5, urgency=0.1),
        make_event("evt_c", "Low", importance=0.1, urgency=0.1),
    ]

    text = describe_schedule(events)

    assert text.startswith("There are 3 scheduled events:")
    assert text.endswith("Priority distribution: high priority 1, medium priority 1, low priority 1.")


def test_zero_buckets_are_omitted():
    text = describe_schedule([make_event("evt_a", "Only", importance=0.9, urgency=0.9)])

    assert text.endswith("Priority distribution: high priority 1.")


def test_unreadable_times_are_kept_verbatim():
    assert format_time("next tuesday-ish") == "next tuesday-ish"
    assert format_time("2025-06-18T09:30:00Z") == "2025-06-18 (Wednesday) 09:30"
