from __future__ import annotations

from typing import List

from ..domain import Event, EventDetails


def seed_events() -> List[Event]:
    """Starter events shown on first launch, spread over all four quadrants."""

    return [
        Event(
            id="evt_001",
            name="Project report",
            size=80,
            color="#ff6b6b",
            importance=0.85,
            urgency=0.9,
            start_time="2025-06-20 14:00",
            end_time="2025-06-20 16:00",
            details=EventDetails(location="Meeting room A", notes="Prepare slides and demo", estimated_hours=2),
        ),
        Event(
            id="evt_002",
            name="Team weekly sync",
            size=60,
            color="#4ecdc4",
            importance=0.7,
            urgency=0.6,
            start_time="2025-06-18 10:00",
            end_time="2025-06-18 11:30",
            details=EventDetails(location="Online", notes="Review project progress"),
        ),
        Event(
            id="evt_003",
            name="Tidy up documents",
            size=40,
            color="#ffe66d",
            importance=0.4,
            urgency=0.3,
            start_time="2025-06-19 09:00",
            end_time="2025-06-19 12:00",
        ),
    ]
