"""Shared fixtures: an in-memory blob store, a fixed clock and a scripted transport."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import pytest

from quadrant_planner.config import AppSettings, LlmSettings, StorageSettings
from quadrant_planner.core import EventStore
from quadrant_planner.data import MemoryBlobStore
from quadrant_planner.domain import Event, EventDetails
from quadrant_planner.llm import TransportErrorKind, TransportResult
from quadrant_planner.services import AppContext

NOW = datetime(2025, 6, 18, 9, 0)
TODAY = date(2025, 6, 18)


class FakeTransport:
    """Replays scripted replies and records every message list it was sent."""

    def __init__(self, replies: Sequence[Union[str, TransportResult, Any]] = ()) -> None:
        self.replies: List[Any] = list(replies)
        self.calls: List[List[Dict[str, str]]] = []

    def queue(self, *replies: Any) -> None:
        self.replies.extend(replies)

    def send(self, messages):
        self.calls.append([dict(message) for message in messages])
        if not self.replies:
            raise AssertionError("FakeTransport ran out of scripted replies")
        reply = self.replies.pop(0)
        if isinstance(reply, TransportResult):
            return reply
        if not isinstance(reply, str):
            reply = json.dumps(reply, ensure_ascii=False)
        return TransportResult(content=reply)


def transport_failure(kind: TransportErrorKind = TransportErrorKind.RATE_LIMITED) -> TransportResult:
    return TransportResult.failure(kind, code="rate_limit_exceeded")


def make_event(event_id: str, name: str, **overrides: Any) -> Event:
    values: Dict[str, Any] = {
        "importance": 0.5,
        "urgency": 0.5,
        "size": 50,
        "start_time": "2025-06-18 10:00",
        "end_time": "2025-06-18 19:00",
    }
    values.update(overrides)
    return Event(id=event_id, name=name, **values)


@pytest.fixture
def blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def store(blob_store: MemoryBlobStore) -> EventStore:
    return EventStore(blob_store, clock=lambda: NOW)


@pytest.fixture
def weekly_sync(blob_store: MemoryBlobStore, store: EventStore) -> Event:
    """A stored event loaded straight from the blob, so no urgency is derived."""

    event = make_event(
        "evt_x",
        "Weekly report meeting",
        importance=0.7,
        urgency=0.6,
        details=EventDetails(location="Room B", estimated_hours=1.5),
    )
    blob_store.set("schedule_events", [event.to_record()])
    store.reload()
    return event


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def app_settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        llm=LlmSettings(
            api_key="sk-test-1234567890",
            model="deepseek-chat",
            base_url="https://api.example.com/v1",
            temperature=0.7,
            top_p=1.0,
            timeout_seconds=30.0,
        ),
        storage=StorageSettings(
            data_dir=tmp_path,
            events_key="schedule_events",
            settings_key="app_settings",
            seed_events=False,
        ),
    )


@pytest.fixture
def context(app_settings: AppSettings, fake_transport: FakeTransport) -> AppContext:
    return AppContext(settings=app_settings, blob_store=MemoryBlobStore(), transport=fake_transport)
