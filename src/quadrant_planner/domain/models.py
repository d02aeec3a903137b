from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

DEFAULT_COLOR = "#4CAF50"


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _as_float(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse the textual timestamps events carry. Returns ``None`` when unreadable."""

    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    # Naive and aware timestamps cannot be compared; everything is treated as local wall time.
    return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed


@dataclass(slots=True)
class EventDetails:
    location: Optional[str] = None
    notes: Optional[str] = None
    estimated_hours: Optional[float] = None

    def __post_init__(self) -> None:
        if self.estimated_hours is not None:
            hours = _as_float(self.estimated_hours, 0.0)
            self.estimated_hours = hours if hours > 0 else None

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]) -> "EventDetails":
        record = record or {}
        return cls(
            location=record.get("location") or None,
            notes=record.get("notes") or None,
            estimated_hours=record.get("estimatedHours"),
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        if self.location:
            record["location"] = self.location
        if self.notes:
            record["notes"] = self.notes
        if self.estimated_hours is not None:
            record["estimatedHours"] = self.estimated_hours
        return record


@dataclass(slots=True)
class Event:
    id: str
    name: str
    importance: float = 0.5
    urgency: float = 0.5
    size: float = 100.0
    color: str = DEFAULT_COLOR
    start_time: str = ""
    end_time: str = ""
    details: EventDetails = field(default_factory=EventDetails)

    def __post_init__(self) -> None:
        self.normalize()

    def normalize(self) -> None:
        """Clamp scores back into their documented ranges."""

        self.importance = clamp(_as_float(self.importance, 0.5), 0.0, 1.0)
        self.urgency = clamp(_as_float(self.urgency, 0.5), 0.0, 1.0)
        self.size = clamp(_as_float(self.size, 100.0), 0.0, 100.0)

    @property
    def starts_at(self) -> Optional[datetime]:
        return parse_timestamp(self.start_time)

    @property
    def ends_at(self) -> Optional[datetime]:
        return parse_timestamp(self.end_time)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        return cls(
            id=str(record.get("id") or ""),
            name=str(record.get("name") or ""),
            importance=record.get("importance", 0.5),
            urgency=record.get("urgency", 0.5),
            size=record.get("size", 100.0),
            color=record.get("color") or DEFAULT_COLOR,
            start_time=str(record.get("startTime") or ""),
            end_time=str(record.get("endTime") or ""),
            details=EventDetails.from_record(record.get("details")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "color": self.color,
            "importance": self.importance,
            "urgency": self.urgency,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "details": self.details.to_record(),
        }
