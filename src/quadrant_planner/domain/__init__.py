"""Domain models for the quadrant planner."""

from __future__ import annotations

from .enums import CommandStatus, Intent, Operation
from .models import DEFAULT_COLOR, Event, EventDetails, clamp, parse_timestamp

__all__ = [
    "DEFAULT_COLOR",
    "CommandStatus",
    "Event",
    "EventDetails",
    "Intent",
    "Operation",
    "clamp",
    "parse_timestamp",
]
