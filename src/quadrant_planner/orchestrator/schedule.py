from __future__ import annotations

from typing import Iterable, List

from ..domain import Event, parse_timestamp

EMPTY_SCHEDULE = "There are no scheduled events."

_LEVELS = ((0.8, "very high"), (0.6, "high"), (0.4, "medium"), (0.2, "low"))


def _level(value: float) -> str:
    for threshold, label in _LEVELS:
        if value >= threshold:
            return label
    return "very low"


def importance_label(importance: float) -> str:
    return _level(importance)


def urgency_label(urgency: float) -> str:
    return _level(urgency)


def format_time(value: str) -> str:
    """Render a timestamp as ``2025-06-20 (Friday) 14:00``; unreadable text is returned as given."""

    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.strftime("%Y-%m-%d (%A) %H:%M")


def describe_event(event: Event, index: int) -> str:
    parts: List[str] = [f"{index + 1}. [{event.name}]"]

    if event.start_time and event.end_time:
        parts.append(f"time: {format_time(event.start_time)} to {format_time(event.end_time)}")
    elif event.start_time:
        parts.append(f"starts: {format_time(event.start_time)}")

    parts.append(f"importance: {importance_label(event.importance)}, urgency: {urgency_label(event.urgency)}")

    details = event.details
    if details.location:
        parts.append(f"location: {details.location}")
    if details.estimated_hours:
        parts.append(f"estimated: {details.estimated_hours:g} hours")
    if details.notes:
        escaped = details.notes.replace("\n", "\\n")
        parts.append(f'notes: "{escaped}"')

    return "; ".join(parts)


def describe_schedule(events: Iterable[Event]) -> str:
    """Deterministic plain-text summary of the schedule, used as model context.

    Events are listed by descending importance, then descending urgency, and
    followed by a high/medium/low priority distribution.
    """

    items = list(events)
    if not items:
        return EMPTY_SCHEDULE

    noun = "event" if len(items) == 1 else "events"
    lines: List[str] = [f"There are {len(items)} scheduled {noun}:", ""]

    ordered = sorted(items, key=lambda item: (-item.importance, -item.urgency))
    lines.extend(describe_event(event, index) for index, event in enumerate(ordered))
    lines.append("")

    high = sum(1 for item in items if item.importance >= 0.7 and item.urgency >= 0.7)
    medium = sum(1 for item in items if item.importance >= 0.4 or item.urgency >= 0.4) - high
    low = len(items) - high - medium

    summary = []
    if high > 0:
        summary.append(f"high priority {high}")
    if medium > 0:
        summary.append(f"medium priority {medium}")
    if low > 0:
        summary.append(f"low priority {low}")
    if summary:
        lines.append(f"Priority distribution: {', '.join(summary)}.")

    return "\n".join(lines)


__all__ = [
    "EMPTY_SCHEDULE",
    "describe_event",
    "describe_schedule",
    "format_time",
    "importance_label",
    "urgency_label",
]
