from __future__ import annotations

import colorsys
from datetime import datetime
from typing import Optional

from ..domain.models import Event, clamp

CALM_HUE = 210.0
ALARM_HUE = 0.0
CALM_LIGHTNESS = 0.60
ALARM_LIGHTNESS = 0.40
SATURATION = 0.70


def compute_urgency(
    importance: float,
    remaining_workload: float,
    remaining_hours: float,
    estimated_hours: float,
) -> float:
    """Time pressure in [0, 1] from importance, workload left and time left.

    A passed deadline or a non-positive estimate is maximally urgent; a task
    with no workload left is not urgent at all.
    """

    if remaining_hours <= 0:
        return 1.0
    if estimated_hours <= 0:
        return 1.0
    if remaining_workload <= 0:
        return 0.0
    raw = importance * (remaining_workload / 100.0) * (estimated_hours / remaining_hours)
    return clamp(raw, 0.0, 1.0)


def urgency_color(urgency: float) -> str:
    """Blue for calm, red for alarm, darker as urgency grows."""

    level = clamp(float(urgency), 0.0, 1.0)
    hue = CALM_HUE + (ALARM_HUE - CALM_HUE) * level
    lightness = CALM_LIGHTNESS + (ALARM_LIGHTNESS - CALM_LIGHTNESS) * level
    red, green, blue = colorsys.hls_to_rgb(hue / 360.0, lightness, SATURATION)
    return "#{:02x}{:02x}{:02x}".format(round(red * 255), round(green * 255), round(blue * 255))


def derive_urgency(event: Event, now: datetime) -> Optional[float]:
    ends_at = event.ends_at
    if ends_at is None:
        return None
    remaining_hours = (ends_at - now).total_seconds() / 3600.0
    if remaining_hours <= 0:
        return 1.0
    estimated = event.details.estimated_hours
    if estimated is None:
        starts_at = event.starts_at
        if starts_at is None:
            return None
        estimated = (ends_at - starts_at).total_seconds() / 3600.0
    return compute_urgency(event.importance, event.size, remaining_hours, estimated)


def refresh_derived(event: Event, now: datetime) -> bool:
    """Recompute urgency and color in place. Returns ``False`` when timing is unknown."""

    urgency = derive_urgency(event, now)
    if urgency is None:
        return False
    event.urgency = urgency
    event.color = urgency_color(urgency)
    return True


__all__ = ["compute_urgency", "derive_urgency", "refresh_derived", "urgency_color"]
