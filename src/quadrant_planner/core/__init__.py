"""Core configuration constants and the event store."""

from .config import (
    APP_NAME,
    DATA_DIR,
    EVENTS_KEY,
    LOG_FILE,
    SETTINGS_KEY,
    ensure_data_dir,
)
from .event_store import EventStore
from .urgency import compute_urgency, derive_urgency, urgency_color

__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "EVENTS_KEY",
    "LOG_FILE",
    "SETTINGS_KEY",
    "EventStore",
    "compute_urgency",
    "derive_urgency",
    "ensure_data_dir",
    "urgency_color",
]
