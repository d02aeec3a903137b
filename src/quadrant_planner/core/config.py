from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Quadrant Planner"
APP_AUTHOR = "QuadrantPlanner"
DATA_DIR = Path(os.getenv("QUADRANT_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))
LOG_FILE = DATA_DIR / "quadrant_planner.log"

EVENTS_KEY = "schedule_events"
SETTINGS_KEY = "app_settings"


def ensure_data_dir(path: Path | None = None) -> Path:
    target = path or DATA_DIR
    target.mkdir(parents=True, exist_ok=True)
    return target
