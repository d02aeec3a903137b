from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from ..core.config import DATA_DIR, EVENTS_KEY, SETTINGS_KEY

load_dotenv()

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_MODEL = "deepseek-chat"

# Keys written by older settings pages, mapped onto LlmSettings fields.
_LEGACY_KEYS = {
    "baseURL": "base_url",
    "key": "api_key",
    "appointModel": "model",
}


@dataclass(frozen=True)
class LlmSettings:
    api_key: Optional[str]
    model: str
    base_url: str
    temperature: float
    top_p: float
    timeout_seconds: float

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.model)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.api_key:
            missing.append("OPENAI_API_KEY")
        if not self.model:
            missing.append("OPENAI_MODEL")
        return missing

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "LlmSettings":
        """Overlay a stored settings blob. Unknown keys and unusable values are ignored."""

        if not overrides:
            return self
        known = {item.name for item in fields(self)}
        changes: dict[str, Any] = {}
        for raw_key, value in overrides.items():
            key = _LEGACY_KEYS.get(raw_key, raw_key)
            if key not in known or value is None:
                continue
            if key in {"temperature", "top_p", "timeout_seconds"}:
                try:
                    changes[key] = float(value)
                except (TypeError, ValueError):
                    continue
            elif isinstance(value, str):
                changes[key] = value.strip()
        if "base_url" in changes:
            changes["base_url"] = _normalize_base_url(changes["base_url"]) or self.base_url
        return replace(self, **changes)


@dataclass(frozen=True)
class StorageSettings:
    data_dir: Path
    events_key: str
    settings_key: str
    seed_events: bool


@dataclass(frozen=True)
class AppSettings:
    llm: LlmSettings
    storage: StorageSettings


def _normalize_base_url(url: str) -> str:
    # The OpenAI client appends /chat/completions itself.
    trimmed = url.strip().rstrip("/")
    suffix = "/chat/completions"
    if trimmed.endswith(suffix):
        trimmed = trimmed[: -len(suffix)]
    return trimmed


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _flag_from_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    llm = LlmSettings(
        api_key=os.getenv("OPENAI_API_KEY"),
        model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
        base_url=_normalize_base_url(os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL)),
        temperature=_float_from_env("QUADRANT_LLM_TEMPERATURE", 0.7),
        top_p=_float_from_env("QUADRANT_LLM_TOP_P", 1.0),
        timeout_seconds=_float_from_env("QUADRANT_LLM_TIMEOUT_SECONDS", 3600.0),
    )

    storage = StorageSettings(
        data_dir=Path(os.getenv("QUADRANT_DATA_DIR") or DATA_DIR),
        events_key=os.getenv("QUADRANT_EVENTS_KEY", EVENTS_KEY),
        settings_key=os.getenv("QUADRANT_SETTINGS_KEY", SETTINGS_KEY),
        seed_events=_flag_from_env("QUADRANT_SEED_EVENTS", True),
    )

    return AppSettings(llm=llm, storage=storage)
