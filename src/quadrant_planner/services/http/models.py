from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...config import LlmSettings


class CommandRequest(BaseModel):
    text: str
    schedule: Optional[str] = Field(default=None)


class EventCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None)
    name: str
    importance: float = Field(default=0.5)
    size: float = Field(default=100.0)
    start_time: str = Field(default="", alias="startTime")
    end_time: str = Field(default="", alias="endTime")
    details: Dict[str, Any] = Field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SettingsUpdateRequest(BaseModel):
    base_url: Optional[str] = Field(default=None)
    api_key: Optional[str] = Field(default=None)
    model: Optional[str] = Field(default=None)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    timeout_seconds: Optional[float] = Field(default=None, gt=0.0)


class SettingsPayload(BaseModel):
    base_url: str
    model: str
    temperature: float
    top_p: float
    timeout_seconds: float
    api_key_set: bool
    api_key_hint: Optional[str] = Field(default=None)

    @classmethod
    def from_settings(cls, settings: LlmSettings) -> "SettingsPayload":
        key = settings.api_key or ""
        return cls(
            base_url=settings.base_url,
            model=settings.model,
            temperature=settings.temperature,
            top_p=settings.top_p,
            timeout_seconds=settings.timeout_seconds,
            api_key_set=bool(key),
            api_key_hint=f"...{key[-4:]}" if len(key) >= 8 else None,
        )
