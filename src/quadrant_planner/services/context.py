from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..config import AppSettings, LlmSettings, get_settings
from ..core import EventStore
from ..data import BlobStore, JsonFileBlobStore, seed_events
from ..llm import ChatTransport
from ..orchestrator import CommandPipeline

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Aggregate root wiring settings, persistence, transport and pipeline together."""

    settings: AppSettings = field(default_factory=get_settings)
    blob_store: Optional[BlobStore] = None
    transport: Optional[ChatTransport] = None
    store: EventStore = field(init=False)
    pipeline: CommandPipeline = field(init=False)

    def __post_init__(self) -> None:
        if self.blob_store is None:
            self.blob_store = JsonFileBlobStore(self.settings.storage.data_dir)
        self.store = EventStore(
            self.blob_store,
            key=self.settings.storage.events_key,
            seed=seed_events() if self.settings.storage.seed_events else None,
        )
        if self.transport is None:
            self.transport = ChatTransport(config_loader=self.load_llm_settings)
        self.pipeline = CommandPipeline(self.transport, self.store)

    def load_llm_settings(self) -> LlmSettings:
        try:
            stored = self.blob_store.get(self.settings.storage.settings_key)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to read transport settings")
            stored = None
        return self.settings.llm.with_overrides(stored if isinstance(stored, dict) else None)

    def save_llm_settings(self, changes: Mapping[str, Any]) -> LlmSettings:
        key = self.settings.storage.settings_key
        stored = self.blob_store.get(key)
        merged = dict(stored) if isinstance(stored, dict) else {}
        merged.update({name: value for name, value in changes.items() if value is not None})
        self.blob_store.set(key, merged)
        logger.info("Saved transport settings: %s", sorted(merged))
        return self.transport.refresh_config()
