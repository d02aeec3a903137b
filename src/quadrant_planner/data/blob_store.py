from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import orjson

from ..core.config import DATA_DIR, ensure_data_dir

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Key-value store holding one JSON document per key."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class JsonFileBlobStore:
    """Keeps each key as ``<key>.json`` inside the data directory."""

    def __init__(self, directory: Optional[Path] = None) -> None:
        self._directory = ensure_data_dir(directory or DATA_DIR)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path_for(key)
        if not path.exists():
            return None
        raw = path.read_bytes()
        if not raw.strip():
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("Ignoring unreadable blob %s", path)
            return None

    def set(self, key: str, value: Any) -> None:
        payload = orjson.dumps(value, option=orjson.OPT_INDENT_2)
        self._path_for(key).write_bytes(payload + b"\n")


class MemoryBlobStore:
    """In-process blob store, mostly for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._blobs: Dict[str, Any] = deepcopy(initial or {})

    def get(self, key: str) -> Optional[Any]:
        if key not in self._blobs:
            return None
        return deepcopy(self._blobs[key])

    def set(self, key: str, value: Any) -> None:
        # Round-trip through orjson so unserializable payloads fail the same way as on disk.
        self._blobs[key] = orjson.loads(orjson.dumps(value))


__all__ = ["BlobStore", "JsonFileBlobStore", "MemoryBlobStore"]
