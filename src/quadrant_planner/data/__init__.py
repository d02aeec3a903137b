"""Persistence backends and seed data."""

from __future__ import annotations

from .blob_store import BlobStore, JsonFileBlobStore, MemoryBlobStore
from .seed import seed_events

__all__ = ["BlobStore", "JsonFileBlobStore", "MemoryBlobStore", "seed_events"]
