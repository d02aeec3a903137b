"""Application services wiring the store, transport and pipeline."""

from __future__ import annotations

from .context import AppContext

__all__ = ["AppContext"]
