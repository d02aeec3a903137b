"""Chat-completion transport."""

from __future__ import annotations

from .transport import ChatTransport, TransportErrorKind, TransportResult

__all__ = ["ChatTransport", "TransportErrorKind", "TransportResult"]
