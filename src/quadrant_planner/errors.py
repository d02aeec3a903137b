from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .llm.transport import TransportErrorKind


class QuadrantPlannerError(RuntimeError):
    """Base class for errors surfaced by the command pipeline."""


class TransportError(QuadrantPlannerError):
    """Raised when the chat-completion endpoint reports a failure."""

    def __init__(self, message: str, *, kind: Optional["TransportErrorKind"] = None) -> None:
        super().__init__(message)
        self.kind = kind


class ParseError(QuadrantPlannerError):
    """Raised when a model response does not have the expected JSON shape."""

    def __init__(self, message: str, *, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class IntentParseError(ParseError):
    pass


class CommandParseError(ParseError):
    pass


class ValidationError(QuadrantPlannerError):
    """Raised when an event or operation is missing a required field."""


class UnknownIntentError(QuadrantPlannerError):
    pass


__all__ = [
    "CommandParseError",
    "IntentParseError",
    "ParseError",
    "QuadrantPlannerError",
    "TransportError",
    "UnknownIntentError",
    "ValidationError",
]
