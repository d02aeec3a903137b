from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import openai
from openai import OpenAI

from ..config import LlmSettings, get_settings
from ..errors import TransportError

logger = logging.getLogger(__name__)

Message = Mapping[str, str]


class TransportErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    AUTH_FAILED = "auth_failed"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    INVALID_PARAMS = "invalid_params"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    OVERLOADED = "overloaded"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    NOT_CONFIGURED = "not_configured"
    UNKNOWN = "unknown"


_STATUS_KINDS: Dict[int, TransportErrorKind] = {
    400: TransportErrorKind.BAD_REQUEST,
    401: TransportErrorKind.AUTH_FAILED,
    402: TransportErrorKind.INSUFFICIENT_BALANCE,
    422: TransportErrorKind.INVALID_PARAMS,
    429: TransportErrorKind.RATE_LIMITED,
    500: TransportErrorKind.SERVER_ERROR,
    503: TransportErrorKind.OVERLOADED,
}

KIND_MESSAGES: Dict[TransportErrorKind, str] = {
    TransportErrorKind.BAD_REQUEST: "Malformed request body",
    TransportErrorKind.AUTH_FAILED: "Invalid API key, authentication failed",
    TransportErrorKind.INSUFFICIENT_BALANCE: "Insufficient account balance",
    TransportErrorKind.INVALID_PARAMS: "Invalid request parameters",
    TransportErrorKind.RATE_LIMITED: "Rate limit reached (TPM or RPM), try again later",
    TransportErrorKind.SERVER_ERROR: "The API server had an internal error",
    TransportErrorKind.OVERLOADED: "The API server is overloaded",
    TransportErrorKind.TIMEOUT: "The request timed out, check the network connection",
    TransportErrorKind.CONNECTION: "Network connection failed, check the network settings",
    TransportErrorKind.NOT_CONFIGURED: "API key is not configured",
    TransportErrorKind.UNKNOWN: "Unknown error",
}


def kind_for_status(status: int) -> TransportErrorKind:
    return _STATUS_KINDS.get(status, TransportErrorKind.UNKNOWN)


@dataclass(frozen=True)
class TransportResult:
    """Outcome of a single chat call. On failure ``content`` holds the readable message."""

    content: str
    error: bool = False
    error_detail: Optional[str] = None
    kind: Optional[TransportErrorKind] = None

    @classmethod
    def failure(
        cls,
        kind: TransportErrorKind,
        *,
        code: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> "TransportResult":
        message = KIND_MESSAGES[kind]
        if kind is TransportErrorKind.UNKNOWN and detail:
            message = detail
        if code:
            message = f"{code}: {message}"
        return cls(content=message, error=True, error_detail=detail, kind=kind)

    def unwrap(self, context: str) -> str:
        """Return the content or raise :class:`TransportError` prefixed with ``context``."""

        if self.error:
            raise TransportError(f"{context}: {self.content}", kind=self.kind)
        return self.content


class ChatTransport:
    """Sends role-tagged messages to an OpenAI-compatible chat-completion endpoint.

    The transport never raises and never retries: every failure comes back as
    a :class:`TransportResult` with ``error=True``. Configuration can be
    swapped between calls with :meth:`update_config` or reloaded through the
    ``config_loader`` with :meth:`refresh_config`; the underlying client is
    rebuilt lazily when the configuration changes.
    """

    def __init__(
        self,
        settings: Optional[LlmSettings] = None,
        *,
        config_loader: Optional[Callable[[], LlmSettings]] = None,
        client_factory: Optional[Callable[[LlmSettings], Any]] = None,
    ) -> None:
        self._config_loader = config_loader
        self._client_factory = client_factory or self._build_client
        self._config = settings or (config_loader() if config_loader else get_settings().llm)
        self._client: Optional[Any] = None
        self._client_config: Optional[LlmSettings] = None

    # ------------------------------------------------------------------ config

    def current_config(self) -> LlmSettings:
        return self._config

    def has_api_key(self) -> bool:
        return bool(self._config.api_key)

    def refresh_config(self) -> LlmSettings:
        if self._config_loader is not None:
            self._config = self._config_loader()
        return self._config

    def update_config(self, **changes: Any) -> LlmSettings:
        self._config = self._config.with_overrides(changes)
        return self._config

    # ------------------------------------------------------------------ public API

    def send(self, messages: Sequence[Message]) -> TransportResult:
        config = self._config
        if not config.api_key:
            missing = ", ".join(config.missing_env_vars)
            return TransportResult.failure(TransportErrorKind.NOT_CONFIGURED, detail=f"Missing: {missing}")

        try:
            payload: List[Dict[str, str]] = [
                {"role": str(message["role"]), "content": str(message["content"])} for message in messages
            ]
            completion = self._ensure_client().chat.completions.create(
                model=config.model,
                messages=payload,
                temperature=config.temperature,
                top_p=config.top_p,
            )
        except openai.APITimeoutError as exc:
            logger.warning("Chat request timed out after %.0fs: %s", config.timeout_seconds, exc)
            return TransportResult.failure(TransportErrorKind.TIMEOUT, detail=str(exc))
        except openai.APIStatusError as exc:
            return self._status_failure(exc)
        except openai.APIConnectionError as exc:
            logger.warning("Chat request could not connect: %s", exc)
            return TransportResult.failure(TransportErrorKind.CONNECTION, detail=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Chat request failed unexpectedly")
            return TransportResult.failure(TransportErrorKind.UNKNOWN, detail=str(exc) or type(exc).__name__)

        return self._parse_completion(completion)

    # ------------------------------------------------------------------ helpers

    def _ensure_client(self) -> Any:
        if self._client is None or self._client_config != self._config:
            self._client = self._client_factory(self._config)
            self._client_config = self._config
        return self._client

    @staticmethod
    def _build_client(config: LlmSettings) -> OpenAI:
        return OpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    def _status_failure(self, exc: openai.APIStatusError) -> TransportResult:
        body = exc.body if isinstance(exc.body, dict) else {}
        inner = body.get("error") if isinstance(body.get("error"), dict) else body
        code = inner.get("code") or "unknown"
        detail = inner.get("message") or exc.message
        kind = kind_for_status(exc.status_code)
        logger.warning("Chat request failed with HTTP %s (%s): %s", exc.status_code, kind.value, detail)
        return TransportResult.failure(kind, code=str(code), detail=detail)

    def _parse_completion(self, completion: Any) -> TransportResult:
        choices = getattr(completion, "choices", None) or []
        if not choices:
            logger.warning("Chat response had no choices: %r", completion)
            return TransportResult.failure(TransportErrorKind.UNKNOWN, detail="Response contained no choices.")
        message = choices[0].message
        content = message.content or ""
        usage = getattr(completion, "usage", None)
        if usage is not None:
            logger.info(
                "Chat request succeeded: id=%s prompt_tokens=%s completion_tokens=%s total_tokens=%s",
                getattr(completion, "id", None),
                getattr(usage, "prompt_tokens", None),
                getattr(usage, "completion_tokens", None),
                getattr(usage, "total_tokens", None),
            )
        reasoning = getattr(message, "reasoning_content", None)
        if reasoning:
            logger.debug("Model reasoning: %s", reasoning)
        return TransportResult(content=content)


__all__ = ["ChatTransport", "KIND_MESSAGES", "TransportErrorKind", "TransportResult", "kind_for_status"]
