from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..domain import Intent
from ..errors import IntentParseError
from ..llm import ChatTransport
from .parsing import strip_code_fence
from .prompts import INTENT_PROMPT_TEMPLATE, INTENT_SYSTEM_PROMPT
from .schedule import EMPTY_SCHEDULE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntentResult:
    intent: str
    missing_info: Optional[str] = None

    @property
    def known_intent(self) -> Optional[Intent]:
        try:
            return Intent(self.intent)
        except ValueError:
            return None


def parse_intent(content: str) -> IntentResult:
    """Parse the classifier reply. Unknown intent strings are kept for the caller to reject."""

    try:
        payload = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as exc:
        logger.warning("Intent response is not JSON: %r", content)
        raise IntentParseError(f"Failed to parse intent: {exc.msg}", raw=content) from exc

    if not isinstance(payload, dict) or not payload.get("intent"):
        logger.warning("Intent response has no intent field: %r", content)
        raise IntentParseError("Failed to parse intent: the response has no 'intent' field", raw=content)

    missing = payload.get("missing_info") or payload.get("missingInfo")
    return IntentResult(intent=str(payload["intent"]).strip(), missing_info=str(missing) if missing else None)


class IntentClassifier:
    def __init__(self, transport: ChatTransport) -> None:
        self._transport = transport

    def build_messages(self, user_text: str, schedule_text: str) -> List[Dict[str, str]]:
        prompt = INTENT_PROMPT_TEMPLATE.format(
            schedule=schedule_text or EMPTY_SCHEDULE,
            user_input=user_text,
        )
        return [
            {"role": "system", "content": INTENT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    def classify(self, user_text: str, schedule_text: str = "") -> IntentResult:
        result = self._transport.send(self.build_messages(user_text, schedule_text))
        content = result.unwrap("Intent detection failed")
        intent = parse_intent(content)
        logger.info("Classified intent: %s", intent.intent)
        return intent


__all__ = ["IntentClassifier", "IntentResult", "parse_intent"]
