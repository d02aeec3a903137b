from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from ..errors import CommandParseError
from ..llm import ChatTransport
from .parsing import strip_code_fence
from .prompts import COMMAND_PROMPT_TEMPLATE, COMMAND_SYSTEM_PROMPT
from .schedule import EMPTY_SCHEDULE

logger = logging.getLogger(__name__)


def parse_commands(content: str) -> List[Dict[str, Any]]:
    """Parse the extractor reply. Only the array shape is checked here."""

    try:
        payload = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as exc:
        logger.warning("Command response is not JSON: %r", content)
        raise CommandParseError(f"Failed to parse operations: {exc.msg}", raw=content) from exc
    if not isinstance(payload, list):
        logger.warning("Command response is not an array: %r", content)
        raise CommandParseError("Failed to parse operations: the response is not a JSON array", raw=content)
    return payload


class CommandExtractor:
    def __init__(self, transport: ChatTransport, *, today: Optional[Callable[[], date]] = None) -> None:
        self._transport = transport
        self._today = today or date.today

    def build_messages(self, user_text: str, schedule_text: str) -> List[Dict[str, str]]:
        today = self._today()
        prompt = COMMAND_PROMPT_TEMPLATE.format(
            today=today.isoformat(),
            compact_today=today.strftime("%Y%m%d"),
            schedule=schedule_text or EMPTY_SCHEDULE,
            user_input=user_text,
        )
        return [
            {"role": "system", "content": COMMAND_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    def extract(self, user_text: str, schedule_text: str = "") -> List[Dict[str, Any]]:
        result = self._transport.send(self.build_messages(user_text, schedule_text))
        content = result.unwrap("Failed to parse operations")
        commands = parse_commands(content)
        logger.info("Extracted %d operations", len(commands))
        return commands


__all__ = ["CommandExtractor", "parse_commands"]
