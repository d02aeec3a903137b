from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from ..core.event_store import EventStore
from ..domain import CommandStatus, Event, Intent
from ..errors import QuadrantPlannerError, UnknownIntentError
from ..llm import ChatTransport
from .commands import CommandExecutor
from .extractor import CommandExtractor
from .intent import IntentClassifier
from .prompts import (
    HELP_PROMPT_TEMPLATE,
    HELP_SYSTEM_PROMPT,
    SUGGESTION_PROMPT_TEMPLATE,
    SUGGESTION_SYSTEM_PROMPT,
)
from .schedule import describe_schedule

logger = logging.getLogger(__name__)

FREE_TIME_MISSING = "free time"
FREE_TIME_PROMPT = 'Please tell me how much free time you have today (e.g. "I have 4 free hours today").'
DEFAULT_MISSING_INFO = "required information is missing"


@dataclass
class CommandOutcome:
    status: CommandStatus
    message: str
    data: Optional[List[Dict[str, Any]]] = None
    missing_info: Optional[str] = None
    events: Optional[List[Event]] = None
    intent: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": self.status.value, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        if self.missing_info is not None:
            payload["missingInfo"] = self.missing_info
        if self.events is not None:
            payload["events"] = [event.to_record() for event in self.events]
        if self.intent is not None:
            payload["intent"] = self.intent
        return payload


class CommandPipeline:
    """Turns one natural-language command into a single outcome.

    ``received -> classifying -> help | suggest | modify -> responded``.
    Help and ready suggestions are answered by the model; ready modifications
    are extracted into operations and executed against the store; requests
    missing information stop with ``need_more_info`` and the caller re-enters
    with the original text plus the supplement. Invocations are serialized.
    """

    def __init__(
        self,
        transport: ChatTransport,
        store: EventStore,
        *,
        classifier: Optional[IntentClassifier] = None,
        extractor: Optional[CommandExtractor] = None,
        executor: Optional[CommandExecutor] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self._transport = transport
        self._store = store
        self._today = today or date.today
        self.classifier = classifier or IntentClassifier(transport)
        self.extractor = extractor or CommandExtractor(transport, today=self._today)
        self.executor = executor or CommandExecutor(store)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ public API

    def process_command(self, user_text: str, schedule_text: Optional[str] = None) -> CommandOutcome:
        with self._lock:
            try:
                return self._process(user_text, schedule_text)
            except QuadrantPlannerError as exc:
                logger.warning("Command failed: %s", exc)
                return CommandOutcome(status=CommandStatus.ERROR, message=str(exc))
            except Exception:  # noqa: BLE001
                logger.exception("Unexpected failure while processing %r", user_text)
                return CommandOutcome(
                    status=CommandStatus.ERROR,
                    message="Something went wrong while processing the command.",
                )

    # ------------------------------------------------------------------ steps

    def _process(self, user_text: str, schedule_text: Optional[str]) -> CommandOutcome:
        text = (user_text or "").strip()
        if not text:
            return CommandOutcome(status=CommandStatus.ERROR, message="The command is empty.")
        schedule = schedule_text if schedule_text is not None else describe_schedule(self._store.list_all())

        classified = self.classifier.classify(text, schedule)
        intent = classified.known_intent

        if intent is Intent.HELP:
            return self._success(self._answer_help(text), intent)

        if intent is Intent.SUGGEST_WITHOUT_INFO:
            return CommandOutcome(
                status=CommandStatus.NEED_MORE_INFO,
                message=FREE_TIME_PROMPT,
                missing_info=FREE_TIME_MISSING,
                intent=intent.value,
            )

        if intent is Intent.SUGGEST_WITH_INFO:
            return self._success(self._suggest(text, schedule), intent)

        if intent is Intent.MODIFY_WITHOUT_INFO:
            missing = classified.missing_info or DEFAULT_MISSING_INFO
            return CommandOutcome(
                status=CommandStatus.NEED_MORE_INFO,
                message=f"Please provide the following: {missing}",
                missing_info=missing,
                intent=intent.value,
            )

        if intent is Intent.MODIFY_WITH_INFO:
            commands = self.extractor.extract(text, schedule)
            result = self.executor.execute(commands)
            return CommandOutcome(
                status=CommandStatus.SUCCESS if result.success else CommandStatus.ERROR,
                message=result.message,
                data=commands,
                events=self._store.list_all(),
                intent=intent.value,
            )

        raise UnknownIntentError(f"Unrecognized intent: {classified.intent}")

    def _answer_help(self, text: str) -> str:
        messages = [
            {"role": "system", "content": HELP_SYSTEM_PROMPT},
            {"role": "user", "content": HELP_PROMPT_TEMPLATE.format(user_input=text)},
        ]
        return self._transport.send(messages).unwrap("Help request failed")

    def _suggest(self, text: str, schedule: str) -> str:
        prompt = SUGGESTION_PROMPT_TEMPLATE.format(
            today=self._today().isoformat(),
            schedule=schedule,
            user_input=text,
        )
        messages = [
            {"role": "system", "content": SUGGESTION_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        return self._transport.send(messages).unwrap("Suggestion request failed")

    @staticmethod
    def _success(message: str, intent: Intent) -> CommandOutcome:
        return CommandOutcome(status=CommandStatus.SUCCESS, message=message, intent=intent.value)


__all__ = ["CommandOutcome", "CommandPipeline"]
