"""Natural-language command pipeline."""

from __future__ import annotations

from .commands import CommandExecutor, ExecutionResult, parse_command
from .extractor import CommandExtractor
from .intent import IntentClassifier, IntentResult
from .pipeline import CommandOutcome, CommandPipeline
from .schedule import EMPTY_SCHEDULE, describe_schedule

__all__ = [
    "EMPTY_SCHEDULE",
    "CommandExecutor",
    "CommandExtractor",
    "CommandOutcome",
    "CommandPipeline",
    "ExecutionResult",
    "IntentClassifier",
    "IntentResult",
    "describe_schedule",
    "parse_command",
]
