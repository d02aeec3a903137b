from __future__ import annotations

from enum import Enum


class Intent(str, Enum):
    HELP = "help"
    SUGGEST_WITH_INFO = "suggest_with_info"
    SUGGEST_WITHOUT_INFO = "suggest_without_info"
    MODIFY_WITH_INFO = "modify_with_info"
    MODIFY_WITHOUT_INFO = "modify_without_info"


class Operation(str, Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class CommandStatus(str, Enum):
    SUCCESS = "success"
    NEED_MORE_INFO = "need_more_info"
    ERROR = "error"
