from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.event_store import EventStore, new_event_id
from ..domain import DEFAULT_COLOR, Event, EventDetails, Operation
from ..errors import ValidationError

logger = logging.getLogger(__name__)


class DetailsPatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True, strict=True, extra="ignore")

    location: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    estimated_hours: Optional[float] = Field(default=None, alias="estimatedHours")


class EventPatch(BaseModel):
    """Partial event as proposed by the model. ``color`` and ``urgency`` are never accepted."""

    model_config = ConfigDict(populate_by_name=True, strict=True, extra="ignore")

    id: Optional[str] = Field(default=None)
    name: Optional[str] = Field(default=None)
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    importance: Optional[float] = Field(default=None)
    size: Optional[float] = Field(default=None)
    details: Optional[DetailsPatch] = Field(default=None)

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"})


class AddCommand(BaseModel):
    operation: Literal["add"]
    event: EventPatch

    def to_event(self, now: datetime) -> Event:
        patch = self.event
        details = patch.details or DetailsPatch()
        return Event(
            id=new_event_id(now),
            name=(patch.name or "").strip(),
            importance=patch.importance if patch.importance is not None else 0.5,
            size=patch.size if patch.size is not None else 100.0,
            color=DEFAULT_COLOR,
            start_time=patch.start_time or "",
            end_time=patch.end_time or "",
            details=EventDetails(
                location=details.location,
                notes=details.notes,
                estimated_hours=details.estimated_hours,
            ),
        )


class UpdateCommand(BaseModel):
    operation: Literal["update"]
    event: EventPatch


class DeleteCommand(BaseModel):
    operation: Literal["delete"]
    event: EventPatch


OperationCommand = Annotated[Union[AddCommand, UpdateCommand, DeleteCommand], Field(discriminator="operation")]
_COMMAND_ADAPTER: TypeAdapter[Any] = TypeAdapter(OperationCommand)
_KNOWN_OPERATIONS = {operation.value for operation in Operation}


def parse_command(raw: Any) -> Optional[Union[AddCommand, UpdateCommand, DeleteCommand]]:
    """Validate one untrusted command. Returns ``None`` for unknown operations."""

    if isinstance(raw, (AddCommand, UpdateCommand, DeleteCommand)):
        command = raw
    else:
        if not isinstance(raw, dict):
            raise ValidationError(f"Operation must be an object, got {type(raw).__name__}.")
        operation = raw.get("operation")
        if not isinstance(operation, str):
            raise ValidationError(f"Invalid operation: {operation!r}")
        if operation not in _KNOWN_OPERATIONS:
            logger.warning("Unknown operation: %r", operation)
            return None
        try:
            command = _COMMAND_ADAPTER.validate_python(raw)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise ValidationError(f"Invalid {operation} operation at '{location}': {first.get('msg')}") from exc

    if isinstance(command, AddCommand):
        if not (command.event.name or "").strip():
            raise ValidationError("Adding an event requires a name.")
    elif not command.event.id:
        raise ValidationError(f"{command.operation.capitalize()} requires an event id.")
    return command


@dataclass(frozen=True)
class AppliedOperation:
    operation: str
    event_id: str
    found: bool = True

    def describe(self) -> str:
        suffix = "" if self.found else " (not found)"
        return f"{self.operation} {self.event_id}{suffix}"

    def to_dict(self) -> Dict[str, Any]:
        return {"operation": self.operation, "id": self.event_id, "found": self.found}


@dataclass
class ExecutionResult:
    success: bool
    message: str
    applied: List[AppliedOperation] = field(default_factory=list)
    skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "applied": [item.to_dict() for item in self.applied],
            "skipped": self.skipped,
        }


class CommandExecutor:
    """Applies operation batches to the event store.

    Execution is two-phase: the whole batch is validated before the first
    mutation, so a batch with one invalid operation leaves the store untouched.
    """

    def __init__(self, store: EventStore, *, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._store = store
        self._clock = clock or datetime.now

    def validate(self, commands: Sequence[Any]) -> Tuple[List[Union[AddCommand, UpdateCommand, DeleteCommand]], int]:
        parsed = []
        skipped = 0
        for raw in commands:
            command = parse_command(raw)
            if command is None:
                skipped += 1
                continue
            parsed.append(command)
        return parsed, skipped

    def execute(self, commands: Sequence[Any]) -> ExecutionResult:
        try:
            parsed, skipped = self.validate(commands)
        except ValidationError as exc:
            logger.warning("Rejected operation batch: %s", exc)
            return ExecutionResult(success=False, message=f"Execution failed: {exc}")

        applied: List[AppliedOperation] = []
        try:
            for command in parsed:
                applied.append(self._apply(command))
        except ValidationError as exc:
            logger.warning("Operation batch stopped after %d operations: %s", len(applied), exc)
            return ExecutionResult(success=False, message=f"Execution failed: {exc}", applied=applied, skipped=skipped)

        return ExecutionResult(success=True, message=self._summarize(applied, skipped), applied=applied, skipped=skipped)

    def _apply(self, command: Union[AddCommand, UpdateCommand, DeleteCommand]) -> AppliedOperation:
        if isinstance(command, AddCommand):
            created = self._store.add(command.to_event(self._clock()))
            return AppliedOperation(Operation.ADD.value, created.id)
        event_id = command.event.id or ""
        if isinstance(command, UpdateCommand):
            updated = self._store.update(event_id, command.event.to_fields())
            return AppliedOperation(Operation.UPDATE.value, event_id, found=updated is not None)
        removed = self._store.delete(event_id)
        return AppliedOperation(Operation.DELETE.value, event_id, found=removed)

    @staticmethod
    def _summarize(applied: Sequence[AppliedOperation], skipped: int) -> str:
        if not applied:
            message = "No operations to apply."
        else:
            noun = "operation" if len(applied) == 1 else "operations"
            message = f"Applied {len(applied)} {noun}: " + ", ".join(item.describe() for item in applied)
        if skipped:
            message += f" Skipped {skipped} unknown operation(s)."
        return message


__all__ = [
    "AddCommand",
    "AppliedOperation",
    "CommandExecutor",
    "DeleteCommand",
    "EventPatch",
    "ExecutionResult",
    "OperationCommand",
    "UpdateCommand",
    "parse_command",
]
