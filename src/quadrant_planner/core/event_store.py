from __future__ import annotations

import logging
from copy import deepcopy
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Mapping, Optional
from uuid import uuid4

from ..domain import Event
from ..errors import ValidationError
from .config import EVENTS_KEY
from .urgency import refresh_derived

if TYPE_CHECKING:  # pragma: no cover
    from ..data.blob_store import BlobStore

logger = logging.getLogger(__name__)

Observer = Callable[[List[Event]], None]

URGENCY_INPUTS = frozenset({"importance", "size", "startTime", "endTime"})
# Urgency and color are derived, never patched.
READ_ONLY_FIELDS = frozenset({"id", "urgency", "color"})


def new_event_id(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d")
    return f"evt_{stamp}_{uuid4().hex[:8]}"


class EventStore:
    """Authoritative in-memory event collection mirrored to a blob store.

    Every mutation is persisted synchronously under ``key`` and then pushed
    to the subscribed observers. Persistence is best effort: a failed write
    is logged and the in-memory mutation stands.
    """

    def __init__(
        self,
        blob_store: "BlobStore",
        *,
        key: str = EVENTS_KEY,
        seed: Optional[Iterable[Event]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._blob_store = blob_store
        self._key = key
        self._seed = list(seed or ())
        self._clock = clock or datetime.now
        self._events: List[Event] = []
        self._observers: List[Observer] = []
        self.reload()

    # ------------------------------------------------------------------ loading

    def reload(self) -> None:
        try:
            raw = self._blob_store.get(self._key)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to load events from blob '%s'", self._key)
            raw = None

        events: List[Event] = []
        repaired = False
        if isinstance(raw, list):
            seen: set[str] = set()
            for record in raw:
                if not isinstance(record, dict):
                    logger.warning("Skipping malformed event record: %r", record)
                    repaired = True
                    continue
                event = Event.from_record(record)
                if not event.id:
                    event.id = new_event_id(self._clock())
                    logger.warning("Stored event %r had no id; assigned %s", event.name, event.id)
                    repaired = True
                elif event.id in seen:
                    logger.warning("Skipping stored event with duplicate id %s", event.id)
                    repaired = True
                    continue
                seen.add(event.id)
                events.append(event)

        if not events and self._seed:
            logger.info("No stored events under '%s'; seeding %d events", self._key, len(self._seed))
            self._events = [deepcopy(event) for event in self._seed]
            self.persist()
        else:
            self._events = events
            if repaired:
                self.persist()

    # ------------------------------------------------------------------ queries

    def get(self, event_id: str) -> Optional[Event]:
        for event in self._events:
            if event.id == event_id:
                return deepcopy(event)
        return None

    def list_all(self) -> List[Event]:
        return [deepcopy(event) for event in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return any(event.id == event_id for event in self._events)

    # ------------------------------------------------------------------ mutations

    def add(self, event: Event) -> Event:
        if not event.name or not event.name.strip():
            raise ValidationError("Adding an event requires a name.")
        stored = deepcopy(event)
        if not stored.id:
            stored.id = new_event_id(self._clock())
        if stored.id in self:
            raise ValidationError(f"Event '{stored.id}' already exists.")
        stored.normalize()
        refresh_derived(stored, self._clock())
        self._events.append(stored)
        logger.debug("Added event %s (%s)", stored.id, stored.name)
        self._commit()
        return deepcopy(stored)

    def update(self, event_id: str, fields: Mapping[str, Any]) -> Optional[Event]:
        """Merge ``fields`` (record-shaped, camelCase) into the event. Unknown ids are a no-op."""

        for index, existing in enumerate(self._events):
            if existing.id == event_id:
                break
        else:
            logger.debug("Update ignored, no event %s", event_id)
            return None

        patch = {key: value for key, value in fields.items() if value is not None and key not in READ_ONLY_FIELDS}
        if patch.get("name") == "":
            patch.pop("name")
        details_patch = patch.pop("details", None)

        record = existing.to_record()
        record.update(patch)
        touched = set(patch) & URGENCY_INPUTS
        if isinstance(details_patch, Mapping):
            details = dict(record["details"])
            for key, value in details_patch.items():
                if value is None:
                    details.pop(key, None)
                else:
                    details[key] = value
            record["details"] = details
            if "estimatedHours" in details_patch:
                touched.add("estimatedHours")

        updated = Event.from_record(record)
        if touched:
            refresh_derived(updated, self._clock())
        self._events[index] = updated
        self._commit()
        return deepcopy(updated)

    def delete(self, event_id: str) -> bool:
        remaining = [event for event in self._events if event.id != event_id]
        removed = len(remaining) != len(self._events)
        self._events = remaining
        self._commit()
        return removed

    # ------------------------------------------------------------------ observers

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    # ------------------------------------------------------------------ persistence

    def persist(self) -> None:
        try:
            self._blob_store.set(self._key, [event.to_record() for event in self._events])
        except Exception:  # noqa: BLE001
            logger.exception("Failed to persist %d events under '%s'", len(self._events), self._key)

    def _commit(self) -> None:
        self.persist()
        snapshot = self.list_all()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:  # noqa: BLE001
                logger.exception("Event observer %r failed", observer)


__all__ = ["EventStore", "new_event_id"]
