"""Record store boundary and its change notifications."""

from __future__ import annotations

import datetime
import logging
import threading
import uuid
from collections.abc import Callable
from typing import Literal, Protocol

from pydantic import BaseModel

from pricesync.schemas.investment import InvestmentRecord

logger = logging.getLogger(__name__)


class ChangeEvent(BaseModel):
    kind: Literal["insert", "update", "delete"]
    user_id: str | None = None
    record_id: str


ChangeListener = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ``subscribe``; release it with ``unsubscribe`` or ``with``."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release = release
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._release()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info) -> None:
        self.unsubscribe()


class RecordStore(Protocol):
    def list_for_user(self, user_id: str) -> list[InvestmentRecord]:
        """Records owned by ``user_id``, newest ``date`` first."""
        ...

    def create(self, record: InvestmentRecord) -> InvestmentRecord:
        ...

    def update(self, record_id: str, changes: dict) -> InvestmentRecord:
        ...

    def delete(self, record_id: str) -> None:
        ...

    def subscribe(self, on_change: ChangeListener) -> Subscription:
        ...


def _sort_key(record: InvestmentRecord) -> str:
    value = record.date
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value or ""


class InMemoryRecordStore:
    """Process-local ``RecordStore``; records are keyed by their ``id`` extra field."""

    def __init__(self) -> None:
        self._records: dict[str, InvestmentRecord] = {}
        self._listeners: dict[int, ChangeListener] = {}
        self._next_listener = 0
        self._lock = threading.Lock()

    def list_for_user(self, user_id: str) -> list[InvestmentRecord]:
        with self._lock:
            owned = [r for r in self._records.values() if getattr(r, "user_id", None) == user_id]
        return sorted(owned, key=_sort_key, reverse=True)

    def get(self, record_id: str) -> InvestmentRecord | None:
        with self._lock:
            return self._records.get(record_id)

    def create(self, record: InvestmentRecord) -> InvestmentRecord:
        record_id = getattr(record, "id", None) or str(uuid.uuid4())
        stored = record.model_copy(update={"id": record_id})
        with self._lock:
            self._records[record_id] = stored
        self._notify(ChangeEvent(kind="insert", user_id=getattr(stored, "user_id", None), record_id=record_id))
        return stored

    def update(self, record_id: str, changes: dict) -> InvestmentRecord:
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                raise KeyError(record_id)
            # Normalise aliased keys (type, api_symbol, ...) to field names before merging.
            patch = InvestmentRecord.model_validate(changes).model_dump(exclude_unset=True)
            merged = {**current.model_dump(), **patch, "id": record_id}
            updated = InvestmentRecord.model_validate(merged)
            self._records[record_id] = updated
        self._notify(ChangeEvent(kind="update", user_id=getattr(updated, "user_id", None), record_id=record_id))
        return updated

    def delete(self, record_id: str) -> None:
        with self._lock:
            removed = self._records.pop(record_id, None)
        if removed is None:
            raise KeyError(record_id)
        self._notify(ChangeEvent(kind="delete", user_id=getattr(removed, "user_id", None), record_id=record_id))

    def subscribe(self, on_change: ChangeListener) -> Subscription:
        with self._lock:
            token = self._next_listener
            self._next_listener += 1
            self._listeners[token] = on_change

        def release() -> None:
            with self._lock:
                self._listeners.pop(token, None)

        return Subscription(release)

    def _notify(self, event: ChangeEvent) -> None:
        with self._lock:
            listeners = list(self._listeners.values())
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed for %s %s", event.kind, event.record_id)
