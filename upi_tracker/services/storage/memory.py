"""
In-Memory Storage Implementations

Used by tests and by embedders that persist state themselves.
Stored objects are deep copies so later mutations cannot leak in.
"""

from typing import Optional

from upi_tracker.models.audit import AuditEvent
from upi_tracker.models.ledger import PersistedState
from upi_tracker.services.storage.interface import (
    AuditStorageInterface,
    StateStorageInterface,
)


class InMemoryStateStorage(StateStorageInterface):
    """State storage backed by a single attribute."""

    def __init__(self, initial: Optional[PersistedState] = None):
        self._state = initial.model_copy(deep=True) if initial else None
        self.save_count = 0

    @property
    def state(self) -> Optional[PersistedState]:
        return self._state

    def load(self) -> Optional[PersistedState]:
        if self._state is None:
            return None
        return self._state.model_copy(deep=True)

    def save(self, state: PersistedState) -> None:
        self._state = state.model_copy(deep=True)
        self.save_count += 1


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
