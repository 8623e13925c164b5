"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the ledger decoupled from where state lives
2. Use in-memory storage for testing
3. Add other backends later without touching business logic

The state interface is deliberately tiny: the whole state is loaded once
at startup and written back whole after every committing mutation.
"""

from abc import ABC, abstractmethod
from typing import Optional

from upi_tracker.models.audit import AuditEvent
from upi_tracker.models.ledger import PersistedState


class StateStorageInterface(ABC):
    """
    Abstract interface for persisting {budget, spent, transactions}.

    Both operations are synchronous.
    """

    @abstractmethod
    def load(self) -> Optional[PersistedState]:
        """
        Load the saved state.

        Returns:
            The state, or None when nothing usable is stored

        Raises:
            PersistenceUnavailable: If the backend cannot be read at all
        """
        pass

    @abstractmethod
    def save(self, state: PersistedState) -> None:
        """
        Replace the saved state.

        Re-saving an identical state must be harmless.

        Raises:
            PersistenceUnavailable: If the state could not be written
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceUnavailable(StorageError):
    """The storage backend could not be read or written."""
    pass
