"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a JSON file as the backend, but designed to be swappable.
"""

from upi_tracker.services.storage.interface import (
    AuditStorageInterface,
    PersistenceUnavailable,
    StateStorageInterface,
    StorageError,
)
from upi_tracker.services.storage.json_file import (
    JsonFileStateStorage,
    state_from_json_dict,
)
from upi_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryStateStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "StateStorageInterface",
    # Exceptions
    "PersistenceUnavailable",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryStateStorage",
    "JsonFileStateStorage",
    "state_from_json_dict",
]
