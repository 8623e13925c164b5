"""Services package."""

from upi_tracker.services.launcher import (
    LaunchError,
    PaymentLauncher,
    WebBrowserLauncher,
)
from upi_tracker.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryStateStorage,
    JsonFileStateStorage,
    PersistenceUnavailable,
    StateStorageInterface,
    StorageError,
)

__all__ = [
    # Launcher
    "LaunchError",
    "PaymentLauncher",
    "WebBrowserLauncher",
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryStateStorage",
    "JsonFileStateStorage",
    "PersistenceUnavailable",
    "StateStorageInterface",
    "StorageError",
]
