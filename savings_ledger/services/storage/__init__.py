"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for room,
transaction and audit storage. Real backends implement the same
interfaces.
"""

from savings_ledger.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    RoomListener,
    RoomStorageInterface,
    StorageError,
    Unsubscribe,
)
from savings_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryRoomStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "RoomListener",
    "RoomStorageInterface",
    "Unsubscribe",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryRoomStorage",
]
