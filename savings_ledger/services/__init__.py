"""Services package."""

from savings_ledger.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryRoomStorage,
    NotFoundError,
    RoomStorageInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryRoomStorage",
    "NotFoundError",
    "RoomStorageInterface",
    "StorageError",
]
