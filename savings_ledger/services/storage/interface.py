"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Plug in any document store without touching accounting logic
2. Use in-memory storage for testing
3. Keep the two mutation shapes explicit

There are two kinds of room mutation and they are deliberately separate:
- APPEND-ONLY (comments): no read-before-write, safe under concurrent appends
- READ-MODIFY-WRITE (payments): must be applied as one atomic update

KNOWN GAP: record_payment is only as safe as the backend's atomicity.
There is no compare-and-swap or retry for concurrent recordings from
several sessions of the same creator.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, Optional
from uuid import UUID

from savings_ledger.models.audit import AuditEvent
from savings_ledger.models.room import (
    Comment,
    Participant,
    ParticipantPayment,
    SavingRoom,
    Transaction,
)

# Receives the new snapshot, or None once the room is deleted.
RoomListener = Callable[[Optional[SavingRoom]], None]
Unsubscribe = Callable[[], None]


class RoomStorageInterface(ABC):
    """
    Abstract interface for saving room and transaction storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def save_room(self, room: SavingRoom) -> SavingRoom:
        """
        Persist a newly created room.

        Raises:
            DuplicateError: If a room with the same ID exists
        """
        pass

    @abstractmethod
    async def get_room(self, room_id: str) -> Optional[SavingRoom]:
        """
        Retrieve a room snapshot by ID.

        Returns:
            The room if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_room(
        self,
        room_id: str,
        name: str,
        goal: Optional[str],
        participants: list[Participant],
        participant_ids: list[str],
        payments: list[ParticipantPayment],
        total_amount: Decimal,
    ) -> SavingRoom:
        """
        Replace a room's editable fields and membership.

        Cadence, anchor, creator and discussion are left untouched.

        Raises:
            NotFoundError: If room doesn't exist
        """
        pass

    @abstractmethod
    async def record_payment(
        self,
        room_id: str,
        user_id: str,
        amount: Decimal,
        transaction: Transaction,
    ) -> SavingRoom:
        """
        Atomically add `amount` to a participant's amount_paid and
        store the paired transaction.

        Returns:
            The updated room snapshot

        Raises:
            NotFoundError: If the room or the participant's payment doesn't exist
        """
        pass

    @abstractmethod
    async def append_comment(self, room_id: str, comment: Comment) -> SavingRoom:
        """
        Append a comment to the room discussion.

        Raises:
            NotFoundError: If room doesn't exist
        """
        pass

    @abstractmethod
    async def delete_room(self, room_id: str) -> bool:
        """
        Delete a room by ID.

        Returns:
            True if a room was deleted
        """
        pass

    @abstractmethod
    async def add_transaction(self, transaction: Transaction) -> Transaction:
        """Store a standalone income/expense transaction."""
        pass

    @abstractmethod
    async def list_transactions(
        self,
        room_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> list[Transaction]:
        """
        List transactions, optionally filtered by room and/or user.

        Returns:
            Matching transactions, newest first
        """
        pass

    @abstractmethod
    def subscribe(self, room_id: str, listener: RoomListener) -> Unsubscribe:
        """
        Register for push notifications of new room snapshots.

        The listener is called with each new snapshot after a mutation,
        and with None when the room is deleted.

        Returns:
            A callable that removes the listener
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID, in chronological order.
        """
        pass

    @abstractmethod
    async def get_events_by_room(
        self,
        room_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a room, in chronological order.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
