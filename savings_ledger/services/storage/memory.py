"""
In-Memory Storage Implementation

Reference backend for tests and for callers embedding the ledger in a
single process. Every mutation runs under one asyncio.Lock, so a payment
recording (increment + transaction) is a single atomic step with respect
to other coroutines.

Listeners are notified after the lock is released, in registration order.
"""

import asyncio
from collections import defaultdict
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from savings_ledger.models.audit import AuditEvent
from savings_ledger.models.room import (
    Comment,
    Participant,
    ParticipantPayment,
    SavingRoom,
    Transaction,
)
from savings_ledger.money import to_money
from savings_ledger.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    RoomListener,
    RoomStorageInterface,
    Unsubscribe,
)

logger = structlog.get_logger(__name__)


class InMemoryRoomStorage(RoomStorageInterface):
    """Room and transaction storage held in process memory."""

    def __init__(self):
        self._rooms: dict[str, SavingRoom] = {}
        self._transactions: list[Transaction] = []
        self._listeners: dict[str, list[RoomListener]] = defaultdict(list)
        self._lock = asyncio.Lock()

    def _require(self, room_id: str) -> SavingRoom:
        room = self._rooms.get(room_id)
        if room is None:
            raise NotFoundError(f"Saving room not found: {room_id}")
        return room

    def _notify(self, room_id: str, snapshot: Optional[SavingRoom]) -> None:
        for listener in list(self._listeners.get(room_id, [])):
            try:
                listener(snapshot)
            except Exception:
                # One broken listener must not block the others
                logger.exception("room_listener_failed", room_id=room_id)

    async def save_room(self, room: SavingRoom) -> SavingRoom:
        async with self._lock:
            if room.id in self._rooms:
                raise DuplicateError(f"Saving room already exists: {room.id}")
            self._rooms[room.id] = room
        self._notify(room.id, room)
        return room

    async def get_room(self, room_id: str) -> Optional[SavingRoom]:
        return self._rooms.get(room_id)

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
        async with self._lock:
            room = self._require(room_id)
            updated = room.model_copy(update={
                "name": name,
                "goal": goal,
                "participants": list(participants),
                "participant_ids": list(participant_ids),
                "payments": list(payments),
                "total_amount": to_money(total_amount),
            })
            self._rooms[room_id] = updated
        self._notify(room_id, updated)
        return updated

    async def record_payment(
        self,
        room_id: str,
        user_id: str,
        amount: Decimal,
        transaction: Transaction,
    ) -> SavingRoom:
        async with self._lock:
            room = self._require(room_id)
            if room.payment_for(user_id) is None:
                raise NotFoundError(f"No payment record for {user_id} in room {room_id}")

            payments = [
                payment.model_copy(update={
                    "amount_paid": to_money(payment.amount_paid + to_money(amount)),
                })
                if payment.user_id == user_id else payment
                for payment in room.payments
            ]
            updated = room.model_copy(update={"payments": payments})

            self._transactions.append(transaction)
            self._rooms[room_id] = updated
        self._notify(room_id, updated)
        return updated

    async def append_comment(self, room_id: str, comment: Comment) -> SavingRoom:
        async with self._lock:
            room = self._require(room_id)
            updated = room.model_copy(update={"discussion": [*room.discussion, comment]})
            self._rooms[room_id] = updated
        self._notify(room_id, updated)
        return updated

    async def delete_room(self, room_id: str) -> bool:
        async with self._lock:
            removed = self._rooms.pop(room_id, None)
        if removed is not None:
            self._notify(room_id, None)
        return removed is not None

    async def add_transaction(self, transaction: Transaction) -> Transaction:
        async with self._lock:
            self._transactions.append(transaction)
        return transaction

    async def list_transactions(
        self,
        room_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> list[Transaction]:
        results = [
            t for t in self._transactions
            if (room_id is None or t.room_id == room_id)
            and (user_id is None or t.user_id == user_id)
        ]
        return sorted(results, key=lambda t: t.date, reverse=True)

    def subscribe(self, room_id: str, listener: RoomListener) -> Unsubscribe:
        self._listeners[room_id].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(room_id, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log held in process memory."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_events_by_room(
        self,
        room_id: str,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.room_id == room_id]
        return sorted(events, key=lambda e: e.timestamp)
