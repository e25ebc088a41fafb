"""
Main Orchestrator for Savings Ledger

This module ties together validation, storage, accounting and audit
and defines the end-to-end flows for a saving room:
1. Create (validate → build snapshot → save)
2. Edit (validate → rebuild membership → update)
3. Record payment (bound by amount still owed → atomic increment + transaction)
4. Comment (validate → append)
5. View (snapshot → periods → totals → window)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No payment is recorded above what the participant still owes
- No room the service builds itself is saved in an inconsistent state
- Every mutation is audited, and so is every failure

Accounting stays pure; this is the only layer that reads the clock
and talks to storage.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence
from uuid import UUID

from savings_ledger.accounting import (
    ScheduleError,
    amount_still_owed,
    build_room_view,
    enumerate_periods,
    summarize_transactions,
)
from savings_ledger.audit import AuditLogger, create_correlation_id
from savings_ledger.config import get_settings
from savings_ledger.models.room import (
    Comment,
    Participant,
    ParticipantPayment,
    PaymentPeriod,
    SavingRoom,
    Transaction,
    TransactionType,
)
from savings_ledger.models.validation import ValidationResult
from savings_ledger.models.views import DashboardSummary, RoomDetailsView
from savings_ledger.money import MoneyLike, to_money
from savings_ledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryRoomStorage,
    NotFoundError,
    RoomStorageInterface,
    StorageError,
)
from savings_ledger.timeutils import utc_now
from savings_ledger.validation import RoomValidationError, RoomValidator, ensure_valid


class RoomConsistencyError(ValueError):
    """The service built a room snapshot that breaks the room invariants."""

    def __init__(self, room_id: str, issues: list[str]):
        self.room_id = room_id
        self.issues = issues
        super().__init__(f"Room {room_id} is inconsistent: {'; '.join(issues)}")


def _unique_members(members: Sequence[Participant]) -> list[Participant]:
    """Drop repeated participant IDs, keeping the first occurrence."""
    seen = set()
    unique = []
    for member in members:
        if member.id in seen:
            continue
        seen.add(member.id)
        unique.append(member)
    return unique


class SavingRoomService:
    """
    Orchestrates the saving room flows.

    All mutations go through the storage backend; the returned room is
    always the snapshot the backend stored.
    """

    def __init__(
        self,
        storage: RoomStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[RoomValidator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._validator = validator or RoomValidator()
        self._clock = clock or utc_now

    @property
    def storage(self) -> RoomStorageInterface:
        return self._storage

    # -------------------------------------------------------------------------
    # Failure handling
    # -------------------------------------------------------------------------

    async def _ensure_valid(
        self,
        result: ValidationResult,
        correlation_id: UUID,
        room_id: Optional[str] = None,
    ) -> ValidationResult:
        try:
            return ensure_valid(result)
        except RoomValidationError:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    request_type=result.request_type,
                    issues=[issue.model_dump() for issue in result.issues],
                    correlation_id=correlation_id,
                    room_id=room_id,
                )
            raise

    async def _audit_failure(
        self,
        operation: str,
        error: Exception,
        correlation_id: UUID,
        room_id: Optional[str] = None,
    ) -> None:
        if not self._audit_logger:
            return
        if isinstance(error, StorageError):
            await self._audit_logger.log_storage_error(
                operation=operation,
                error_message=str(error),
                correlation_id=correlation_id,
                room_id=room_id,
            )
        else:
            await self._audit_logger.log_error(
                error_type=type(error).__name__,
                error_message=str(error),
                details={"operation": operation},
                correlation_id=correlation_id,
                room_id=room_id,
            )

    async def _load_room(
        self,
        room_id: str,
        operation: str,
        correlation_id: UUID,
    ) -> SavingRoom:
        try:
            room = await self._storage.get_room(room_id)
            if room is None:
                raise NotFoundError(f"Saving room not found: {room_id}")
        except StorageError as e:
            await self._audit_failure(operation, e, correlation_id, room_id)
            raise
        return room

    async def _check_consistency(
        self,
        room: SavingRoom,
        operation: str,
        correlation_id: UUID,
    ) -> None:
        issues = room.consistency_issues()
        if issues:
            error = RoomConsistencyError(room.id, issues)
            await self._audit_failure(operation, error, correlation_id, room.id)
            raise error

    # -------------------------------------------------------------------------
    # Flows
    # -------------------------------------------------------------------------

    async def create_room(
        self,
        creator: Participant,
        name: str,
        amount_per_participant: MoneyLike,
        payment_period: str,
        participants: Sequence[Participant] = (),
        goal: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SavingRoom:
        """
        Create and save a new room.

        The creator is always a participant. Every participant owes
        amount_per_participant each period and starts with nothing paid.

        Raises:
            RoomValidationError: name, amount or cadence rejected
            DuplicateError: a room with the generated ID already exists
        """
        correlation_id = correlation_id or create_correlation_id()

        await self._ensure_valid(
            self._validator.validate_create(name, amount_per_participant, payment_period),
            correlation_id,
        )

        amount = to_money(amount_per_participant)
        members = _unique_members([creator, *participants])

        room = SavingRoom(
            name=name,
            creator_id=creator.id,
            goal=goal,
            payment_period=PaymentPeriod(payment_period),
            created_at=self._clock(),
            total_amount=to_money(amount * len(members)),
            participants=members,
            participant_ids=[m.id for m in members],
            payments=[ParticipantPayment(user_id=m.id, amount_due=amount) for m in members],
            discussion=[],
        )
        await self._check_consistency(room, "create_room", correlation_id)

        try:
            saved = await self._storage.save_room(room)
        except StorageError as e:
            await self._audit_failure("create_room", e, correlation_id, room.id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_room_created(
                room_id=saved.id,
                creator_id=saved.creator_id,
                name=saved.name,
                payment_period=saved.payment_period.value,
                participant_count=len(saved.participants),
                correlation_id=correlation_id,
            )

        return saved

    async def edit_room(
        self,
        room_id: str,
        name: str,
        goal: Optional[str],
        participants: Sequence[Participant],
        correlation_id: Optional[UUID] = None,
    ) -> SavingRoom:
        """
        Rename a room and replace its membership.

        The creator is put back if left out. Remaining participants keep
        what they already paid; newcomers start at zero. Everyone owes the
        room's existing per-participant amount.

        Raises:
            NotFoundError: room doesn't exist
            RoomValidationError: name or membership rejected
        """
        correlation_id = correlation_id or create_correlation_id()
        room = await self._load_room(room_id, "edit_room", correlation_id)

        await self._ensure_valid(
            self._validator.validate_edit(room, name, participants),
            correlation_id,
            room_id,
        )

        members = _unique_members(participants)
        if all(m.id != room.creator_id for m in members):
            creator = room.participant(room.creator_id) or Participant(id=room.creator_id)
            members.insert(0, creator)

        per_participant = room.amount_per_participant
        payments = []
        for member in members:
            existing = room.payment_for(member.id)
            payments.append(ParticipantPayment(
                user_id=member.id,
                amount_due=per_participant,
                amount_paid=existing.amount_paid if existing else Decimal("0"),
            ))
        total_amount = to_money(per_participant * len(members))
        participant_ids = [m.id for m in members]

        candidate = room.model_copy(update={
            "name": name,
            "goal": goal,
            "participants": members,
            "participant_ids": participant_ids,
            "payments": payments,
            "total_amount": total_amount,
        })
        await self._check_consistency(candidate, "edit_room", correlation_id)

        try:
            updated = await self._storage.update_room(
                room_id=room_id,
                name=name,
                goal=goal,
                participants=members,
                participant_ids=participant_ids,
                payments=payments,
                total_amount=total_amount,
            )
        except StorageError as e:
            await self._audit_failure("edit_room", e, correlation_id, room_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_room_updated(
                room_id=room_id,
                participant_ids=participant_ids,
                total_amount=total_amount,
                correlation_id=correlation_id,
            )

        return updated

    async def record_payment(
        self,
        room_id: str,
        participant_id: str,
        amount: MoneyLike,
        correlation_id: Optional[UUID] = None,
    ) -> SavingRoom:
        """
        Record a payment made by one participant.

        The amount must be positive and no more than the participant still
        owes as of now. The increment and its expense transaction are
        stored in one storage call.

        KNOWN GAP: two concurrent recordings are only as safe as the
        backend's atomicity; nothing here detects a conflicting write.

        Raises:
            NotFoundError: room or participant payment doesn't exist
            RoomValidationError: amount rejected
        """
        correlation_id = correlation_id or create_correlation_id()
        room = await self._load_room(room_id, "record_payment", correlation_id)

        payment = room.payment_for(participant_id)
        if payment is None:
            error = NotFoundError(f"No payment record for {participant_id} in room {room_id}")
            await self._audit_failure("record_payment", error, correlation_id, room_id)
            raise error

        now = self._clock()
        try:
            periods = enumerate_periods(room.schedule, now)
        except ScheduleError as e:
            await self._audit_failure("record_payment", e, correlation_id, room_id)
            raise
        owed = amount_still_owed(payment, room.payment_period, periods)

        await self._ensure_valid(
            self._validator.validate_payment(amount, owed),
            correlation_id,
            room_id,
        )

        amount = to_money(amount)
        transaction = Transaction(
            description=f'Payment for "{room.name}"',
            amount=amount,
            category=get_settings().accounting.payment_category,
            date=now,
            type=TransactionType.EXPENSE,
            user_id=participant_id,
            room_id=room_id,
        )

        try:
            updated = await self._storage.record_payment(
                room_id=room_id,
                user_id=participant_id,
                amount=amount,
                transaction=transaction,
            )
        except StorageError as e:
            await self._audit_failure("record_payment", e, correlation_id, room_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_payment_recorded(
                room_id=room_id,
                user_id=participant_id,
                amount=amount,
                transaction_id=transaction.id,
                correlation_id=correlation_id,
            )

        return updated

    async def post_comment(
        self,
        room_id: str,
        author: Participant,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> Comment:
        """
        Append a comment to the room discussion.

        Raises:
            NotFoundError: room doesn't exist
            RoomValidationError: blank or overlong text
        """
        correlation_id = correlation_id or create_correlation_id()

        await self._ensure_valid(
            self._validator.validate_comment(text),
            correlation_id,
            room_id,
        )

        comment = Comment(
            user_id=author.id,
            user_name=author.name or "Anonymous",
            user_avatar=author.avatar_url,
            text=text,
            created_at=self._clock(),
        )

        try:
            await self._storage.append_comment(room_id, comment)
        except StorageError as e:
            await self._audit_failure("post_comment", e, correlation_id, room_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_comment_posted(
                room_id=room_id,
                user_id=author.id,
                comment_id=comment.id,
                correlation_id=correlation_id,
            )

        return comment

    async def delete_room(
        self,
        room_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Delete a room. Its transactions are kept.

        Returns:
            True if a room was deleted
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            deleted = await self._storage.delete_room(room_id)
        except StorageError as e:
            await self._audit_failure("delete_room", e, correlation_id, room_id)
            raise

        if deleted and self._audit_logger:
            await self._audit_logger.log_room_deleted(
                room_id=room_id,
                correlation_id=correlation_id,
            )

        return deleted

    async def get_room_view(
        self,
        room_id: str,
        viewer_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RoomDetailsView:
        """
        Compute the room details view.

        Raises:
            NotFoundError: room doesn't exist
        """
        room = await self._storage.get_room(room_id)
        if room is None:
            raise NotFoundError(f"Saving room not found: {room_id}")

        transactions = await self._storage.list_transactions(room_id=room_id)
        return build_room_view(room, transactions, now or self._clock(), viewer_id)

    async def get_dashboard(self, user_id: str) -> DashboardSummary:
        """Balance, income, expenses and category breakdown of one user."""
        transactions = await self._storage.list_transactions(user_id=user_id)
        return summarize_transactions(transactions)


def create_app_components(
    persist_audit: bool = True,
) -> tuple[SavingRoomService, InMemoryRoomStorage, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        persist_audit: Whether audit events are kept in audit storage.
                      Set to False for local-only audit logging.

    Returns:
        (service, room_storage, audit_logger)
    """
    storage = InMemoryRoomStorage()
    audit_logger = AuditLogger(InMemoryAuditStorage() if persist_audit else None)

    service = SavingRoomService(
        storage=storage,
        audit_logger=audit_logger,
    )

    return service, storage, audit_logger
