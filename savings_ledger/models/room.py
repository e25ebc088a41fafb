"""
Core Data Models for Savings Ledger

These models define the schemas for a saving room snapshot and the
transactions recorded against it. They are designed to:
1. Enforce type safety at runtime
2. Keep money as cent-rounded Decimal
3. Be immutable snapshots (mutations create new instances)
4. Be serializable for storage and logging

DESIGN DECISION: A snapshot handed in by an external collaborator is
accepted even when its participant/payment pairing is broken. Accounting
skips such participants instead of failing; `consistency_issues()` reports
the problem for callers that build rooms themselves.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from savings_ledger.money import money_sum, to_money
from savings_ledger.timeutils import ensure_utc, utc_now


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PaymentPeriod(str, Enum):
    """
    Recurrence cadence of a saving room.

    Fixed at creation; a room never changes cadence.
    """
    ONE_TIME = "one-time"
    HOURLY = "hourly"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def is_recurring(self) -> bool:
        return self is not PaymentPeriod.ONE_TIME


class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class ParticipantStatus(str, Enum):
    """
    Payment standing of one participant against their due-to-date.
    """
    PAID = "paid"
    PARTIALLY_PAID = "partially_paid"
    PENDING = "pending"


def _new_id() -> str:
    return uuid4().hex


# =============================================================================
# ROOM MODELS
# =============================================================================

class Participant(BaseModel):
    """A member of a saving room."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(default="", max_length=200)
    avatar_url: str = Field(default="")


class ParticipantPayment(BaseModel):
    """
    Payment record of one participant.

    amount_due is PER PERIOD, not cumulative.
    amount_paid is the cumulative lifetime amount and only ever grows.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    amount_due: Decimal = Field(
        ...,
        ge=0,
        description="Amount owed for a single period"
    )
    amount_paid: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        description="Cumulative amount paid so far"
    )

    @field_validator('amount_due', 'amount_paid')
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        return to_money(v)


class Comment(BaseModel):
    """A discussion entry. Comments are appended, never edited."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=_new_id)
    user_id: str = Field(..., min_length=1)
    user_name: str = Field(default="Anonymous")
    user_avatar: str = Field(default="")
    text: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator('created_at')
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class SavingRoom(BaseModel):
    """
    A shared savings goal.

    total_amount is the room-wide amount for ONE period
    (amount per participant x participant count).
    created_at anchors the recurrence schedule.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    # Identity
    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1, max_length=200)
    creator_id: str = Field(..., min_length=1)
    goal: Optional[str] = Field(default=None, max_length=1000)

    # Schedule
    payment_period: PaymentPeriod
    created_at: datetime = Field(default_factory=utc_now)

    # Money
    total_amount: Decimal = Field(..., ge=0)

    # Membership
    participants: list[Participant] = Field(default_factory=list)
    participant_ids: list[str] = Field(default_factory=list)
    payments: list[ParticipantPayment] = Field(default_factory=list)

    # Discussion (append-only)
    discussion: list[Comment] = Field(default_factory=list)

    @field_validator('total_amount')
    @classmethod
    def round_total(cls, v: Decimal) -> Decimal:
        return to_money(v)

    @field_validator('created_at')
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator('discussion', mode='before')
    @classmethod
    def default_discussion(cls, v):
        """Older records may carry no discussion at all."""
        return [] if v is None else v

    def payment_for(self, user_id: str) -> Optional[ParticipantPayment]:
        """Find the payment record of a participant, if any."""
        for payment in self.payments:
            if payment.user_id == user_id:
                return payment
        return None

    def participant(self, user_id: str) -> Optional[Participant]:
        """Find a participant by ID, if present."""
        for participant in self.participants:
            if participant.id == user_id:
                return participant
        return None

    @property
    def schedule(self) -> "Schedule":
        return Schedule.for_room(self)

    @property
    def amount_per_participant(self) -> Decimal:
        """
        Per-period amount each participant owes.

        Taken from the first payment record; falls back to total_amount
        when there are no payments or the first one owes nothing.
        """
        if self.payments and self.payments[0].amount_due > 0:
            return self.payments[0].amount_due
        return self.total_amount

    def consistency_issues(self) -> list[str]:
        """
        Check the structural invariants of the room.

        Returns a list of human-readable problems (empty when consistent).
        """
        issues = []

        if not (len(self.participant_ids) == len(self.participants) == len(self.payments)):
            issues.append(
                f"participant_ids ({len(self.participant_ids)}), participants "
                f"({len(self.participants)}) and payments ({len(self.payments)}) differ in length"
            )

        participant_ids = [p.id for p in self.participants]
        if set(participant_ids) != set(self.participant_ids):
            issues.append("participant_ids are out of sync with participants")

        for payment in self.payments:
            matches = participant_ids.count(payment.user_id)
            if matches != 1:
                issues.append(
                    f"payment for {payment.user_id} matches {matches} participants"
                )

        if self.creator_id not in self.participant_ids:
            issues.append("creator is not a participant")

        due_sum = money_sum(p.amount_due for p in self.payments)
        if due_sum != self.total_amount:
            issues.append(
                f"total_amount {self.total_amount} does not equal sum of amounts due {due_sum}"
            )

        return issues


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    Room payments are recorded as expense transactions carrying room_id.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=_new_id)
    description: str = Field(..., min_length=1, max_length=500)
    amount: Decimal = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    date: datetime = Field(default_factory=utc_now)
    type: TransactionType
    user_id: str = Field(..., min_length=1)
    room_id: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def round_amount(cls, v: Decimal) -> Decimal:
        return to_money(v)

    @field_validator('date')
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)


# =============================================================================
# SCHEDULE MODELS (derived, never persisted)
# =============================================================================

class Schedule(BaseModel):
    """
    A recurrence schedule: cadence plus the instant that anchors it.

    The anchor accepts ISO 8601 strings.
    """
    model_config = ConfigDict(frozen=True)

    cadence: PaymentPeriod
    anchor: datetime

    @field_validator('anchor')
    @classmethod
    def normalize_anchor(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @classmethod
    def for_room(cls, room: "SavingRoom") -> "Schedule":
        return cls(cadence=room.payment_period, anchor=room.created_at)


class Period(BaseModel):
    """
    One instance of a recurrence cadence.

    key uniquely identifies the calendar period (hour, ISO week, month,
    year); due_date is the period's start instant.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    due_date: datetime


class PeriodAllocation(BaseModel):
    """How much of one period's due amount has been covered."""
    model_config = ConfigDict(frozen=True)

    period: Period
    due: Decimal
    paid: Decimal
    balance: Decimal
