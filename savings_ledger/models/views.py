"""
Derived View Models

Everything the room details page, the room list and the dashboard show.
None of these are persisted; they are recomputed from a snapshot on
every change. Values are raw numbers and structured data, never
formatted strings.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from savings_ledger.models.room import (
    Comment,
    Participant,
    ParticipantPayment,
    ParticipantStatus,
    Period,
    PeriodAllocation,
    SavingRoom,
    Transaction,
)


class ParticipantStanding(BaseModel):
    """One participant's position against their due-to-date."""
    model_config = ConfigDict(frozen=True)

    participant: Participant
    payment: ParticipantPayment
    due_to_date: Decimal
    amount_owed: Decimal = Field(
        ...,
        description="max(0, due_to_date - amount_paid); the payment upper bound"
    )
    status: ParticipantStatus


class ContributionChartEntry(BaseModel):
    """One bar of the contribution chart."""
    model_config = ConfigDict(frozen=True)

    name: str
    paid: Decimal
    pending: Decimal
    total: Decimal


class RoomSummary(BaseModel):
    """Room-wide totals and per-participant standings."""
    model_config = ConfigDict(frozen=True)

    total_due_to_date: Decimal
    total_paid_amount: Decimal
    overall_progress: float = Field(
        ...,
        ge=0,
        description="Percent paid of due-to-date; may exceed 100"
    )
    standings: list[ParticipantStanding] = Field(default_factory=list)
    chart: list[ContributionChartEntry] = Field(default_factory=list)


class WindowProgress(BaseModel):
    """
    Progress through the currently open period.

    period_start/period_end are None for one-time rooms.
    """
    model_config = ConfigDict(frozen=True)

    progress_percent: float = Field(default=0.0, ge=0, le=100)
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self.period_end is None


class RoomCardSummary(BaseModel):
    """What the saving-rooms list shows for one room."""
    model_config = ConfigDict(frozen=True)

    room_id: str
    paid_amount: Decimal
    progress: float
    is_completed: bool


class CategoryShare(BaseModel):
    """Share of one category in total expenses."""
    model_config = ConfigDict(frozen=True)

    category: str
    amount: Decimal
    percentage: float
    is_placeholder: bool = False


class DashboardSummary(BaseModel):
    """Totals for the general (non-room) dashboard."""
    model_config = ConfigDict(frozen=True)

    total_balance: Decimal
    total_income: Decimal
    total_expenses: Decimal
    expense_breakdown: list[CategoryShare] = Field(default_factory=list)


class RoomDetailsView(BaseModel):
    """
    Everything the room details page needs, computed from one snapshot.
    """
    model_config = ConfigDict(frozen=True)

    room: SavingRoom
    computed_at: datetime
    is_creator: bool = False
    periods: list[Period] = Field(default_factory=list)
    summary: RoomSummary
    breakdowns: dict[str, list[PeriodAllocation]] = Field(
        default_factory=dict,
        description="Per-participant waterfall, keyed by user_id; empty for one-time"
    )
    window: WindowProgress
    payment_history: list[Transaction] = Field(
        default_factory=list,
        description="Room payments, newest first"
    )
    discussion: list[Comment] = Field(
        default_factory=list,
        description="Comments, newest first"
    )
