"""
Aggregate Accounting

Room-wide totals, per-participant standings and chart series computed
from one room snapshot and its enumerated periods.

Participants without a payment record are skipped rather than failing
the whole computation.
"""

from decimal import Decimal
from typing import Sequence

from savings_ledger.accounting.allocation import allocate_participant
from savings_ledger.models.room import (
    ParticipantPayment,
    ParticipantStatus,
    PaymentPeriod,
    Period,
    PeriodAllocation,
    SavingRoom,
)
from savings_ledger.models.views import (
    ContributionChartEntry,
    ParticipantStanding,
    RoomCardSummary,
    RoomSummary,
)
from savings_ledger.money import ZERO, money_sum, percentage, to_money


def total_due_to_date(room: SavingRoom, periods: Sequence[Period]) -> Decimal:
    """
    Room-wide amount owed across all elapsed periods.

    One-time rooms owe their flat total_amount.
    """
    if room.payment_period == PaymentPeriod.ONE_TIME:
        return room.total_amount
    per_period = to_money(room.amount_per_participant * len(room.participants))
    return to_money(per_period * len(periods))


def total_paid(room: SavingRoom) -> Decimal:
    """Sum of every participant's cumulative payments."""
    return money_sum(p.amount_paid for p in room.payments)


def participant_due_to_date(
    payment: ParticipantPayment,
    cadence: PaymentPeriod,
    periods: Sequence[Period],
) -> Decimal:
    """One participant's cumulative obligation so far."""
    if cadence == PaymentPeriod.ONE_TIME:
        return payment.amount_due
    return to_money(payment.amount_due * len(periods))


def participant_status(
    payment: ParticipantPayment,
    due_to_date: Decimal,
) -> ParticipantStatus:
    """
    Classify a participant:
    - paid: something is due and it is fully covered
    - partially_paid: something paid, not fully covered
    - pending: nothing paid yet
    """
    if due_to_date > 0 and payment.amount_paid >= due_to_date:
        return ParticipantStatus.PAID
    if payment.amount_paid > 0:
        return ParticipantStatus.PARTIALLY_PAID
    return ParticipantStatus.PENDING


def amount_still_owed(
    payment: ParticipantPayment,
    cadence: PaymentPeriod,
    periods: Sequence[Period],
) -> Decimal:
    """Upper bound for the next recorded payment."""
    due = participant_due_to_date(payment, cadence, periods)
    return to_money(max(ZERO, due - payment.amount_paid))


def participant_standings(
    room: SavingRoom,
    periods: Sequence[Period],
) -> list[ParticipantStanding]:
    """Standing of every participant that has a payment record, in room order."""
    standings = []
    for participant in room.participants:
        payment = room.payment_for(participant.id)
        if payment is None:
            continue
        due = participant_due_to_date(payment, room.payment_period, periods)
        standings.append(ParticipantStanding(
            participant=participant,
            payment=payment,
            due_to_date=due,
            amount_owed=to_money(max(ZERO, due - payment.amount_paid)),
            status=participant_status(payment, due),
        ))
    return standings


def contribution_chart(standings: Sequence[ParticipantStanding]) -> list[ContributionChartEntry]:
    """Stacked paid/pending bars, one per participant."""
    return [
        ContributionChartEntry(
            name=standing.participant.name,
            paid=to_money(standing.payment.amount_paid),
            pending=to_money(max(ZERO, standing.due_to_date - standing.payment.amount_paid)),
            total=to_money(standing.due_to_date),
        )
        for standing in standings
    ]


def summarize_room(room: SavingRoom, periods: Sequence[Period]) -> RoomSummary:
    """
    Compute the room's totals, progress, standings and chart series.

    overall_progress is 0 when nothing is due yet and is not capped
    at 100 (overpayment shows as >100%).
    """
    due = total_due_to_date(room, periods)
    paid = total_paid(room)
    standings = participant_standings(room, periods)

    return RoomSummary(
        total_due_to_date=due,
        total_paid_amount=paid,
        overall_progress=percentage(paid, due),
        standings=standings,
        chart=contribution_chart(standings),
    )


def participant_breakdowns(
    room: SavingRoom,
    periods: Sequence[Period],
) -> dict[str, list[PeriodAllocation]]:
    """
    Per-participant waterfall keyed by user_id.

    Empty for one-time rooms, which have no period breakdown.
    """
    if room.payment_period == PaymentPeriod.ONE_TIME:
        return {}

    breakdowns = {}
    for participant in room.participants:
        payment = room.payment_for(participant.id)
        if payment is None:
            continue
        breakdowns[participant.id] = allocate_participant(payment, periods)
    return breakdowns


def room_card_summary(room: SavingRoom) -> RoomCardSummary:
    """
    Progress shown on the saving-rooms list.

    Measured against one period's total_amount, not due-to-date.
    """
    paid = total_paid(room)
    progress = percentage(paid, room.total_amount)
    return RoomCardSummary(
        room_id=room.id,
        paid_amount=paid,
        progress=progress,
        is_completed=progress >= 100,
    )
