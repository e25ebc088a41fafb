"""
Waterfall Allocation

A participant's lifetime payments form a single pool. The pool fills
periods earliest-first: each period takes min(pool, due), the remainder
carries to the next period.

GUARANTEES:
- sum(paid) == round(min(total_paid, due * len(periods)))
- 0 <= paid <= due and balance >= 0 for every period
- one output row per input period, in the same order

Every arithmetic step is rounded to the cent.
"""

from decimal import Decimal
from typing import Sequence

from savings_ledger.models.room import ParticipantPayment, Period, PeriodAllocation
from savings_ledger.money import ZERO, MoneyLike, to_money


def allocate(
    amount_due_per_period: MoneyLike,
    total_paid: MoneyLike,
    periods: Sequence[Period],
) -> list[PeriodAllocation]:
    """
    Distribute `total_paid` across `periods`, earliest first.

    Not defined for one-time rooms; see one_time_allocation.

    Raises:
        ValueError: if either amount is negative
    """
    due = to_money(amount_due_per_period)
    pool = to_money(total_paid)
    if due < 0 or pool < 0:
        raise ValueError("Amounts must not be negative")

    allocations = []
    for period in periods:
        paid = to_money(min(pool, due))
        pool = to_money(pool - paid)
        allocations.append(PeriodAllocation(
            period=period,
            due=due,
            paid=paid,
            balance=to_money(due - paid),
        ))
    return allocations


def allocate_participant(
    payment: ParticipantPayment,
    periods: Sequence[Period],
) -> list[PeriodAllocation]:
    """Waterfall for one participant's payment record."""
    return allocate(payment.amount_due, payment.amount_paid, periods)


def one_time_allocation(payment: ParticipantPayment) -> tuple[Decimal, Decimal, Decimal]:
    """
    (due, paid, balance) for a one-time room, where there is no
    period breakdown.
    """
    due = payment.amount_due
    paid = payment.amount_paid
    balance = to_money(max(ZERO, due - paid))
    return due, paid, balance
