"""
Tests for dashboard totals and transaction history filters.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from savings_ledger.accounting import (
    expense_breakdown,
    filter_transactions,
    room_payment_history,
    summarize_transactions,
    top_categories,
)
from savings_ledger.accounting.dashboard import NO_EXPENSES_CATEGORY
from savings_ledger.models import Transaction, TransactionType

BASE = datetime(2024, 5, 1, tzinfo=timezone.utc)


def tx(amount, category="Food", type_=TransactionType.EXPENSE, days=0, description="Lunch", room_id=None):
    return Transaction(
        description=description,
        amount=Decimal(amount),
        category=category,
        type=type_,
        date=BASE + timedelta(days=days),
        user_id="alice",
        room_id=room_id,
    )


class TestExpenseBreakdown:
    """Tests for expense_breakdown()."""

    def test_groups_and_sorts_by_amount(self):
        breakdown = expense_breakdown([
            tx("30", "Food"),
            tx("50", "Rent"),
            tx("20", "Food"),
            tx("500", "Salary", TransactionType.INCOME),
        ])

        assert [s.category for s in breakdown] == ["Food", "Rent"]
        assert breakdown[0].amount == Decimal("50.00")
        assert breakdown[0].percentage == 50.0
        assert breakdown[1].percentage == 50.0

    def test_percentages_add_up(self):
        breakdown = expense_breakdown([tx("10", "A"), tx("30", "B"), tx("60", "C")])
        assert [s.percentage for s in breakdown] == [60.0, 30.0, 10.0]

    def test_placeholder_when_no_expenses(self):
        """With no expenses a single placeholder slice is returned."""
        breakdown = expense_breakdown([tx("100", "Salary", TransactionType.INCOME)])

        assert len(breakdown) == 1
        assert breakdown[0].category == NO_EXPENSES_CATEGORY
        assert breakdown[0].amount == Decimal("1")
        assert breakdown[0].percentage == 100.0
        assert breakdown[0].is_placeholder is True

    def test_top_categories(self):
        breakdown = expense_breakdown([tx(str(i + 1), f"C{i}") for i in range(7)])
        top = top_categories(breakdown)
        assert [s.category for s in top] == ["C6", "C5", "C4", "C3", "C2"]
        assert len(top_categories(breakdown, limit=2)) == 2


class TestSummary:
    """Tests for summarize_transactions()."""

    def test_totals(self):
        summary = summarize_transactions([
            tx("1000", "Salary", TransactionType.INCOME),
            tx("250.50", "Rent"),
            tx("49.50", "Food"),
        ])

        assert summary.total_income == Decimal("1000.00")
        assert summary.total_expenses == Decimal("300.00")
        assert summary.total_balance == Decimal("700.00")
        assert summary.expense_breakdown[0].category == "Rent"

    def test_empty(self):
        summary = summarize_transactions([])
        assert summary.total_balance == Decimal("0.00")
        assert summary.expense_breakdown[0].is_placeholder


class TestFilters:
    """Tests for the transaction history filters."""

    def test_newest_first(self):
        result = filter_transactions([tx("1", days=0), tx("2", days=2), tx("3", days=1)])
        assert [t.amount for t in result] == [Decimal("2.00"), Decimal("3.00"), Decimal("1.00")]

    def test_search_is_case_insensitive(self):
        result = filter_transactions(
            [tx("1", description="Coffee beans"), tx("2", description="Rent")],
            search="  COFFEE ",
        )
        assert [t.description for t in result] == ["Coffee beans"]

    def test_type_and_category(self):
        transactions = [
            tx("1", "Food"),
            tx("2", "Rent"),
            tx("3", "Salary", TransactionType.INCOME),
        ]
        assert len(filter_transactions(transactions, type_filter="income")) == 1
        assert len(filter_transactions(transactions, type_filter="expense", category_filter="Rent")) == 1
        assert len(filter_transactions(transactions, type_filter="all", category_filter="All")) == 3

    def test_room_payment_history(self):
        transactions = [
            tx("10", "Other", room_id="room-1", days=0),
            tx("20", "Other", room_id="room-2", days=1),
            tx("30", "Other", room_id="room-1", days=2),
        ]
        history = room_payment_history(transactions, "room-1")
        assert [t.amount for t in history] == [Decimal("30.00"), Decimal("10.00")]
