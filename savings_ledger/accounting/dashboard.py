"""
Dashboard Computations

Deterministic aggregation over a user's transactions: balance, income,
expenses, the expense-category breakdown, and the filters used by the
transaction history.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from savings_ledger.models.room import Transaction, TransactionType
from savings_ledger.models.views import CategoryShare, DashboardSummary
from savings_ledger.money import money_sum, percentage

NO_EXPENSES_CATEGORY = "No Expenses"


def expense_breakdown(transactions: Iterable[Transaction]) -> list[CategoryShare]:
    """
    Group expenses by category with each category's share of the total.

    Largest category first. With no expenses at all, a single placeholder
    category at 100% is returned so a chart always has something to draw.
    """
    groups: dict[str, list[Decimal]] = {}
    for transaction in transactions:
        if transaction.type != TransactionType.EXPENSE:
            continue
        groups.setdefault(transaction.category, []).append(transaction.amount)

    if not groups:
        return [CategoryShare(
            category=NO_EXPENSES_CATEGORY,
            amount=Decimal("1"),
            percentage=100.0,
            is_placeholder=True,
        )]

    totals = {category: money_sum(amounts) for category, amounts in groups.items()}
    total_expenses = money_sum(totals.values())

    shares = [
        CategoryShare(
            category=category,
            amount=amount,
            percentage=percentage(amount, total_expenses),
        )
        for category, amount in totals.items()
    ]
    shares.sort(key=lambda share: share.amount, reverse=True)
    return shares


def top_categories(breakdown: Sequence[CategoryShare], limit: int = 5) -> list[CategoryShare]:
    """The `limit` largest categories."""
    return sorted(breakdown, key=lambda share: share.amount, reverse=True)[:limit]


def summarize_transactions(transactions: Sequence[Transaction]) -> DashboardSummary:
    """Balance, income, expenses and category breakdown."""
    income = money_sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
    expenses = money_sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE)

    return DashboardSummary(
        total_balance=income - expenses,
        total_income=income,
        total_expenses=expenses,
        expense_breakdown=expense_breakdown(transactions),
    )


def newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def filter_transactions(
    transactions: Iterable[Transaction],
    search: str = "",
    type_filter: str = "all",
    category_filter: str = "All",
) -> list[Transaction]:
    """
    Transaction history filters, newest first.

    Args:
        search: Case-insensitive substring of the description
        type_filter: "all", "income" or "expense"
        category_filter: "All" or an exact category name
    """
    needle = search.strip().lower()
    results = []
    for transaction in transactions:
        if needle and needle not in transaction.description.lower():
            continue
        if type_filter != "all" and transaction.type.value != type_filter:
            continue
        if category_filter != "All" and transaction.category != category_filter:
            continue
        results.append(transaction)
    return newest_first(results)


def room_payment_history(transactions: Iterable[Transaction], room_id: str) -> list[Transaction]:
    """Payments recorded against one room, newest first."""
    return newest_first(t for t in transactions if t.room_id == room_id)
