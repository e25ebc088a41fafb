"""
Accounting Package

Pure functions over immutable room snapshots: period enumeration,
waterfall allocation, aggregate accounting, time-window progress and
dashboard totals. Nothing here performs I/O or holds state.
"""

from savings_ledger.accounting.periods import (
    ScheduleError,
    ScheduleOverflowError,
    UnsupportedCadenceError,
    cadence_step,
    enumerate_periods,
)
from savings_ledger.accounting.allocation import (
    allocate,
    allocate_participant,
    one_time_allocation,
)
from savings_ledger.accounting.aggregate import (
    amount_still_owed,
    participant_breakdowns,
    participant_due_to_date,
    participant_standings,
    participant_status,
    room_card_summary,
    summarize_room,
    total_due_to_date,
    total_paid,
)
from savings_ledger.accounting.window import (
    current_window,
    current_window_progress,
)
from savings_ledger.accounting.dashboard import (
    expense_breakdown,
    filter_transactions,
    room_payment_history,
    summarize_transactions,
    top_categories,
)
from savings_ledger.accounting.room_view import build_room_view

__all__ = [
    # Periods
    "ScheduleError",
    "ScheduleOverflowError",
    "UnsupportedCadenceError",
    "cadence_step",
    "enumerate_periods",
    # Allocation
    "allocate",
    "allocate_participant",
    "one_time_allocation",
    # Aggregates
    "amount_still_owed",
    "participant_breakdowns",
    "participant_due_to_date",
    "participant_standings",
    "participant_status",
    "room_card_summary",
    "summarize_room",
    "total_due_to_date",
    "total_paid",
    # Time window
    "current_window",
    "current_window_progress",
    # Dashboard
    "expense_breakdown",
    "filter_transactions",
    "room_payment_history",
    "summarize_transactions",
    "top_categories",
    # Room view
    "build_room_view",
]
