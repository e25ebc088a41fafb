"""
Data Models Package

This package contains all Pydantic models used in Savings Ledger.
Room snapshots, transactions, derived views, validation results
and audit events all conform to these schemas.
"""

from savings_ledger.models.room import (
    Comment,
    Participant,
    ParticipantPayment,
    ParticipantStatus,
    PaymentPeriod,
    Period,
    PeriodAllocation,
    SavingRoom,
    Schedule,
    Transaction,
    TransactionType,
)
from savings_ledger.models.views import (
    CategoryShare,
    ContributionChartEntry,
    DashboardSummary,
    ParticipantStanding,
    RoomCardSummary,
    RoomDetailsView,
    RoomSummary,
    WindowProgress,
)
from savings_ledger.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from savings_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Room models
    "Comment",
    "Participant",
    "ParticipantPayment",
    "ParticipantStatus",
    "PaymentPeriod",
    "Period",
    "PeriodAllocation",
    "SavingRoom",
    "Schedule",
    "Transaction",
    "TransactionType",
    # Derived views
    "CategoryShare",
    "ContributionChartEntry",
    "DashboardSummary",
    "ParticipantStanding",
    "RoomCardSummary",
    "RoomDetailsView",
    "RoomSummary",
    "WindowProgress",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
