"""
Audit Models for Savings Ledger

Every mutation of a saving room is logged for audit purposes.
This provides:
1. Traceability of who changed what and when
2. A record paired with every payment recording
3. Debugging information when things go wrong

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from savings_ledger.timeutils import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Room lifecycle
    ROOM_CREATED = "room_created"
    ROOM_UPDATED = "room_updated"
    ROOM_DELETED = "room_deleted"

    # Contributions
    PAYMENT_RECORDED = "payment_recorded"

    # Discussion
    COMMENT_POSTED = "comment_posted"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every room mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which room / who acted
    room_id: Optional[str] = Field(
        default=None,
        description="Saving room this event relates to"
    )
    actor_id: Optional[str] = Field(
        default=None,
        description="Participant who triggered the event"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., validation + save)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "room_id": self.room_id,
            "actor_id": self.actor_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_record(self) -> list:
        """
        Convert to a flat row for tabular audit storage.

        Columns: [event_id, timestamp, event_type, severity, room_id,
        actor_id, correlation_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.room_id or "",
            self.actor_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.room_created(room_id, creator_id, name, correlation_id)
        event = AuditEventBuilder.payment_recorded(room_id, user_id, amount, correlation_id)
    """

    @staticmethod
    def room_created(
        room_id: str,
        creator_id: str,
        name: str,
        payment_period: str,
        participant_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROOM_CREATED,
            room_id=room_id,
            actor_id=creator_id,
            correlation_id=correlation_id,
            description=f"Saving room created: {name}",
            details={
                "payment_period": payment_period,
                "participant_count": participant_count,
            },
        )

    @staticmethod
    def room_updated(
        room_id: str,
        participant_ids: list[str],
        total_amount: Decimal,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROOM_UPDATED,
            room_id=room_id,
            correlation_id=correlation_id,
            description=f"Saving room updated ({len(participant_ids)} participants)",
            details={
                "participant_ids": participant_ids,
                "total_amount": str(total_amount),
            },
        )

    @staticmethod
    def room_deleted(
        room_id: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROOM_DELETED,
            severity=AuditSeverity.WARNING,
            room_id=room_id,
            correlation_id=correlation_id,
            description="Saving room deleted",
        )

    @staticmethod
    def payment_recorded(
        room_id: str,
        user_id: str,
        amount: Decimal,
        transaction_id: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_RECORDED,
            room_id=room_id,
            actor_id=user_id,
            correlation_id=correlation_id,
            description=f"Payment of {amount} recorded",
            details={
                "amount": str(amount),
                "transaction_id": transaction_id,
            },
        )

    @staticmethod
    def comment_posted(
        room_id: str,
        user_id: str,
        comment_id: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMENT_POSTED,
            room_id=room_id,
            actor_id=user_id,
            correlation_id=correlation_id,
            description="Comment posted",
            details={
                "comment_id": comment_id,
            },
        )

    @staticmethod
    def validation_failed(
        request_type: str,
        issues: list[dict],
        correlation_id: UUID,
        room_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            room_id=room_id,
            correlation_id=correlation_id,
            description=f"{request_type} rejected with {len(issues)} issues",
            details={
                "request_type": request_type,
                "issues": issues,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
        room_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            room_id=room_id,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: UUID,
        room_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            room_id=room_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )
