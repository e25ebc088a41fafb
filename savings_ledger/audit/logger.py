"""
Audit Logger

DESIGN DECISION: Every room mutation is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. A record paired with every payment recording

The audit logger:
- Is async so it composes with the storage calls around it
- Gracefully handles failures (a failed audit write never fails the mutation)
- Supports correlation IDs to trace related events
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from savings_ledger.models.audit import AuditEvent, AuditEventBuilder
from savings_ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_room_created(
        self,
        room_id: str,
        creator_id: str,
        name: str,
        payment_period: str,
        participant_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log room creation."""
        event = AuditEventBuilder.room_created(
            room_id=room_id,
            creator_id=creator_id,
            name=name,
            payment_period=payment_period,
            participant_count=participant_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_room_updated(
        self,
        room_id: str,
        participant_ids: list[str],
        total_amount: Decimal,
        correlation_id: UUID,
    ) -> None:
        """Log room edit."""
        event = AuditEventBuilder.room_updated(
            room_id=room_id,
            participant_ids=participant_ids,
            total_amount=total_amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_room_deleted(
        self,
        room_id: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.room_deleted(
            room_id=room_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_payment_recorded(
        self,
        room_id: str,
        user_id: str,
        amount: Decimal,
        transaction_id: str,
        correlation_id: UUID,
    ) -> None:
        """Log a recorded payment."""
        event = AuditEventBuilder.payment_recorded(
            room_id=room_id,
            user_id=user_id,
            amount=amount,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_comment_posted(
        self,
        room_id: str,
        user_id: str,
        comment_id: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.comment_posted(
            room_id=room_id,
            user_id=user_id,
            comment_id=comment_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        request_type: str,
        issues: list[dict],
        correlation_id: UUID,
        room_id: Optional[str] = None,
    ) -> None:
        """Log a rejected request."""
        event = AuditEventBuilder.validation_failed(
            request_type=request_type,
            issues=issues,
            correlation_id=correlation_id,
            room_id=room_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
        room_id: Optional[str] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
            room_id=room_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: UUID,
        room_id: Optional[str] = None,
    ) -> None:
        """Log a storage backend failure."""
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
            room_id=room_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., recording a payment).
    Pass it through all subsequent operations.
    """
    return uuid4()
