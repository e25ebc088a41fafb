"""
Request Validation

DESIGN DECISION: Requests are checked before they reach storage, and
validation NEVER silently fixes input. Each check reports issues for the
caller to show; `ensure_valid` turns error-level issues into an exception.

The accounting core does not re-validate: in particular the payment
upper bound (amount still owed) is enforced here and only here.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from savings_ledger.config import get_settings
from savings_ledger.models.room import Participant, PaymentPeriod, SavingRoom
from savings_ledger.models.validation import ValidationIssue, ValidationResult
from savings_ledger.money import MoneyLike, to_money


class RoomValidationError(ValueError):
    """A request failed validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(i.message for i in result.issues if i.severity == "error")
        super().__init__(f"{result.request_type} rejected: {messages}")

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.result.issues


def _parse_amount(value: MoneyLike) -> Optional[Decimal]:
    try:
        parsed = to_money(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


class RoomValidator:
    """
    Validates saving room requests.

    Covers room creation, edits, payment recording and comments.
    """

    def __init__(self):
        self._settings = get_settings().app

    def _check_name(self, name: Optional[str]) -> list[ValidationIssue]:
        min_length = self._settings.min_room_name_length
        if not name or len(name.strip()) < min_length:
            return [ValidationIssue(
                field="name",
                issue_type="too_short",
                message=f"Name must be at least {min_length} characters",
                severity="error",
            )]
        return []

    def validate_create(
        self,
        name: str,
        amount_per_participant: MoneyLike,
        payment_period: str,
    ) -> ValidationResult:
        """Check a new room request."""
        issues = self._check_name(name)

        amount = _parse_amount(amount_per_participant)
        if amount is None:
            issues.append(ValidationIssue(
                field="amount_per_participant",
                issue_type="invalid_format",
                message="Amount is not a number",
                severity="error",
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field="amount_per_participant",
                issue_type="invalid_value",
                message="Total amount must be positive",
                severity="error",
            ))

        try:
            PaymentPeriod(payment_period)
        except ValueError:
            allowed = ", ".join(p.value for p in PaymentPeriod)
            issues.append(ValidationIssue(
                field="payment_period",
                issue_type="invalid_value",
                message=f"Unknown payment period: {payment_period}",
                severity="error",
                suggested_fix=f"Use one of: {allowed}",
            ))

        return ValidationResult(request_type="create_room", issues=issues)

    def validate_edit(
        self,
        room: SavingRoom,
        name: str,
        participants: Sequence[Participant],
    ) -> ValidationResult:
        """Check an edit of an existing room."""
        issues = self._check_name(name)

        if not participants:
            issues.append(ValidationIssue(
                field="participants",
                issue_type="missing",
                message="At least one participant is required",
                severity="error",
            ))

        if not room.payments or room.payments[0].amount_due <= 0:
            issues.append(ValidationIssue(
                field="payments",
                issue_type="missing",
                message="Could not determine amount per participant",
                severity="error",
            ))

        return ValidationResult(request_type="edit_room", issues=issues)

    def validate_payment(
        self,
        amount: MoneyLike,
        amount_owed: Decimal,
    ) -> ValidationResult:
        """
        Check a payment against what the participant still owes.

        Args:
            amount: Amount being recorded
            amount_owed: max(0, due-to-date - amount_paid) for the participant
        """
        issues = []
        parsed = _parse_amount(amount)

        if parsed is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount is not a number",
                severity="error",
            ))
        elif parsed <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be positive",
                severity="error",
            ))
        elif parsed > amount_owed:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_high",
                message=f"Amount {parsed} exceeds the {amount_owed} still owed",
                severity="error",
                suggested_fix=f"Record at most {amount_owed}",
            ))

        return ValidationResult(request_type="record_payment", issues=issues)

    def validate_comment(self, text: Optional[str]) -> ValidationResult:
        """Check a discussion comment."""
        issues = []
        max_length = self._settings.max_comment_length

        if not text or not text.strip():
            issues.append(ValidationIssue(
                field="text",
                issue_type="missing",
                message="Comment cannot be empty",
                severity="error",
            ))
        elif len(text) > max_length:
            issues.append(ValidationIssue(
                field="text",
                issue_type="too_long",
                message=f"Comment is longer than {max_length} characters",
                severity="error",
            ))

        return ValidationResult(request_type="post_comment", issues=issues)


def ensure_valid(result: ValidationResult) -> ValidationResult:
    """Raise RoomValidationError if the result has errors."""
    if result.has_errors:
        raise RoomValidationError(result)
    return result
