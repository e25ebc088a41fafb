"""
Validation Models

Results of the caller-side request checks (room creation, edits,
payments, comments).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from savings_ledger.timeutils import utc_now


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'too_high')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one request.

    A request is valid when there are no error-level issues;
    warnings are shown but do not block.
    """

    request_type: str = Field(
        ...,
        pattern="^(create_room|edit_room|record_payment|post_comment)$",
        description="Which request was validated"
    )
    validated_at: datetime = Field(
        default_factory=utc_now
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
