"""
Tests for request validation.
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from savings_ledger.models import Participant, ParticipantPayment, PaymentPeriod, SavingRoom
from savings_ledger.validation import RoomValidationError, RoomValidator, ensure_valid


@pytest.fixture
def validator():
    return RoomValidator()


@pytest.fixture
def room():
    return SavingRoom(
        name="Gift for Dana",
        creator_id="alice",
        payment_period=PaymentPeriod.WEEKLY,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        total_amount=Decimal("20"),
        participants=[Participant(id="alice", name="Alice")],
        participant_ids=["alice"],
        payments=[ParticipantPayment(user_id="alice", amount_due=Decimal("20"))],
    )


class TestCreateValidation:
    """Tests for validate_create()."""

    def test_valid_request(self, validator):
        result = validator.validate_create("Trip", Decimal("50"), "monthly")
        assert result.is_valid
        assert result.request_type == "create_room"

    def test_short_name(self, validator):
        result = validator.validate_create("  ab ", Decimal("50"), "monthly")
        assert result.has_errors
        assert result.issues[0].field == "name"

    def test_amount_must_be_positive(self, validator):
        result = validator.validate_create("Trip", "0", "monthly")
        assert [i.issue_type for i in result.issues] == ["invalid_value"]

    def test_amount_must_be_a_number(self, validator):
        result = validator.validate_create("Trip", "lots", "monthly")
        assert [i.issue_type for i in result.issues] == ["invalid_format"]

    @pytest.mark.parametrize("amount", ["NaN", float("nan")])
    def test_nan_amount_is_a_format_error(self, validator, amount):
        result = validator.validate_create("Trip", amount, "monthly")
        assert [i.issue_type for i in result.issues] == ["invalid_format"]

    def test_unknown_period(self, validator):
        result = validator.validate_create("Trip", Decimal("50"), "fortnightly")
        issue = result.issues[0]
        assert issue.field == "payment_period"
        assert "one-time" in issue.suggested_fix

    def test_reports_every_problem(self, validator):
        result = validator.validate_create("", "-5", "daily")
        assert result.error_count == 3

    def test_min_name_length_from_environment(self, monkeypatch):
        monkeypatch.setenv("MIN_ROOM_NAME_LENGTH", "6")
        result = RoomValidator().validate_create("Trip", Decimal("50"), "monthly")
        assert result.has_errors


class TestEditValidation:
    """Tests for validate_edit()."""

    def test_valid_edit(self, validator, room):
        result = validator.validate_edit(room, "New name", [Participant(id="alice")])
        assert result.is_valid

    def test_no_participants(self, validator, room):
        result = validator.validate_edit(room, "New name", [])
        assert [i.field for i in result.issues] == ["participants"]

    def test_undeterminable_amount(self, validator, room):
        broken = room.model_copy(update={"payments": []})
        result = validator.validate_edit(broken, "New name", [Participant(id="alice")])
        assert [i.field for i in result.issues] == ["payments"]


class TestPaymentValidation:
    """Tests for validate_payment()."""

    def test_within_amount_owed(self, validator):
        assert validator.validate_payment(Decimal("40"), Decimal("40.00")).is_valid

    def test_above_amount_owed(self, validator):
        result = validator.validate_payment(Decimal("40.01"), Decimal("40.00"))
        issue = result.issues[0]
        assert issue.issue_type == "too_high"
        assert issue.suggested_fix == "Record at most 40.00"

    def test_zero(self, validator):
        result = validator.validate_payment(0, Decimal("40.00"))
        assert result.issues[0].issue_type == "invalid_value"

    def test_nothing_owed(self, validator):
        assert validator.validate_payment(Decimal("1"), Decimal("0.00")).has_errors

    def test_not_a_number(self, validator):
        result = validator.validate_payment("abc", Decimal("40.00"))
        assert result.issues[0].issue_type == "invalid_format"

    @pytest.mark.parametrize("amount", ["NaN", float("nan")])
    def test_nan_amount(self, validator, amount):
        result = validator.validate_payment(amount, Decimal("40.00"))
        assert [i.issue_type for i in result.issues] == ["invalid_format"]


class TestCommentValidation:
    """Tests for validate_comment()."""

    def test_valid(self, validator):
        assert validator.validate_comment("Sent my share!").is_valid

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank(self, validator, text):
        assert validator.validate_comment(text).has_errors

    def test_too_long(self, validator):
        assert validator.validate_comment("x" * 2001).issues[0].issue_type == "too_long"


class TestEnsureValid:
    """Tests for ensure_valid()."""

    def test_passes_valid_result(self, validator):
        result = validator.validate_comment("ok")
        assert ensure_valid(result) is result

    def test_raises_with_issues(self, validator):
        with pytest.raises(RoomValidationError) as exc_info:
            ensure_valid(validator.validate_payment(Decimal("5"), Decimal("1.00")))
        assert exc_info.value.issues[0].field == "amount"
        assert "record_payment rejected" in str(exc_info.value)
