"""
Tests for aggregate accounting: totals, standings, progress and cards.
"""

from datetime import datetime, timezone
from decimal import Decimal

from savings_ledger.accounting import (
    amount_still_owed,
    enumerate_periods,
    participant_breakdowns,
    participant_due_to_date,
    participant_status,
    room_card_summary,
    summarize_room,
    total_due_to_date,
    total_paid,
)
from savings_ledger.models import (
    Participant,
    ParticipantPayment,
    ParticipantStatus,
    PaymentPeriod,
    SavingRoom,
)

ANCHOR = datetime(2024, 1, 1, tzinfo=timezone.utc)
AS_OF = datetime(2024, 3, 15, tzinfo=timezone.utc)


def make_room(
    payment_period: PaymentPeriod = PaymentPeriod.MONTHLY,
    amount_due: str = "100",
    paid: tuple = ("0", "0"),
    total_amount: str = None,
) -> SavingRoom:
    ids = ["alice", "bob", "carol"][:len(paid)]
    return SavingRoom(
        id="room-1",
        name="Holiday fund",
        creator_id="alice",
        payment_period=payment_period,
        created_at=ANCHOR,
        total_amount=Decimal(total_amount) if total_amount is not None else Decimal(amount_due) * len(ids),
        participants=[Participant(id=i, name=i.title()) for i in ids],
        participant_ids=ids,
        payments=[
            ParticipantPayment(user_id=i, amount_due=Decimal(amount_due), amount_paid=Decimal(p))
            for i, p in zip(ids, paid)
        ],
    )


def periods_for(room: SavingRoom):
    return enumerate_periods(room.schedule, AS_OF)


class TestTotals:
    """Room-wide due-to-date and paid totals."""

    def test_recurring_due_to_date(self):
        """Two participants x 100 x 3 elapsed months."""
        room = make_room()
        assert total_due_to_date(room, periods_for(room)) == Decimal("600.00")

    def test_one_time_due_is_flat_total(self):
        room = make_room(payment_period=PaymentPeriod.ONE_TIME)
        assert periods_for(room) == []
        assert total_due_to_date(room, []) == Decimal("200.00")

    def test_total_paid(self):
        room = make_room(paid=("120.10", "30.05"))
        assert total_paid(room) == Decimal("150.15")

    def test_summary_progress(self):
        room = make_room(paid=("300", "150"))
        summary = summarize_room(room, periods_for(room))

        assert summary.total_due_to_date == Decimal("600.00")
        assert summary.total_paid_amount == Decimal("450.00")
        assert summary.overall_progress == 75.0

    def test_progress_is_not_capped(self):
        room = make_room(paid=("600", "600"))
        summary = summarize_room(room, periods_for(room))
        assert summary.overall_progress == 200.0

    def test_zero_total_has_zero_progress(self):
        """Nothing due means 0%, not a division error."""
        room = make_room(amount_due="0", paid=("0", "0"), total_amount="0")
        summary = summarize_room(room, periods_for(room))
        assert summary.total_due_to_date == Decimal("0.00")
        assert summary.overall_progress == 0.0

    def test_future_room_has_nothing_due(self):
        room = make_room()
        summary = summarize_room(room, [])
        assert summary.total_due_to_date == Decimal("0.00")
        assert summary.overall_progress == 0.0

    def test_repeat_calls_are_identical(self):
        room = make_room(paid=("120", "0"))
        periods = periods_for(room)
        assert summarize_room(room, periods) == summarize_room(room, periods)


class TestParticipantStatus:
    """paid / partially_paid / pending classification."""

    def test_exactly_due_is_paid(self):
        payment = ParticipantPayment(user_id="a", amount_due=Decimal("100"), amount_paid=Decimal("300"))
        assert participant_status(payment, Decimal("300.00")) == ParticipantStatus.PAID

    def test_one_cent_short_is_partially_paid(self):
        payment = ParticipantPayment(user_id="a", amount_due=Decimal("100"), amount_paid=Decimal("299.99"))
        assert participant_status(payment, Decimal("300.00")) == ParticipantStatus.PARTIALLY_PAID

    def test_nothing_paid_is_pending(self):
        payment = ParticipantPayment(user_id="a", amount_due=Decimal("100"))
        assert participant_status(payment, Decimal("300.00")) == ParticipantStatus.PENDING

    def test_nothing_due_and_nothing_paid_is_pending(self):
        payment = ParticipantPayment(user_id="a", amount_due=Decimal("100"))
        assert participant_status(payment, Decimal("0.00")) == ParticipantStatus.PENDING

    def test_paid_ahead_before_anything_is_due(self):
        payment = ParticipantPayment(user_id="a", amount_due=Decimal("100"), amount_paid=Decimal("50"))
        assert participant_status(payment, Decimal("0.00")) == ParticipantStatus.PARTIALLY_PAID


class TestStandings:
    """Per-participant standings and chart series."""

    def test_standings_follow_room_order(self):
        room = make_room(paid=("300", "120"))
        summary = summarize_room(room, periods_for(room))

        alice, bob = summary.standings
        assert alice.participant.id == "alice"
        assert alice.due_to_date == Decimal("300.00")
        assert alice.status == ParticipantStatus.PAID
        assert bob.amount_owed == Decimal("180.00")
        assert bob.status == ParticipantStatus.PARTIALLY_PAID

    def test_chart_entries(self):
        room = make_room(paid=("350", "120"))
        chart = summarize_room(room, periods_for(room)).chart

        assert chart[0].name == "Alice"
        assert chart[0].paid == Decimal("350.00")
        assert chart[0].pending == Decimal("0.00")
        assert chart[1].pending == Decimal("180.00")
        assert chart[1].total == Decimal("300.00")

    def test_participant_without_payment_is_skipped(self):
        """A broken pairing drops the participant instead of failing."""
        room = make_room(paid=("0", "0")).model_copy(update={
            "participants": [
                Participant(id="alice", name="Alice"),
                Participant(id="bob", name="Bob"),
                Participant(id="dave", name="Dave"),
            ],
        })
        periods = periods_for(room)
        summary = summarize_room(room, periods)

        assert [s.participant.id for s in summary.standings] == ["alice", "bob"]
        assert set(participant_breakdowns(room, periods)) == {"alice", "bob"}

    def test_one_time_due_to_date(self):
        payment = ParticipantPayment(user_id="a", amount_due=Decimal("80"), amount_paid=Decimal("20"))
        assert participant_due_to_date(payment, PaymentPeriod.ONE_TIME, []) == Decimal("80.00")
        assert amount_still_owed(payment, PaymentPeriod.ONE_TIME, []) == Decimal("60.00")

    def test_amount_still_owed_never_negative(self):
        room = make_room(paid=("1000", "0"))
        periods = periods_for(room)
        assert amount_still_owed(room.payments[0], room.payment_period, periods) == Decimal("0.00")
        assert amount_still_owed(room.payments[1], room.payment_period, periods) == Decimal("300.00")


class TestBreakdowns:
    """Per-participant period waterfall."""

    def test_breakdown_per_participant(self):
        room = make_room(paid=("250", "0"))
        breakdowns = participant_breakdowns(room, periods_for(room))

        assert [a.paid for a in breakdowns["alice"]] == [Decimal("100.00"), Decimal("100.00"), Decimal("50.00")]
        assert [a.period.key for a in breakdowns["bob"]] == ["2024-01", "2024-02", "2024-03"]

    def test_one_time_has_no_breakdown(self):
        room = make_room(payment_period=PaymentPeriod.ONE_TIME, paid=("50", "0"))
        assert participant_breakdowns(room, []) == {}


class TestRoomCard:
    """Room list progress, measured against one period's total."""

    def test_in_progress(self):
        card = room_card_summary(make_room(paid=("100", "50")))
        assert card.paid_amount == Decimal("150.00")
        assert card.progress == 75.0
        assert card.is_completed is False

    def test_completed(self):
        card = room_card_summary(make_room(paid=("100", "100")))
        assert card.progress == 100.0
        assert card.is_completed is True

    def test_zero_total(self):
        card = room_card_summary(make_room(amount_due="0", total_amount="0"))
        assert card.progress == 0.0
        assert card.is_completed is False
