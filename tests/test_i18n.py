"""
Tests for translation and display strings.
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from savings_ledger.i18n import (
    Translator,
    UnknownLocaleError,
    category_label,
    describe_remaining,
    get_translator,
    interpolate,
    load_messages,
    localized_period_label,
    normalize_locale,
    room_card_label,
    status_label,
)
from savings_ledger.models import CategoryShare, ParticipantStatus, PaymentPeriod, Period

NOW = datetime(2024, 3, 10, 12, tzinfo=timezone.utc)


def period_at(start: datetime) -> Period:
    return Period(key="k", label="l", due_date=start)


class TestTranslator:
    """Tests for Translator lookups."""

    def test_interpolation(self):
        t = Translator("xx", {"greeting": {"hello": "Hi {name}"}})
        assert t("greeting.hello", {"name": "Bo"}) == "Hi Bo"

    def test_unknown_placeholder_left_alone(self):
        assert interpolate("{a} and {b}", {"a": 1}) == "1 and {b}"

    def test_missing_key_returns_key(self):
        t = Translator("xx", {})
        assert t("nothing.here") == "nothing.here"

    def test_branch_key_is_not_a_message(self):
        t = Translator("xx", {"status": {"paid": "Paid"}})
        assert t("status") == "status"

    def test_missing_key_uses_fallback(self):
        t = Translator("xx", {}, fallback=Translator("en", {"status": {"paid": "Paid"}}))
        assert t("status.paid") == "Paid"

    def test_bundles_have_the_same_keys(self):
        def keys(tree, prefix=""):
            for name, value in tree.items():
                if isinstance(value, dict):
                    yield from keys(value, f"{prefix}{name}.")
                else:
                    yield f"{prefix}{name}"

        assert set(keys(load_messages("en"))) == set(keys(load_messages("es")))

    def test_unknown_bundle(self):
        with pytest.raises(UnknownLocaleError):
            load_messages("xx")


class TestLocaleSelection:
    """Tests for locale normalization."""

    def test_region_is_dropped(self):
        assert normalize_locale("es-ES") == "es"
        assert get_translator("es-ES").locale == "es"

    def test_unsupported_uses_default(self):
        assert normalize_locale("fr") == "en"
        assert get_translator("fr")("status.paid") == "Paid"

    def test_default_from_environment(self, monkeypatch):
        monkeypatch.setenv("I18N_DEFAULT_LOCALE", "es")
        assert normalize_locale(None) == "es"


class TestLabels:
    """Tests for status, card and category labels."""

    def test_status_labels(self):
        assert status_label(ParticipantStatus.PARTIALLY_PAID, get_translator("en")) == "Partially paid"
        assert status_label(ParticipantStatus.PAID, get_translator("es")) == "Pagado"

    def test_room_card_labels(self):
        assert room_card_label(True, get_translator("en")) == "Completed"
        assert room_card_label(False, get_translator("es")) == "En progreso"

    def test_placeholder_category_is_translated(self):
        placeholder = CategoryShare(category="No Expenses", amount=Decimal("1"), percentage=100, is_placeholder=True)
        real = CategoryShare(category="Food", amount=Decimal("5"), percentage=100)

        assert category_label(placeholder, get_translator("es")) == "Sin gastos"
        assert category_label(real, get_translator("es")) == "Food"


class TestPeriodLabels:
    """Tests for localized_period_label()."""

    def test_english_matches_neutral_labels(self):
        t = get_translator("en")
        start = datetime(2024, 3, 4, 15, tzinfo=timezone.utc)

        assert localized_period_label(period_at(start), PaymentPeriod.MONTHLY, t) == "March 2024"
        assert localized_period_label(period_at(start), PaymentPeriod.WEEKLY, t) == "Week 10, 2024"
        assert localized_period_label(period_at(start), PaymentPeriod.BI_WEEKLY, t) == "Bi-weekly from Mar 4"
        assert localized_period_label(period_at(start), PaymentPeriod.HOURLY, t) == "Mar 4, 3 PM"
        assert localized_period_label(period_at(start), PaymentPeriod.YEARLY, t) == "2024"

    def test_spanish(self):
        t = get_translator("es")
        start = datetime(2024, 3, 4, 15, tzinfo=timezone.utc)

        assert localized_period_label(period_at(start), PaymentPeriod.MONTHLY, t) == "marzo 2024"
        assert localized_period_label(period_at(start), PaymentPeriod.WEEKLY, t) == "Semana 10, 2024"
        assert localized_period_label(period_at(start), PaymentPeriod.HOURLY, t) == "4 mar, 15:00"


class TestDescribeRemaining:
    """Tests for describe_remaining()."""

    def test_future_days(self):
        text = describe_remaining(NOW + timedelta(days=3), get_translator("en"), now=NOW)
        assert text == "In 3 days"

    def test_spanish(self):
        text = describe_remaining(NOW + timedelta(days=3), get_translator("es"), now=NOW)
        assert text == "En 3 días"

    def test_past_hours(self):
        text = describe_remaining(NOW - timedelta(hours=2), get_translator("en"), now=NOW)
        assert text == "About 2 hours ago"

    def test_under_a_minute(self):
        text = describe_remaining(NOW + timedelta(seconds=20), get_translator("en"), now=NOW)
        assert text == "In less than a minute"

    def test_no_window(self):
        assert describe_remaining(None, get_translator("en"), now=NOW) == ""
