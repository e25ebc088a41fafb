"""
Display Strings

Turns the raw values produced by the accounting core into localized
text. Numbers and currency are left to the renderer.
"""

from datetime import datetime
from typing import Optional

from savings_ledger.i18n.translator import Translator
from savings_ledger.models.room import ParticipantStatus, PaymentPeriod, Period
from savings_ledger.models.views import CategoryShare
from savings_ledger.timeutils import ensure_utc, utc_now

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY


def status_label(status: ParticipantStatus, t: Translator) -> str:
    return t(f"status.{status.value}")


def room_card_label(is_completed: bool, t: Translator) -> str:
    return t("room_card.completed" if is_completed else "room_card.in_progress")


def category_label(share: CategoryShare, t: Translator) -> str:
    """Category name, with the empty-chart placeholder translated."""
    if share.is_placeholder:
        return t("dashboard.no_expenses")
    return share.category


def _distance(seconds: float, t: Translator) -> str:
    """Rough human distance, in the spirit of "about 3 hours"."""
    if seconds < 45:
        return t("relative.less_than_minute")
    if seconds < 45 * _MINUTE:
        minutes = max(1, round(seconds / _MINUTE))
        return t("relative.minute") if minutes == 1 else t("relative.minutes", {"count": minutes})
    if seconds < _DAY:
        hours = max(1, round(seconds / _HOUR))
        return t("relative.hour") if hours == 1 else t("relative.hours", {"count": hours})
    if seconds < _MONTH:
        days = max(1, round(seconds / _DAY))
        return t("relative.day") if days == 1 else t("relative.days", {"count": days})
    if seconds < _YEAR:
        months = max(1, round(seconds / _MONTH))
        return t("relative.month") if months == 1 else t("relative.months", {"count": months})
    years = max(1, round(seconds / _YEAR))
    return t("relative.year") if years == 1 else t("relative.years", {"count": years})


def describe_remaining(
    period_end: Optional[datetime],
    t: Translator,
    now: Optional[datetime] = None,
) -> str:
    """
    "In 3 days" style text for the end of the open period.

    Empty for schedules without a window (one-time rooms).
    """
    if period_end is None:
        return ""
    now = ensure_utc(now) if now is not None else utc_now()
    delta = (ensure_utc(period_end) - now).total_seconds()

    distance = _distance(abs(delta), t)
    key = "relative.future" if delta >= 0 else "relative.past"
    text = t(key, {"distance": distance})
    return text[:1].upper() + text[1:]


def localized_period_label(period: Period, cadence: PaymentPeriod, t: Translator) -> str:
    """Period label in the translator's locale."""
    start = period.due_date
    iso_year, iso_week, _ = start.isocalendar()
    params = {
        "year": start.year if cadence != PaymentPeriod.WEEKLY else iso_year,
        "week": iso_week,
        "day": start.day,
        "month": t(f"calendar.months.{start.month}"),
        "month_short": t(f"calendar.months_short.{start.month}"),
        "hour12": start.hour % 12 or 12,
        "hour24": f"{start.hour:02d}",
        "meridiem": t("calendar.am") if start.hour < 12 else t("calendar.pm"),
    }
    return t(f"periods.{cadence.value}", params)
