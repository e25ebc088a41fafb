"""
Period Enumeration

Turns a schedule (cadence + anchor) into the ordered list of billing
periods that have started up to a given instant.

DESIGN DECISION: Each period starts one cadence step after the previous
one. Month and year arithmetic clamps to the end of shorter months, so a
Jan 31 monthly schedule steps Jan 31, Feb 29, Mar 29 and stays on the 29th.

Every walk is bounded: an unknown cadence fails immediately, and a walk
that exceeds the configured step limit raises instead of looping.
"""

from datetime import datetime
from typing import Optional

from dateutil.relativedelta import relativedelta

from savings_ledger.config import get_settings
from savings_ledger.models.room import PaymentPeriod, Period, Schedule
from savings_ledger.timeutils import ensure_utc, utc_now


class ScheduleError(Exception):
    """Base exception for schedule computations."""
    pass


class UnsupportedCadenceError(ScheduleError):
    """The cadence has no step function."""

    def __init__(self, cadence):
        self.cadence = cadence
        super().__init__(f"Unsupported payment period: {cadence!r}")


class ScheduleOverflowError(ScheduleError):
    """Walking the schedule exceeded the configured step limit."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Schedule walk exceeded {limit} steps")


_STEPS = {
    PaymentPeriod.HOURLY: relativedelta(hours=1),
    PaymentPeriod.WEEKLY: relativedelta(weeks=1),
    PaymentPeriod.BI_WEEKLY: relativedelta(weeks=2),
    PaymentPeriod.MONTHLY: relativedelta(months=1),
    PaymentPeriod.YEARLY: relativedelta(years=1),
}


def cadence_step(cadence: PaymentPeriod, count: int = 1) -> relativedelta:
    """
    Calendar offset of `count` cadence steps.

    Raises UnsupportedCadenceError for one-time or unknown cadences.
    """
    try:
        step = _STEPS[cadence]
    except (KeyError, TypeError):
        raise UnsupportedCadenceError(cadence) from None
    return step * count


def step_limit(max_steps: Optional[int] = None) -> int:
    """Resolve the walk bound, defaulting to settings."""
    if max_steps is not None:
        return max_steps
    return get_settings().accounting.max_schedule_steps


def schedule_start(schedule: Schedule) -> datetime:
    """
    First period start: the anchor truncated to the hour for hourly
    schedules, to the day for everything else.
    """
    anchor = ensure_utc(schedule.anchor)
    if schedule.cadence == PaymentPeriod.HOURLY:
        return anchor.replace(minute=0, second=0, microsecond=0)
    return anchor.replace(hour=0, minute=0, second=0, microsecond=0)


def period_key(cadence: PaymentPeriod, start: datetime) -> str:
    """Key identifying the calendar period that begins at `start`."""
    if cadence == PaymentPeriod.HOURLY:
        return start.strftime("%Y-%m-%d-%H")
    if cadence == PaymentPeriod.MONTHLY:
        return start.strftime("%Y-%m")
    if cadence == PaymentPeriod.YEARLY:
        return f"{start.year:04d}"
    if cadence in (PaymentPeriod.WEEKLY, PaymentPeriod.BI_WEEKLY):
        iso_year, iso_week, _ = start.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    raise UnsupportedCadenceError(cadence)


def period_label(cadence: PaymentPeriod, start: datetime) -> str:
    """
    Locale-neutral (English) label. Localized labels come from
    savings_ledger.i18n.
    """
    if cadence == PaymentPeriod.HOURLY:
        hour = start.hour % 12 or 12
        meridiem = "AM" if start.hour < 12 else "PM"
        return f"{start:%b} {start.day}, {hour} {meridiem}"
    if cadence == PaymentPeriod.MONTHLY:
        return f"{start:%B} {start.year}"
    if cadence == PaymentPeriod.YEARLY:
        return str(start.year)
    if cadence == PaymentPeriod.WEEKLY:
        iso_year, iso_week, _ = start.isocalendar()
        return f"Week {iso_week}, {iso_year}"
    if cadence == PaymentPeriod.BI_WEEKLY:
        return f"Bi-weekly from {start:%b} {start.day}"
    raise UnsupportedCadenceError(cadence)


def enumerate_periods(
    schedule: Schedule,
    as_of: Optional[datetime] = None,
    max_steps: Optional[int] = None,
) -> list[Period]:
    """
    List every period of the schedule whose start is not after `as_of`.

    Args:
        schedule: Cadence and anchor instant
        as_of: Cut-off instant (defaults to now, UTC)
        max_steps: Walk bound (defaults to settings)

    Returns:
        Periods in strictly ascending start order. Empty for one-time
        schedules and for anchors in the future.

    Raises:
        UnsupportedCadenceError: cadence has no step function
        ScheduleOverflowError: more than max_steps periods have elapsed
    """
    if schedule.cadence == PaymentPeriod.ONE_TIME:
        return []

    as_of = ensure_utc(as_of) if as_of is not None else utc_now()
    limit = step_limit(max_steps)
    start = schedule_start(schedule)
    step = cadence_step(schedule.cadence)

    periods = []
    index = 0
    current = start
    while current <= as_of:
        if index >= limit:
            raise ScheduleOverflowError(limit)
        periods.append(Period(
            key=period_key(schedule.cadence, current),
            label=period_label(schedule.cadence, current),
            due_date=current,
        ))
        current = current + step
        index += 1

    return periods
