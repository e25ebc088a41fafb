"""
Time-Window Progress

How far "now" is through the currently open period of a schedule,
independent of payments. The caller re-invokes this on a timer; nothing
here schedules itself.
"""

from datetime import datetime
from typing import Optional

from savings_ledger.accounting.periods import (
    ScheduleOverflowError,
    cadence_step,
    step_limit,
)
from savings_ledger.models.room import PaymentPeriod, Schedule
from savings_ledger.models.views import WindowProgress
from savings_ledger.timeutils import ensure_utc, utc_now


def current_window(
    schedule: Schedule,
    now: Optional[datetime] = None,
    max_steps: Optional[int] = None,
) -> tuple[datetime, datetime]:
    """
    (period_start, period_end) of the open period. Each period starts where
    the previous one ended; the open one is the first whose end is after
    `now`.

    Unlike period enumeration, the anchor is not truncated.

    Raises:
        UnsupportedCadenceError: one-time or unknown cadence
        ScheduleOverflowError: more than max_steps periods have elapsed
    """
    now = ensure_utc(now) if now is not None else utc_now()
    limit = step_limit(max_steps)
    anchor = ensure_utc(schedule.anchor)

    step = cadence_step(schedule.cadence)
    index = 0
    period_start = anchor
    period_end = anchor + step
    while period_end <= now:
        index += 1
        if index >= limit:
            raise ScheduleOverflowError(limit)
        period_start = period_end
        period_end = period_start + step

    return period_start, period_end


def current_window_progress(
    schedule: Schedule,
    now: Optional[datetime] = None,
    max_steps: Optional[int] = None,
) -> WindowProgress:
    """
    Percent of the open period that has elapsed, clamped to [0, 100].

    One-time schedules have no window and return an empty result.
    """
    if schedule.cadence == PaymentPeriod.ONE_TIME:
        return WindowProgress()

    now = ensure_utc(now) if now is not None else utc_now()
    period_start, period_end = current_window(schedule, now, max_steps)

    total = (period_end - period_start).total_seconds()
    elapsed = (now - period_start).total_seconds()
    progress = elapsed / total * 100 if total > 0 else 0.0

    return WindowProgress(
        progress_percent=max(0.0, min(100.0, progress)),
        period_start=period_start,
        period_end=period_end,
    )
