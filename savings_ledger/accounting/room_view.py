"""
Room Details View

Assembles everything the room details page shows from one snapshot and
its payment transactions. Used both for one-off reads and for every
pushed snapshot.
"""

from datetime import datetime
from typing import Optional, Sequence

from savings_ledger.accounting.aggregate import participant_breakdowns, summarize_room
from savings_ledger.accounting.dashboard import room_payment_history
from savings_ledger.accounting.periods import enumerate_periods
from savings_ledger.accounting.window import current_window_progress
from savings_ledger.models.room import SavingRoom, Transaction
from savings_ledger.models.views import RoomDetailsView
from savings_ledger.timeutils import ensure_utc, utc_now


def build_room_view(
    room: SavingRoom,
    transactions: Sequence[Transaction] = (),
    now: Optional[datetime] = None,
    viewer_id: Optional[str] = None,
    max_steps: Optional[int] = None,
) -> RoomDetailsView:
    """
    Compute the full details view of a room as of `now`.

    Periods and the time window share the same instant so the two
    never disagree about which period is open.
    """
    now = ensure_utc(now) if now is not None else utc_now()
    schedule = room.schedule
    periods = enumerate_periods(schedule, now, max_steps)

    return RoomDetailsView(
        room=room,
        computed_at=now,
        is_creator=viewer_id is not None and viewer_id == room.creator_id,
        periods=periods,
        summary=summarize_room(room, periods),
        breakdowns=participant_breakdowns(room, periods),
        window=current_window_progress(schedule, now, max_steps),
        payment_history=room_payment_history(transactions, room.id),
        discussion=sorted(room.discussion, key=lambda c: c.created_at, reverse=True),
    )
