"""
Live Room Updates

Two feeds a details page keeps open while it is shown:
1. RoomViewPublisher - a fresh RoomDetailsView for every stored snapshot
2. WindowProgressTicker - time-window progress on a fixed polling interval

Both are started and stopped by the caller; nothing here runs on its own.
"""

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Optional

import structlog

from savings_ledger.accounting import build_room_view, current_window_progress
from savings_ledger.config import get_settings
from savings_ledger.models.room import PaymentPeriod, SavingRoom, Schedule
from savings_ledger.models.views import RoomDetailsView, WindowProgress
from savings_ledger.services.storage import RoomStorageInterface, Unsubscribe
from savings_ledger.timeutils import utc_now

logger = structlog.get_logger(__name__)

_STOP = object()


class RoomViewPublisher:
    """
    Recomputes the room details view on every pushed snapshot.

    Storage listeners are synchronous, so snapshots are queued and the
    view is built when the caller drains the queue (or runs the loop).
    """

    def __init__(
        self,
        storage: RoomStorageInterface,
        room_id: str,
        on_view: Callable[[RoomDetailsView], None],
        on_gone: Optional[Callable[[], None]] = None,
        viewer_id: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage
        self._room_id = room_id
        self._on_view = on_view
        self._on_gone = on_gone
        self._viewer_id = viewer_id
        self._clock = clock or utc_now
        self._queue: asyncio.Queue = asyncio.Queue()
        self._unsubscribe: Optional[Unsubscribe] = None
        self._gone = False

    @property
    def is_active(self) -> bool:
        return self._unsubscribe is not None

    @property
    def is_gone(self) -> bool:
        return self._gone

    def _receive(self, snapshot: Optional[SavingRoom]) -> None:
        self._queue.put_nowait(snapshot)

    def start(self) -> None:
        """Subscribe to the room. Calling it twice is a no-op."""
        if self._unsubscribe is None:
            self._unsubscribe = self._storage.subscribe(self._room_id, self._receive)
            logger.debug("room_subscription_started", room_id=self._room_id)

    def stop(self) -> None:
        """Unsubscribe and wake up a pending run()."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            self._queue.put_nowait(_STOP)
            logger.debug("room_subscription_stopped", room_id=self._room_id)

    async def _publish(self, snapshot: Optional[SavingRoom]) -> None:
        if snapshot is None:
            self._gone = True
            self.stop()
            if self._on_gone:
                self._on_gone()
            return

        transactions = await self._storage.list_transactions(room_id=self._room_id)
        view = build_room_view(snapshot, transactions, self._clock(), self._viewer_id)
        self._on_view(view)

    async def refresh(self) -> None:
        """Publish the current stored snapshot, e.g. right after start()."""
        await self._publish(await self._storage.get_room(self._room_id))

    async def drain(self) -> int:
        """
        Publish every queued snapshot.

        Returns the number of snapshots handled.
        """
        handled = 0
        while not self._queue.empty():
            snapshot = self._queue.get_nowait()
            if snapshot is _STOP:
                continue
            await self._publish(snapshot)
            handled += 1
        return handled

    async def run(self) -> None:
        """Publish snapshots as they arrive until stopped or the room is deleted."""
        self.start()
        while self.is_active:
            snapshot = await self._queue.get()
            if snapshot is _STOP:
                break
            await self._publish(snapshot)


class WindowProgressTicker:
    """
    Async iterator of WindowProgress, one value per polling interval.

    One-time schedules have no window: a single empty value is produced.

    Usage:
        async for progress in WindowProgressTicker(room.schedule):
            render(progress)
    """

    def __init__(
        self,
        schedule: Schedule,
        interval: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._schedule = schedule
        self._interval = (
            interval if interval is not None
            else get_settings().accounting.window_poll_interval_seconds
        )
        self._clock = clock or utc_now
        self._sleep = sleep
        self._started = False
        self._stopped = False

    @property
    def interval(self) -> float:
        return self._interval

    def stop(self) -> None:
        self._stopped = True

    def __aiter__(self) -> "WindowProgressTicker":
        return self

    async def __anext__(self) -> WindowProgress:
        if self._stopped:
            raise StopAsyncIteration

        if self._started:
            await self._sleep(self._interval)
            if self._stopped:
                raise StopAsyncIteration
        self._started = True

        if self._schedule.cadence == PaymentPeriod.ONE_TIME:
            self._stopped = True
        return current_window_progress(self._schedule, self._clock())
