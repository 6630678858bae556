# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Cooperative single-threaded timer scheduler built on the sched module.

Recurring timers reschedule themselves after their callback returns, so
a callback never overlaps with its own next run. Cancelling removes the
pending event, and a timer cancelled from inside a callback is not
rescheduled.

The time and delay functions are injectable: pass a fake clock's
``time`` and ``advance`` to drive timers deterministically.
"""
import logging
import sched
import time
from typing import Callable


_log = logging.getLogger(__name__)


class RecurringTimer:
    """Handle to a self-rescheduling sched event."""

    def __init__(self, scheduler: "SchedScheduler", interval_s: float,
                 callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._interval_s = interval_s
        self._callback = callback
        self._event: sched.Event | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def interval_s(self) -> float:
        return self._interval_s

    def _arm(self) -> None:
        self._event = self._scheduler._queue.enter(self._interval_s, 0, self._fire)

    def _fire(self) -> None:
        self._event = None
        if self._cancelled:
            return
        try:
            self._callback()
        finally:
            if not self._cancelled:
                self._arm()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._event is not None:
            try:
                self._scheduler._queue.cancel(self._event)
            except ValueError:
                pass  # already popped by the run loop
            self._event = None


class SchedScheduler:
    """Scheduler port backed by sched.scheduler."""

    def __init__(
        self,
        timefunc: Callable[[], float] = time.monotonic,
        delayfunc: Callable[[float], object] = time.sleep,
    ) -> None:
        self._timefunc = timefunc
        self._delayfunc = delayfunc
        self._queue = sched.scheduler(timefunc, delayfunc)

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> RecurringTimer:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        timer = RecurringTimer(self, interval_s, callback)
        timer._arm()
        return timer

    @property
    def pending(self) -> int:
        """Number of queued events."""
        return len(self._queue.queue)

    def run_pending(self) -> None:
        """Run every event that is due now without waiting."""
        self._queue.run(blocking=False)

    def run_for(self, duration_s: float) -> None:
        """
        Run events for duration_s seconds of scheduler time.

        Events due exactly at the deadline are run.
        """
        deadline = self._timefunc() + duration_s
        while True:
            next_delay = self._queue.run(blocking=False)
            now = self._timefunc()
            if next_delay is None or now + next_delay > deadline:
                if deadline > now:
                    self._delayfunc(deadline - now)
                self._queue.run(blocking=False)
                return
            self._delayfunc(next_delay)
