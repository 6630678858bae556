# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for periodic timers.

Scheduling is cooperative and single-threaded: a callback always runs to
completion before the next one starts, and a cancelled timer never fires
again.
"""
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    """Handle to a recurring timer."""

    @property
    def cancelled(self) -> bool:
        ...

    def cancel(self) -> None:
        """Stop the timer. Idempotent."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Port for recurring callbacks."""

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback every interval_s seconds, first run one interval from now."""
        ...
