"""Mini README: Cancellable delayed callbacks for the USSD simulator.

Structure:
    * ScheduledCall - handle returned by a scheduler; ``cancel`` stops it.
    * Scheduler - abstract interface with a single ``schedule`` method.
    * TimerScheduler - wall-clock delays using daemon ``threading.Timer``.
    * ManualScheduler - virtual clock advanced explicitly by the caller.

The manual scheduler runs due callbacks synchronously inside ``advance`` so
tests and step-driven front ends can reproduce timer behaviour exactly.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Callback = Callable[[], None]


class ScheduledCall(ABC):
    """Handle for a callback that has not fired yet."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""


class Scheduler(ABC):
    """Run callbacks after a delay."""

    @abstractmethod
    def schedule(self, delay_seconds: float, callback: Callback) -> ScheduledCall:
        """Arrange for ``callback`` to run once ``delay_seconds`` have passed."""


class _TimerCall(ScheduledCall):
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class TimerScheduler(Scheduler):
    """Fire callbacks from background timer threads."""

    def schedule(self, delay_seconds: float, callback: Callback) -> ScheduledCall:
        timer = threading.Timer(delay_seconds, callback)
        timer.daemon = True
        timer.start()
        LOGGER.debug("Timer scheduled to fire in %.2fs", delay_seconds)
        return _TimerCall(timer)


@dataclass(slots=True)
class _ManualCall(ScheduledCall):
    due_at: float
    callback: Callback
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Virtual clock that only moves when ``advance`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._calls: List[_ManualCall] = []

    def schedule(self, delay_seconds: float, callback: Callback) -> ScheduledCall:
        call = _ManualCall(due_at=self.now + delay_seconds, callback=callback)
        self._calls.append(call)
        return call

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that are neither cancelled nor run."""

        return sum(1 for call in self._calls if not call.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every callback that became due.

        Returns the number of callbacks executed.
        """

        self.now += seconds
        due = sorted(
            (call for call in self._calls if call.due_at <= self.now),
            key=lambda call: call.due_at,
        )
        self._calls = [call for call in self._calls if call.due_at > self.now]
        executed = 0
        for call in due:
            if call.cancelled:
                continue
            call.callback()
            executed += 1
        return executed
