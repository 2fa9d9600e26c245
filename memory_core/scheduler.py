from __future__ import annotations

import abc
import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class Handle:
    """A scheduled one-shot or recurring callback that can be cancelled."""

    def __init__(self, callback: Callback, interval: Optional[float] = None) -> None:
        self.callback = callback
        self.interval = interval
        self.cancelled = False
        self.fired = False

    @property
    def recurring(self) -> bool:
        return self.interval is not None

    @property
    def active(self) -> bool:
        if self.cancelled:
            return False
        return self.recurring or not self.fired

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(abc.ABC):
    """Timed-task facility: one-shot delayed callbacks and recurring ticks."""

    @abc.abstractmethod
    def call_later(self, delay: float, callback: Callback) -> Handle:
        """Runs ``callback`` once, ``delay`` seconds from now."""

    @abc.abstractmethod
    def call_every(self, interval: float, callback: Callback) -> Handle:
        """Runs ``callback`` every ``interval`` seconds until cancelled."""


def _check_delay(delay: float) -> None:
    if delay < 0:
        raise ValueError(f'delay must be non-negative, got {delay}')


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler; nothing runs until ``advance`` is called.

    Used by the tests and by the terminal front end, which feeds it
    wall-clock deltas from a single thread.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, Handle]] = []
        self._seq = itertools.count()

    def _push(self, due: float, handle: Handle) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), handle))

    def call_later(self, delay: float, callback: Callback) -> Handle:
        _check_delay(delay)
        handle = Handle(callback)
        self._push(self.now + delay, handle)
        return handle

    def call_every(self, interval: float, callback: Callback) -> Handle:
        if interval <= 0:
            raise ValueError(f'interval must be positive, got {interval}')
        handle = Handle(callback, interval=interval)
        self._push(self.now + interval, handle)
        return handle

    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if handle.active)

    def advance(self, seconds: float) -> None:
        """Moves the clock forward, running every task that falls due on the way."""
        _check_delay(seconds)
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            handle.fired = True
            try:
                handle.callback()
            finally:
                # Re-armed even when the callback raises; the error still propagates.
                if handle.recurring and not handle.cancelled:
                    self._push(due + handle.interval, handle)
        self.now = target


class _TimerHandle(Handle):
    """Handle backed by a chain of ``threading.Timer`` objects."""

    def __init__(self, callback: Callback, delay: float, interval: Optional[float] = None) -> None:
        super().__init__(callback, interval)
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        # Recurring fires are pinned to origin + n * interval.
        self._origin = time.monotonic() + delay
        self._runs = 0
        self._arm(delay)

    def _arm(self, delay: float) -> None:
        timer = threading.Timer(delay, self._run)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _run(self) -> None:
        with self._lock:
            if self.cancelled:
                return
            self.fired = True
            self._runs += 1
        try:
            self.callback()
        except Exception:
            logger.exception("[timer-error] scheduled callback raised")
        with self._lock:
            if self.recurring and not self.cancelled:
                due = self._origin + self._runs * self.interval
                self._arm(max(0.0, due - time.monotonic()))

    def cancel(self) -> None:
        with self._lock:
            self.cancelled = True
            if self._timer is not None:
                self._timer.cancel()


class ThreadingScheduler(Scheduler):
    """Wall-clock scheduler; callbacks run on daemon timer threads."""

    def call_later(self, delay: float, callback: Callback) -> Handle:
        _check_delay(delay)
        return _TimerHandle(callback, delay)

    def call_every(self, interval: float, callback: Callback) -> Handle:
        if interval <= 0:
            raise ValueError(f'interval must be positive, got {interval}')
        return _TimerHandle(callback, interval, interval=interval)


class Ticker:
    """A single recurring tick: starting again replaces the running one."""

    def __init__(self, scheduler: Scheduler, interval: float, callback: Callback) -> None:
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self._handle: Optional[Handle] = None

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self, callback: Optional[Callback] = None) -> None:
        self.stop()
        if callback is not None:
            self.callback = callback
        self._handle = self.scheduler.call_every(self.interval, self.callback)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
