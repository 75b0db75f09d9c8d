"""Scheduler — deadline-based tick loop with cooperative shutdown.

The signal handler only sets a threading.Event. The loop checks it once per
tick, after the row is written and before sleeping, so shutdown takes at
most one interval and at most one more row is written.
"""

from __future__ import annotations

import enum
import logging
import signal
import threading
import time
from typing import Callable, Iterable

from ifstat.base import CounterSource, InterfaceHandle
from ifstat.sampler import RateSample, SamplerState, sample
from ifstat.writer import RecordWriter

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class State(enum.Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


class CancelFlag:
    """Process-wide stop request, safe to set from a signal handler."""

    def __init__(self):
        self._event = threading.Event()

    def set(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def install(self, signals: Iterable[int] = SHUTDOWN_SIGNALS) -> dict[int, object]:
        """Route signals to set(). Returns the previous handlers."""
        def on_signal(signum, frame):
            self._event.set()

        previous = {}
        for signum in signals:
            previous[signum] = signal.signal(signum, on_signal)
        return previous

    @staticmethod
    def restore(previous: dict[int, object]) -> None:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


class Scheduler:
    """Drives sample → write → observe → check cancel → sleep.

    Lifecycle:
        1. __init__() takes an open writer and a resolved handle
        2. run() loops until cancelled or max_ticks is reached
        3. the writer is flushed and closed while draining
    """

    def __init__(self, source: CounterSource, handle: InterfaceHandle,
                 writer: RecordWriter, interval: int, cancel: CancelFlag, *,
                 emit_first: bool = False,
                 max_ticks: int | None = None,
                 observers: Iterable[Callable[[RateSample], None]] = (),
                 clock: Callable[[], float] = time.time,
                 monotonic: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.source = source
        self.handle = handle
        self.writer = writer
        self.interval = max(0, interval)
        self.cancel = cancel
        self.emit_first = emit_first
        self.max_ticks = max_ticks
        self.observers = list(observers)
        self.state = State.INITIALIZING
        self.sampler_state = SamplerState()
        self.ticks = 0
        self._clock = clock
        self._monotonic = monotonic
        self._sleep = sleep

    def tick(self) -> RateSample:
        """One iteration: sample, commit, write, notify."""
        current, rate = sample(self.source, self.handle, self.sampler_state, self._clock())
        self.sampler_state = self.sampler_state.commit(current)
        self.ticks += 1

        if rate.primed or self.emit_first:
            self.writer.write(rate)
        else:
            logger.debug("first tick primes the baseline, no row written")

        for observer in self.observers:
            observer(rate)
        return rate

    def run(self) -> int:
        """Blocking main loop. Returns the number of rows written."""
        self.state = State.RUNNING
        logger.info("sampling %s every %ds", self.handle.name, self.interval)

        next_tick = self._monotonic()
        try:
            while True:
                self.tick()
                if self.cancel.is_set():
                    logger.info("cancellation requested, draining")
                    break
                if self.max_ticks is not None and self.ticks >= self.max_ticks:
                    break
                next_tick += self.interval
                now = self._monotonic()
                if next_tick < now:
                    # overran: never catch up with back-to-back ticks
                    logger.debug("tick overran by %.3fs", now - next_tick)
                    next_tick = now + self.interval
                self._sleep(next_tick - now)
            self.state = State.DRAINING
            self.writer.close()
        finally:
            self.state = State.TERMINATED
        logger.info("wrote %d rows to %s", self.writer.rows, self.writer.path)
        return self.writer.rows
