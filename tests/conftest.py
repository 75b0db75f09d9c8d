from __future__ import annotations

import logging

import pytest

from ifstat.base import CounterSource, InterfaceHandle


class FakeSource(CounterSource):
    """Counter source that replays scripted (inbound, outbound) readings."""

    name = "fake"

    def __init__(self, readings=(), names=("lo", "eth0"), counter_width=64):
        self.readings = list(readings)
        self.names = list(names)
        self.counter_width = counter_width
        self.reads = 0

    def interfaces(self) -> list[str]:
        return list(self.names)

    def read(self, handle: InterfaceHandle) -> tuple[int, int]:
        value = self.readings[min(self.reads, len(self.readings) - 1)]
        self.reads += 1
        return value


class FakeClock:
    """Wall clock, monotonic clock and sleep sharing one virtual time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
