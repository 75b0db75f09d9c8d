"""Fake counter source — in-memory counters that advance on every read.

Lets you run the whole pipeline without a real NIC (``--source stub``).
"""

from __future__ import annotations

import random

from ifstat import register
from ifstat.base import CounterSource, InterfaceHandle
from ifstat.errors import CounterSourceUnavailable

STUB_INTERFACES = ["lo", "stub0", "stub1"]


@register
class StubSource(CounterSource):
    name = "stub"

    def __init__(self, names: list[str] | None = None, *,
                 counter_width: int = 64,
                 inbound_step: tuple[int, int] = (10_000, 100_000),
                 outbound_step: tuple[int, int] = (5_000, 50_000),
                 seed: int | None = None):
        self.counter_width = counter_width
        self._names = list(names) if names is not None else list(STUB_INTERFACES)
        self._inbound_step = inbound_step
        self._outbound_step = outbound_step
        self._rng = random.Random(seed)
        # Seed counters with some baseline values
        self._state = {
            name: [self._rng.randint(1_000_000, 10_000_000),
                   self._rng.randint(1_000_000, 10_000_000)]
            for name in self._names
        }

    def interfaces(self) -> list[str]:
        return list(self._names)

    def read(self, handle: InterfaceHandle) -> tuple[int, int]:
        st = self._state.get(handle.name)
        if st is None:
            raise CounterSourceUnavailable(f"no stub interface {handle.name!r}")
        mask = (1 << self.counter_width) - 1
        st[0] = (st[0] + self._rng.randint(*self._inbound_step)) & mask
        st[1] = (st[1] + self._rng.randint(*self._outbound_step)) & mask
        return st[0], st[1]
