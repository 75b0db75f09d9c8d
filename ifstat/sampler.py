"""Rate sampler — turns two cumulative counter samples into bytes/second.

The state lives with the caller: sample() returns the new CounterSample and
the scheduler commits it. Nothing here sleeps, writes or touches globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ifstat.base import SENTINEL, CounterSample, CounterSource, InterfaceHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateSample:
    """Throughput for one tick."""
    timestamp: float
    inbound_rate: float     # bytes/s
    outbound_rate: float    # bytes/s
    primed: bool = True     # False when computed against the sentinel baseline


@dataclass(frozen=True)
class SamplerState:
    last: CounterSample = SENTINEL
    primed: bool = False

    def commit(self, current: CounterSample) -> SamplerState:
        return SamplerState(last=current, primed=True)


def counter_delta(prev: int, cur: int, width: int = 64) -> int:
    """Bytes moved between two reads of a counter that is `width` bits wide.

    A decrease on a counter narrower than 64 bits is a single wraparound and
    is compensated. A decrease on a 64-bit counter is a reset and yields 0.
    """
    if cur >= prev:
        return cur - prev
    if width < 64:
        return cur + (1 << width) - prev
    return 0


def compute_rates(prev: CounterSample, cur: CounterSample,
                  width: int = 64, primed: bool = True) -> RateSample:
    """Per-second inbound/outbound rates between prev and cur."""
    elapsed = cur.timestamp - prev.timestamp
    if elapsed <= 0:
        if primed:
            logger.warning("clock did not advance (%.6fs), reporting 0 B/s", elapsed)
        return RateSample(cur.timestamp, 0.0, 0.0, primed)

    d_in = counter_delta(prev.inbound_bytes, cur.inbound_bytes, width)
    d_out = counter_delta(prev.outbound_bytes, cur.outbound_bytes, width)
    if primed and (cur.inbound_bytes < prev.inbound_bytes
                   or cur.outbound_bytes < prev.outbound_bytes):
        logger.warning("counter went backwards (%s bit), %s",
                       width, "compensating wrap" if width < 64 else "treating as reset")

    return RateSample(
        timestamp=cur.timestamp,
        inbound_rate=d_in / elapsed,
        outbound_rate=d_out / elapsed,
        primed=primed,
    )


def sample(source: CounterSource, handle: InterfaceHandle,
           state: SamplerState, now: float) -> tuple[CounterSample, RateSample]:
    """Read the source once and compute rates against state.last."""
    inbound, outbound = source.read(handle)
    current = CounterSample(timestamp=now, inbound_bytes=inbound, outbound_bytes=outbound)
    rate = compute_rates(state.last, current, source.counter_width, state.primed)
    logger.debug("%s in=%d out=%d → %.1f/%.1f B/s", handle.name, inbound, outbound,
                 rate.inbound_rate, rate.outbound_rate)
    return current, rate
