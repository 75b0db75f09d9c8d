"""Live terminal chart of the sampled rates (``--graph``).

Handles: deque window, rate-limited redraw, unit auto-scaling, plotext
theming and ANSI cursor-home double-buffering.
"""

from __future__ import annotations

import math
import sys
import time
from collections import deque
from dataclasses import dataclass, field

import plotext as plt

from ifstat.sampler import RateSample

# ---- unit scaling ----

RATE_UNITS = [("B/s", 1), ("KB/s", 1024), ("MB/s", 1024**2), ("GB/s", 1024**3)]


def pick_unit(max_val: float, units: list[tuple[str, int]] | None = None) -> tuple[str, int]:
    """Choose the best unit so the peak value is readable."""
    if units is None:
        units = RATE_UNITS
    for name, divisor in reversed(units):
        if max_val >= divisor:
            return name, divisor
    return units[0]


def format_rate(bps: float, units: list[tuple[str, int]] | None = None) -> str:
    """Format a value into a human-readable string with auto-scaled units."""
    if units is None:
        units = RATE_UNITS
    for name, divisor in reversed(units):
        if bps >= divisor:
            return f"{bps / divisor:.1f} {name}"
    return f"{bps:.0f} {units[0][0]}"


@dataclass
class Series:
    """One data series on the chart."""
    name: str
    color: str
    label_fmt: str          # e.g. "↓ {}"
    data: deque = field(default=None, repr=False)
    current: float = 0.0

    def formatted_label(self) -> str:
        return self.label_fmt.format(format_rate(self.current))


class RateGraph:
    """Observer that plots inbound/outbound rates over a rolling window."""

    def __init__(self, title: str, interval: float, window: float = 60.0, *,
                 out=None):
        # interval 0 is legal for sampling; plot it as if 0.1s apart
        self.interval_s = max(0.1, float(interval))
        self.window_seconds = max(self.interval_s * 4, window)
        self.max_points = max(2, int(self.window_seconds / self.interval_s))
        self.xs = [i * self.interval_s - self.window_seconds for i in range(self.max_points)]
        self.title = title
        self.out = out if out is not None else sys.stdout
        self._last_draw = 0.0
        self.series = [
            Series("in", "green", "↓ {}", deque([0.0] * self.max_points, maxlen=self.max_points)),
            Series("out", "yellow", "↑ {}", deque([0.0] * self.max_points, maxlen=self.max_points)),
        ]

    def __call__(self, rate: RateSample) -> None:
        if not rate.primed:
            return
        for s, val in zip(self.series, (rate.inbound_rate, rate.outbound_rate)):
            s.current = val
            s.data.append(val)
        self.draw()

    def scaled(self) -> tuple[str, list[list[float]], float]:
        """Return (unit label, scaled series, y_max) for the current window."""
        peak = max((max(s.data) for s in self.series), default=1.0)
        unit_label, divisor = pick_unit(max(peak, 1.0))
        scaled = [[v / divisor for v in s.data] for s in self.series]
        y_max = math.ceil(max(max(max(vals) for vals in scaled), 0.01) * 1.15)
        return unit_label, scaled, y_max

    def draw(self) -> None:
        now = time.monotonic()
        if now - self._last_draw < 0.05:
            return
        self._last_draw = now

        unit_label, scaled, y_max = self.scaled()

        plt.clf()
        plt.theme("clear")
        plt.plotsize(None, None)
        for s, values in zip(self.series, scaled):
            plt.plot(self.xs, values, label=s.formatted_label(), color=s.color, marker="braille")

        plt.frame(False)
        plt.xticks([])
        plt.yticks([])
        plt.ylim(0, y_max)
        plt.xlim(-self.window_seconds, 0)
        plt.grid(False, False)
        plt.text(f"{self.title}  {unit_label}", x=-self.window_seconds / 2, y=y_max * 0.9,
                 color="default", alignment="center")

        self.out.write("\033[H" + plt.build().rstrip() + "\033[J")
        self.out.flush()

    def start(self) -> None:
        self.out.write("\033[?25l")  # hide cursor
        self.out.flush()

    def stop(self) -> None:
        self.out.write("\033[?25h\n")  # show cursor
        self.out.flush()
