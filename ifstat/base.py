"""CounterSource — shared interface for all interface byte-counter backends.

Subclasses implement: name, interfaces(), read(). Optionally override
counter_width, is_available() and close().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class InterfaceHandle:
    """A resolved interface. index is the 1-based enumeration row."""
    index: int
    name: str


@dataclass(frozen=True)
class CounterSample:
    """Cumulative byte counters read at one instant."""
    timestamp: float        # epoch seconds, wall clock
    inbound_bytes: int
    outbound_bytes: int


# Priming baseline used before the first real read
SENTINEL = CounterSample(timestamp=0.0, inbound_bytes=0, outbound_bytes=0)


class CounterSource(ABC):
    """Abstract base for all counter sources.

    Lifecycle:
        1. interfaces() is called once by the resolver
        2. read() is called each tick with the resolved handle
        3. close() is called on exit
    """

    name: str = ""                # e.g. "proc" — used by registry & --source
    counter_width: int = 64       # bits; narrower counters get wrap compensation

    @abstractmethod
    def interfaces(self) -> list[str]:
        """Return interface names in enumeration order."""

    @abstractmethod
    def read(self, handle: InterfaceHandle) -> tuple[int, int]:
        """Return cumulative (inbound_bytes, outbound_bytes) for handle."""

    def close(self) -> None:
        """Called on exit. Override to release resources."""

    @classmethod
    def is_available(cls) -> bool:
        """Return True if this source can run on the current system."""
        return True
