"""Portable counter source — psutil per-NIC I/O counters."""

from __future__ import annotations

from ifstat import register
from ifstat.base import CounterSource, InterfaceHandle
from ifstat.errors import CounterSourceUnavailable


@register
class PsutilSource(CounterSource):
    name = "psutil"

    def __init__(self):
        import psutil
        self._psutil = psutil

    def interfaces(self) -> list[str]:
        return list(self._counters())

    def read(self, handle: InterfaceHandle) -> tuple[int, int]:
        nio = self._counters().get(handle.name)
        if nio is None:
            raise CounterSourceUnavailable(f"interface {handle.name!r} disappeared")
        return nio.bytes_recv, nio.bytes_sent

    def _counters(self) -> dict:
        # nowrap=True lets psutil stitch 32-bit kernel counters back together
        try:
            return self._psutil.net_io_counters(pernic=True, nowrap=True)
        except (OSError, self._psutil.Error) as exc:
            raise CounterSourceUnavailable(f"psutil.net_io_counters: {exc}") from exc

    @classmethod
    def is_available(cls) -> bool:
        try:
            import psutil
            psutil.net_io_counters(pernic=True)
            return True
        except Exception:
            return False
