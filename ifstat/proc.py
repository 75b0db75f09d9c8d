"""Linux counter source — reads /proc/net/dev."""

from __future__ import annotations

import os

from ifstat import register
from ifstat.base import CounterSource, InterfaceHandle
from ifstat.errors import CounterSourceUnavailable

PROC_NET_DEV = "/proc/net/dev"


@register
class ProcNetDevSource(CounterSource):
    name = "proc"

    def __init__(self, path: str = PROC_NET_DEV):
        self._path = path

    def interfaces(self) -> list[str]:
        return list(self._read_table())

    def read(self, handle: InterfaceHandle) -> tuple[int, int]:
        table = self._read_table()
        try:
            return table[handle.name]
        except KeyError:
            raise CounterSourceUnavailable(
                f"interface {handle.name!r} disappeared from {self._path}"
            ) from None

    def _read_table(self) -> dict[str, tuple[int, int]]:
        """Parse /proc/net/dev → {iface: (rx_bytes, tx_bytes)} in file order."""
        table = {}
        try:
            with open(self._path) as f:
                for line in f:
                    if ":" not in line:
                        continue
                    iface, data = line.split(":", 1)
                    parts = data.split()
                    if len(parts) < 9:
                        continue
                    table[iface.strip()] = (int(parts[0]),   # receive bytes
                                            int(parts[8]))   # transmit bytes
        except (OSError, ValueError) as exc:
            raise CounterSourceUnavailable(f"{self._path}: {exc}") from exc
        return table

    @classmethod
    def is_available(cls) -> bool:
        return os.path.exists(PROC_NET_DEV)
