"""CSV record writer."""

from __future__ import annotations

import csv
import io
import time

from ifstat.errors import RecordWriteError
from ifstat.sampler import RateSample

HEADER = ["date", "input in bytes per second", "output in bytes per second"]
TIME_FORMAT = "%Y.%m.%d %H:%M:%S"


def format_row(rate: RateSample) -> str:
    """Render one sample as a CSV line. Rates are truncated to whole bytes/s."""
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow([
        time.strftime(TIME_FORMAT, time.localtime(rate.timestamp)),
        int(rate.inbound_rate),
        int(rate.outbound_rate),
    ])
    return buf.getvalue()


class RecordWriter:
    """Appends rows to an output file opened once in truncate mode.

    The header is written when the file is opened, before any row.
    """

    def __init__(self, path: str):
        self.path = path
        self.rows = 0
        try:
            self._fh = open(path, "w", newline="")
            csv.writer(self._fh, lineterminator="\n").writerow(HEADER)
            self._fh.flush()
        except OSError as exc:
            raise RecordWriteError(f"{path}: {exc.strerror or exc}") from exc

    @property
    def closed(self) -> bool:
        return self._fh.closed

    def append(self, row: str) -> None:
        try:
            self._fh.write(row)
            self._fh.flush()
        except (OSError, ValueError) as exc:
            raise RecordWriteError(f"{self.path}: {exc}") from exc
        self.rows += 1

    def write(self, rate: RateSample) -> None:
        self.append(format_row(rate))

    def close(self) -> None:
        if self._fh.closed:
            return
        try:
            self._fh.flush()
        except OSError as exc:
            raise RecordWriteError(f"{self.path}: {exc}") from exc
        finally:
            self._fh.close()

    def __enter__(self) -> RecordWriter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
