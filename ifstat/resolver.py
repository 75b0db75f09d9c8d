"""Map an interface name to a handle the counter source understands."""

from __future__ import annotations

import logging

from ifstat.base import CounterSource, InterfaceHandle
from ifstat.errors import InterfaceNotFound

logger = logging.getLogger(__name__)


def resolve(source: CounterSource, name: str) -> InterfaceHandle:
    """Scan the source's interfaces for an exact, case-sensitive match.

    Enumeration errors propagate as CounterSourceUnavailable. The scan runs
    once; a missing interface is not retried.
    """
    names = source.interfaces()
    logger.debug("%s source lists %d interfaces", source.name, len(names))
    for row, candidate in enumerate(names, start=1):
        if candidate == name:
            handle = InterfaceHandle(index=row, name=name)
            logger.info("resolved %s to row %d", name, row)
            return handle
    raise InterfaceNotFound(f"couldn't get interface {name!r}")
