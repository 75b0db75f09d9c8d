"""Command line entry point: ``ifstat outfile interval interface``.

All failures surface here as IfstatError subclasses and are turned into a
single line on stderr plus exit status 1.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from argparse import ArgumentParser
from dataclasses import dataclass

import ifstat
import ifstat.pernic
import ifstat.proc
import ifstat.stub
from ifstat.base import CounterSource
from ifstat.errors import CounterSourceUnavailable, IfstatError, UsageError
from ifstat.graph import RateGraph
from ifstat.resolver import resolve
from ifstat.scheduler import CancelFlag, Scheduler
from ifstat.writer import RecordWriter

logger = logging.getLogger("ifstat")

INTERVAL_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Config:
    outfile: str
    interval: int
    interface: str
    source: str | None = None
    emit_first: bool = False
    count: int | None = None
    graph: bool = False
    verbosity: int = 0


class _Parser(ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def _interval(value: str) -> int:
    if not INTERVAL_RE.fullmatch(value):
        raise argparse.ArgumentTypeError(f"interval must be a whole number of seconds, got {value!r}")
    return int(value)


def _count(value: str) -> int:
    if not INTERVAL_RE.fullmatch(value) or int(value) < 1:
        raise argparse.ArgumentTypeError(f"count must be a positive integer, got {value!r}")
    return int(value)


def build_parser() -> ArgumentParser:
    parser = _Parser(prog="ifstat",
                     description="Log a network interface's throughput in bytes/s to a CSV file.")
    parser.add_argument("outfile", help="File to write data to (truncated)")
    parser.add_argument("interval", type=_interval,
                        help="Interval of data retrieval in seconds")
    parser.add_argument("interface", help="Network interface to retrieve data from")
    parser.add_argument("--source", default=None,
                        help="Counter source: proc, psutil or stub (default: auto-detect)")
    parser.add_argument("--emit-first", action="store_true",
                        help="Also write the first row, computed against a zero baseline")
    parser.add_argument("--count", type=_count, default=None,
                        help="Stop after this many samples (default: run until interrupted)")
    parser.add_argument("--graph", action="store_true",
                        help="Draw a live chart of the rates on the terminal")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More log output (repeat for debug)")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only log errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {ifstat.__version__}")
    return parser


def parse_config(argv: list[str] | None = None) -> Config:
    args = build_parser().parse_args(argv)
    return Config(
        outfile=args.outfile,
        interval=args.interval,
        interface=args.interface,
        source=args.source,
        emit_first=args.emit_first,
        count=args.count,
        graph=args.graph,
        verbosity=-1 if args.quiet else args.verbose,
    )


def setup_logging(verbosity: int) -> None:
    level = {-1: logging.ERROR, 0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(level=level, stream=sys.stderr, format="ifstat: %(message)s", force=True)


def open_source(name: str | None) -> CounterSource:
    """Instantiate the requested (or first available) counter source."""
    if name is None:
        name = ifstat.default_source()
        if name is None:
            raise CounterSourceUnavailable("no counter source available on this system")
    name = ifstat.resolve(name)
    cls = ifstat.REGISTRY.get(name)
    if cls is None:
        raise UsageError(f"unknown source {name!r} (choose from {', '.join(sorted(ifstat.REGISTRY))})")
    try:
        source = cls()
    except ImportError as exc:
        raise CounterSourceUnavailable(f"{name}: {exc}") from exc
    logger.info("using %s counter source", name)
    return source


def monitor(config: Config, cancel: CancelFlag | None = None) -> int:
    """Initialize, run the scheduler and drain. Returns rows written."""
    cancel = cancel or CancelFlag()
    # Signals only set the flag from here on, including during startup
    previous = cancel.install()
    try:
        source = open_source(config.source)
        try:
            # Resolve before touching the output so a bad name leaves no file content
            handle = resolve(source, config.interface)
            if cancel.is_set():
                logger.info("cancelled during startup")
                return 0
            with RecordWriter(config.outfile) as writer:
                observers = []
                graph = None
                if config.graph:
                    graph = RateGraph(f"Net {handle.name}", config.interval)
                    observers.append(graph)
                    graph.start()
                try:
                    scheduler = Scheduler(source, handle, writer, config.interval, cancel,
                                          emit_first=config.emit_first,
                                          max_ticks=config.count,
                                          observers=observers)
                    return scheduler.run()
                finally:
                    if graph is not None:
                        graph.stop()
        finally:
            source.close()
    finally:
        CancelFlag.restore(previous)


def main(argv: list[str] | None = None) -> int:
    try:
        config = parse_config(argv)
    except UsageError as exc:
        build_parser().print_usage(sys.stderr)
        print(f"ifstat: {exc}", file=sys.stderr)
        return exc.exit_code

    setup_logging(config.verbosity)
    try:
        monitor(config)
    except IfstatError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    return 0


def entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    entry()
