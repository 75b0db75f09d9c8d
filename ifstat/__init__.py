"""ifstat — log a network interface's throughput to CSV.

Each counter source is a CounterSource subclass that lives in its own module.
Import a source module to register it in REGISTRY.
"""

from ifstat.base import CounterSource

__version__ = "1.0.0"

REGISTRY: dict[str, type[CounterSource]] = {}

# Short aliases → canonical name
ALIASES: dict[str, str] = {
    "procfs": "proc",
    "fake": "stub",
}

# Preferred order when no --source is given
DEFAULT_ORDER = ("proc", "psutil")


def register(cls: type[CounterSource]) -> type[CounterSource]:
    """Decorator that adds a counter source class to the global registry."""
    REGISTRY[cls.name] = cls
    return cls


def resolve(name: str) -> str:
    """Resolve a source name, supporting aliases."""
    return ALIASES.get(name, name)


def default_source() -> str | None:
    """First registered source in DEFAULT_ORDER that works on this system."""
    for name in DEFAULT_ORDER:
        cls = REGISTRY.get(name)
        if cls is not None and cls.is_available():
            return name
    return None
