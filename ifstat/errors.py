"""Exception taxonomy. Every error is fatal; cli.main maps them to exit codes."""


class IfstatError(Exception):
    """Base class for all ifstat failures."""

    exit_code = 1
    step = "error"

    def __str__(self) -> str:
        return f"{self.step}: {super().__str__()}"


class UsageError(IfstatError):
    """Bad command line arguments."""

    step = "usage"


class InterfaceNotFound(IfstatError):
    """No enumerated interface matches the requested name."""

    step = "resolve interface"


class CounterSourceUnavailable(IfstatError):
    """The OS counter query itself failed."""

    step = "read counters"


class RecordWriteError(IfstatError):
    """Opening or writing the output CSV failed."""

    step = "write output"
