"""Configuration classes and enums for logging."""

from enum import IntEnum

from msgspec import Struct


class LogLevel(IntEnum):
    """Log level enumeration."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4


class LoggerConfig(Struct):
    """Configuration for the diagnostics logger.

    Args:
        base_level: Minimum level that will be logged.
        do_stdout: Also print flushed messages to stdout.
        str_format: Format of every message. Supports %(asctime)s,
            %(levelname)s, %(name)s and %(message)s.
        flush_interval_s: Maximum seconds a message may sit in the buffer
            before a flush is forced. Must be > 0.
        buffer_size: Number of buffered messages that forces a flush. Must be > 0.

    Raises:
        ValueError: If any value is out of range, or the format lacks %(message)s.
    """

    base_level: LogLevel = LogLevel.INFO
    do_stdout: bool = True
    str_format: str = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
    flush_interval_s: float = 1.0
    buffer_size: int = 10000

    def __post_init__(self):
        if self.flush_interval_s <= 0.0:
            raise ValueError(
                f"Invalid flush interval; expected >0 but got {self.flush_interval_s}"
            )
        if "%(message)s" not in self.str_format:
            raise ValueError("Format string must contain '%(message)s' placeholder")
        if self.buffer_size <= 0:
            raise ValueError(
                f"Invalid buffer size; expected >0 but got {self.buffer_size}"
            )

    @classmethod
    def for_verbosity(cls, verbosity: int) -> "LoggerConfig":
        """Config of the suite diagnostics for a ``-v`` count.

        0 keeps only warnings (late registrations, zero reference times) and
        writes nothing to stdout. 1 adds round timings, 2 or more adds the
        per-test warmup statistics; both echo to stdout.
        """
        if verbosity < 0:
            raise ValueError(f"Invalid verbosity; expected >=0 but got {verbosity}")
        if verbosity == 0:
            return cls(base_level=LogLevel.WARNING, do_stdout=False)
        level = LogLevel.INFO if verbosity == 1 else LogLevel.DEBUG
        return cls(base_level=level, do_stdout=True)
