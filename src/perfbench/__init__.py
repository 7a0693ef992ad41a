"""Micro-benchmark harness comparing candidate callables over randomized rounds."""

from .config import (
    DEFAULT_MAX_COUNT as DEFAULT_MAX_COUNT,
)
from .config import (
    BenchConfig as BenchConfig,
)
from .events import (
    BaseEventHandler as BaseEventHandler,
)
from .events import (
    BenchEvent as BenchEvent,
)
from .events import (
    CallbackEventHandler as CallbackEventHandler,
)
from .events import (
    NullEventHandler as NullEventHandler,
)
from .events import (
    ProgressEventHandler as ProgressEventHandler,
)
from .formatting import (
    to_number as to_number,
)
from .logging import (
    Logger as Logger,
)
from .logging import (
    LoggerConfig as LoggerConfig,
)
from .logging import (
    LogLevel as LogLevel,
)
from .progress import (
    ProgressBar as ProgressBar,
)
from .results import (
    NoRoundsError as NoRoundsError,
)
from .runner import (
    BenchSuite as BenchSuite,
)
from .runner import (
    SuiteState as SuiteState,
)
from .stats import (
    RoundRecord as RoundRecord,
)
from .stats import (
    Candidate as Candidate,
)
from .stats import (
    WarmupStats as WarmupStats,
)

__all__ = [
    # Engine
    "BenchSuite",
    "BenchConfig",
    "DEFAULT_MAX_COUNT",
    "SuiteState",
    "NoRoundsError",
    # Measurement state
    "Candidate",
    "RoundRecord",
    "WarmupStats",
    # Events
    "BenchEvent",
    "BaseEventHandler",
    "NullEventHandler",
    "CallbackEventHandler",
    "ProgressEventHandler",
    "ProgressBar",
    # Logging
    "Logger",
    "LoggerConfig",
    "LogLevel",
    # Formatting
    "to_number",
]
