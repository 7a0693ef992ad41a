"""Buffered single-process logging."""

from .config import (
    LoggerConfig as LoggerConfig,
)
from .config import (
    LogLevel as LogLevel,
)
from .handlers import (
    BaseLogHandler as BaseLogHandler,
)
from .handlers import (
    CallbackLogHandler as CallbackLogHandler,
)
from .handlers import (
    FileLogHandler as FileLogHandler,
)
from .logger import (
    Logger as Logger,
)
