from .base import BaseLogHandler as BaseLogHandler
from .callback import CallbackLogHandler as CallbackLogHandler
from .file import FileLogHandler as FileLogHandler

__all__ = [
    "BaseLogHandler",
    "CallbackLogHandler",
    "FileLogHandler",
]
