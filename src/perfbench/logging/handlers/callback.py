from typing import Callable

from perfbench.logging.handlers.base import BaseLogHandler


class CallbackLogHandler(BaseLogHandler):
    """
    A log handler that forwards every formatted line to a callable.
    """

    def __init__(self, callback: Callable[[str], None]) -> None:
        super().__init__()
        if not callable(callback):
            raise TypeError(f"Invalid callback; expected callable but got {callback!r}")
        self._callback = callback

    def push(self, buffer: list[str]) -> None:
        for line in buffer:
            self._callback(line)
