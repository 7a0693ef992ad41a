"""Lifecycle events emitted by a suite and the handlers that observe them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable, TextIO

from perfbench.progress import ProgressBar

if TYPE_CHECKING:
    from perfbench.runner import BenchSuite


class BenchEvent(StrEnum):
    """Named points in the life of a suite, in emission order within a round."""

    BEFORE_RUN = "before_run"
    BEFORE_WARMUP = "before_warmup"
    AFTER_WARMUP = "after_warmup"
    BEFORE_EACH_ITERATION = "before_each_iteration"
    BEFORE_EACH_TEST = "before_each_test"
    AFTER_EACH_TEST = "after_each_test"
    AFTER_EACH_ITERATION = "after_each_iteration"
    AFTER_RUN = "after_run"
    BEFORE_BUILD_RESULTS = "before_build_results"
    AFTER_BUILD_RESULTS = "after_build_results"
    BEFORE_BUILD_TOTALS = "before_build_totals"
    AFTER_BUILD_TOTALS = "after_build_totals"


class BaseEventHandler(ABC):
    """
    Observer of suite lifecycle events.

    Payloads by event:
        before/after_each_iteration: (iteration,)
        before/after_each_test: (iteration, test_case, slot)
        after_run: (iterations_done,)
        all others: ()

    Handlers must not touch measurement state.
    """

    @abstractmethod
    def on_event(self, sender: BenchSuite, event: BenchEvent, *payload: Any) -> None:
        pass


class NullEventHandler(BaseEventHandler):
    """Ignores every event."""

    def on_event(self, sender: BenchSuite, event: BenchEvent, *payload: Any) -> None:
        return None


class CallbackEventHandler(BaseEventHandler):
    """Adapts a plain ``f(sender, event, *payload)`` callable."""

    def __init__(self, callback: Callable[..., Any]) -> None:
        if not callable(callback):
            raise TypeError(f"Invalid callback; expected callable but got {callback!r}")
        self._callback = callback

    def on_event(self, sender: BenchSuite, event: BenchEvent, *payload: Any) -> None:
        self._callback(sender, event, *payload)


class ProgressEventHandler(BaseEventHandler):
    """Shows a progress bar over the iterations of each round."""

    def __init__(self, width: int = 80, stream: TextIO | None = None) -> None:
        self.width = width
        self.stream = stream
        self.progress_bar: ProgressBar | None = None

    def on_event(self, sender: BenchSuite, event: BenchEvent, *payload: Any) -> None:
        match event:
            case BenchEvent.BEFORE_RUN:
                self.progress_bar = ProgressBar(
                    sender.config.max_count, self.width, self.stream
                )
            case BenchEvent.AFTER_WARMUP:
                self.progress_bar.update(0)
            case BenchEvent.BEFORE_EACH_ITERATION:
                self.progress_bar.update(payload[0])
            case BenchEvent.AFTER_RUN:
                self.progress_bar.finish()


def as_event_handler(handler: BaseEventHandler | Callable[..., Any] | None) -> BaseEventHandler:
    """Normalise an optional handler or callable into a ``BaseEventHandler``."""
    if handler is None:
        return NullEventHandler()
    if isinstance(handler, BaseEventHandler):
        return handler
    return CallbackEventHandler(handler)
