import random
from collections.abc import Callable, Iterable
from typing import Any

import pytest

from perfbench import BenchConfig, BenchSuite, Logger, LoggerConfig, LogLevel
from perfbench.logging import CallbackLogHandler


def pytest_configure(config: pytest.Config) -> None:
    """Register shared markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


class FakeClock:
    """Millisecond clock that only moves when a candidate advances it."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def constant_candidate(clock: FakeClock) -> Callable[..., Callable[..., Any]]:
    """Return a factory of candidates that take ``ms`` per call and return ``result``."""

    def _make(ms: float, result: Any = None, name: str | None = None) -> Callable[..., Any]:
        def candidate(*args: Any) -> Any:
            clock.advance(ms)
            return result

        if name:
            candidate.__name__ = name
        return candidate

    return _make


@pytest.fixture
def scripted_candidate(clock: FakeClock) -> Callable[[Iterable[float]], Callable[..., Any]]:
    """Return a factory of candidates whose successive calls take the given durations."""

    def _make(durations: Iterable[float], result: Any = None) -> Callable[..., Any]:
        remaining = iter(durations)

        def candidate(*args: Any) -> Any:
            clock.advance(next(remaining))
            return result

        return candidate

    return _make


@pytest.fixture
def log_lines() -> list[str]:
    return []


@pytest.fixture
def captured_logger() -> tuple[Logger, list[str]]:
    """A DEBUG logger that writes nothing to stdout and keeps every line."""
    lines: list[str] = []
    logger = Logger(
        name="perfbench",
        config=LoggerConfig(base_level=LogLevel.DEBUG, do_stdout=False, str_format="[%(levelname)s] %(message)s"),
        handlers=[CallbackLogHandler(lines.append)],
    )
    return logger, lines


@pytest.fixture
def make_suite(clock: FakeClock, log_lines: list[str]) -> Callable[..., BenchSuite]:
    """Build a suite on the fake clock with a seeded shuffle and captured report output."""

    def _make(**config: Any) -> BenchSuite:
        config.setdefault("warmup_rounds", 0)
        config.setdefault("decimals", 3)
        return BenchSuite(
            BenchConfig(**config),
            on_log=log_lines.append,
            timer=clock,
            rng=random.Random(1234),
        )

    return _make
