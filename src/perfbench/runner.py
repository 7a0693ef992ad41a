"""Measurement engine: registration, warmup, randomized rounds and ranking.

Typical use::

    suite = BenchSuite(BenchConfig(max_count=10_000))
    suite.register(join_strings).register(concat_strings, "concat")
    suite.run().show()
    suite.run().show()
    suite.show_totals()

Every ``run()`` is one round. Each round warms every test up, then performs
``max_count`` iterations; every iteration calls each test once, in an order
freshly shuffled for that iteration. Candidate exceptions are not caught.
"""

from __future__ import annotations

import random
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Self

import numpy as np

from perfbench.config import DEFAULT_MAX_COUNT, BenchConfig
from perfbench.events import BaseEventHandler, BenchEvent, as_event_handler
from perfbench.logging import Logger, LoggerConfig, LogLevel
from perfbench.reporting import ConsoleReporter
from perfbench.results import (
    NoRoundsError,
    RoundResults,
    TotalsResults,
    build_round_results,
    build_totals,
)
from perfbench.stats import Candidate, RoundRecord, WarmupStats
from perfbench.time import time_ms


class SuiteState(Enum):
    """Which summary, if any, currently matches the measured state."""

    IDLE = "idle"
    MEASURED = "measured"
    RESULTS_BUILT = "results_built"
    TOTALS_BUILT = "totals_built"


def default_logger() -> Logger:
    return Logger(name="perfbench", config=LoggerConfig(base_level=LogLevel.WARNING))


class BenchSuite:
    """Registry of candidate functions plus the engine that measures them.

    Args:
        config: Run configuration; defaults to ``BenchConfig.default()``.
        options: Loose option mapping applied on top of ``config``
            (see ``BenchConfig.from_options``). Unknown keys are ignored.
        event_handler: Observer of lifecycle events, or a plain callable.
        on_log: Receives every report line; defaults to ``print``.
        logger: Diagnostics logger; defaults to a WARNING-level ``perfbench`` logger.
        timer: Millisecond clock used for every measurement.
        rng: Random source for shuffling.
    """

    def __init__(
        self,
        config: BenchConfig | None = None,
        options: Mapping[str, Any] | None = None,
        event_handler: BaseEventHandler | Callable[..., Any] | None = None,
        on_log: Callable[[str], None] | None = None,
        logger: Logger | None = None,
        timer: Callable[[], float] = time_ms,
        rng: random.Random | None = None,
    ) -> None:
        self._logger = logger if logger is not None else default_logger()
        self._config = BenchConfig.from_options(options, base=config or BenchConfig.default())
        self._log_unknown_options(options)

        self._event_handler = as_event_handler(event_handler)
        self._on_log = on_log
        self._timer = timer
        self._rng = rng if rng is not None else random.Random()

        self.tests: list[Candidate] = []
        self.rounds_done = 0
        self.different_result_rounds: list[int] = []

        self._order: list[int] = []
        self._state = SuiteState.IDLE
        self._round_results: RoundResults | None = None
        self._round_results_args: tuple | None = None
        self._totals: TotalsResults | None = None

        self.reporter = ConsoleReporter(self.log, self._config.pad_title)

    # ------------------------------------------------------------------ config

    @property
    def config(self) -> BenchConfig:
        return self._config

    @property
    def state(self) -> SuiteState:
        return self._state

    @property
    def event_handler(self) -> BaseEventHandler:
        return self._event_handler

    @property
    def logger(self) -> Logger:
        return self._logger

    @property
    def title_max_len(self) -> int:
        return self.reporter.title_max_len

    def _log_unknown_options(self, options: Mapping[str, Any] | None) -> None:
        unknown = BenchConfig.unknown_options(options)
        if unknown:
            self._logger.debug(f"Ignoring unknown options: {', '.join(unknown)}")

    def _invalidate(self) -> None:
        self._state = SuiteState.MEASURED if self.rounds_done else SuiteState.IDLE

    def _set_config(self, config: BenchConfig) -> Self:
        self._config = config
        self.reporter.pad_titles = config.pad_title
        self._invalidate()
        return self

    def set_options(self, options: Mapping[str, Any] | None) -> Self:
        self._log_unknown_options(options)
        return self._set_config(BenchConfig.from_options(options, base=self._config))

    def set_config(self, config: BenchConfig) -> Self:
        return self._set_config(config)

    def set_max_count(self, value: int) -> Self:
        return self._set_config(self._config.replace(max_count=value))

    def set_max_count_factor(self, factor: float) -> Self:
        return self._set_config(self._config.replace(max_count=int(DEFAULT_MAX_COUNT * factor)))

    def set_parameters(self, value: Any) -> Self:
        return self._set_config(self._config.replace(parameters=value))

    def set_pad_title(self, value: bool = True) -> Self:
        return self._set_config(self._config.replace(pad_title=value))

    def set_event_handler(self, handler: BaseEventHandler | Callable[..., Any] | None) -> Self:
        self._event_handler = as_event_handler(handler)
        return self

    def set_on_log(self, callback: Callable[[str], None] | None) -> Self:
        self._on_log = callback
        return self

    def log(self, *msgs: Any) -> Self:
        """Write one report line, made of ``msgs`` joined by spaces."""
        line = " ".join(str(msg) for msg in msgs)
        if self._on_log is None:
            print(line)
        else:
            self._on_log(line)
        return self

    def _emit(self, event: BenchEvent, *payload: Any) -> None:
        self._event_handler.on_event(self, event, *payload)

    # ---------------------------------------------------------------- registry

    def register(self, function: Callable[..., Any], title: str | None = None) -> Self:
        """Add a candidate.

        Args:
            function: Called with ``config.parameters`` as its only argument, or
                with no argument when ``parameters`` is None.
            title: Display name. Defaults to the function's name, or
                ``test #<n>`` when it has none.

        Raises:
            TypeError: If ``function`` is not callable.
        """
        if not callable(function):
            raise TypeError(f"Invalid test function; expected callable but got {function!r}")

        if not title:
            name = getattr(function, "__name__", "")
            title = name if name and name != "<lambda>" else f"test #{len(self.tests) + 1}"

        test = Candidate(function=function, title=title, index=len(self.tests))
        if self.rounds_done:
            # Placeholder records keep every test at the same number of rounds.
            test.round_records = [RoundRecord.empty(0) for _ in range(self.rounds_done)]
            self._logger.warning(
                f"'{title}' registered after {self.rounds_done} round(s); "
                "its totals only cover rounds run from now on"
            )

        self.tests.append(test)
        self._order.append(test.index)
        self.reporter.title_max_len = max(self.reporter.title_max_len, len(title))
        self._invalidate()
        return self

    def calculate_title_max_len(self) -> int:
        self.reporter.title_max_len = max((len(test.title) for test in self.tests), default=-1)
        return self.reporter.title_max_len

    def format_title(self, title: str) -> str:
        return self.reporter.format_title(title)

    # ------------------------------------------------------------- measurement

    def _shuffle(self) -> None:
        """Fisher-Yates permutation of the execution order, in place."""
        order = self._order
        randrange = self._rng.randrange
        for i in range(len(order) - 1, 0, -1):
            j = randrange(i + 1)
            order[i], order[j] = order[j], order[i]

    def _call(self, test: Candidate, parameters: Any) -> tuple[Any, float]:
        timer = self._timer
        if parameters is None:
            start = timer()
            result = test.function()
            end = timer()
        else:
            start = timer()
            result = test.function(parameters)
            end = timer()
        return result, end - start

    def account_call(self, test: Candidate, elapsed: float) -> float:
        """Return the duration to add to the totals for one call.

        With outlier filtering on and a non-zero warmup average, a call slower
        than ``outlier_factor`` times that average is counted as an outlier
        (with its true duration) and the warmup average is accounted instead.
        """
        average = test.warmup.average
        if (
            self._config.filter_outliers
            and average > 0
            and elapsed > average * self._config.outlier_factor
        ):
            test.add_outlier(elapsed)
            return average
        return elapsed

    def warmup(self) -> Self:
        """Call every test ``warmup_rounds`` times and derive its warmup statistics."""
        self._emit(BenchEvent.BEFORE_WARMUP)
        self._shuffle()

        config = self._config
        num_tests = len(self.tests)
        self._logger.info(
            f"preparing {num_tests} tests for {config.max_count} iterations..."
        )

        for index in self._order:
            test = self.tests[index]
            test.ensure_rankings(num_tests)
            samples = np.empty(config.warmup_rounds, dtype=np.float64)
            for i in range(config.warmup_rounds):
                _, samples[i] = self._call(test, config.parameters)
            test.warmup = WarmupStats.from_samples(samples)
            test.reset_outliers()
            self._logger.debug(
                f"warmup '{test.title}': avg={test.warmup.average:.6f} ms "
                f"min={test.warmup.min_time:.6f} ms discarded={test.warmup.max_time:.6f} ms"
            )

        self._emit(BenchEvent.AFTER_WARMUP)
        return self

    def run(self) -> Self:
        """Run one round: warmup followed by ``max_count`` shuffled iterations.

        A round record is appended to every test before anything is called, so
        all tests always hold the same number of records. If a candidate raises,
        the exception propagates and the round is left unranked.
        """
        num_tests = len(self.tests)
        self.rounds_done += 1
        self._state = SuiteState.MEASURED
        for test in self.tests:
            test.display_results = []
            test.round_records.append(RoundRecord.empty(num_tests))

        self._emit(BenchEvent.BEFORE_RUN)
        self.warmup()

        config = self._config
        parameters = config.parameters
        emit = self._emit
        tests = self.tests
        order = self._order
        started = self._timer()

        for iteration in range(1, config.max_count + 1):
            self._shuffle()
            emit(BenchEvent.BEFORE_EACH_ITERATION, iteration)
            for slot, index in enumerate(order):
                test = tests[index]
                emit(BenchEvent.BEFORE_EACH_TEST, iteration, test, slot)

                result, elapsed = self._call(test, parameters)
                accounted = self.account_call(test, elapsed)
                test.round_records[-1].add_call(elapsed, accounted, result, slot)
                test.cumulative_time += accounted
                test.cumulative_calls += 1

                emit(BenchEvent.AFTER_EACH_TEST, iteration, test, slot)
            emit(BenchEvent.AFTER_EACH_ITERATION, iteration)

        self.rank_round()
        self._emit(BenchEvent.AFTER_RUN, config.max_count)
        self._logger.info(
            f"round {self.rounds_done} done: {num_tests} tests x {config.max_count} "
            f"iterations in {self._timer() - started:.3f} ms"
        )
        return self

    def rank_round(self) -> None:
        """Increment each test's ranking histogram at its finishing position in
        the latest round. Ties keep registration order.
        """
        num_tests = len(self.tests)
        ranked = sorted(self.tests, key=lambda test: test.round_records[-1].total_time)
        for position, test in enumerate(ranked):
            test.ensure_rankings(num_tests)
            test.rankings[position] += 1

    def reset_rounds(self) -> Self:
        """Forget all round records and rankings; registrations and
        cumulative times are kept.
        """
        self.rounds_done = 0
        self.different_result_rounds = []
        for test in self.tests:
            test.reset_rounds()
        self._round_results = None
        self._totals = None
        self._state = SuiteState.IDLE
        return self

    # ----------------------------------------------------------------- results

    def build_results(
        self,
        show_distribution: bool = False,
        result_max_len: int = 50,
        show_warmup_info: bool = False,
    ) -> Self:
        """Build display columns for the latest round (see ``build_round_results``)."""
        self._emit(BenchEvent.BEFORE_BUILD_RESULTS)
        results = build_round_results(
            self.tests,
            self.rounds_done,
            self._config,
            show_distribution=show_distribution,
            result_max_len=result_max_len,
            show_warmup_info=show_warmup_info,
        )
        if results.zero_reference:
            self._logger.warning(
                f"fastest total of round {self.rounds_done} is zero; differences left empty"
            )
        if results.has_different_results and self.rounds_done not in self.different_result_rounds:
            self.different_result_rounds.append(self.rounds_done)

        self._round_results = results
        self._round_results_args = (show_distribution, result_max_len, show_warmup_info)
        self._totals = None
        self._state = SuiteState.RESULTS_BUILT
        self._emit(BenchEvent.AFTER_BUILD_RESULTS)
        return self

    @property
    def has_different_results(self) -> bool:
        """Whether the last built round showed diverging return values."""
        return self._round_results is not None and self._round_results.has_different_results

    def show(
        self,
        show_distribution: bool = False,
        result_max_len: int = 50,
        show_warmup_info: bool = False,
    ) -> Self:
        """Print the latest round, building its results first if they are stale."""
        args = (show_distribution, result_max_len, show_warmup_info)
        if self._state is not SuiteState.RESULTS_BUILT or self._round_results_args != args:
            self.build_results(*args)
        self.reporter.show_round(self._round_results.order)
        return self

    def build_totals(self) -> Self:
        """Build cumulative averages and differences, fastest first.

        Raises:
            NoRoundsError: If no round has completed.
        """
        self._emit(BenchEvent.BEFORE_BUILD_TOTALS)
        totals = build_totals(self.tests, self.rounds_done, self._config)
        if totals.zero_reference:
            self._logger.warning("fastest cumulative time is zero; differences left empty")

        self._totals = totals
        self._round_results = None
        self._state = SuiteState.TOTALS_BUILT
        self._emit(BenchEvent.AFTER_BUILD_TOTALS)
        return self

    @property
    def totals_order(self) -> list[Candidate]:
        """Tests ordered by cumulative time, building totals if needed."""
        self._ensure_totals()
        return list(self._totals.order)

    def _ensure_totals(self) -> None:
        if self._state is not SuiteState.TOTALS_BUILT:
            self.build_totals()

    def build_totals_header(
        self, header: str = "Totals", add_tests: bool = True, add_rounds: bool = True
    ) -> str:
        return self.reporter.totals_header(
            header, len(self.tests), self.rounds_done, add_tests, add_rounds
        )

    def show_totals(
        self, header: str | None = "Totals", add_tests: bool = True, add_rounds: bool = True
    ) -> Self:
        """Print cumulative totals under an optional header."""
        if not self.tests:
            return self
        self._ensure_totals()
        line = self.build_totals_header(header, add_tests, add_rounds) if header else None
        self.reporter.show_totals(self._totals.order, self._config.decimals, line)
        return self

    def show_placements(self) -> Self:
        """Print the ranking histogram of every test, in totals order."""
        if not self.tests:
            return self
        self._ensure_totals()
        self.reporter.show_placements(self._totals.order, len(self.tests))
        return self


__all__ = [
    "BenchSuite",
    "NoRoundsError",
    "SuiteState",
]
