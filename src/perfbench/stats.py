"""Measurement state of registered candidates.

All times are milliseconds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray


@dataclass
class WarmupStats:
    """Statistics of the warmup calls of one test, slowest call excluded.

    Args:
        average: Mean of the kept samples; 0.0 when fewer than two samples exist.
        total: Sum of the kept samples.
        min_time: Fastest kept sample.
        max_time: The discarded (slowest) sample.
    """

    average: float = 0.0
    total: float = 0.0
    min_time: float = 0.0
    max_time: float = 0.0

    @classmethod
    def from_samples(cls, samples: NDArray[np.float64] | list[float]) -> WarmupStats:
        """Compute warmup statistics, discarding the single largest sample.

        Args:
            samples: Elapsed time of every warmup call.

        Returns:
            The statistics of the remaining samples.
        """
        arr = np.asarray(samples, dtype=np.float64)
        if arr.size == 0:
            return cls()
        max_time = float(arr.max())
        if arr.size == 1:
            return cls(max_time=max_time)

        kept = np.delete(arr, int(arr.argmax()))
        total = float(kept.sum())
        return cls(
            average=total / kept.size,
            total=total,
            min_time=float(kept.min()),
            max_time=max_time,
        )


@dataclass
class RoundRecord:
    """Measurements of one test within one round.

    Args:
        total_time: Sum of per-call durations, outliers substituted when filtering.
        min_time: Fastest unfiltered call.
        max_time: Slowest unfiltered call.
        last_call_result: Return value of the most recent call.
        position_counts: How often the test ran in each execution slot.
        iterations: Number of measured calls so far.
    """

    total_time: float = 0.0
    min_time: float = float("inf")
    max_time: float = 0.0
    last_call_result: Any = None
    position_counts: NDArray[np.int64] = field(
        default_factory=lambda: np.zeros(0, dtype=np.int64)
    )
    iterations: int = 0

    @classmethod
    def empty(cls, num_slots: int) -> RoundRecord:
        return cls(position_counts=np.zeros(num_slots, dtype=np.int64))

    @property
    def is_measured(self) -> bool:
        """True once at least one call was timed in this round."""
        return self.iterations > 0

    def add_call(self, elapsed: float, accounted: float, result: Any, slot: int) -> None:
        """Record one timed call.

        Args:
            elapsed: The true duration, used for min/max.
            accounted: The duration added to the round total.
            result: The candidate's return value.
            slot: Execution slot the test occupied in this iteration.
        """
        if elapsed < self.min_time:
            self.min_time = elapsed
        if elapsed > self.max_time:
            self.max_time = elapsed
        self.total_time += accounted
        self.last_call_result = result
        self.position_counts[slot] += 1
        self.iterations += 1


@dataclass
class Candidate:
    """A registered candidate and everything measured about it.

    ``cumulative_time`` and ``cumulative_calls`` span every round ever run and
    survive ``reset_rounds``.

    Args:
        function: The callable under test.
        title: Display name.
        index: Registration position, used to break ranking ties.
    """

    function: Callable[..., Any]
    title: str
    index: int
    warmup: WarmupStats = field(default_factory=WarmupStats)
    round_records: list[RoundRecord] = field(default_factory=list)
    rankings: NDArray[np.int64] = field(
        default_factory=lambda: np.zeros(0, dtype=np.int64)
    )
    cumulative_time: float = 0.0
    cumulative_calls: int = 0
    outlier_count: int = 0
    outlier_sum: float = 0.0
    display_results: list[str] = field(default_factory=list)

    @property
    def rounds_measured(self) -> int:
        return sum(1 for record in self.round_records if record.is_measured)

    @property
    def last_round(self) -> RoundRecord | None:
        return self.round_records[-1] if self.round_records else None

    def ensure_rankings(self, num_tests: int) -> None:
        """Grow the ranking histogram to ``num_tests`` slots, keeping counts."""
        missing = num_tests - self.rankings.size
        if missing > 0:
            self.rankings = np.concatenate(
                (self.rankings, np.zeros(missing, dtype=np.int64))
            )

    def reset_outliers(self) -> None:
        self.outlier_count = 0
        self.outlier_sum = 0.0

    def add_outlier(self, elapsed: float) -> None:
        self.outlier_count += 1
        self.outlier_sum += elapsed

    def reset_rounds(self) -> None:
        self.round_records = []
        self.rankings = np.zeros(0, dtype=np.int64)
        self.display_results = []
