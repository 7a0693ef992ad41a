"""End-to-end comparison on the real clock."""

import pytest

from perfbench import BenchConfig, BenchSuite


def fast():
    return None


def slow():
    total = 0
    for i in range(5_000):
        total += i
    return total


@pytest.mark.slow
class TestEndToEnd:
    """A busy-looping candidate loses to one that returns immediately."""

    def test_fast_ranks_ahead_of_slow(self):
        lines = []
        suite = BenchSuite(BenchConfig(max_count=100, warmup_rounds=5), on_log=lines.append)
        suite.register(slow).register(fast)
        suite.run().build_totals()

        first, second = suite.totals_order
        assert first.title == "fast"
        assert second.title == "slow"

        diff = second.display_results[1]
        assert diff.startswith("+") and diff.endswith(" %")
        assert float(diff[1:-2]) > 0

        suite.show().show_totals().show_placements()
        assert any(line.startswith("Totals (2 Tests, 1 Rounds):") for line in lines)

    def test_outlier_filtering_on_real_clock(self):
        suite = BenchSuite(
            BenchConfig(max_count=200, warmup_rounds=10, filter_outliers=True),
            on_log=lambda line: None,
        )
        suite.register(slow)
        suite.run()

        test = suite.tests[0]
        record = test.round_records[-1]
        assert test.warmup.average > 0
        assert record.total_time <= record.iterations * max(record.max_time, test.warmup.average)
        assert record.total_time == pytest.approx(test.cumulative_time)
