"""Tests for the per-test measurement records."""

import numpy as np

from perfbench import Candidate, RoundRecord


class TestRoundRecord:
    """Accumulation of timed calls within one round."""

    def test_empty_record(self):
        record = RoundRecord.empty(3)
        assert not record.is_measured
        assert record.position_counts.tolist() == [0, 0, 0]
        assert record.min_time == float("inf")

    def test_add_call_separates_accounted_from_elapsed(self):
        record = RoundRecord.empty(2)
        record.add_call(elapsed=9.0, accounted=4.0, result="a", slot=1)
        record.add_call(elapsed=2.0, accounted=2.0, result="b", slot=0)

        assert record.total_time == 6.0
        assert record.min_time == 2.0
        assert record.max_time == 9.0
        assert record.last_call_result == "b"
        assert record.position_counts.tolist() == [1, 1]
        assert record.iterations == 2


class TestCandidate:
    """Ranking histogram and reset handling."""

    @staticmethod
    def _case():
        return Candidate(function=lambda: None, title="t", index=0)

    def test_ensure_rankings_grows_and_keeps_counts(self):
        case = self._case()
        case.ensure_rankings(2)
        case.rankings[0] = 5
        case.ensure_rankings(4)
        assert case.rankings.tolist() == [5, 0, 0, 0]
        case.ensure_rankings(1)
        assert case.rankings.size == 4

    def test_rounds_measured_skips_placeholders(self):
        case = self._case()
        case.round_records.append(RoundRecord.empty(1))
        measured = RoundRecord.empty(1)
        measured.add_call(1.0, 1.0, None, 0)
        case.round_records.append(measured)
        assert case.rounds_measured == 1
        assert case.last_round is measured

    def test_reset_rounds_keeps_cumulative_totals(self):
        case = self._case()
        case.round_records.append(RoundRecord.empty(1))
        case.rankings = np.array([1], dtype=np.int64)
        case.cumulative_time = 12.0
        case.cumulative_calls = 3
        case.reset_rounds()

        assert case.round_records == []
        assert case.rankings.size == 0
        assert case.last_round is None
        assert case.cumulative_time == 12.0
        assert case.cumulative_calls == 3

    def test_outlier_counters(self):
        case = self._case()
        case.add_outlier(3.0)
        case.add_outlier(4.5)
        assert (case.outlier_count, case.outlier_sum) == (2, 7.5)
        case.reset_outliers()
        assert (case.outlier_count, case.outlier_sum) == (0, 0.0)
