"""Per-round and cumulative summaries derived from measured candidates.

Builders only write the transient ``display_results`` of each candidate and
never touch recorded measurements, so building twice gives the same output.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from perfbench.config import BenchConfig
from perfbench.formatting import percent_diff, to_number
from perfbench.stats import Candidate

RESULT_COLUMN_TITLES: dict[str, str] = {
    "total": "tot: ",
    "average": "avg: ",
    "min": "min: ",
    "max": "max: ",
    "diff": "diff: ",
    "func_result": "\n    => ",
}


class NoRoundsError(RuntimeError):
    """Raised when a summary needs at least one completed round."""


@dataclass
class RoundResults:
    """Outcome of building the results of the latest round.

    Args:
        round_number: 1-based number of the summarised round.
        order: Measured tests, fastest round total first.
        skipped: Tests without measurements in that round.
        has_different_results: Whether any test returned something other than its predecessor.
        zero_reference: The fastest total was zero, so differences were left empty.
    """

    round_number: int
    order: list[Candidate] = field(default_factory=list)
    skipped: list[Candidate] = field(default_factory=list)
    has_different_results: bool = False
    zero_reference: bool = False


@dataclass
class TotalsResults:
    """Outcome of building cumulative totals.

    Args:
        rounds: Rounds completed when the totals were built.
        order: All tests, fastest cumulative time first, never-measured tests last.
        unmeasured: Tests without a single timed call, in registration order.
        zero_reference: The fastest cumulative time was zero.
    """

    rounds: int
    order: list[Candidate] = field(default_factory=list)
    unmeasured: list[Candidate] = field(default_factory=list)
    zero_reference: bool = False


def _label(config: BenchConfig, column: str) -> str:
    return RESULT_COLUMN_TITLES[column] if config.add_column_titles else ""


def format_call_result(result: object, max_len: int) -> str:
    """Render a return value quoted, cut to ``max_len`` chars with ``...`` when longer.

    A negative ``max_len`` disables truncation.
    """
    text = str(result)
    if max_len > -1 and len(text) > max_len:
        text = text[:max_len] + "..."
    return f"'{text}'"


def build_round_results(
    tests: list[Candidate],
    round_number: int,
    config: BenchConfig,
    show_distribution: bool = False,
    result_max_len: int = 50,
    show_warmup_info: bool = False,
) -> RoundResults:
    """Build display columns for the latest round of every test.

    Columns are total, average, min and max time, then for every test but the
    fastest the percentage by which it is slower. Optional columns follow:
    warmup info ``(avg, outliers, outlier sum)``, the per-slot distribution and
    the last return value. A return value equal to the one shown just before
    it is left out so that diverging results stand out.

    Args:
        tests: Registered tests in registration order.
        round_number: 1-based number of the round to summarise.
        config: Formatting settings.
        show_distribution: Append execution-slot tallies.
        result_max_len: Maximum characters of a displayed return value.
        show_warmup_info: Append warmup diagnostics.

    Returns:
        The ordering and flags of the built round.
    """
    summary = RoundResults(round_number=round_number)
    measured = []
    for test in tests:
        test.display_results = []
        record = (
            test.round_records[round_number - 1]
            if 0 < round_number <= len(test.round_records)
            else None
        )
        if record is None or not record.is_measured:
            summary.skipped.append(test)
        else:
            measured.append((test, record))

    # Stable sort, so equal totals keep registration order.
    measured.sort(key=lambda pair: pair[1].total_time)

    decimals = config.decimals
    fastest_total = 0.0
    last_text = None
    for position, (test, record) in enumerate(measured):
        columns = [
            _label(config, "total") + to_number(record.total_time, decimals) + " ms",
            _label(config, "average")
            + to_number(record.total_time / record.iterations, decimals)
            + " ms",
            _label(config, "min") + to_number(record.min_time, decimals) + " ms",
            _label(config, "max") + to_number(record.max_time, decimals) + " ms",
        ]

        if position == 0:
            fastest_total = record.total_time
        else:
            diff = percent_diff(record.total_time, fastest_total)
            if diff is None:
                summary.zero_reference = True
                columns.append(_label(config, "diff"))
            else:
                columns.append(
                    _label(config, "diff") + to_number(diff, config.diff_decimals) + "%"
                )

        if show_warmup_info:
            columns.append(
                f"({to_number(test.warmup.average, decimals)}, "
                f"{test.outlier_count}, {to_number(test.outlier_sum, decimals)})"
            )
        if show_distribution:
            columns.append(str(record.position_counts.tolist()))

        if config.add_func_result:
            text = str(record.last_call_result)
            if text != last_text:
                if position > 0:
                    summary.has_different_results = True
                columns.append(
                    _label(config, "func_result")
                    + format_call_result(record.last_call_result, result_max_len)
                )
                last_text = text

        test.display_results = columns
        summary.order.append(test)

    return summary


def build_totals(tests: list[Candidate], rounds_done: int, config: BenchConfig) -> TotalsResults:
    """Build cumulative display columns: average time per call and the
    percentage by which each test is slower than the overall fastest.

    Tests registered after the last round have no timed calls yet. They are
    listed after every measured test with an empty average and no difference.

    Raises:
        NoRoundsError: If no round has been run or nothing is registered.
    """
    if rounds_done < 1 or not tests:
        raise NoRoundsError("Totals require at least one completed round")

    summary = TotalsResults(rounds=rounds_done)
    measured = sorted(
        (test for test in tests if test.cumulative_calls),
        key=lambda test: test.cumulative_time,
    )
    summary.unmeasured = [test for test in tests if not test.cumulative_calls]
    summary.order = measured + summary.unmeasured

    for test in summary.unmeasured:
        test.display_results = [RESULT_COLUMN_TITLES["average"]]
    if not measured:
        return summary

    fastest = measured[0].cumulative_time
    for position, test in enumerate(measured):
        average = test.cumulative_time / test.cumulative_calls
        columns = [
            RESULT_COLUMN_TITLES["average"] + to_number(average, config.decimals) + " ms"
        ]
        if position > 0:
            diff = percent_diff(test.cumulative_time, fastest)
            if diff is None:
                summary.zero_reference = True
            else:
                columns.append(f"+{to_number(diff, config.diff_decimals)} %")
        test.display_results = columns

    return summary
