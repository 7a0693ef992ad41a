"""Console rendering of built round results, totals and placements."""

from __future__ import annotations

from typing import Callable

from perfbench.formatting import pad_title, to_number
from perfbench.stats import Candidate

PLACEMENT_COLUMN_WIDTH = 7


class ConsoleReporter:
    """Formats built results into lines and hands them to a writer.

    Args:
        writer: Receives one complete line per call.
        pad_titles: Align titles to the longest one.
    """

    def __init__(self, writer: Callable[[str], None], pad_titles: bool = True) -> None:
        self.writer = writer
        self.pad_titles = pad_titles
        self.title_max_len = -1

    def format_title(self, title: str) -> str:
        return pad_title(title, self.title_max_len, self.pad_titles)

    def show_round(self, order: list[Candidate]) -> None:
        """Print one line per test: title, then its built result columns."""
        for test in order:
            self.writer(f"{self.format_title(test.title)} {', '.join(test.display_results)}")

    @staticmethod
    def totals_header(
        header: str, num_tests: int, num_rounds: int, add_tests: bool = True, add_rounds: bool = True
    ) -> str:
        """Return e.g. ``Totals (3 Tests, 2 Rounds):``."""
        attribs = []
        if add_tests:
            attribs.append(f"{num_tests} Tests")
        if add_rounds:
            attribs.append(f"{num_rounds} Rounds")
        header = str(header)
        if attribs:
            header += f" ({', '.join(attribs)})"
        return header + ":"

    def show_totals(self, order: list[Candidate], decimals: int, header: str | None = None) -> None:
        """Print the optional header, then title, cumulative time and totals columns."""
        if header:
            self.writer(header)
        for test in order:
            self.writer(
                f"{self.format_title(test.title)} "
                f"{to_number(test.cumulative_time, decimals)} ms, "
                f"{', '.join(test.display_results)}"
            )

    def show_placements(self, order: list[Candidate], num_tests: int) -> None:
        """Print how often each test finished 1st, 2nd, ... across rounds."""
        width = max(self.title_max_len, len("Placements"))
        header = pad_title("Placements", width)
        self.writer(
            header
            + "".join(f"{rank}.".rjust(PLACEMENT_COLUMN_WIDTH) for rank in range(1, num_tests + 1))
        )
        for test in order:
            counts = list(test.rankings.tolist()) + [0] * (num_tests - test.rankings.size)
            self.writer(
                pad_title(test.title, width)
                + "".join(str(count).rjust(PLACEMENT_COLUMN_WIDTH) for count in counts)
            )
