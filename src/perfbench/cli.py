"""Command-line entry point.

Usage:
    perfbench mymodule:join_strings mymodule:concat_strings=concat -n 10000 -r 3
    perfbench path/to/candidates.py:fast path/to/candidates.py:slow --progress --placements
"""

from __future__ import annotations

import argparse
import importlib
import importlib.util
import os
import sys
from types import ModuleType
from typing import Any, Callable

from perfbench.config import DEFAULT_MAX_COUNT, BenchConfig
from perfbench.events import ProgressEventHandler
from perfbench.logging import FileLogHandler, Logger, LoggerConfig
from perfbench.runner import BenchSuite


class BenchmarkCLI:
    """Builder for the ``perfbench`` command-line interface.

    Args:
        description: Description shown by --help.
    """

    def __init__(self, description: str) -> None:
        self.parser = argparse.ArgumentParser(prog="perfbench", description=description)
        self._add_common_args()

    def _add_common_args(self) -> None:
        """Add the targets and the measurement arguments."""
        self.parser.add_argument(
            "targets",
            nargs="+",
            metavar="TARGET",
            help="Candidate as 'module:function' or 'file.py:function', optionally suffixed with '=title'",
        )
        count = self.parser.add_mutually_exclusive_group()
        count.add_argument(
            "--iterations",
            "-n",
            type=int,
            default=DEFAULT_MAX_COUNT,
            help=f"Iterations per round (default: {DEFAULT_MAX_COUNT:,})",
        )
        count.add_argument(
            "--factor",
            type=float,
            default=None,
            help=f"Iterations per round as a multiple of {DEFAULT_MAX_COUNT:,}",
        )
        self.parser.add_argument(
            "--warmup",
            "-w",
            type=int,
            default=10,
            help="Warmup calls per test and round (default: 10)",
        )
        self.parser.add_argument(
            "--rounds",
            "-r",
            type=int,
            default=1,
            help="Number of rounds (default: 1)",
        )
        self.parser.add_argument(
            "--decimals",
            type=int,
            default=7,
            help="Decimal digits of displayed times (default: 7)",
        )
        self.parser.add_argument(
            "--filter-outliers",
            action="store_true",
            help="Clip calls slower than twice the warmup average",
        )

    def add_display_args(self) -> BenchmarkCLI:
        """Add flags controlling what gets printed.

        Returns:
            Self for method chaining.
        """
        self.parser.add_argument("--no-pad-title", action="store_true", help="Do not align titles")
        self.parser.add_argument(
            "--no-column-titles", action="store_true", help="Omit column labels in round results"
        )
        self.parser.add_argument(
            "--no-func-result", action="store_true", help="Omit the candidates' return values"
        )
        self.parser.add_argument("--progress", action="store_true", help="Show a progress bar")
        self.parser.add_argument(
            "--warmup-info", action="store_true", help="Show warmup average and outliers"
        )
        self.parser.add_argument(
            "--distribution", action="store_true", help="Show execution-slot tallies"
        )
        self.parser.add_argument(
            "--placements", action="store_true", help="Show the ranking histogram after the totals"
        )
        return self

    def add_logging_args(self) -> BenchmarkCLI:
        """Add --log-file and --verbose.

        Returns:
            Self for method chaining.
        """
        self.parser.add_argument("--log-file", default=None, help="Append diagnostics to this .log or .txt file")
        self.parser.add_argument(
            "--verbose", "-v", action="count", default=0, help="More diagnostics (-v info, -vv debug)"
        )
        return self

    def parse(self, argv: list[str] | None = None) -> argparse.Namespace:
        """Parse command-line arguments.

        Returns:
            Parsed arguments namespace.
        """
        return self.parser.parse_args(argv)


def _load_module(location: str) -> ModuleType:
    if location.endswith(".py") or os.sep in location:
        path = os.path.abspath(location)
        name = os.path.splitext(os.path.basename(path))[0]
        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"cannot load {location}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    return importlib.import_module(location)


def load_target(target: str) -> tuple[Callable[..., Any], str | None]:
    """Resolve ``module:function[=title]`` into the function and its title.

    Raises:
        ValueError: If the target is malformed or does not name a callable.
        ImportError: If the module cannot be imported.
    """
    spec, _, title = target.partition("=")
    location, sep, attr = spec.rpartition(":")
    if not sep or not location or not attr:
        raise ValueError(f"Invalid target; expected 'module:function' but got '{target}'")

    function: Any = _load_module(location)
    for part in attr.split("."):
        function = getattr(function, part)
    if not callable(function):
        raise ValueError(f"Invalid target; '{spec}' is not callable")
    return function, title or None


def build_logger(args: argparse.Namespace) -> Logger:
    handlers = []
    if args.log_file:
        handlers.append(
            FileLogHandler(args.log_file, create=True, run_label=" ".join(args.targets))
        )
    return Logger(
        name="perfbench",
        config=LoggerConfig.for_verbosity(args.verbose),
        handlers=handlers,
    )


def main(argv: list[str] | None = None) -> int:
    cli = BenchmarkCLI("Compare the speed of Python callables").add_display_args().add_logging_args()
    args = cli.parse(argv)
    if args.rounds < 1:
        cli.parser.error("--rounds must be at least 1")

    sys.path.insert(0, os.getcwd())
    candidates = []
    for target in args.targets:
        try:
            candidates.append(load_target(target))
        except (ImportError, AttributeError, ValueError) as exc:
            cli.parser.error(f"{target}: {exc}")

    max_count = args.iterations if args.factor is None else int(DEFAULT_MAX_COUNT * args.factor)
    try:
        config = BenchConfig(
            max_count=max_count,
            warmup_rounds=args.warmup,
            filter_outliers=args.filter_outliers,
            decimals=args.decimals,
            pad_title=not args.no_pad_title,
            add_column_titles=not args.no_column_titles,
            add_func_result=not args.no_func_result,
        )
        logger = build_logger(args)
    except ValueError as exc:
        cli.parser.error(str(exc))

    suite = BenchSuite(
        config,
        event_handler=ProgressEventHandler() if args.progress else None,
        logger=logger,
    )
    for function, title in candidates:
        suite.register(function, title)

    try:
        for round_number in range(1, args.rounds + 1):
            suite.log(f"Round {round_number}:")
            suite.run().show(
                show_distribution=args.distribution,
                show_warmup_info=args.warmup_info,
            )
        suite.log("")
        suite.show_totals()
        if args.placements:
            suite.log("")
            suite.show_placements()
    finally:
        logger.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
