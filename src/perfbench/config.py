"""Immutable run configuration for a benchmark suite."""

from collections.abc import Mapping
from numbers import Integral, Real
from typing import Any, Self

import msgspec.structs
from msgspec import Struct

DEFAULT_MAX_COUNT = 100_000

# Option keys as accepted by ``BenchConfig.from_options``, mapped to fields.
OPTION_ALIASES: dict[str, str] = {
    "maxCount": "max_count",
    "decimals": "decimals",
    "parameters": "parameters",
    "padTitle": "pad_title",
    "warmupRounds": "warmup_rounds",
    "filterWarmupAverage": "filter_outliers",
    "resultsAddColumnTitle": "add_column_titles",
    "resultsAddFuncResult": "add_func_result",
}
MAX_COUNT_FACTOR_KEYS = ("maxCountFactor", "max_count_factor")
INTEGER_FIELDS = ("max_count", "warmup_rounds", "decimals", "diff_decimals")


class BenchConfig(Struct, frozen=True):
    """Settings applied to every round of a suite.

    Args:
        max_count: Iterations ("circles") per round. Every test runs once per iteration.
        warmup_rounds: Calls per test during warmup. The slowest warmup call is discarded.
        filter_outliers: Clip calls slower than ``outlier_factor`` times the warmup average.
        decimals: Digits after the decimal point when rendering times.
        parameters: Forwarded unchanged as the single argument of every candidate call.
        pad_title: Pad titles to the longest registered title when printing.
        add_column_titles: Prefix result columns with labels such as ``avg:``.
        add_func_result: Append the last return value of each candidate to its results.
        outlier_factor: Multiple of the warmup average above which a call is an outlier.
        diff_decimals: Digits after the decimal point for percentage differences.
    """

    max_count: int = DEFAULT_MAX_COUNT
    warmup_rounds: int = 10
    filter_outliers: bool = False
    decimals: int = 7
    parameters: Any = None
    pad_title: bool = True
    add_column_titles: bool = True
    add_func_result: bool = True
    outlier_factor: float = 2.0
    diff_decimals: int = 5

    def __post_init__(self):
        """Validate counts and precision."""
        for name in INTEGER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise ValueError(
                    f"Invalid {name}; expected int but got {type(value).__name__} {value!r}"
                )
        if isinstance(self.outlier_factor, bool) or not isinstance(self.outlier_factor, Real):
            raise ValueError(
                f"Invalid outlier_factor; expected a number but got {self.outlier_factor!r}"
            )
        if self.max_count < 1:
            raise ValueError(
                f"Invalid max_count; expected >=1 but got {self.max_count}"
            )
        if self.warmup_rounds < 0:
            raise ValueError(
                f"Invalid warmup_rounds; expected >=0 but got {self.warmup_rounds}"
            )
        if self.decimals < 0:
            raise ValueError(f"Invalid decimals; expected >=0 but got {self.decimals}")
        if self.diff_decimals < 0:
            raise ValueError(
                f"Invalid diff_decimals; expected >=0 but got {self.diff_decimals}"
            )
        if self.outlier_factor <= 1.0:
            raise ValueError(
                f"Invalid outlier_factor; expected >1 but got {self.outlier_factor}"
            )

    @classmethod
    def default(cls) -> Self:
        """Return the default configuration (100,000 iterations, 10 warmup calls)."""
        return cls()

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None, base: Self | None = None) -> Self:
        """Build a config from a loose option mapping.

        Both the camelCase option names (``maxCount``, ``warmupRounds``, ...) and
        the field names are recognised. ``maxCountFactor`` sets ``max_count`` to a
        multiple of ``DEFAULT_MAX_COUNT``. Keys that are not recognised are
        ignored; use ``unknown_options`` to find them.

        Args:
            options: Option mapping, may be None.
            base: Config whose values are kept for keys not present in ``options``.

        Returns:
            A new validated config.
        """
        base = base if base is not None else cls()
        if not options:
            return base

        changes: dict[str, Any] = {}
        for key, value in options.items():
            if key in OPTION_ALIASES:
                changes[OPTION_ALIASES[key]] = value
            elif key in cls.__struct_fields__:
                changes[key] = value
        # The factor wins over an explicit maxCount, whatever the key order.
        for key in MAX_COUNT_FACTOR_KEYS:
            if key in options:
                changes["max_count"] = int(DEFAULT_MAX_COUNT * options[key])
        return base.replace(**changes)

    @classmethod
    def unknown_options(cls, options: Mapping[str, Any] | None) -> list[str]:
        """Return the keys of ``options`` that ``from_options`` would ignore."""
        if not options:
            return []
        return [
            key
            for key in options
            if key not in OPTION_ALIASES
            and key not in MAX_COUNT_FACTOR_KEYS
            and key not in cls.__struct_fields__
        ]

    def replace(self, **changes: Any) -> Self:
        """Return a copy with ``changes`` applied, validated again."""
        fields = msgspec.structs.asdict(self)
        fields.update(changes)
        return type(self)(**fields)
