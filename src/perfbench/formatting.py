"""Fixed-precision rendering of measured values."""

import math
from decimal import Decimal


def to_number(number: float, decimals: int) -> str:
    """
    Render ``number`` with exactly ``decimals`` fractional digits by truncation.

    The shortest decimal representation of the float is cut after
    ``decimals`` digits (never rounded) and padded with zeros when shorter.

    Examples
    --------
    >>> to_number(1, 3)
    '1.000'
    >>> to_number(1.23456, 3)
    '1.234'
    """
    if isinstance(number, int):
        exact = Decimal(number)
    else:
        number = float(number)
        if not math.isfinite(number):
            return str(number)
        # repr() gives the shortest round-trip digits; Decimal drops the exponent form.
        exact = Decimal(repr(number))

    text = format(exact, "f")
    integer, _, fraction = text.partition(".")
    if decimals == 0:
        return integer
    return f"{integer}.{(fraction + '0' * decimals)[:decimals]}"


def percent_diff(value: float, reference: float) -> float | None:
    """Return how much slower ``value`` is than ``reference`` in percent, or None if undefined."""
    if reference == 0:
        return None
    return (value / reference - 1.0) * 100.0


def pad_title(title: str, width: int, pad: bool = True) -> str:
    """Append ``:`` and, if ``pad``, spaces so all titles of ``width`` chars align."""
    title = title + ":"
    if pad:
        title = title.ljust(width + 1)
    return title
