"""Numeric normalization and monetary rounding.

Record amounts arrive from the storage layer as numbers or as wire strings
("1200.40", "1 200,40"). Everything that sums money goes through
``to_number`` and ``round_two`` so one malformed value degrades to 0 instead
of failing a whole report.
"""

import math
import re
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Union

NumericInput = Union[int, float, Decimal, str, None, Any]

_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_CENT = Decimal("0.01")
# Enough digits to quantize the largest finite float to cents.
_MONEY_CONTEXT = Context(prec=400)


def to_number(value: NumericInput) -> float:
    """Coerce ``value`` to a finite float, or 0.0 when that is not possible.

    Numbers pass through. Strings have every whitespace character removed and
    a decimal comma turned into a decimal point before parsing. Booleans,
    None, containers and non-finite results all give 0.0. Never raises.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return 0.0
        return number if math.isfinite(number) else 0.0
    if isinstance(value, str):
        cleaned = "".join(value.split()).replace(",", ".")
        if not _NUMBER_PATTERN.match(cleaned):
            return 0.0
        number = float(cleaned)
        return number if math.isfinite(number) else 0.0
    return 0.0


def round_two(value: float) -> float:
    """Round to cents, half away from zero (1.005 -> 1.01)."""
    if not math.isfinite(value):
        return 0.0
    return float(
        Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP, context=_MONEY_CONTEXT)
    )


def sum_rounded(values: Iterable[float]) -> float:
    """Sum monetary values, rounding to cents after every addition."""
    total = 0.0
    for value in values:
        total = round_two(total + value)
    return total


def format_amount_fr(value: float) -> str:
    """Format an amount the fr-FR way: narrow no-break thousands, comma decimals.

    >>> format_amount_fr(1234.5)
    '1\u202f234,50'
    """
    text = f"{round_two(value):,.2f}"
    return text.replace(",", "\u202f").replace(".", ",")


__all__ = [
    "NumericInput",
    "to_number",
    "round_two",
    "sum_rounded",
    "format_amount_fr",
]
