"""Half-up rounding for percentages and rates.

Python's round() uses banker's rounding (round(12.5) == 12); stored rates
and percentages are rounded half-up instead (12.5 -> 13).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, ndigits: int = 0) -> float:
    quantum = Decimal(1).scaleb(-ndigits)
    # Drop float noise first so 52.49999999999999 still rounds to 53
    cleaned = Decimal(repr(round(value, 9)))
    return float(cleaned.quantize(quantum, rounding=ROUND_HALF_UP))


def round_percent(value: float) -> int:
    """Round to a whole percentage."""
    return int(round_half_up(value))
