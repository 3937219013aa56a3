"""
Half-up rounding for scores, percentages and rolling averages.

Python's built-in ``round`` uses banker's rounding (``round(12.5) == 12``).
User-facing percentages and averages here round half up instead, so a
category at 12.5 % reports 13 % and a 7.25 h sleep average reports 7.3 h.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


def round_to(value: float, ndigits: int) -> float:
    """Round to ``ndigits`` decimal places, halves towards +infinity.

    Example::

        round_to(7.25, 1)  # 7.3
    """
    factor = 10 ** ndigits
    return round_half_up(value * factor) / factor
