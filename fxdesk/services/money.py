"""Money / rounding helpers.

Centralized so the converter, JSON API and templates use identical
rounding semantics.
"""

from __future__ import annotations
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

FOUR_PLACES = Decimal("0.0001")

# Largest finite float has 309 integer digits; keep 4 more after the point.
_QUANTIZE_PRECISION = 320


def round4(value: float) -> float:
    if not math.isfinite(value):
        return value
    with localcontext() as ctx:
        ctx.prec = _QUANTIZE_PRECISION
        return float(
            Decimal(str(value)).quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)
        )
