from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Protocol

from fxdesk.core.errors import ConversionOverflowError, UnknownCurrencyError
from fxdesk.services.money import round4

"""Cross-currency conversion through the base currency.

Every rate is "units of currency per 1 USD", so converting X -> Y is
amount / rate[X] * rate[Y]. The result is rounded once, to 4 decimals,
regardless of the target currency.

The amount is not validated here; handlers reject non-positive or
non-finite input before calling convert(). A result or cross rate that
overflows a float raises ConversionOverflowError instead of returning inf.
"""


class SupportsRateLookup(Protocol):
    def get(self, code: str) -> Optional[float]: ...


@dataclass(frozen=True)
class ConversionResult:
    amount: float
    from_currency: str
    to_currency: str
    rate: float
    result: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _rate_or_raise(store: SupportsRateLookup, code: str) -> float:
    rate = store.get(code)
    if not rate:
        raise UnknownCurrencyError(code)
    return rate


def convert(
    amount: float, from_currency: str, to_currency: str, store: SupportsRateLookup
) -> ConversionResult:
    from_rate = _rate_or_raise(store, from_currency)
    to_rate = _rate_or_raise(store, to_currency)
    amount_in_base = amount / from_rate
    result = amount_in_base * to_rate
    rate = to_rate / from_rate
    if not (math.isfinite(result) and math.isfinite(rate)):
        raise ConversionOverflowError(to_currency)
    return ConversionResult(
        amount=amount,
        from_currency=from_currency,
        to_currency=to_currency,
        rate=rate,
        result=round4(result),
    )
