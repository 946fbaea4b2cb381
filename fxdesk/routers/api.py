from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from fxdesk.core.errors import ConversionOverflowError, UnknownCurrencyError
from fxdesk.models.rates import ConversionOut, RateTableOut, normalize_code
from fxdesk.routers.deps import get_rate_store
from fxdesk.services.rates.conversion import convert
from fxdesk.services.rates.store import RateStore

"""Read-only JSON view of the rate table and converter.

Endpoints:
    - GET /api/rates    -> {"base": "USD", "rates": {...}} in file order
    - GET /api/convert  -> conversion result for amount/from/to query params
"""

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/rates", response_model=RateTableOut, summary="Current rate table")
async def list_rates(store: RateStore = Depends(get_rate_store)):
    return RateTableOut(base=store.base_currency, rates=store.as_dict())


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount")
async def convert_amount(
    amount: float = Query(..., gt=0, allow_inf_nan=False),
    from_currency: str = Query(..., alias="from", min_length=1),
    to_currency: str = Query(..., alias="to", min_length=1),
    store: RateStore = Depends(get_rate_store),
):
    try:
        conv = convert(
            amount, normalize_code(from_currency), normalize_code(to_currency), store
        )
    except (UnknownCurrencyError, ValueError) as e:
        # ValueError: code was only whitespace
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConversionOverflowError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return ConversionOut(**conv.as_dict())
