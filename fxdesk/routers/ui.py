import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from fxdesk.core.errors import ConversionOverflowError, UnknownCurrencyError
from fxdesk.models.rates import ConversionIn, is_blank
from fxdesk.routers.deps import get_rate_store, templates
from fxdesk.services.rates.conversion import convert
from fxdesk.services.rates.store import RateStore

router = APIRouter(tags=["ui"])

logger = logging.getLogger("fxdesk.ui")

MSG_FIELDS_REQUIRED = "All fields are required"
MSG_INVALID_AMOUNT = "Enter a valid amount"
MSG_UNKNOWN_CURRENCY = "Unknown currency"
MSG_OUT_OF_RANGE = "Conversion result is out of range"


def _base_context(request: Request, store: RateStore) -> Dict[str, Any]:
    return {
        "request": request,
        "version": request.app.state.settings.version,
        "currencies": store.codes(),
    }


@router.get("/", response_class=HTMLResponse)
async def ui_home(request: Request, store: RateStore = Depends(get_rate_store)):
    context = _base_context(request, store)
    context["title"] = "Currency Converter"
    return templates.TemplateResponse(request, "index.html", context)


@router.post("/convert", response_class=HTMLResponse)
async def ui_convert(
    request: Request,
    amount: Optional[str] = Form(None),
    from_currency: Optional[str] = Form(None, alias="fromCurrency"),
    to_currency: Optional[str] = Form(None, alias="toCurrency"),
    store: RateStore = Depends(get_rate_store),
):
    """Convert the submitted amount and render the result page.

    Validation failures and unknown currencies re-render the same form with
    the submitted values and a 400 status.
    """
    context = _base_context(request, store)
    context.update(
        {
            "title": "Conversion",
            "form": {
                "amount": amount,
                "fromCurrency": from_currency,
                "toCurrency": to_currency,
            },
            "result": None,
            "success": False,
            "error": None,
        }
    )
    errors: List[str] = []

    if is_blank(amount) or is_blank(from_currency) or is_blank(to_currency):
        errors.append(MSG_FIELDS_REQUIRED)
    else:
        try:
            query = ConversionIn(
                amount=amount.strip(),
                from_currency=from_currency,
                to_currency=to_currency,
            )
        except ValidationError:
            errors.append(MSG_INVALID_AMOUNT)
        else:
            try:
                conv = convert(
                    query.amount, query.from_currency, query.to_currency, store
                )
            except UnknownCurrencyError as e:
                logger.info("conversion rejected: %s", e)
                errors.append(MSG_UNKNOWN_CURRENCY)
            except ConversionOverflowError as e:
                logger.info("conversion rejected: %s", e)
                errors.append(MSG_OUT_OF_RANGE)
            else:
                context["form"] = {
                    "amount": conv.amount,
                    "fromCurrency": conv.from_currency,
                    "toCurrency": conv.to_currency,
                }
                context["result"] = conv
                context["success"] = True

    if errors:
        context["error"] = errors[0]
        return templates.TemplateResponse(
            request,
            "convert.html",
            context,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return templates.TemplateResponse(request, "convert.html", context)


@router.get("/rates", response_class=HTMLResponse)
async def ui_rates(request: Request, store: RateStore = Depends(get_rate_store)):
    context = _base_context(request, store)
    context.update(
        {
            "title": "Exchange Rates",
            "rates": store.as_dict(),
            "base_currency": store.base_currency,
        }
    )
    return templates.TemplateResponse(request, "rates.html", context)
