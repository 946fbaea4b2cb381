from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from fxdesk.core.errors import (
    CurrencyNotFoundError,
    DuplicateCurrencyError,
    ProtectedCurrencyError,
    RatePersistenceError,
)
from fxdesk.models.rates import RateEntryIn, is_blank, normalize_code
from fxdesk.routers.deps import get_rate_store, templates
from fxdesk.services.rates.store import RateStore

"""Admin rate editor.

Every POST answers with a 303 redirect back to GET /admin/rates carrying a
human readable ``message`` query parameter; there are no structured status
bodies. Each successful mutation is saved to disk before redirecting, and a
failed save has already been rolled back by the store. The POST handlers
are plain functions so the blocking file write runs in the threadpool.
"""

router = APIRouter(prefix="/admin/rates", tags=["admin"])

logger = logging.getLogger("fxdesk.admin")

ADMIN_URL = "/admin/rates"

MSG_FIELDS_REQUIRED = "All fields are required"
MSG_INVALID_RATE = "Enter a valid rate"
MSG_UPDATED = "Rate updated successfully"
MSG_EXISTS = "Currency already exists"
MSG_ADDED = "Currency added successfully"
MSG_SELECT_DELETE = "Select a currency to delete"
MSG_NOT_FOUND = "Currency not found"
MSG_DELETED = "Currency deleted successfully"
MSG_SAVE_FAILED = "Save failed"
MSG_SERVER_ERROR = "Server error"


def _admin_redirect(message: str) -> RedirectResponse:
    url = f"{ADMIN_URL}?{urlencode({'message': message})}"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("", response_class=HTMLResponse)
async def admin_rates(
    request: Request,
    message: Optional[str] = Query(None),
    store: RateStore = Depends(get_rate_store),
):
    context = {
        "request": request,
        "version": request.app.state.settings.version,
        "title": "Exchange Rate Editor",
        "rates": store.as_dict(),
        "base_currency": store.base_currency,
        "message": message,
        "load_failed": store.load_failed,
        "load_error": store.load_error,
    }
    return templates.TemplateResponse(request, "admin_rates.html", context)


@router.post("/update", response_class=RedirectResponse)
def admin_update_rate(
    currency: Optional[str] = Form(None),
    rate: Optional[str] = Form(None),
    store: RateStore = Depends(get_rate_store),
):
    if is_blank(currency) or is_blank(rate):
        return _admin_redirect(MSG_FIELDS_REQUIRED)
    try:
        entry = RateEntryIn(currency=currency, rate=rate.strip())
    except ValidationError:
        return _admin_redirect(MSG_INVALID_RATE)
    try:
        store.update_rate(entry.currency, entry.rate)
    except RatePersistenceError:
        return _admin_redirect(MSG_SAVE_FAILED)
    except Exception:
        logger.exception("rate update failed for %s", entry.currency)
        return _admin_redirect(MSG_SERVER_ERROR)
    logger.info("rate updated %s=%s", entry.currency, entry.rate)
    return _admin_redirect(MSG_UPDATED)


@router.post("/add", response_class=RedirectResponse)
def admin_add_rate(
    new_currency: Optional[str] = Form(None, alias="newCurrency"),
    new_rate: Optional[str] = Form(None, alias="newRate"),
    store: RateStore = Depends(get_rate_store),
):
    if is_blank(new_currency) or is_blank(new_rate):
        return _admin_redirect(MSG_FIELDS_REQUIRED)
    # Duplicate check comes before rate validation
    if normalize_code(new_currency) in store:
        return _admin_redirect(MSG_EXISTS)
    try:
        entry = RateEntryIn(currency=new_currency, rate=new_rate.strip())
    except ValidationError:
        return _admin_redirect(MSG_INVALID_RATE)
    try:
        store.add_rate(entry.currency, entry.rate)
    except DuplicateCurrencyError:
        return _admin_redirect(MSG_EXISTS)
    except RatePersistenceError:
        return _admin_redirect(MSG_SAVE_FAILED)
    except Exception:
        logger.exception("adding currency %s failed", entry.currency)
        return _admin_redirect(MSG_SERVER_ERROR)
    logger.info("currency added %s=%s", entry.currency, entry.rate)
    return _admin_redirect(MSG_ADDED)


@router.post("/delete", response_class=RedirectResponse)
def admin_delete_rate(
    currency_to_delete: Optional[str] = Form(None, alias="currencyToDelete"),
    store: RateStore = Depends(get_rate_store),
):
    if is_blank(currency_to_delete):
        return _admin_redirect(MSG_SELECT_DELETE)
    code = normalize_code(currency_to_delete)
    try:
        store.remove_rate(code)
    except ProtectedCurrencyError:
        return _admin_redirect(f"Cannot delete base currency {store.base_currency}")
    except CurrencyNotFoundError:
        return _admin_redirect(MSG_NOT_FOUND)
    except RatePersistenceError:
        return _admin_redirect(MSG_SAVE_FAILED)
    except Exception:
        logger.exception("deleting currency %s failed", code)
        return _admin_redirect(MSG_SERVER_ERROR)
    logger.info("currency deleted %s", code)
    return _admin_redirect(MSG_DELETED)
