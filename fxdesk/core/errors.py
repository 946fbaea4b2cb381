"""Domain exceptions and FastAPI exception handlers.

Rate store / converter failures are plain exceptions deriving from
RateError; routers translate them into form errors or redirect messages.
The handlers below cover whatever escapes the routers.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("fxdesk.errors")


class RateError(Exception):
    """Base class for rate table errors."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class UnknownCurrencyError(RateError):
    def __init__(self, code: str):
        super().__init__(code, f"Unknown currency: {code}")


class DuplicateCurrencyError(RateError):
    def __init__(self, code: str):
        super().__init__(code, f"Currency already exists: {code}")


class CurrencyNotFoundError(RateError):
    def __init__(self, code: str):
        super().__init__(code, f"Currency not found: {code}")


class ProtectedCurrencyError(RateError):
    def __init__(self, code: str):
        super().__init__(code, f"Cannot delete base currency {code}")


class ConversionOverflowError(RateError):
    """Converted amount or cross rate does not fit in a float."""

    def __init__(self, code: str):
        super().__init__(code, f"Conversion result out of range for {code}")


class RatePersistenceError(RateError):
    """Saving the table failed; the in-memory change has been rolled back."""

    def __init__(self, code: str, reason: str | None = None):
        msg = f"Failed to save rates after changing {code}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(code, msg)


def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        detail = f"No route for {request.method} {request.url.path}"
    else:
        detail = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "not_found" if exc.status_code == 404 else "http_error",
            "detail": detail,
        },
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.error(
        "unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return HTMLResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content="<h1>Something went wrong!</h1>",
    )
