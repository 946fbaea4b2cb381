from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def normalize_code(v: str) -> str:
    code = v.strip().upper()
    if not code:
        raise ValueError("currency code must not be blank")
    return code


class RateEntryIn(BaseModel):
    """Admin add/update submission after the presence check."""

    currency: str
    rate: float = Field(..., gt=0, allow_inf_nan=False)

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_code(v)


class ConversionIn(BaseModel):
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    from_currency: str
    to_currency: str

    @field_validator("from_currency", "to_currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_code(v)


class RateTableOut(BaseModel):
    base: str
    rates: Dict[str, float]


class ConversionOut(BaseModel):
    amount: float
    from_currency: str
    to_currency: str
    rate: float
    result: float


class HealthOut(BaseModel):
    status: str
    rates_loaded: str
    currencies: int
    version: str
