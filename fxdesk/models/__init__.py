"""Pydantic models for form input and JSON responses."""

from .rates import (
    ConversionIn,
    ConversionOut,
    HealthOut,
    RateEntryIn,
    RateTableOut,
    is_blank,
    normalize_code,
)

__all__ = [
    "ConversionIn",
    "ConversionOut",
    "HealthOut",
    "RateEntryIn",
    "RateTableOut",
    "is_blank",
    "normalize_code",
]
