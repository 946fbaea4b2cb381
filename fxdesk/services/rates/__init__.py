from .conversion import ConversionResult, convert
from .store import LoadState, RateStore

__all__ = ["ConversionResult", "convert", "LoadState", "RateStore"]
