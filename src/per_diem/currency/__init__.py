"""Static currency snapshot and conversion."""

from .converter import (
    CurrencyConverter,
    CurrencyTable,
    CurrencyTableError,
    UnknownCurrencyError,
)

__all__ = [
    "CurrencyConverter",
    "CurrencyTable",
    "CurrencyTableError",
    "UnknownCurrencyError",
]
