"""Per-diem record models, field extractors and jurisdiction rules."""

from .extractors import MoneyCleaner, parse_currency_code, parse_money_value
from .locations import slug_location, slugify
from .models import OUTPUT_COLUMNS, NormalizedRecord, RawRecord
from .rules import ColumnRule, RuleEngine

__all__ = [
    "ColumnRule",
    "MoneyCleaner",
    "NormalizedRecord",
    "OUTPUT_COLUMNS",
    "RawRecord",
    "RuleEngine",
    "parse_currency_code",
    "parse_money_value",
    "slug_location",
    "slugify",
]
