"""Jurisdiction rules deriving total, lodging and M&IE figures from raw rows.

No table says which jurisdiction layout it follows, so every row is matched
against ordered column rules: the first rule whose column is populated decides
how a figure is computed. The order below is load-bearing.

Layouts seen in the cleaned tables:

- US (State Department): ``Lodging``, ``Meals & Incidentals``, ``Per Diem`` or
  ``First 60 Days US$``
- EU: ``Amount (Euros)`` or ``Hotel ceiling`` plus ``Daily allowance``
- UN (ICSC DSA): ``Per Diem`` plus ``Room as % of DSA``
- Canada (NJC): ``GRAND TOTAL (taxes included)`` plus ``Incidental Amount``
- UK (HMRC): ``Room rate`` plus ``Total residual`` in a local ``Currency``
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from per_diem.currency import CurrencyConverter, CurrencyTable

from .extractors import MoneyCleaner
from .locations import slug_location
from .models import NormalizedRecord, RawRecord

logger = logging.getLogger(__name__)

COUNTRY = "Country"
LOCATION = "Location"
SEASON = "Season Code"
CURRENCY = "Currency"

FIRST_60_DAYS = "First 60 Days US$"
PER_DIEM = "Per Diem"
TOTAL_RESIDUAL = "Total residual"
GRAND_TOTAL = "GRAND TOTAL (taxes included)"
AMOUNT_EUROS = "Amount (Euros)"
HOTEL_CEILING = "Hotel ceiling"
DAILY_ALLOWANCE = "Daily allowance"
ROOM_RATE = "Room rate"
ROOM_PERCENTAGE = "Room as % of DSA"
INCIDENTAL_AMOUNT = "Incidental Amount"
LODGING = "Lodging"
MEALS_AND_INCIDENTALS = "Meals & Incidentals"

TOTAL_COLUMNS: tuple[str, ...] = (
    FIRST_60_DAYS,
    PER_DIEM,
    TOTAL_RESIDUAL,
    GRAND_TOTAL,
    AMOUNT_EUROS,
    HOTEL_CEILING,
)

EURO = "EUR"

Handler = Callable[[RawRecord, str], Optional[float]]


@dataclass(frozen=True)
class ColumnRule:
    """Computes a figure when ``column`` is populated in a row."""

    column: str
    jurisdiction: str
    handler: Handler


def _present(record: RawRecord, column: str) -> bool:
    return bool(record.get(column))


def _parse_percentage(raw: str) -> Optional[float]:
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return None if math.isnan(value) else value


def matching_rule(rules: Sequence[ColumnRule], record: RawRecord) -> Optional[ColumnRule]:
    return next((rule for rule in rules if _present(record, rule.column)), None)


def first_match(rules: Sequence[ColumnRule], record: RawRecord) -> Optional[float]:
    rule = matching_rule(rules, record)
    if rule is None:
        return None
    logger.debug("Applying %s rule on column %r", rule.jurisdiction, rule.column)
    return rule.handler(record, record[rule.column])


class RuleEngine:
    """Applies the jurisdiction rules with a fixed currency snapshot."""

    def __init__(self, cleaner: MoneyCleaner) -> None:
        self._cleaner = cleaner
        self.room_rate_rules: tuple[ColumnRule, ...] = (
            ColumnRule(ROOM_PERCENTAGE, "UN", self._room_share_of_total),
            ColumnRule(HOTEL_CEILING, "EU", self._euro_amount),
            ColumnRule(INCIDENTAL_AMOUNT, "Canada", lambda record, value: 0.0),
            ColumnRule(LODGING, "US", self._target_amount),
            ColumnRule(ROOM_RATE, "UK", self._room_rate_with_currency),
        )
        self.meals_rules: tuple[ColumnRule, ...] = (
            ColumnRule(MEALS_AND_INCIDENTALS, "US", self._target_amount),
            ColumnRule(DAILY_ALLOWANCE, "EU", self._euro_amount),
            ColumnRule(ROOM_PERCENTAGE, "UN", self._meals_share_of_total),
            ColumnRule(INCIDENTAL_AMOUNT, "Canada", lambda record, value: self.compute_total(record)),
            ColumnRule(TOTAL_RESIDUAL, "UK", self._local_currency_amount),
        )

    @classmethod
    def from_table(cls, table: CurrencyTable, *, target: str = "USD") -> "RuleEngine":
        return cls(MoneyCleaner(CurrencyConverter(table), target=target))

    # Derived figures --------------------------------------------------------------

    def compute_total(self, record: RawRecord) -> Optional[float]:
        provisional = next((record[column] for column in TOTAL_COLUMNS if _present(record, column)), None)

        currency = record.get(CURRENCY)
        # The header already says dollars, whatever the Currency column claims.
        if _present(record, FIRST_60_DAYS):
            currency = None
        if _present(record, AMOUNT_EUROS) or _present(record, DAILY_ALLOWANCE):
            currency = EURO

        total = self._cleaner.clean_money(currency, provisional)

        # EU tables report the hotel ceiling and the daily allowance separately.
        if _present(record, DAILY_ALLOWANCE):
            allowance = self._cleaner.clean_money(currency, record[DAILY_ALLOWANCE])
            total = None if total is None or allowance is None else total + allowance

        # UK residual totals exclude the room rate.
        if _present(record, ROOM_RATE):
            room_rate = self._room_rate_with_currency(record, record[ROOM_RATE])
            if total is not None and room_rate is not None:
                total += room_rate

        return total

    def compute_room_rate(self, record: RawRecord) -> Optional[float]:
        return first_match(self.room_rate_rules, record)

    def compute_meals_and_incidentals(self, record: RawRecord) -> Optional[float]:
        return first_match(self.meals_rules, record)

    def process_row(self, jurisdiction: str, record: RawRecord) -> NormalizedRecord:
        return NormalizedRecord(
            jurisdiction=jurisdiction,
            slug=slug_location(record),
            country=record.get(COUNTRY),
            location=record.get(LOCATION),
            season=record.get(SEASON),
            total=self.compute_total(record),
            meals_and_incidentals=self.compute_meals_and_incidentals(record),
            room_rate=self.compute_room_rate(record),
        )

    # Rule handlers ----------------------------------------------------------------

    def _target_amount(self, record: RawRecord, value: str) -> Optional[float]:
        return self._cleaner.clean_money(None, value)

    def _euro_amount(self, record: RawRecord, value: str) -> Optional[float]:
        return self._cleaner.clean_money(EURO, value)

    def _local_currency_amount(self, record: RawRecord, value: str) -> Optional[float]:
        return self._cleaner.clean_money(record.get(CURRENCY), value)

    def _room_rate_with_currency(self, record: RawRecord, value: str) -> Optional[float]:
        # The code may sit inside the cell itself or in the Currency column.
        hint = f"{value} {record.get(CURRENCY) or ''}"
        return self._cleaner.clean_money(hint, value)

    def _room_share_of_total(self, record: RawRecord, value: str) -> Optional[float]:
        total = self.compute_total(record)
        percentage = _parse_percentage(value)
        if total is None or percentage is None:
            return None
        return total * (percentage / 100)

    def _meals_share_of_total(self, record: RawRecord, value: str) -> Optional[float]:
        total = self.compute_total(record)
        percentage = _parse_percentage(value)
        if total is None or percentage is None:
            return None
        return total * (1 - percentage / 100)
