from __future__ import annotations

import pytest

from per_diem.currency import CurrencyTable
from per_diem.rates import RuleEngine

RATES = {"EUR": 0.9, "GBP": 0.8, "CAD": 1.25, "JPY": 150.0}


@pytest.fixture
def currency_table() -> CurrencyTable:
    return CurrencyTable(base="USD", rates=RATES)


@pytest.fixture
def engine(currency_table: CurrencyTable) -> RuleEngine:
    return RuleEngine.from_table(currency_table)
