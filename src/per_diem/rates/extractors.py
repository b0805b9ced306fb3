"""Parse raw monetary cells and currency annotations."""
from __future__ import annotations

import re
from typing import Optional

from per_diem.currency import CurrencyConverter, CurrencyTable

PLACEHOLDER = "*"

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_FLOAT = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_CURRENCY_TOKEN = re.compile(r"\(*[A-Z]{3}\)*")


def parse_money_value(raw: Optional[str]) -> Optional[float]:
    """Return the number embedded in ``raw``.

    Every character other than digits and ``.`` is dropped before parsing, so
    ``"$1,234.50"`` reads as ``1234.5`` but ``"12-15"`` also reads as ``1215``.
    Only the leading float survives when several dots remain (``"1.2.3"`` -> 1.2).
    """
    if not raw:
        return None
    match = _LEADING_FLOAT.match(_NON_NUMERIC.sub("", raw))
    if match is None:
        return None
    return float(match.group(0))


def parse_currency_code(raw: Optional[str], table: CurrencyTable) -> Optional[str]:
    """Return the first three-letter code in ``raw`` if the snapshot knows it."""
    if not raw:
        return None
    match = _CURRENCY_TOKEN.search(raw)
    if match is None:
        return None
    code = match.group(0).replace("(", "").replace(")", "")
    return code if table.knows(code) else None


class MoneyCleaner:
    """Turns raw cells into amounts of the target currency."""

    def __init__(self, converter: CurrencyConverter, *, target: str = "USD") -> None:
        self._converter = converter
        self._target = target

    @property
    def target(self) -> str:
        return self._target

    @property
    def table(self) -> CurrencyTable:
        return self._converter.table

    def clean_money(self, code_hint: Optional[str], raw: Optional[str]) -> Optional[float]:
        if raw is None or raw == PLACEHOLDER:
            return None
        code = parse_currency_code(code_hint, self.table) or self._target
        value = parse_money_value(raw)
        if value is None:
            return None
        return self._converter.convert(value, code, self._target)
