"""Currency snapshot loading and conversion between known codes."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class CurrencyTableError(ValueError):
    """Raised when the currency snapshot is missing required content."""


class UnknownCurrencyError(KeyError):
    """Raised when a conversion references a code outside the snapshot."""


class CurrencyTable(BaseModel):
    """Base currency plus rates expressed as units per one unit of base."""

    model_config = ConfigDict(frozen=True)

    base: str = Field(min_length=3, max_length=3)
    rates: Dict[str, float] = Field(default_factory=dict)

    @field_validator("rates")
    @classmethod
    def _positive_rates(cls, value: Dict[str, float]) -> Dict[str, float]:
        bad = sorted(code for code, rate in value.items() if rate <= 0)
        if bad:
            raise ValueError(f"rates must be positive (offending codes: {', '.join(bad)})")
        return value

    def knows(self, code: str) -> bool:
        return code in self.rates

    def rate(self, code: str) -> float:
        if code == self.base:
            return 1.0
        try:
            return self.rates[code]
        except KeyError as exc:
            raise UnknownCurrencyError(code) from exc

    @classmethod
    def load(cls, path: Path) -> "CurrencyTable":
        if not path.exists():
            raise FileNotFoundError(f"Currency snapshot not found at {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CurrencyTableError(f"Currency snapshot {path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise CurrencyTableError(f"Currency snapshot {path} must be a JSON object")
        try:
            table = cls.model_validate({"base": data.get("base"), "rates": data.get("rates")})
        except ValidationError as exc:
            raise CurrencyTableError(f"Currency snapshot {path} is malformed: {exc}") from exc
        logger.debug("Loaded %s currency rates (base %s) from %s", len(table.rates), table.base, path)
        return table


class CurrencyConverter:
    """Converts amounts between codes of a fixed snapshot."""

    def __init__(self, table: CurrencyTable) -> None:
        self._table = table

    @property
    def table(self) -> CurrencyTable:
        return self._table

    def convert(self, amount: float, from_code: str, to_code: str) -> float:
        """Express ``amount`` of ``from_code`` in ``to_code`` via the base currency."""
        if from_code == to_code:
            return amount
        return amount / self._table.rate(from_code) * self._table.rate(to_code)
