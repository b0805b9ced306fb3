"""Dataclasses for normalised per-diem records."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

RawRecord = Mapping[str, str]

OUTPUT_COLUMNS: tuple[str, ...] = (
    "jurisdiction",
    "slug",
    "country",
    "location",
    "season",
    "total",
    "mealsAndIncidentals",
    "roomRate",
)


def _format_amount(value: Optional[float]) -> str:
    return "" if value is None else repr(float(value))


@dataclass(slots=True)
class NormalizedRecord:
    """One per-diem rate expressed in the target currency.

    Amounts are ``None`` when the source row does not determine them.
    """

    jurisdiction: str
    slug: str
    country: Optional[str]
    location: Optional[str]
    season: Optional[str]
    total: Optional[float]
    meals_and_incidentals: Optional[float]
    room_rate: Optional[float]

    def is_determinate(self) -> bool:
        return self.total is not None or self.meals_and_incidentals is not None

    def to_row(self) -> dict[str, str]:
        return {
            "jurisdiction": self.jurisdiction,
            "slug": self.slug,
            "country": self.country or "",
            "location": self.location or "",
            "season": self.season or "",
            "total": _format_amount(self.total),
            "mealsAndIncidentals": _format_amount(self.meals_and_incidentals),
            "roomRate": _format_amount(self.room_rate),
        }
