"""Location slugs shared by every jurisdiction table."""
from __future__ import annotations

import re
import unicodedata
from typing import Optional

from .models import RawRecord

CATCH_ALL_MARKERS: tuple[str, ...] = ("Other", "Elsewhere", "All Areas")

_APOSTROPHES = re.compile(r"['’]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    folded = _APOSTROPHES.sub("", folded.lower())
    return _NON_ALNUM.sub("-", folded).strip("-")


def _location_fragment(country: str, location: Optional[str]) -> str:
    if not location:
        return ""
    if any(marker in location for marker in CATCH_ALL_MARKERS):
        return ""
    if location.upper() == country.upper():
        return ""
    return "-" + location.split(" (")[0]


def slug_location(record: RawRecord) -> str:
    """Build a slug such as ``afghanistan-kabul`` from Country and Location.

    Catch-all locations and locations repeating the country collapse to the
    country alone; parenthetical qualifiers are dropped.
    """
    country = record.get("Country") or ""
    return slugify(country + _location_fragment(country, record.get("Location")))
