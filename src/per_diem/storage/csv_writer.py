"""CSV persistence for the consolidated rates table."""
from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable

from per_diem.rates.models import OUTPUT_COLUMNS, NormalizedRecord


def format_rates_csv(records: Iterable[NormalizedRecord]) -> str:
    buf = io.StringIO(newline="")
    writer = csv.DictWriter(buf, fieldnames=list(OUTPUT_COLUMNS), lineterminator="\n")
    writer.writeheader()
    for record in records:
        writer.writerow(record.to_row())
    return buf.getvalue()


class RatesCsvWriter:
    def __init__(self, path: Path) -> None:
        self.path = path

    def write(self, records: Iterable[NormalizedRecord]) -> Path:
        """Replace the output table with ``records``."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(format_rates_csv(records), encoding="utf-8")
        return self.path
