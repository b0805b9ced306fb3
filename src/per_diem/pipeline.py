"""Batch collection of every jurisdiction table into one rates table."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from per_diem.config.settings import Settings
from per_diem.currency import CurrencyTable
from per_diem.rates import NormalizedRecord, RawRecord, RuleEngine
from per_diem.sources import SourceCatalog, SourceTable
from per_diem.storage import RatesCsvWriter

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TableSummary:
    jurisdiction: str
    rows_read: int
    rows_kept: int

    @property
    def rows_dropped(self) -> int:
        return self.rows_read - self.rows_kept


@dataclass
class CollectionSummary:
    """Counts gathered while collecting, one entry per table in discovery order."""

    tables: List[TableSummary] = field(default_factory=list)
    output_path: Optional[Path] = None

    @property
    def rows_read(self) -> int:
        return sum(table.rows_read for table in self.tables)

    @property
    def rows_kept(self) -> int:
        return sum(table.rows_kept for table in self.tables)


def normalize_records(
    jurisdiction: str,
    records: Iterable[RawRecord],
    engine: RuleEngine,
) -> List[NormalizedRecord]:
    """Apply the rules to each row, keeping rows with a determinate figure."""
    normalized = (engine.process_row(jurisdiction, record) for record in records)
    return [record for record in normalized if record.is_determinate()]


def normalize_table(table: SourceTable, engine: RuleEngine) -> tuple[List[NormalizedRecord], TableSummary]:
    records = table.read_records()
    kept = normalize_records(table.jurisdiction, records, engine)
    summary = TableSummary(jurisdiction=table.jurisdiction, rows_read=len(records), rows_kept=len(kept))
    logger.info(
        "Table %s: kept %s of %s rows",
        table.jurisdiction,
        summary.rows_kept,
        summary.rows_read,
    )
    return kept, summary


def collect_rates(
    catalog: Iterable[SourceTable],
    engine: RuleEngine,
) -> tuple[List[NormalizedRecord], CollectionSummary]:
    collected: List[NormalizedRecord] = []
    summary = CollectionSummary()
    for table in catalog:
        kept, table_summary = normalize_table(table, engine)
        collected.extend(kept)
        summary.tables.append(table_summary)
    return collected, summary


def run(settings: Settings) -> CollectionSummary:
    """Collect every table under ``settings.source_dir`` and write the output table.

    Nothing is written unless every table was read successfully.
    """
    table = CurrencyTable.load(settings.currency_path)
    engine = RuleEngine.from_table(table, target=settings.target_currency)
    catalog = SourceCatalog.load(settings.source_dir, excluded=settings.skipped_entries())
    logger.info(
        "Collecting %s tables from %s: %s",
        len(catalog),
        catalog.source,
        ", ".join(catalog.jurisdictions()) or "(none)",
    )

    records, summary = collect_rates(catalog, engine)

    summary.output_path = RatesCsvWriter(settings.output_path()).write(records)
    logger.info(
        "Wrote %s of %s rows to %s",
        summary.rows_kept,
        summary.rows_read,
        summary.output_path,
    )
    return summary
