"""Discovery of the per-jurisdiction source tables."""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Collection, Iterator, List

from per_diem.rates.models import RawRecord

logger = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"


@dataclass(frozen=True)
class SourceTable:
    """A cleaned CSV table published by one jurisdiction."""

    path: Path

    @property
    def jurisdiction(self) -> str:
        return self.path.stem

    def read_records(self) -> List[RawRecord]:
        text = self.path.read_text(encoding="utf-8")
        if text.startswith(BYTE_ORDER_MARK):
            text = text[len(BYTE_ORDER_MARK):]
        reader = csv.DictReader(io.StringIO(text, newline=""))
        return [dict(row) for row in reader]


class SourceCatalog:
    """Lists the jurisdiction tables of a directory in a stable order."""

    def __init__(self, tables: List[SourceTable], *, source: Path) -> None:
        self._tables = tables
        self._source = source

    @property
    def source(self) -> Path:
        return self._source

    def __iter__(self) -> Iterator[SourceTable]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def jurisdictions(self) -> List[str]:
        return [table.jurisdiction for table in self._tables]

    @classmethod
    def load(cls, directory: Path, *, excluded: Collection[str] = ()) -> "SourceCatalog":
        if not directory.is_dir():
            raise FileNotFoundError(f"Source directory not found at {directory}")
        tables: List[SourceTable] = []
        for entry in sorted(directory.iterdir()):
            if entry.name in excluded or entry.name.startswith("."):
                logger.debug("Skipping reserved entry %s", entry.name)
                continue
            if not entry.is_file() or entry.suffix.lower() != ".csv":
                logger.debug("Skipping non-table entry %s", entry.name)
                continue
            tables.append(SourceTable(entry))
        return cls(tables, source=directory)
