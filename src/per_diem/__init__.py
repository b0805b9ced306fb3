"""Normalise per-diem allowance tables from several jurisdictions into one USD table."""

__version__ = "0.1.0"
