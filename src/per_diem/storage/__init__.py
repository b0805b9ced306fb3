"""Output persistence helpers."""

from .csv_writer import RatesCsvWriter, format_rates_csv

__all__ = ["RatesCsvWriter", "format_rates_csv"]
