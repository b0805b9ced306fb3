"""Jurisdiction source tables."""

from .catalog import SourceCatalog, SourceTable

__all__ = ["SourceCatalog", "SourceTable"]
