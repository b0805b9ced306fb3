"""Runtime configuration for the rate collector.

Relies on pydantic-settings so that environment variables (prefixed with ``PERDIEM_``)
can override defaults. See `.env.example` for common values.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated, Iterable, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")

DEFAULT_EXCLUDED_ENTRIES: Tuple[str, ...] = (".ipynb_checkpoints", "capitals.csv")


class Settings(BaseSettings):
    """Captures runtime configuration for a collection run."""

    source_dir: Path = Field(
        default=Path("cleaned"),
        description="Directory holding one cleaned CSV table per jurisdiction",
    )
    currency_path: Path = Field(
        default=Path("data/currency.json"),
        description="JSON document with a `base` code and a `rates` mapping",
    )
    output_filename: str = Field(
        default="rates.csv",
        description="File name of the consolidated table, written into source_dir",
    )
    excluded_entries: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_EXCLUDED_ENTRIES,
        description="Directory entries that are never treated as jurisdiction tables",
    )
    target_currency: str = Field(
        default="USD",
        description="Currency every amount is converted into; unresolved codes default to it",
    )
    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("data/logs"))

    model_config = SettingsConfigDict(
        env_prefix="PERDIEM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("source_dir", "currency_path", "log_dir", mode="before")
    def _expand_path(cls, value: str | Path) -> Path:  # noqa: D401
        if isinstance(value, Path):
            return value.expanduser()
        return Path(value).expanduser()

    @field_validator("excluded_entries", mode="before")
    def _parse_excluded_entries(cls, value: object) -> Tuple[str, ...]:
        if value is None or value == "":
            return ()
        if isinstance(value, tuple):
            return tuple(str(item).strip() for item in value if str(item).strip())
        if isinstance(value, list):
            return tuple(str(item).strip() for item in value if str(item).strip())
        if isinstance(value, str):
            parts: Iterable[str] = (part.strip() for part in value.split(","))
            return tuple(part for part in parts if part)
        raise TypeError("excluded_entries must be provided as a comma-separated string or list")

    @field_validator("target_currency")
    def _validate_target_currency(cls, value: str) -> str:
        value = value.strip().upper()
        if not _CURRENCY_CODE.match(value):
            raise ValueError("target_currency must be a three-letter currency code")
        return value

    def output_path(self) -> Path:
        return self.source_dir / self.output_filename

    def skipped_entries(self) -> frozenset[str]:
        """Names the source catalog ignores, always including the output table."""
        return frozenset(self.excluded_entries) | {self.output_filename}
