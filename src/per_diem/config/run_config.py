"""User-friendly run configuration loader for manual runs."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

try:  # pragma: no cover - Python 3.11+ ships tomllib
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise RuntimeError(
            "Run configuration loading requires 'tomllib' (Python >=3.11) or the 'tomli' package."
        ) from exc

if TYPE_CHECKING:  # pragma: no cover
    from per_diem.config.settings import Settings


def _coerce_string_list(value: object) -> list[str]:
    if value in (None, "", ()):
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Iterable):
        result: list[str] = []
        for item in value:
            text = str(item).strip()
            if text:
                result.append(text)
        return result
    raise TypeError("Expected string or list of strings")


class PathsSection(BaseModel):
    """Input/output locations decoded from the run config."""

    source_dir: Optional[str] = Field(
        default=None, description="Directory with the per-jurisdiction CSV tables"
    )
    currency_path: Optional[str] = Field(
        default=None, description="Currency snapshot JSON document"
    )
    output_filename: Optional[str] = None
    excluded_entries: Optional[list[str]] = Field(
        default=None,
        description="Replace the default list of ignored directory entries",
    )

    @field_validator("excluded_entries", mode="before")
    @classmethod
    def _coerce_excluded(cls, value: object) -> Optional[list[str]]:
        if value is None:
            return None
        return _coerce_string_list(value)


class CurrencySection(BaseModel):
    target: Optional[str] = Field(default=None, min_length=3, max_length=3)


class LoggingSection(BaseModel):
    level: Optional[str] = None
    directory: Optional[str] = None


class RunConfig(BaseModel):
    """Top-level configuration decoded from TOML."""

    profile: str = Field(default="default", description="Human label used for logging")
    title: Optional[str] = None
    notes: Optional[str] = None
    paths: PathsSection = Field(default_factory=PathsSection)
    currency: CurrencySection = Field(default_factory=CurrencySection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    @classmethod
    def load(cls, path: Path) -> "RunConfig":
        """Load a config from a TOML file."""
        data = tomllib.loads(path.read_text())
        return cls.model_validate(data)

    # Public API -----------------------------------------------------------------

    def apply_to(self, settings: "Settings", *, base_dir: Optional[Path] = None) -> None:
        """Apply overrides to an existing Settings instance."""
        self._apply_paths(settings, base_dir)
        self._apply_currency(settings)
        self._apply_logging(settings, base_dir)

    # Internal helpers -----------------------------------------------------------

    def _apply_paths(self, settings: "Settings", base_dir: Optional[Path]) -> None:
        paths = self.paths
        if paths.source_dir:
            settings.source_dir = _resolve_path(paths.source_dir, base_dir)
        if paths.currency_path:
            settings.currency_path = _resolve_path(paths.currency_path, base_dir)
        if paths.output_filename:
            settings.output_filename = paths.output_filename
        if paths.excluded_entries is not None:
            settings.excluded_entries = tuple(paths.excluded_entries)

    def _apply_currency(self, settings: "Settings") -> None:
        if self.currency.target:
            settings.target_currency = self.currency.target.upper()

    def _apply_logging(self, settings: "Settings", base_dir: Optional[Path]) -> None:
        if self.logging.level:
            settings.log_level = self.logging.level
        if self.logging.directory:
            settings.log_dir = _resolve_path(self.logging.directory, base_dir)


def _resolve_path(raw: str, base_dir: Optional[Path]) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute() and base_dir:
        return (base_dir / path).resolve()
    return path


__all__ = ["RunConfig"]
