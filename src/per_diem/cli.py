"""Command line entry point for a collection run."""
from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from per_diem.config.run_config import RunConfig
from per_diem.config.settings import Settings
from per_diem.core.logging import configure_logging
from per_diem.currency import CurrencyTableError
from per_diem.pipeline import run

DEFAULT_CONFIG_PATH = Path("config/run_config.toml")

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Normalise per-diem tables into a single rates.csv in the target currency",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Path to a TOML run profile (defaults to {DEFAULT_CONFIG_PATH} when present)",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        help="Ignore any run profile and rely on environment-based settings",
    )
    parser.add_argument("--source-dir", type=Path, help="Directory holding the cleaned tables")
    parser.add_argument("--currency", type=Path, help="Currency snapshot JSON document")
    parser.add_argument(
        "--override",
        action="append",
        metavar="KEY=VALUE",
        help="Override a Settings attribute (repeatable). Values accept JSON literals.",
    )
    return parser


def _decode_override(value: str) -> object:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _apply_overrides(settings: Settings, overrides: dict[str, object]) -> None:
    for key, raw in overrides.items():
        if key not in Settings.model_fields:
            logger.warning("Ignoring unknown override '%s'", key)
            continue
        setattr(settings, key, raw)
        logger.info("Override: set %s=%r", key, raw)


def _resolve_settings(parser: argparse.ArgumentParser, args: argparse.Namespace) -> tuple[Settings, Optional[RunConfig], Optional[Path]]:
    settings = Settings()
    config_path: Optional[Path] = None
    run_config: Optional[RunConfig] = None

    if not args.no_config:
        if args.config:
            config_path = args.config
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        elif DEFAULT_CONFIG_PATH.exists():
            config_path = DEFAULT_CONFIG_PATH

    if config_path:
        run_config = RunConfig.load(config_path)
        run_config.apply_to(settings, base_dir=config_path.parent)

    if args.source_dir:
        settings.source_dir = args.source_dir
    if args.currency:
        settings.currency_path = args.currency

    overrides: dict[str, object] = {}
    for entry in args.override or []:
        if "=" not in entry:
            parser.error(f"Override must be in KEY=VALUE form (got '{entry}')")
        key, value = entry.split("=", 1)
        overrides[key.strip()] = _decode_override(value.strip())
    if overrides:
        _apply_overrides(settings, overrides)

    return settings, run_config, config_path


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings, run_config, config_path = _resolve_settings(parser, args)

    configure_logging(settings.log_level, settings.log_dir)

    if run_config:
        suffix = f" ({run_config.title})" if run_config.title else ""
        logger.info("Loaded run profile '%s'%s from %s", run_config.profile, suffix, config_path)
        if run_config.notes:
            logger.info("Profile notes: %s", run_config.notes)
    else:
        logger.info("Running with environment-based settings (no run_config applied)")

    try:
        summary = run(settings)
    except (OSError, UnicodeDecodeError, csv.Error, CurrencyTableError) as exc:
        logger.error("Collection aborted: %s", exc)
        return 1

    logger.info(
        "Collected %s rates from %s tables into %s",
        summary.rows_kept,
        len(summary.tables),
        summary.output_path,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
