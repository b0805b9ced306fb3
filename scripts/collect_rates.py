"""Entry point for manual runs.

    PYTHONPATH=src python scripts/collect_rates.py --config config/run_config.toml
"""
from __future__ import annotations

import sys

from per_diem.cli import main

if __name__ == "__main__":
    sys.exit(main())
