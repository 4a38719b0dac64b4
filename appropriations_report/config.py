"""Configuration management for the appropriations report.

This module centralizes all configuration values including paths,
report defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in appropriations_report/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("APPROPS_DATA_DIR", _PROJECT_ROOT / "data"))
REPORTS_DIR = Path(os.getenv("APPROPS_REPORTS_DIR", DATA_DIR / "reports"))

# Input spreadsheet
INPUT_FILE = Path(
    os.getenv("APPROPS_INPUT_FILE", DATA_DIR / "appropriations.csv")
).resolve()

# Report defaults
PREVIEW_ROWS = int(os.getenv("APPROPS_PREVIEW_ROWS", "25"))
TOP_N = int(os.getenv("APPROPS_TOP_N", "10"))

LOG_LEVEL = os.getenv("APPROPS_LOG_LEVEL", "INFO").upper()


def default_report_path() -> Path:
    """Location of the rendered HTML document when no output is given."""
    return REPORTS_DIR / "appropriations_report.html"
