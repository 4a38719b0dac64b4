#!/usr/bin/env python3
"""Write the appropriations report as a standalone HTML document."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from appropriations_report import data_processing as dp
from appropriations_report.amounts import InvalidAmountFormat
from appropriations_report.config import INPUT_FILE, LOG_LEVEL, default_report_path
from appropriations_report.report_html import write_report


def main(input_path: Path = INPUT_FILE, output_path: Path | None = None, on_error: str = "raise") -> int:
    try:
        df = dp.load_appropriations(input_path, on_error=on_error)
    except (dp.MissingInputFile, dp.MissingColumnsError, InvalidAmountFormat) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    written = write_report(df, output_path or default_report_path())
    print(f"Report written to {written}")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Render the appropriations report to HTML.')
    parser.add_argument('--input', type=Path, default=INPUT_FILE, help='CSV or Excel spreadsheet of line items')
    parser.add_argument('--output', type=Path, default=None, help='Destination HTML file')
    parser.add_argument(
        '--on-error', choices=dp.ON_ERROR_POLICIES, default='raise',
        help='What to do with rows whose amount cannot be parsed',
    )
    args = parser.parse_args()
    logging.basicConfig(level=LOG_LEVEL, format='%(levelname)s %(name)s: %(message)s')
    sys.exit(main(args.input, args.output, on_error=args.on_error))
