#!/usr/bin/env python3
"""Print totals by title and the largest line items of an appropriations sheet."""

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
from appropriations_report.config import INPUT_FILE, LOG_LEVEL, TOP_N
from appropriations_report.formatting import format_currency, format_scaled, format_share


def main(input_path: Path = INPUT_FILE, top: int = TOP_N, on_error: str = "raise") -> int:
    try:
        df = dp.load_appropriations(input_path, on_error=on_error)
    except (dp.MissingInputFile, dp.MissingColumnsError, InvalidAmountFormat) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    summary = dp.summarize(df)
    print(f"Source: {df.attrs.get('source_filename')}")
    print(
        f"Total appropriated: {format_scaled(summary['total_amount'])} "
        f"({format_currency(summary['total_amount'])}) across {summary['line_items']} line items"
    )

    aggregated = dp.aggregate_by_title(df)
    table = aggregated.assign(
        total=aggregated['total_amount'].apply(format_scaled),
        share=aggregated['share'].apply(format_share),
    )[['title', 'title_description', 'total', 'line_items', 'share']]
    print("\nBy title:")
    print(table.to_string(index=False))

    items = dp.top_line_items(df, n=top)
    print(f"\nTop {top} line items:")
    print(items[['title', 'description', 'amount_display']].to_string(index=False))

    for row, raw, reason in df.attrs.get('invalid_rows', []):
        print(f"Unparsed row {row}: {raw!r} ({reason})")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Summarize appropriations by title.')
    parser.add_argument('--input', type=Path, default=INPUT_FILE, help='CSV or Excel spreadsheet of line items')
    parser.add_argument('--top', type=int, default=TOP_N, help='How many of the largest line items to show')
    parser.add_argument(
        '--on-error', choices=dp.ON_ERROR_POLICIES, default='raise',
        help='What to do with rows whose amount cannot be parsed',
    )
    args = parser.parse_args()
    logging.basicConfig(level=LOG_LEVEL, format='%(levelname)s %(name)s: %(message)s')
    sys.exit(main(args.input, top=args.top, on_error=args.on_error))
