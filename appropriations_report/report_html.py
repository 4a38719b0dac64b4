"""Render the appropriations report as a standalone HTML document.

The document mirrors the Streamlit page: headline figures, a preview of
the raw spreadsheet, charts of totals by title, the totals table, the
largest line items and any normalisation issues found while cleaning.
Plotly is loaded from its CDN, so the file only needs a browser.
"""

from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd
import plotly.graph_objects as go

from . import data_processing as dp
from . import visualization as viz
from .config import PREVIEW_ROWS, TOP_N
from .formatting import format_currency, format_scaled

logger = logging.getLogger(__name__)

_PAGE_STYLE = """
body { font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif; margin: 2rem auto; max-width: 1100px; color: #1b1b1b; }
h1 { color: #1f3b5b; }
table { border-collapse: collapse; margin-bottom: 1.5rem; font-size: 0.9rem; }
.metrics { display: flex; gap: 2rem; margin-bottom: 1.5rem; }
.metric .value { font-size: 1.5rem; font-weight: 600; }
.issues li { color: #8a4b00; }
"""


def _figure_html(fig: go.Figure, include_plotlyjs) -> str:
    return fig.to_html(full_html=False, include_plotlyjs=include_plotlyjs)


def _metrics_html(summary: dict) -> str:
    metrics = [
        ("Total appropriated", format_scaled(summary["total_amount"])),
        ("Exact total", format_currency(summary["total_amount"])),
        ("Line items", str(summary["line_items"])),
        ("Titles", str(summary["titles"])),
    ]
    cells = "".join(
        f'<div class="metric"><div>{html.escape(label)}</div><div class="value">{html.escape(value)}</div></div>'
        for label, value in metrics
    )
    return f'<div class="metrics">{cells}</div>'


def _issues_html(df: pd.DataFrame) -> str:
    issues: List[str] = list(df.attrs.get("normalization_issues", []))
    for row, raw, reason in df.attrs.get("invalid_rows", []):
        issues.append(f"Row {row}: {raw!r} ({reason})")
    if not issues:
        return ""
    items = "".join(f"<li>{html.escape(issue)}</li>" for issue in issues)
    return f'<h2>Data issues</h2><ul class="issues">{items}</ul>'


def build_report(
    df: pd.DataFrame,
    title: str = "Appropriations by Title",
    top_n: int = TOP_N,
    preview_rows: int = PREVIEW_ROWS,
) -> str:
    """Build the full HTML document for a cleaned appropriations frame."""
    summary = dp.summarize(df)
    aggregated = dp.aggregate_by_title(df)
    top_items = dp.top_line_items(df, n=top_n)

    source = df.attrs.get("source_filename")
    subtitle = f"<p>Source: {html.escape(str(source))}</p>" if source else ""

    largest = summary["largest_item"]
    largest_html = ""
    if largest is not None:
        largest_html = (
            f"<p>Largest line item: {html.escape(str(largest['description']))} "
            f"({html.escape(str(largest['title']))}, {html.escape(format_scaled(largest['amount']))})</p>"
        )

    sections = [
        f"<h1>{html.escape(title)}</h1>",
        subtitle,
        _metrics_html(summary),
        largest_html,
        f"<h2>Line items (first {preview_rows})</h2>",
        viz.style_preview_table(df, rows=preview_rows).to_html(),
        "<h2>Totals by title</h2>",
        _figure_html(viz.create_title_bar_chart(aggregated), include_plotlyjs="cdn"),
        viz.style_totals_table(aggregated).to_html(),
        _figure_html(viz.create_title_share_pie_chart(aggregated), include_plotlyjs=False),
        f"<h2>Top {top_n} line items</h2>",
        _figure_html(viz.create_top_items_bar_chart(top_items), include_plotlyjs=False),
        viz.style_top_items_table(top_items).to_html(),
        _issues_html(df),
    ]
    body = "\n".join(section for section in sections if section)
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
        f"<title>{html.escape(title)}</title>\n<style>{_PAGE_STYLE}</style>\n</head>\n"
        f"<body>\n{body}\n</body>\n</html>\n"
    )


def write_report(df: pd.DataFrame, output_path: Path, title: Optional[str] = None) -> Path:
    """Write the HTML document to ``output_path``, creating parent folders."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    document = build_report(df, title=title) if title else build_report(df)
    output_path.write_text(document, encoding="utf-8")
    logger.info("Wrote appropriations report to %s", output_path)
    return output_path
