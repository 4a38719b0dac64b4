"""Plotly visualisation helpers for the appropriations report.

Each function accepts a frame returned by the corresponding function in
:mod:`data_processing` and produces a Plotly figure.  The same figures
are embedded in the static HTML document and shown on the Streamlit
page, so nothing here depends on either renderer.

Amounts are plotted in billions of dollars; hover labels show the
amount the way the bill states it (``$13.6 billion``).
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from pandas.io.formats.style import Styler

from .config import PREVIEW_ROWS
from .data_processing import AMOUNT_COLUMN, REQUIRED_COLUMNS, raw_input
from .formatting import format_scaled, format_share

BILLION = 1_000_000_000

TABLE_STYLES = [
    {"selector": "th", "props": [("background-color", "#1f3b5b"), ("color", "white"), ("text-align", "left")]},
    {"selector": "td", "props": [("padding", "4px 8px"), ("vertical-align", "top")]},
    {"selector": "tr:nth-child(even)", "props": [("background-color", "#f2f5f8")]},
]


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def _title_labels(aggregated: pd.DataFrame) -> pd.Series:
    if "title_description" in aggregated.columns:
        descriptions = aggregated["title_description"].fillna("")
        return aggregated["title"].where(descriptions.eq(""), aggregated["title"] + ": " + descriptions)
    return aggregated["title"]


def _ranked_labels(descriptions: pd.Series, width: int = 80) -> list:
    # Rank prefix keeps duplicate descriptions on separate rows
    texts = descriptions.fillna("(no description)").astype(str).str.slice(0, width)
    return [f"{rank}. {text}" for rank, text in enumerate(texts, start=1)]


def create_title_bar_chart(aggregated: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Generate a bar chart of total appropriations per title.

    Parameters
    ----------
    aggregated : pandas.DataFrame
        Output of :func:`data_processing.aggregate_by_title`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart, titles ordered largest first.
    """
    if aggregated.empty:
        return _empty_figure()
    df = pd.DataFrame(
        {
            "Title": aggregated["title"],
            "Label": _title_labels(aggregated),
            "Billions": aggregated["total_amount"].astype(float) / BILLION,
            "Amount": aggregated["total_amount"].apply(format_scaled),
            "Line items": aggregated["line_items"],
        }
    )
    fig = px.bar(
        df,
        x="Title",
        y="Billions",
        hover_name="Label",
        hover_data={"Amount": True, "Line items": True, "Billions": False},
        text="Amount",
    )
    fig.update_traces(textposition="outside", cliponaxis=False)
    fig.update_layout(
        title=title or "Appropriations by title",
        xaxis_title="Title",
        yaxis_title="Appropriations ($ billions)",
        xaxis={"categoryorder": "array", "categoryarray": list(df["Title"])},
    )
    return fig


def create_title_share_pie_chart(aggregated: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Generate a pie chart of each title's share of the bill."""
    if aggregated.empty or aggregated["total_amount"].sum() == 0:
        return _empty_figure()
    df = pd.DataFrame({"Title": _title_labels(aggregated), "Billions": aggregated["total_amount"].astype(float) / BILLION})
    fig = px.pie(df, names="Title", values="Billions")
    fig.update_layout(title=title or "Share of total appropriations")
    return fig


def create_top_items_bar_chart(items: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Render the largest line items as a horizontal bar chart.

    ``items`` is the output of :func:`data_processing.top_line_items`; the
    largest item is drawn at the top.
    """
    if items.empty:
        return _empty_figure()
    df = pd.DataFrame(
        {
            "Line item": _ranked_labels(items["description"]),
            "Title": items["title"].fillna(""),
            "Billions": items[AMOUNT_COLUMN].astype(float) / BILLION,
            "Amount": items[AMOUNT_COLUMN].apply(format_scaled),
        }
    )
    fig = px.bar(
        df.iloc[::-1],
        x="Billions",
        y="Line item",
        color="Title",
        orientation="h",
        hover_data={"Amount": True, "Billions": False},
    )
    fig.update_layout(
        title=title or "Largest line items",
        xaxis_title="Appropriations ($ billions)",
        yaxis_title="",
        yaxis={"categoryorder": "array", "categoryarray": list(df["Line item"].iloc[::-1])},
    )
    return fig


def style_preview_table(df: pd.DataFrame, rows: int = PREVIEW_ROWS) -> Styler:
    """HTML-styled preview of the first ``rows`` line items as they were read.

    Rows dropped for bad amounts are still shown and cell text is not trimmed.
    """
    raw = raw_input(df)
    columns = [col for col in REQUIRED_COLUMNS if col in raw.columns]
    preview = raw[columns].head(rows).fillna("")
    preview.columns = [col.replace("_", " ").title() for col in columns]
    return preview.style.hide(axis="index").set_table_styles(TABLE_STYLES)


def style_totals_table(aggregated: pd.DataFrame) -> Styler:
    """HTML-styled table of totals per title with formatted amounts."""
    table = pd.DataFrame(
        {
            "Title": aggregated["title"],
            "Total": aggregated["total_amount"].apply(format_scaled),
            "Line items": aggregated["line_items"],
            "Share": aggregated["share"].apply(format_share),
        }
    )
    if "title_description" in aggregated.columns:
        table.insert(1, "Description", aggregated["title_description"])
    return table.style.hide(axis="index").set_table_styles(TABLE_STYLES)


def style_top_items_table(items: pd.DataFrame) -> Styler:
    """HTML-styled table of the largest line items."""
    table = pd.DataFrame(
        {
            "Title": items["title"],
            "Line item": items["description"],
            "Amount": items["amount_display"] if "amount_display" in items.columns
            else items[AMOUNT_COLUMN].apply(format_scaled),
        }
    )
    return table.style.hide(axis="index").set_table_styles(TABLE_STYLES)
