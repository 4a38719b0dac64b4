"""Streamlit page for the appropriations report.

This module renders the same report as :mod:`report_html` interactively:
a preview of the spreadsheet, totals by title as bar and pie charts, the
largest line items and any rows whose amount could not be parsed.

To run the page from the command line::

    streamlit run appropriations_report/report.py

or use ``run_report.py`` at the project root.
"""

from __future__ import annotations

import os
import sys

import pandas as pd
import streamlit as st

# Conditional imports to support both ``streamlit run`` on this file and
# package execution via ``python -m appropriations_report.report``.
if __package__:
    from . import data_processing as dp
    from . import visualization as viz
    from .amounts import InvalidAmountFormat
    from .config import INPUT_FILE, PREVIEW_ROWS, TOP_N
    from .formatting import escape_dollar_for_markdown, format_currency, format_scaled
    from .report_html import build_report
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from appropriations_report import data_processing as dp  # type: ignore
    from appropriations_report import visualization as viz  # type: ignore
    from appropriations_report.amounts import InvalidAmountFormat  # type: ignore
    from appropriations_report.config import INPUT_FILE, PREVIEW_ROWS, TOP_N  # type: ignore
    from appropriations_report.formatting import (  # type: ignore
        escape_dollar_for_markdown,
        format_currency,
        format_scaled,
    )
    from appropriations_report.report_html import build_report  # type: ignore

POLICY_LABELS = {
    "Stop on the first bad amount": "raise",
    "Drop rows with bad amounts": "skip",
    "Keep rows, exclude from totals": "report",
}


def load_data(source, on_error: str) -> pd.DataFrame:
    """Load and clean the spreadsheet, reporting failures on the page.

    Returns an empty DataFrame when the file is missing, lacks a
    required column or contains an amount that cannot be parsed under
    the ``"raise"`` policy.
    """
    try:
        return dp.load_appropriations(source, on_error=on_error)
    except dp.MissingInputFile as exc:
        st.error(str(exc))
    except dp.MissingColumnsError as exc:
        st.error(f"The spreadsheet is missing columns. {exc}")
    except InvalidAmountFormat as exc:
        st.error(
            escape_dollar_for_markdown(str(exc))
            + ". Choose a different policy in the sidebar to continue past bad rows."
        )
    return pd.DataFrame()


def main() -> None:
    """Entry point for the Streamlit page."""
    st.set_page_config(
        page_title="Appropriations Report",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    st.title("Appropriations by Title")

    uploaded_file = st.sidebar.file_uploader(
        "Line-item spreadsheet", type=["csv", "xls", "xlsx"], accept_multiple_files=False
    )
    policy_label = st.sidebar.radio("Unparseable amounts", options=list(POLICY_LABELS.keys()), index=0)
    top_n = st.sidebar.slider("Top line items", min_value=5, max_value=50, value=TOP_N, step=5)

    source = uploaded_file if uploaded_file is not None else INPUT_FILE
    data = load_data(source, POLICY_LABELS[policy_label])
    if data.empty:
        st.info("Upload a spreadsheet with title, title_description, description and appropriations columns.")
        st.stop()

    summary = dp.summarize(data)
    cols = st.columns(4)
    cols[0].metric("Total appropriated", format_scaled(summary["total_amount"]))
    cols[1].metric("Exact total", format_currency(summary["total_amount"]))
    cols[2].metric("Line items", f"{summary['line_items']}")
    cols[3].metric("Titles", f"{summary['titles']}")

    st.subheader(f"Line items (first {PREVIEW_ROWS})")
    st.markdown(viz.style_preview_table(data).to_html(), unsafe_allow_html=True)

    aggregated = dp.aggregate_by_title(data)
    st.subheader("Totals by title")
    chart_type = st.radio("Chart type", options=["Bar", "Pie"], horizontal=True)
    if chart_type == "Bar":
        st.plotly_chart(viz.create_title_bar_chart(aggregated), use_container_width=True)
    else:
        st.plotly_chart(viz.create_title_share_pie_chart(aggregated), use_container_width=True)
    st.markdown(viz.style_totals_table(aggregated).to_html(), unsafe_allow_html=True)

    st.subheader(f"Top {top_n} line items")
    titles = ["All titles"] + aggregated["title"].drop_duplicates().tolist()
    selected_title = st.selectbox("Within title", options=titles, index=0)
    items = dp.top_line_items(data, n=top_n, title=None if selected_title == "All titles" else selected_title)
    st.plotly_chart(viz.create_top_items_bar_chart(items), use_container_width=True)
    st.markdown(viz.style_top_items_table(items).to_html(), unsafe_allow_html=True)

    issues = data.attrs.get("normalization_issues", [])
    invalid_rows = data.attrs.get("invalid_rows", [])
    if issues or invalid_rows:
        with st.expander("Data issues", expanded=True):
            for issue in issues:
                st.warning(issue)
            if invalid_rows:
                st.dataframe(
                    pd.DataFrame(invalid_rows, columns=["Row", "Appropriations", "Problem"]),
                    hide_index=True,
                )

    st.download_button(
        "Download report as HTML",
        data=build_report(data, top_n=top_n).encode("utf-8"),
        file_name="appropriations_report.html",
        mime="text/html",
    )


if __name__ == "__main__":  # pragma: no cover
    main()
