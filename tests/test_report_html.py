"""Tests for the standalone HTML report."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from appropriations_report import data_processing as dp
from appropriations_report.report_html import build_report, write_report

SAMPLE_PATH = Path(__file__).resolve().parents[1] / "data" / "appropriations.csv"


def test_build_report_contains_all_sections() -> None:
    document = build_report(dp.load_appropriations(SAMPLE_PATH))
    assert document.startswith("<!DOCTYPE html>")
    assert "<h1>Appropriations by Title</h1>" in document
    assert "Source: appropriations.csv" in document
    assert "$53.897 billion" in document
    assert "$53,897,000,000" in document
    assert "Line items (first 25)" in document
    assert "Top 10 line items" in document
    assert "cdn.plot.ly" in document
    assert "Data issues" not in document


def test_build_report_lists_unparsed_rows() -> None:
    raw = pd.DataFrame(
        {
            "title": ["Title III", "Title III"],
            "title_description": ["Defense", "Defense"],
            "description": ["Facilities", "Construction"],
            "appropriations": ["$1 billion", "$4.5"],
        }
    )
    document = build_report(dp.clean_appropriations(raw, on_error="report"), top_n=5)
    assert "Data issues" in document
    assert "no scale word" in document
    assert "Top 5 line items" in document


def test_write_report_creates_parent_directories(tmp_path) -> None:
    output = tmp_path / "reports" / "approps.html"
    written = write_report(dp.load_appropriations(SAMPLE_PATH), output, title="Disaster Supplemental")
    assert written == output
    assert "<title>Disaster Supplemental</title>" in output.read_text(encoding="utf-8")
