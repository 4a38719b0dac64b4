"""Tests for environment overrides in appropriations_report.config."""

from __future__ import annotations

import importlib

from appropriations_report import config


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("APPROPS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("APPROPS_TOP_N", "3")
    monkeypatch.setenv("APPROPS_LOG_LEVEL", "debug")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.INPUT_FILE == (tmp_path / "appropriations.csv").resolve()
        assert reloaded.TOP_N == 3
        assert reloaded.PREVIEW_ROWS == 25
        assert reloaded.LOG_LEVEL == "DEBUG"
        assert reloaded.default_report_path() == tmp_path / "reports" / "appropriations_report.html"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
