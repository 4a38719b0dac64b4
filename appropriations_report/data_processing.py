"""Spreadsheet ingestion, cleaning and aggregation for appropriations data.

This module contains pure functions for reading the line-item spreadsheet
into a pandas DataFrame, converting the free-text ``appropriations``
column into whole-dollar amounts and summarising the result by title.
These functions are independent of any user interface so that the
Streamlit page, the HTML report builder and the command-line scripts
share the same behaviour and can be unit tested.

Every cleaning step returns a new DataFrame.  Problems found along the
way are recorded in ``DataFrame.attrs['normalization_issues']`` rather
than printed, so callers decide how to surface them.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .amounts import InvalidAmountFormat, try_parse_amount
from .config import TOP_N
from .formatting import format_scaled

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: Tuple[str, ...] = ("title", "title_description", "description", "appropriations")
AMOUNT_COLUMN = "appropriations_amount"
UNIT_COLUMN = "appropriations_unit"

ON_ERROR_POLICIES = ("raise", "skip", "report")

UNTITLED = "Untitled"


class MissingInputFile(FileNotFoundError):
    """Raised when the appropriations spreadsheet does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Appropriations spreadsheet not found: {self.path}")


class MissingColumnsError(ValueError):
    """Raised when the spreadsheet lacks one of :data:`REQUIRED_COLUMNS`."""

    def __init__(self, missing: Sequence[str], available: Sequence[str]) -> None:
        self.missing = list(missing)
        self.available = list(available)
        super().__init__(
            "Missing required column(s): "
            + ", ".join(self.missing)
            + ". Found: "
            + (", ".join(str(col) for col in self.available) or "no columns")
        )


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def read_file(path_or_buffer) -> pd.DataFrame:
    """Load a CSV or Excel spreadsheet, keeping every cell as text."""
    if hasattr(path_or_buffer, "read"):
        name = getattr(path_or_buffer, "name", "uploaded_file.csv").lower()
        if name.endswith((".xlsx", ".xls")):
            return pd.read_excel(path_or_buffer, dtype=str)
        return pd.read_csv(path_or_buffer, dtype=str)

    path = Path(path_or_buffer)
    if not path.exists():
        raise MissingInputFile(path)

    ext = path.suffix.lower()
    if ext in {".csv", ""}:
        for encoding in ("utf-8", "utf-8-sig", "latin-1"):
            try:
                return pd.read_csv(path, dtype=str, encoding=encoding)
            except UnicodeDecodeError:
                logger.debug("Could not decode %s as %s", path, encoding)
                continue
    if ext in {".xlsx", ".xls"}:
        return pd.read_excel(path, dtype=str)
    raise ValueError(f"Unsupported file extension '{ext}'.")


# ---------------------------------------------------------------------------
# Validation and cleaning
# ---------------------------------------------------------------------------


def _normalise_header(name: Any) -> str:
    return "_".join(str(name).strip().lower().replace("-", " ").split())


def validate_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with normalised headers, checking required columns exist."""
    renamed = df.rename(columns={col: _normalise_header(col) for col in df.columns})
    missing = [col for col in REQUIRED_COLUMNS if col not in renamed.columns]
    if missing:
        raise MissingColumnsError(missing, list(df.columns))
    return renamed.copy()


def _sanitize_string_columns(df: pd.DataFrame) -> None:
    for column in df.select_dtypes(include=["object", "string"]).columns:
        df[column] = df[column].apply(_clean_string_value)


def _clean_string_value(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else pd.NA
    return value


def clean_appropriations(df: pd.DataFrame, on_error: str = "raise") -> pd.DataFrame:
    """Parse the ``appropriations`` text column into whole-dollar amounts.

    Parameters
    ----------
    df : pandas.DataFrame
        Raw line items with the columns listed in :data:`REQUIRED_COLUMNS`.
    on_error : {"raise", "skip", "report"}
        What to do with rows whose amount cannot be parsed.  ``"raise"``
        aborts with :class:`InvalidAmountFormat` naming the first bad row,
        ``"skip"`` drops the rows and ``"report"`` keeps them with a
        missing amount.  Both of the latter list the rows in
        ``attrs['invalid_rows']``.

    Returns
    -------
    pandas.DataFrame
        A new frame with ``appropriations_amount`` (Python ``int`` or
        ``None`` in an object column, so sums never overflow) and
        ``appropriations_unit`` columns added.  The untouched input rows
        are kept in ``attrs['raw_rows']`` for :func:`raw_input`.
    """
    if on_error not in ON_ERROR_POLICIES:
        raise ValueError(f"on_error must be one of {', '.join(ON_ERROR_POLICIES)}; got {on_error!r}")

    raw_columns = list(df.columns)
    raw_rows = df.to_dict(orient="records")
    cleaned = validate_columns(df)
    _sanitize_string_columns(cleaned)

    amounts: List[Optional[int]] = []
    units: List[str] = []
    invalid: List[Tuple[Any, Any, str]] = []
    for idx, raw in cleaned["appropriations"].items():
        result = try_parse_amount(raw)
        amounts.append(result.amount)
        units.append(result.unit.label)
        if not result.ok:
            invalid.append((idx, raw, result.error))

    if invalid and on_error == "raise":
        idx, raw, reason = invalid[0]
        raise InvalidAmountFormat(raw, reason, row=idx)

    cleaned[AMOUNT_COLUMN] = pd.Series(amounts, index=cleaned.index, dtype="object")
    cleaned[UNIT_COLUMN] = pd.Series(units, index=cleaned.index, dtype="string")

    issues: List[str] = []
    if invalid:
        for idx, raw, reason in invalid:
            logger.warning("Row %s: unparsed appropriations amount %r (%s)", idx, raw, reason)
        if on_error == "skip":
            bad_rows = [idx for idx, _, _ in invalid]
            cleaned = cleaned.drop(index=bad_rows)
            issues.append(f"Dropped {len(invalid)} row(s) with unparsed appropriations amounts.")
        else:
            issues.append(
                f"Kept {len(invalid)} row(s) with unparsed appropriations amounts; "
                "they are excluded from totals."
            )

    cleaned.attrs["normalization_issues"] = issues
    cleaned.attrs["invalid_rows"] = invalid
    cleaned.attrs["raw_columns"] = raw_columns
    cleaned.attrs["raw_rows"] = raw_rows
    logger.info(
        "Parsed %d of %d appropriation amounts (%s policy)",
        len(amounts) - len(invalid),
        len(amounts),
        on_error,
    )
    return cleaned


def load_appropriations(path_or_buffer, on_error: str = "raise") -> pd.DataFrame:
    """Read, validate and clean an appropriations spreadsheet in one step."""
    raw = read_file(path_or_buffer)
    cleaned = clean_appropriations(raw, on_error=on_error)
    name = getattr(path_or_buffer, "name", path_or_buffer)
    cleaned.attrs["source_filename"] = Path(str(name)).name
    cleaned.attrs["processed_at"] = datetime.now(timezone.utc).isoformat()
    return cleaned


def raw_input(df: pd.DataFrame) -> pd.DataFrame:
    """Rows as they were read, before trimming or dropping bad amounts.

    Headers are normalised so the required columns can be looked up.
    Frames that did not come through :func:`clean_appropriations` are
    returned with normalised headers only.
    """
    if "raw_rows" not in df.attrs:
        return validate_columns(df)
    raw = pd.DataFrame.from_records(df.attrs["raw_rows"], columns=df.attrs.get("raw_columns"))
    return validate_columns(raw)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _require_amounts(df: pd.DataFrame) -> None:
    if AMOUNT_COLUMN not in df.columns:
        raise ValueError(f"Column '{AMOUNT_COLUMN}' not found; run clean_appropriations first")


def _exact_sum(amounts: pd.Series) -> int:
    return sum((int(amount) for amount in amounts.dropna()), 0)


def total_appropriated(df: pd.DataFrame) -> int:
    """Sum of every parsed amount in whole dollars."""
    _require_amounts(df)
    return _exact_sum(df[AMOUNT_COLUMN])


def aggregate_by_title(df: pd.DataFrame, include_description: bool = True) -> pd.DataFrame:
    """Sum appropriations per title, largest first.

    Groups keep the order in which titles first appear in the input, and
    the descending sort is stable, so ties stay in input order.  Rows
    with a missing amount still count as line items but add nothing to
    the total.  ``share`` is each title's fraction of the grand total.
    """
    _require_amounts(df)
    keys = ["title"]
    if include_description and "title_description" in df.columns:
        keys.append("title_description")
    columns = keys + ["total_amount", "line_items", "share"]
    if df.empty:
        return pd.DataFrame(columns=columns)

    tmp = df[keys + [AMOUNT_COLUMN]].copy()
    tmp["title"] = tmp["title"].fillna(UNTITLED)
    if "title_description" in keys:
        tmp["title_description"] = tmp["title_description"].fillna("")

    by_title = tmp.groupby(keys, sort=False)[AMOUNT_COLUMN]
    grouped = by_title.size().reset_index(name="line_items")
    grouped["total_amount"] = pd.Series([_exact_sum(amounts) for _, amounts in by_title], dtype="object")
    grand_total = sum(grouped["total_amount"], 0)
    grouped["share"] = [total / grand_total if grand_total else 0.0 for total in grouped["total_amount"]]
    grouped = grouped.sort_values("total_amount", ascending=False, kind="stable")
    return grouped[columns].reset_index(drop=True)


def top_line_items(df: pd.DataFrame, n: int = TOP_N, title: Optional[str] = None) -> pd.DataFrame:
    """Return the ``n`` largest line items, optionally within one title."""
    _require_amounts(df)
    items = df[df[AMOUNT_COLUMN].notna()]
    if title is not None:
        items = items[items["title"] == title]
    items = items.sort_values(AMOUNT_COLUMN, ascending=False, kind="stable").head(n)
    display_cols = [col for col in REQUIRED_COLUMNS if col in items.columns] + [AMOUNT_COLUMN]
    result = items[display_cols].copy()
    result["amount_display"] = result[AMOUNT_COLUMN].apply(format_scaled)
    return result.reset_index(drop=True)


def summarize(df: pd.DataFrame) -> Dict[str, Any]:
    """Headline figures for the report."""
    _require_amounts(df)
    parsed = df[df[AMOUNT_COLUMN].notna()]
    largest: Optional[Dict[str, Any]] = None
    if not parsed.empty:
        amounts = parsed[AMOUNT_COLUMN].tolist()
        row = parsed.iloc[max(range(len(amounts)), key=amounts.__getitem__)]
        largest = {
            "title": row["title"],
            "description": row["description"],
            "amount": int(row[AMOUNT_COLUMN]),
        }
    return {
        "total_amount": total_appropriated(df),
        "line_items": int(len(df)),
        "titles": int(df["title"].nunique(dropna=True)) if "title" in df.columns else 0,
        "largest_item": largest,
        "invalid_rows": len(df.attrs.get("invalid_rows", [])),
    }
