"""Formatting utilities for dollar amounts in tables and captions."""

from __future__ import annotations

from typing import Any, Union

import pandas as pd

from .amounts import format_amount


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not read them as LaTeX.

    Args:
        text: Text that may contain ``$`` characters

    Returns:
        The text with every dollar sign escaped

    Example:
        >>> escape_dollar_for_markdown("$1.5 billion")
        '\\$1.5 billion'
    """
    return text.replace("$", "\\$")


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a whole-dollar amount with comma separators.

    Example:
        >>> format_currency(13_600_000_000)
        '$13,600,000,000'
        >>> format_currency(1234, include_sign=False)
        '1,234'
    """
    formatted = f"{int(amount):,}"
    return f"${formatted}" if include_sign else formatted


def format_scaled(amount: Any) -> str:
    """Format an amount the way bill summaries do (``$13.6 billion``).

    Missing values render as ``"-"``.
    """
    if amount is None or pd.isna(amount):
        return "-"
    return format_amount(int(amount))


def format_share(share: Any) -> str:
    """Format a fraction of the total as a percentage with one decimal."""
    if share is None or pd.isna(share):
        return "-"
    return f"{float(share) * 100:.1f}%"
