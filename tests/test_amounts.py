"""Unit tests for appropriations_report.amounts."""

from __future__ import annotations

from decimal import Decimal

import pandas as pd
import pytest

from appropriations_report.amounts import (
    InvalidAmountFormat,
    ScaleUnit,
    detect_unit,
    format_amount,
    parse_amount,
    try_parse_amount,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$13.6 billion", 13_600_000_000),
        ("$1.3 billion", 1_300_000_000),
        ("$1 billion", 1_000_000_000),
        ("$8.24 billion", 8_240_000_000),
        ("$300 million", 300_000_000),
        ("$13.6 million", 13_600_000),
        ("$0.5 million", 500_000),
        ("$1,200 million", 1_200_000_000),
        ("$750 thousand", 750_000),
    ],
)
def test_parse_amount_examples(text: str, expected: int) -> None:
    assert parse_amount(text) == expected


@pytest.mark.parametrize("literal", ["0.1", "13.6", "2.65", "587", "1.45", "0.079"])
def test_parse_amount_is_exact(literal: str) -> None:
    assert parse_amount(f"${literal} million") == int(Decimal(literal) * 1_000_000)
    assert parse_amount(f"${literal} billion") == int(Decimal(literal) * 1_000_000_000)


@pytest.mark.parametrize("text", ["  $2.5 Billion ", "$2.5 billions", "$2.5billion", "2.5 billion", "$2.5 billion."])
def test_parse_amount_tolerates_spacing_case_and_plurals(text: str) -> None:
    assert parse_amount(text) == 2_500_000_000


def test_amount_without_scale_word_is_rejected() -> None:
    with pytest.raises(InvalidAmountFormat) as excinfo:
        parse_amount("$4.5")
    assert excinfo.value.raw == "$4.5"
    assert "no scale word" in excinfo.value.reason


def test_unknown_scale_word_is_rejected() -> None:
    result = try_parse_amount("$4.5 trillion")
    assert not result.ok
    assert "'trillion'" in result.error
    assert result.amount is None


@pytest.mark.parametrize("value", [None, "", "   ", float("nan"), pd.NA])
def test_missing_amounts_are_reported(value) -> None:
    result = try_parse_amount(value)
    assert result.error == "amount is missing"


@pytest.mark.parametrize("text", ["-$5 million", "about $5 million", "$5.5.5 million", "five million"])
def test_malformed_text_is_rejected(text: str) -> None:
    with pytest.raises(InvalidAmountFormat):
        parse_amount(text)


def test_fractional_dollars_are_rejected() -> None:
    result = try_parse_amount("$1.2345 thousand")
    assert result.unit is ScaleUnit.THOUSAND
    assert "not a whole number of dollars" in result.error


def test_try_parse_amount_reports_unit() -> None:
    result = try_parse_amount("$300 million")
    assert result.ok
    assert result.amount == 300_000_000
    assert result.unit is ScaleUnit.MILLION
    assert result.unwrap() == 300_000_000


def test_invalid_amount_format_is_value_error() -> None:
    error = InvalidAmountFormat("$4.5", "no scale word", row=7)
    assert isinstance(error, ValueError)
    assert "'$4.5'" in str(error)
    assert "(row 7)" in str(error)


def test_detect_unit() -> None:
    assert detect_unit("$13.6 billion") is ScaleUnit.BILLION
    assert detect_unit("roughly 3 Millions in grants") is ScaleUnit.MILLION
    assert detect_unit("$4.5") is ScaleUnit.UNKNOWN
    assert detect_unit(None) is ScaleUnit.UNKNOWN


def test_format_amount_picks_largest_unit() -> None:
    assert format_amount(13_600_000_000) == "$13.6 billion"
    assert format_amount(300_000_000) == "$300 million"
    assert format_amount(750_000) == "$750 thousand"
    assert format_amount(500) == "$0.5 thousand"
    assert format_amount(1_500_000_000, ScaleUnit.MILLION) == "$1500 million"


def test_format_amount_rejects_negative_and_unknown() -> None:
    with pytest.raises(ValueError):
        format_amount(-1)
    with pytest.raises(ValueError):
        format_amount(1_000, ScaleUnit.UNKNOWN)


@pytest.mark.parametrize("amount", [0, 1, 999, 1_000, 300_000_000, 1_234_567_891, 13_600_000_000])
def test_reparsing_formatted_amount_reproduces_it(amount: int) -> None:
    assert parse_amount(format_amount(amount)) == amount
