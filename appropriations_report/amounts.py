"""Parsing of free-text appropriation amounts.

Bill summaries state amounts as prose, e.g. ``"$13.6 billion"`` or
``"$300 million"``.  The helpers here turn such strings into whole
dollars and back again.  Arithmetic is done with :class:`decimal.Decimal`
so ``"$13.6 billion"`` becomes exactly ``13_600_000_000`` rather than a
float approximation.

Scale words are matched against an explicit list of units.  Text without
a recognised scale word is rejected with :class:`InvalidAmountFormat`
instead of being assumed to be in billions.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ScaleUnit(Enum):
    """Scale words recognised in amount text, valued by their multiplier."""

    THOUSAND = 1_000
    MILLION = 1_000_000
    BILLION = 1_000_000_000
    UNKNOWN = 0

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def multiplier(self) -> int:
        return self.value

    @classmethod
    def from_word(cls, word: Optional[str]) -> "ScaleUnit":
        """Map a scale word (``"million"``, ``"Billions"``) to a unit."""
        if not word:
            return cls.UNKNOWN
        key = word.strip().lower()
        if key.endswith("s"):
            key = key[:-1]
        for unit in (cls.THOUSAND, cls.MILLION, cls.BILLION):
            if unit.label == key:
                return unit
        return cls.UNKNOWN


# Largest first so formatting picks the most compact unit.
KNOWN_UNITS = (ScaleUnit.BILLION, ScaleUnit.MILLION, ScaleUnit.THOUSAND)

_AMOUNT_RE = re.compile(
    r"""
    ^\$?\s*
    (?P<number>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?|\.\d+)
    \s*
    (?P<unit>[a-z]+)?
    \.?$
    """,
    re.IGNORECASE | re.VERBOSE,
)
_UNIT_WORD_RE = re.compile(r"\b(thousand|million|billion)s?\b", re.IGNORECASE)

EXPECTED_SHAPE = "expected '$<number> <thousand|million|billion>'"


class InvalidAmountFormat(ValueError):
    """Raised when amount text does not match ``$<number> <scale word>``."""

    def __init__(self, raw: Any, reason: str, row: Any = None) -> None:
        self.raw = raw
        self.reason = reason
        self.row = row
        message = f"Invalid appropriations amount {raw!r}: {reason}"
        if row is not None:
            message += f" (row {row})"
        super().__init__(message)


@dataclass(frozen=True)
class ParsedAmount:
    """Outcome of parsing one amount: either ``amount`` or ``error`` is set."""

    raw: Any
    amount: Optional[int] = None
    unit: ScaleUnit = ScaleUnit.UNKNOWN
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> int:
        """Return the amount or raise :class:`InvalidAmountFormat`."""
        if self.error is not None:
            raise InvalidAmountFormat(self.raw, self.error)
        return self.amount


def detect_unit(text: str) -> ScaleUnit:
    """Return the first scale word found anywhere in ``text``."""
    if not isinstance(text, str):
        return ScaleUnit.UNKNOWN
    match = _UNIT_WORD_RE.search(text)
    return ScaleUnit.from_word(match.group(1)) if match else ScaleUnit.UNKNOWN


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    # pandas.NA refuses bool(); treat anything self-unequal as missing
    try:
        return bool(value != value)
    except TypeError:
        return True


def try_parse_amount(value: Any) -> ParsedAmount:
    """Parse ``value`` without raising.

    Examples
    --------
    >>> try_parse_amount("$300 million").amount
    300000000
    >>> try_parse_amount("$4.5").error
    "no scale word; expected '$<number> <thousand|million|billion>'"
    """
    if not isinstance(value, str):
        if _is_missing(value):
            return ParsedAmount(raw=value, error="amount is missing")
        return ParsedAmount(raw=value, error=f"expected text, got {type(value).__name__}")

    text = value.strip()
    if not text:
        return ParsedAmount(raw=value, error="amount is missing")

    match = _AMOUNT_RE.match(text)
    if match is None:
        return ParsedAmount(raw=value, error=EXPECTED_SHAPE)

    unit_word = match.group("unit")
    unit = ScaleUnit.from_word(unit_word)
    if unit is ScaleUnit.UNKNOWN:
        if unit_word:
            reason = f"unrecognised scale word {unit_word!r}; {EXPECTED_SHAPE}"
        else:
            reason = f"no scale word; {EXPECTED_SHAPE}"
        return ParsedAmount(raw=value, error=reason)

    try:
        number = Decimal(match.group("number").replace(",", ""))
    except InvalidOperation:
        return ParsedAmount(raw=value, unit=unit, error=EXPECTED_SHAPE)

    dollars = number * unit.multiplier
    if dollars != dollars.to_integral_value():
        return ParsedAmount(
            raw=value,
            unit=unit,
            error=f"{number} {unit.label} is not a whole number of dollars",
        )
    return ParsedAmount(raw=value, amount=int(dollars), unit=unit)


def parse_amount(value: Any) -> int:
    """Convert amount text such as ``"$13.6 billion"`` into whole dollars.

    Raises
    ------
    InvalidAmountFormat
        If the text is missing, lacks a recognised scale word or does not
        resolve to a whole dollar amount.
    """
    result = try_parse_amount(value)
    if not result.ok:
        logger.debug("Unable to parse amount %r: %s", value, result.error)
    return result.unwrap()


def _plain(value: Decimal) -> str:
    return format(value.normalize(), "f")


def format_amount(amount: int, unit: Optional[ScaleUnit] = None) -> str:
    """Render whole dollars in the ``"$<number> <scale word>"`` shape.

    The largest unit not exceeding ``amount`` is used unless ``unit`` is
    given.  Amounts under one thousand are expressed in thousands so the
    result always parses back to the same value.

    >>> format_amount(13_600_000_000)
    '$13.6 billion'
    """
    if amount < 0:
        raise ValueError("Appropriation amounts cannot be negative")
    if unit is None:
        unit = next((u for u in KNOWN_UNITS if amount >= u.multiplier), ScaleUnit.THOUSAND)
    if unit is ScaleUnit.UNKNOWN:
        raise ValueError("Cannot format an amount in an unknown unit")
    scaled = Decimal(int(amount)) / Decimal(unit.multiplier)
    return f"${_plain(scaled)} {unit.label}"
