"""Date and formula normalization for loosely typed extract values."""
from __future__ import annotations

import math
import re
from datetime import date

FORMULA_MARKER = "="

CONSTRUCTION_COMPLETION_SENTINEL = "cc"
SETTLEMENT_SENTINEL = "settlement"

UNIT_SPECIFIC = "Unit Specific"
COMMON_PROPERTY = "Common Property"

_NUMERIC_LITERAL = re.compile(r"-?\d+(\.\d+)?")
_GROUPED_NUMBER = re.compile(r"-?\d{1,3}(,\d{3})+(\.\d+)?")
_DATE_PATTERN = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})")

_HUNDRED_PERCENT_OPTIONS = {0: "Yes", 1: "No"}
_TRUE_FLAGS = {"1", "true", "yes", "y"}


def _clean(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def expand_year(year: str) -> int:
    """Two-digit years pivot at 50: ``49 -> 2049``, ``50 -> 1950``."""
    value = int(year)
    if len(year) == 2:
        return 2000 + value if value < 50 else 1900 + value
    return value


def parse_date(value: object) -> date | None:
    """Parse ``d/m/yy`` or ``dd/mm/yyyy``; anything else yields ``None``."""
    match = _DATE_PATTERN.fullmatch(_clean(value))
    if match is None:
        return None
    day, month, year = match.groups()
    try:
        return date(expand_year(year), int(month), int(day))
    except ValueError:
        return None


def to_formula(value: str) -> str:
    return f"{FORMULA_MARKER}{value}"


def is_numeric_literal(value: object) -> bool:
    return _NUMERIC_LITERAL.fullmatch(_clean(value)) is not None


def classify_scalar(value: object) -> str | None:
    """Numeric literals pass through; any other text becomes a formula."""
    text = _clean(value)
    if not text:
        return None
    if is_numeric_literal(text):
        return text
    return to_formula(text)


def resolve_installation_date(value: object) -> str | None:
    text = _clean(value)
    if not text:
        return None
    if text.lower() == CONSTRUCTION_COMPLETION_SENTINEL:
        return to_formula(CONSTRUCTION_COMPLETION_SENTINEL)
    parsed = parse_date(text)
    if parsed is not None:
        return parsed.isoformat()
    return to_formula(text)


def resolve_first_use_date(value: object, settlement: date | None) -> date | None:
    if _clean(value).lower() == SETTLEMENT_SENTINEL:
        return settlement
    return parse_date(value)


def parse_finite_number(value: object) -> float | None:
    text = _clean(value)
    if not text or "_" in text:
        return None
    if "," in text:
        if _GROUPED_NUMBER.fullmatch(text) is None:
            return None
        text = text.replace(",", "")
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def classify_area(value: object) -> str:
    if parse_finite_number(value) == 0:
        return UNIT_SPECIFIC
    return COMMON_PROPERTY


def hundred_percent_option(code: object) -> str:
    number = parse_finite_number(code)
    if number is None or not number.is_integer():
        return "Force"
    return _HUNDRED_PERCENT_OPTIONS.get(int(number), "Force")


def parse_flag(value: object) -> bool:
    return _clean(value).lower() in _TRUE_FLAGS


def optional_text(value: object) -> str | None:
    text = _clean(value)
    return text or None
