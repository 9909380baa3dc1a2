"""
Value helpers shared by search, filtering, sorting and CSV export.
"""

from __future__ import annotations

import math
import re
from typing import Any, Tuple

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def stringify(value: Any) -> str:
    """
    Render a cell as text. Integral floats drop their ".0" so that a year stored
    as REAL still compares equal to "2024".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_number(text: str) -> Any:
    """
    Return an int or float when the trimmed text is fully numeric, else the trimmed text.
    """
    stripped = text.strip()
    if not _NUMERIC_RE.match(stripped):
        return stripped
    if re.fullmatch(r"[+-]?\d+", stripped):
        return int(stripped)
    return float(stripped)


def month_name(value: Any) -> Any:
    """
    Map 1..12 to a three-letter abbreviation; anything else passes through unchanged.
    """
    if not value:
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    if not number.is_integer() or not 1 <= number <= 12:
        return value
    return MONTH_ABBREVIATIONS[int(number) - 1]


def sort_key(value: Any) -> Tuple[int, Any]:
    """
    Total ordering over mixed cell values: missing first, then numbers, then text.
    """
    if value is None:
        return (0, 0)
    if is_number(value):
        return (1, value)
    return (2, stringify(value))


__all__ = [
    "MONTH_ABBREVIATIONS",
    "is_number",
    "stringify",
    "parse_number",
    "month_name",
    "sort_key",
]
