"""Column type inference and value coercion.

Cell text is weakly typed, so a column's type is a whole-column decision made
after every value has been seen. The numeric grammar mirrors the browser's
``Number()`` / ``parseInt()`` / ``parseFloat()`` on trimmed text, without any
locale handling.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Any

from tablekit.contracts.table import DataType

_DECIMAL_RE = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity"
)
_PREFIXED_RE = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")
_INT_PREFIX_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX_RE = re.compile(
    r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)

BOOLEAN_LITERALS = frozenset({"true", "false"})


def is_numeric(text: str) -> bool:
    """True if ``text`` converts to a number. Blank text counts as numeric (zero)."""
    s = text.strip()
    if not s:
        return True
    return bool(_DECIMAL_RE.fullmatch(s) or _PREFIXED_RE.fullmatch(s))


def infer_type(values: Sequence[str], *, raw_max_length: int = 100) -> DataType:
    """Decide a column type from every text value observed in that column.

    First match wins: no values -> TEXT; any markup-looking or overlong value
    -> RAW; all blank or true/false -> BOOLEAN; all non-blank numeric -> INTEGER,
    or DECIMAL if any carries a decimal point; anything else -> TEXT.
    """
    if not values:
        return DataType.TEXT

    if any("<" in v or ">" in v or len(v) > raw_max_length for v in values):
        return DataType.RAW

    if all(v == "" or v.lower() in BOOLEAN_LITERALS for v in values):
        return DataType.BOOLEAN

    filled = [v for v in values if v != ""]
    if not filled:
        return DataType.TEXT
    if not all(is_numeric(v) for v in filled):
        return DataType.TEXT
    if any("." in v for v in filled):
        return DataType.DECIMAL
    return DataType.INTEGER


def parse_int(text: str) -> int | None:
    """Leading base-10 integer of ``text``; None when there is none."""
    m = _INT_PREFIX_RE.match(text)
    return int(m.group(1)) if m else None


def parse_float(text: str) -> float | None:
    """Longest leading decimal literal of ``text``; None when there is none."""
    m = _FLOAT_PREFIX_RE.match(text)
    if not m:
        return None
    literal = m.group(1)
    if literal.lstrip("+-") == "Infinity":
        return -math.inf if literal.startswith("-") else math.inf
    return float(literal)


def coerce(text: str, data_type: DataType) -> Any:
    """Convert trimmed cell text to a value of ``data_type``.

    Blank INTEGER/DECIMAL cells become None; BOOLEAN has no null state, so a
    blank cell is False.
    """
    if data_type is DataType.INTEGER:
        return None if text == "" else parse_int(text)
    if data_type is DataType.DECIMAL:
        return None if text == "" else parse_float(text)
    if data_type is DataType.BOOLEAN:
        return text.lower() == "true"
    return text


def default_value(data_type: DataType) -> Any:
    """Zero value used to backfill columns missing from a new row."""
    if data_type is DataType.INTEGER:
        return 0
    if data_type is DataType.DECIMAL:
        return 0.0
    if data_type is DataType.BOOLEAN:
        return False
    return ""


def format_value(value: Any) -> str:
    """String form written into the tree.

    Booleans and floats are spelled so that re-parsing the tree yields the
    same column type; None renders as an empty cell.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    return str(value)
