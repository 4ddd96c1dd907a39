from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

"""Cell-level helpers shared by detection, classification and extraction.

Cells arrive from the reader as None, str, int, float, bool or datetime.
"""

__all__ = [
    "is_blank",
    "is_numeric_cell",
    "is_date_cell",
    "cell_label",
    "coerce_text",
    "parse_money",
]

_CURRENCY_CHARS = "$€£¥"
_PLAIN_INT_RE = re.compile(r"^[+-]?\d+$")
_PLAIN_FLOAT_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")
_MONEY_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def is_blank(value: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def is_numeric_cell(value: Any) -> bool:
    """True for numbers and for text that is a plain number ("12", "3.5")."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return bool(_PLAIN_FLOAT_RE.match(value.strip()))
    return False


def is_date_cell(value: Any) -> bool:
    return isinstance(value, (datetime, date))


def cell_label(value: Any) -> str:
    """Render a header cell as a label; floats like 2024.0 become "2024"."""
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == datetime.min.time() else value.isoformat()
    return str(value).strip()


def coerce_text(text: str) -> Any:
    """Turn delimited-text cells into typed cells.

    Plain integers and decimals become numbers; empty strings become None;
    everything else (currency text included) is kept as stripped text.
    """
    stripped = text.strip()
    if not stripped:
        return None
    if _PLAIN_INT_RE.match(stripped):
        # leading zeros carry meaning (zip codes, ids)
        if len(stripped.lstrip("+-")) > 1 and stripped.lstrip("+-").startswith("0"):
            return stripped
        return int(stripped)
    if _PLAIN_FLOAT_RE.match(stripped):
        return float(stripped)
    return stripped


def parse_money(value: Any) -> Decimal | None:
    """Parse a monetary cell into a Decimal.

    Strips currency symbols, thousands separators and surrounding whitespace.
    Accounting negatives ``(12.50)`` and trailing ``-`` are supported.
    Returns None for blanks, booleans, NaN/inf and anything non-numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return Decimal(repr(value))
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1].strip()
    if text.endswith("-"):
        negative = not negative
        text = text[:-1].strip()
    for ch in _CURRENCY_CHARS:
        text = text.replace(ch, "")
    text = text.replace(",", "").replace(" ", "").replace(" ", "")
    if text.upper().startswith("USD"):
        text = text[3:]
    if text.startswith("-"):
        negative = not negative
        text = text[1:]
    elif text.startswith("+"):
        text = text[1:]
    if not _MONEY_RE.match(text):
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    return -amount if negative else amount
