from __future__ import annotations

from typing import Any

from ..excel.values import is_blank, is_numeric_cell
from ..models.catalog import HeaderCandidate, RawGrid

"""Header row detection.

Carrier exports often start with logo rows, report titles or blank spacer
rows. The header is the row, within the first few, with the most non-empty
text cells, where cells mentioning a domain keyword count triple.
"""

__all__ = [
    "HEADER_KEYWORDS",
    "MIN_HEADER_SCORE",
    "DEFAULT_SCAN_ROWS",
    "score_row",
    "detect_header",
]

HEADER_KEYWORDS = ("date", "cost", "amount", "total", "charge", "net", "id", "name", "sku")
MIN_HEADER_SCORE = 3
DEFAULT_SCAN_ROWS = 10
KEYWORD_BONUS = 2


def score_row(row: tuple[Any, ...] | list[Any]) -> int:
    """Score one row: +1 per text cell, +2 more if it mentions a keyword.

    Numbers (including text that is a plain number) never score, so purely
    numeric data rows always score 0.
    """
    score = 0
    for cell in row:
        if not isinstance(cell, str) or is_blank(cell) or is_numeric_cell(cell):
            continue
        score += 1
        text = cell.strip().lower()
        if any(k in text for k in HEADER_KEYWORDS):
            score += KEYWORD_BONUS
    return score


def detect_header(grid: RawGrid, max_rows_to_scan: int = DEFAULT_SCAN_ROWS) -> HeaderCandidate | None:
    """Locate the header row among the first ``max_rows_to_scan`` rows.

    Returns the strictly highest scoring row with score >= MIN_HEADER_SCORE;
    ties keep the earliest row. Returns None when no row qualifies.
    """
    best: HeaderCandidate | None = None
    for index in range(min(max_rows_to_scan, len(grid))):
        row = grid[index]
        if not row or all(is_blank(v) for v in row):
            continue
        score = score_row(row)
        if score < MIN_HEADER_SCORE:
            continue
        if best is None or score > best.score:
            best = HeaderCandidate(row_index=index, score=score)
    return best
