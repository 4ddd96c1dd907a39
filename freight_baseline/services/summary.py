from __future__ import annotations

from decimal import Decimal

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format (single line, space separated ``key=value`` pairs):

    SUMMARY files={n} success={s} undetermined={u} failed={f}
    skipped_sheets={k} total_baseline={amount} elapsed_sec={sec}
"""

__all__ = ["render_summary_line", "format_number"]


def format_number(value: float) -> str:
    """Render a float without scientific notation; integral values drop ``.0``."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 6))


def _format_amount(amount: Decimal) -> str:
    return f"{amount.quantize(Decimal('0.01'))}"


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from decimal import Decimal
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=2, undetermined_files=1, failed_files=0,
        ...     skipped_sheets=1, total_baseline=Decimal("1234.5"),
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=3 success=2 undetermined=1 failed=0 skipped_sheets=1 total_baseline=1234.50 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={result.total_files} "
        f"success={result.success_files} "
        f"undetermined={result.undetermined_files} "
        f"failed={result.failed_files} "
        f"skipped_sheets={result.skipped_sheets} "
        f"total_baseline={_format_amount(result.total_baseline)} "
        f"elapsed_sec={format_number(result.elapsed_seconds)}"
    )
