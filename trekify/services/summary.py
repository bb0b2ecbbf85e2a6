from __future__ import annotations

from ..models.ingestion_result import IngestionResult

"""SUMMARY line rendering for an ingestion pass.

Format:
SUMMARY source={file} sheet={sheet} rows={rows} records={records}
skipped={skipped} elapsed_sec={elapsed}
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(value: float) -> str:
    """Render seconds without scientific notation or trailing zeros.

    >>> format_seconds(2.0)
    '2'
    >>> format_seconds(0.0000123)
    '0.000012'
    """
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # 指数表記を避ける
        return f"{value:.6f}".rstrip("0").rstrip(".") or "0"
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: IngestionResult) -> str:
    """Render the SUMMARY line for ``result``.

    Spaces in file or sheet names are replaced with underscores so the line
    stays a flat ``key=value`` list.
    """
    source = result.source.name.replace(" ", "_")
    sheet = result.sheet_name.replace(" ", "_")
    return (
        f"SUMMARY source={source} "
        f"sheet={sheet} "
        f"rows={result.rows_read} "
        f"records={result.record_count} "
        f"skipped={result.skipped_rows} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
