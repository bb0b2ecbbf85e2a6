from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import read_first_sheet
from ..ingest.header_resolver import DuplicateHeaderPolicy, resolve
from ..ingest.record_normalizer import normalize
from ..models.ingestion_result import IngestionResult
from ..models.trek_record import TrekRecord
from .progress import RowProgress

"""Ingestion entry point.

One synchronous pass over a tabular source:
1. Read the first sheet (header row + data rows)
2. Resolve the header row into a HeaderIndex
3. Normalize every data row in order, dropping rows without name/state
4. Return the records together with pass metrics

SourceUnavailable / SourceMalformed propagate unchanged; a failed pass never
returns a partial record list.
"""

__all__ = [
    "ingest",
    "load_treks",
    "parse_duplicate_policy",
]

logger = logging.getLogger(__name__)


def parse_duplicate_policy(value: str | DuplicateHeaderPolicy) -> DuplicateHeaderPolicy:
    """Accept the config spelling ("last" / "first") or the enum itself."""
    if isinstance(value, DuplicateHeaderPolicy):
        return value
    try:
        return DuplicateHeaderPolicy(str(value).strip().lower())
    except ValueError as e:
        raise ValueError(f"unknown duplicate header policy: {value!r}") from e


def ingest(
    path: Path | str,
    *,
    duplicate_policy: str | DuplicateHeaderPolicy = DuplicateHeaderPolicy.LAST,
    show_progress: bool | None = None,
) -> IngestionResult:
    """Ingest a trek spreadsheet into canonical records.

    Args:
        path: Excel (.xlsx) or CSV file; only the first sheet is read
        duplicate_policy: Tie-break for headers that normalize identically
        show_progress: Force the row progress bar on/off (None = TTY only)

    Raises:
        SourceUnavailable: file missing or unreadable
        SourceMalformed: file has no header row
    """
    source = Path(path)
    policy = parse_duplicate_policy(duplicate_policy)
    start_time = datetime.now(UTC)
    started = time.perf_counter()

    sheet = read_first_sheet(source)
    header_index = resolve(sheet.header, policy)
    logger.debug(f"header index for '{sheet.sheet_name}': {header_index}")

    records: list[TrekRecord] = []
    skipped = 0
    with RowProgress(len(sheet.rows), enabled=show_progress) as progress:
        for position, row in enumerate(sheet.rows, start=1):
            record = normalize(row, header_index, position)
            progress.advance()
            if record is None:
                skipped += 1
                logger.debug(f"row {position} skipped: missing trek name or state")
                continue
            records.append(record)

    elapsed = time.perf_counter() - started
    end_time = datetime.now(UTC)
    logger.info(
        f"ingested {source.name} sheet={sheet.sheet_name} "
        f"records={len(records)} skipped={skipped}"
    )
    return IngestionResult(
        source=source,
        sheet_name=sheet.sheet_name,
        records=tuple(records),
        rows_read=len(sheet.rows),
        skipped_rows=skipped,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        header_index=dict(header_index),
    )


def load_treks(
    path: Path | str,
    *,
    duplicate_policy: str | DuplicateHeaderPolicy = DuplicateHeaderPolicy.LAST,
) -> list[TrekRecord]:
    """Convenience wrapper returning only the ordered records."""
    return list(ingest(path, duplicate_policy=duplicate_policy, show_progress=False).records)
