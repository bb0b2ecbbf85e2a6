from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .trek_record import TrekRecord

"""Ingestion result model.

Aggregates the output of one ingestion pass together with the metrics used
for the SUMMARY output line.
"""

__all__ = [
    "IngestionResult",
]


@dataclass(frozen=True)
class IngestionResult:
    """Records and metrics produced by a single ingestion pass.

    ``records`` keeps source row order. ``rows_read`` counts data rows only
    (header excluded); ``skipped_rows`` counts rows dropped because the trek
    name or state was empty.
    """
    source: Path  # 読み込んだファイル
    sheet_name: str  # 先頭シート名
    records: tuple[TrekRecord, ...]
    rows_read: int
    skipped_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    header_index: dict[str, int] = field(default_factory=dict)

    @property
    def record_count(self) -> int:
        return len(self.records)
