from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..models.trek_record import TrekRecord
from .batch_insert import BatchInsertError, batch_insert

"""Seed a PostgreSQL ``treks`` table from ingested records.

The table is seeded only while empty by default, so restarting a service
never duplicates rows. ``replace=True`` clears the table first (re-seed
after the spreadsheet changed). Transaction boundaries belong to the caller.

Expected table shape::

    CREATE TABLE treks (
        id SERIAL PRIMARY KEY,
        serial_number INTEGER NOT NULL,
        state TEXT NOT NULL,
        trek_name TEXT NOT NULL,
        trek_type TEXT, difficulty_level TEXT, season TEXT, duration TEXT,
        distance TEXT, max_altitude TEXT, description TEXT, age_group TEXT,
        recommended_gear TEXT, guide_needed TEXT, snow_trek TEXT, image_url TEXT
    );
"""

__all__ = [
    "TREK_COLUMNS",
    "SeedResult",
    "StoreError",
    "record_to_row",
    "seed_treks",
    "table_has_rows",
]

logger = logging.getLogger(__name__)

TREK_COLUMNS: tuple[str, ...] = (
    "serial_number",
    "state",
    "trek_name",
    "trek_type",
    "difficulty_level",
    "season",
    "duration",
    "distance",
    "max_altitude",
    "description",
    "age_group",
    "recommended_gear",
    "guide_needed",
    "snow_trek",
    "image_url",
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class StoreError(Exception):
    pass


@dataclass(frozen=True)
class SeedResult:
    table: str
    inserted_rows: int
    skipped: bool  # 既存行ありで投入を見送った場合 True


def _check_table(table: str) -> str:
    if not _IDENTIFIER.match(table):
        raise StoreError(f"invalid table name: {table!r}")
    return table


def record_to_row(record: TrekRecord) -> tuple[Any, ...]:
    return tuple(getattr(record, col) for col in TREK_COLUMNS)


def table_has_rows(cursor: Any, table: str) -> bool:
    cursor.execute(f"SELECT EXISTS (SELECT 1 FROM {_check_table(table)})")
    row = cursor.fetchone()
    return bool(row and row[0])


def seed_treks(
    cursor: Any,
    records: Sequence[TrekRecord],
    table: str = "treks",
    *,
    only_if_empty: bool = True,
    replace: bool = False,
    page_size: int = 1000,
) -> SeedResult:
    """Insert ``records`` into ``table``.

    Raises:
        StoreError: invalid table name or a failed insert
    """
    table = _check_table(table)
    try:
        if replace:
            cursor.execute(f"DELETE FROM {table}")
            logger.info(f"cleared table {table} before re-seed")
        elif only_if_empty and table_has_rows(cursor, table):
            logger.info(f"table {table} already has rows -> seed skipped")
            return SeedResult(table=table, inserted_rows=0, skipped=True)

        result = batch_insert(
            cursor,
            table,
            TREK_COLUMNS,
            (record_to_row(r) for r in records),
            page_size=page_size,
        )
    except BatchInsertError as e:
        raise StoreError(f"seeding {table} failed: {e}") from e
    logger.info(f"seeded {result.inserted_rows} treks into {table}")
    return SeedResult(table=table, inserted_rows=result.inserted_rows, skipped=False)
