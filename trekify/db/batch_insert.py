from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

"""DB batch insert.

psycopg2.extras.execute_values を用いたバッチ INSERT。テーブル名・列名は
呼び出し側で検証済みの識別子を前提とする。
"""

try:  # pragma: no cover - psycopg2 is only needed when seeding a database
    from psycopg2.extras import execute_values
except ImportError:  # pragma: no cover
    execute_values = None  # type: ignore

__all__ = [
    "BatchInsertError",
    "BatchMetrics",
    "InsertResult",
    "batch_insert",
]


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing for a single batch insert call."""
    batch_size: int
    elapsed_seconds: float
    start_time: float
    end_time: float


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int
    returned_values: list[tuple[Any, ...]] | None = None


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    returning: bool = False,
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    """Perform a batched INSERT using psycopg2.extras.execute_values.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: 対象テーブル名 (検証済み)
    columns: 挿入列
    rows: 行シーケンス
    returning: append ``RETURNING *`` and fetch the inserted rows
    page_size: execute_values page size
    metrics_callback: receives a BatchMetrics after the insert; not called
        when ``rows`` is empty
    """
    if execute_values is None:
        raise BatchInsertError("psycopg2 not available")

    rows_list = list(rows)
    if not rows_list:
        return InsertResult(inserted_rows=0, returned_values=[] if returning else None)

    cols_sql = ",".join(f'"{c}"' for c in columns)
    base_sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    if returning:
        base_sql += " RETURNING *"

    start_time = time.time()
    try:
        execute_values(cursor, base_sql, rows_list, page_size=page_size)
    except Exception as e:
        raise BatchInsertError(str(e)) from e
    finally:
        end_time = time.time()
        if metrics_callback is not None:
            metrics_callback(
                BatchMetrics(
                    batch_size=len(rows_list),
                    elapsed_seconds=end_time - start_time,
                    start_time=start_time,
                    end_time=end_time,
                )
            )

    returned = None
    if returning:
        try:
            returned = cursor.fetchall()
        except Exception as e:  # pragma: no cover
            raise BatchInsertError(f"failed fetching RETURNING rows: {e}") from e

    return InsertResult(inserted_rows=len(rows_list), returned_values=returned)
