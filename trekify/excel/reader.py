from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..models.cell import Cell

"""Tabular source reader.

Reads the first sheet of an Excel workbook (or a CSV file) in one pass and
returns the header row plus all data rows as ``Cell`` sequences.

- 先頭シートのみ対象 (2枚目以降は無視)
- 1行目をヘッダ行、2行目以降をデータ行として扱う
- 空行は削除しない (行位置が serial のフォールバックになるため)
"""

__all__ = [
    "SheetRows",
    "SourceError",
    "SourceMalformed",
    "SourceUnavailable",
    "read_first_sheet",
    "read_source_frame",
    "sheet_rows_from_frame",
]

CSV_SUFFIXES = {".csv"}

# 空セルのみ欠損扱い。"NA" / "N/A" / "null" 等は文字列のまま残す
NA_VALUES = [""]


class SourceError(Exception):
    """Base class for failures of a whole ingestion pass."""


class SourceUnavailable(SourceError):
    """Raised when the source artifact is missing or cannot be opened."""


class SourceMalformed(SourceError):
    """Raised when the source artifact has no header row or cannot be parsed."""


@dataclass
class SheetRows:
    sheet_name: str
    header: list[Cell]
    rows: list[list[Cell]]  # ヘッダ除外、元の順序


def read_source_frame(path: Path) -> tuple[str, pd.DataFrame]:
    """Read the first sheet of ``path`` as a raw DataFrame (no header applied).

    Returns (sheet_name, frame). CSV files use the file stem as sheet name.

    Raises
    ------
    SourceUnavailable: path missing, not a file, or unreadable
    SourceMalformed: CSV file with no content or ragged rows
    """
    if not path.exists():
        raise SourceUnavailable(f"source not found: {path}")
    if not path.is_file():
        raise SourceUnavailable(f"source is not a file: {path}")

    if path.suffix.lower() in CSV_SUFFIXES:
        try:
            df = pd.read_csv(
                path,
                header=None,
                keep_default_na=False,
                na_values=NA_VALUES,
                skip_blank_lines=False,
            )
        except pd.errors.EmptyDataError as e:
            raise SourceMalformed(f"source '{path.name}' has no header row") from e
        except pd.errors.ParserError as e:
            raise SourceMalformed(f"source '{path.name}' is not valid CSV: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailable(f"failed to read {path.name}: {e}") from e
        return path.stem, df

    try:
        with pd.ExcelFile(path) as xls:
            if not xls.sheet_names:
                raise SourceMalformed(f"source '{path.name}' has no sheets")
            sheet_name = str(xls.sheet_names[0])
            # ヘッダなしで生読み (1行目をヘッダとして後で適用)
            df = xls.parse(
                xls.sheet_names[0], header=None, keep_default_na=False, na_values=NA_VALUES
            )
    except SourceError:
        raise
    except Exception as e:
        raise SourceUnavailable(f"failed to open {path.name}: {e}") from e
    return sheet_name, df


def sheet_rows_from_frame(df: pd.DataFrame, sheet_name: str) -> SheetRows:
    """Split a raw frame into header cells and data row cells.

    Raises SourceMalformed when the frame has zero rows.
    """
    if df.shape[0] < 1:
        raise SourceMalformed(f"sheet '{sheet_name}' has no header row")
    records = list(df.itertuples(index=False, name=None))
    header = [Cell.from_raw(v) for v in records[0]]
    rows = [[Cell.from_raw(v) for v in raw] for raw in records[1:]]
    return SheetRows(sheet_name=sheet_name, header=header, rows=rows)


def read_first_sheet(path: Path) -> SheetRows:
    """Read the first sheet of a tabular source into header + data rows."""
    sheet_name, df = read_source_frame(path)
    return sheet_rows_from_frame(df, sheet_name)
