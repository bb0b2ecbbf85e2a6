from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

"""Cell model for loosely typed spreadsheet values.

Spreadsheet rows mix strings, numbers and blanks (NaN from pandas). Each raw
value is wrapped once in a ``Cell`` and every field accessor goes through an
explicit coercion rule (``as_text`` / ``as_int``) instead of ``str(value)``.
"""

__all__ = [
    "Cell",
    "CellKind",
]


class CellKind(Enum):
    """Tag for the three cell variants."""
    EMPTY = "empty"
    TEXT = "text"
    NUMBER = "number"


@dataclass(frozen=True)
class Cell:
    """A single spreadsheet cell value.

    Attributes:
        kind: Variant tag
        text: Raw string for TEXT cells ("" otherwise)
        number: Numeric value for NUMBER cells (None otherwise)
    """
    kind: CellKind
    text: str = ""
    number: float | None = None

    @staticmethod
    def empty() -> Cell:
        return _EMPTY

    @staticmethod
    def of_text(value: str) -> Cell:
        if value.strip() == "":
            return _EMPTY
        return Cell(kind=CellKind.TEXT, text=value)

    @staticmethod
    def of_number(value: float) -> Cell:
        if math.isnan(value):
            return _EMPTY
        return Cell(kind=CellKind.NUMBER, number=float(value))

    @staticmethod
    def from_raw(value: Any) -> Cell:
        """Wrap a raw value as produced by pandas / openpyxl.

        Coercion on construction:
        - None / NaN / NaT / whitespace-only string -> EMPTY
        - bool -> TEXT("TRUE" / "FALSE")
        - int / float (numpy scalars included) -> NUMBER
        - date / datetime / time -> TEXT(isoformat)
        - anything else -> TEXT(str(value))
        """
        if isinstance(value, Cell):
            return value
        if value is None:
            return _EMPTY
        # bool は numbers.Number に含まれるため先に判定
        if isinstance(value, (bool, np.bool_)):
            return Cell(kind=CellKind.TEXT, text="TRUE" if value else "FALSE")
        if isinstance(value, str):
            return Cell.of_text(value)
        if isinstance(value, numbers.Number):
            try:
                return Cell.of_number(float(value))  # type: ignore[arg-type]
            except (TypeError, ValueError):
                return Cell.of_text(str(value))
        if value is pd.NaT:
            return _EMPTY
        if isinstance(value, (datetime, date, time)):
            return Cell(kind=CellKind.TEXT, text=value.isoformat())
        return Cell.of_text(str(value))

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    @property
    def is_text(self) -> bool:
        return self.kind is CellKind.TEXT

    def as_text(self) -> str:
        """Coerce to a trimmed string.

        NUMBER cells with an integral value render without a fractional part
        (1.0 -> "1"); others use the locale-invariant shortest repr.
        """
        if self.kind is CellKind.TEXT:
            return self.text.strip()
        if self.kind is CellKind.NUMBER and self.number is not None:
            if math.isfinite(self.number) and self.number.is_integer():
                return str(int(self.number))
            return repr(self.number)
        return ""

    def as_int(self) -> int | None:
        """Coerce to int, or None when the value is not an integer."""
        if self.kind is CellKind.NUMBER and self.number is not None:
            if math.isfinite(self.number) and self.number.is_integer():
                return int(self.number)
            return None
        if self.kind is CellKind.TEXT:
            try:
                return int(self.text.strip())
            except ValueError:
                return None
        return None


_EMPTY = Cell(kind=CellKind.EMPTY)
