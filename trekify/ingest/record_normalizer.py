from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..models.cell import Cell
from ..models.trek_record import (
    GUIDE_NO,
    GUIDE_OPTIONAL,
    GUIDE_RECOMMENDED,
    GUIDE_YES,
    SNOW_NO,
    SNOW_YES,
    TrekRecord,
)

"""Record normalizer: one raw data row + HeaderIndex -> TrekRecord.

Row reading is header-first with a positional fallback for the core columns,
because source sheets seen in the wild carry inconsistent headers. Malformed
cells never raise; the only rejection is a row without trek name or state,
for which ``normalize`` returns None.
"""

__all__ = [
    "POSITIONAL_COLUMNS",
    "canonicalize_guide_needed",
    "find_image_url",
    "normalize",
    "parse_snow_trek",
]

# 旧来の列順 (ヘッダ解決に失敗した場合のみ使用)
POSITIONAL_COLUMNS: dict[str, int] = {
    "serialNumber": 0,
    "trekName": 1,
    "state": 2,
    "trekType": 3,
    "difficultyLevel": 4,
    "season": 5,
    "duration": 6,
    "distance": 7,
    "maxAltitude": 8,
    "trekDescription": 9,
}

_GUIDE_VOCAB: dict[str, str] = {
    **dict.fromkeys(("required", "yes", "y", "true", "1"), GUIDE_YES),
    **dict.fromkeys(("not needed", "not required", "no", "false", "0", "n"), GUIDE_NO),
    **dict.fromkeys(("recommended", "recommend", "advisable", "advised"), GUIDE_RECOMMENDED),
    **dict.fromkeys(("optional", "maybe"), GUIDE_OPTIONAL),
}

_SNOW_TRUE = frozenset({"yes", "true", "y", "1"})

_URL_PREFIXES = ("http://", "https://")
_CLOUDINARY_MARKERS = ("cloudinary.com", "res.cloudinary")
_CLOUDINARY_PREFIX = "https://res.cloudinary"


def _cell_at(row: Sequence[Any], idx: int | None) -> Cell:
    if idx is None or idx < 0 or idx >= len(row):
        return Cell.empty()
    return Cell.from_raw(row[idx])


def _header_cell(row: Sequence[Any], header_index: Mapping[str, int], field: str) -> Cell:
    """Cell for a header-only field (no positional fallback)."""
    return _cell_at(row, header_index.get(field))


def _field_cell(row: Sequence[Any], header_index: Mapping[str, int], field: str) -> Cell:
    """Cell for a core field: resolved header column, else the historical position.

    The historical position is skipped when a resolved header already owns
    that column, so one field's data never leaks into another.
    """
    if field in header_index:
        return _cell_at(row, header_index[field])
    position = POSITIONAL_COLUMNS.get(field)
    if position in header_index.values():
        return Cell.empty()
    return _cell_at(row, position)


def canonicalize_guide_needed(value: str) -> str:
    """Map a free-text guide requirement to YES/NO/RECOMMENDED/OPTIONAL.

    Unknown non-empty values pass through uppercased; empty stays empty.

    >>> canonicalize_guide_needed("Not Needed")
    'NO'
    >>> canonicalize_guide_needed(" Sometimes ")
    'SOMETIMES'
    """
    trimmed = value.strip()
    if not trimmed:
        return ""
    return _GUIDE_VOCAB.get(trimmed.lower(), trimmed.upper())


def parse_snow_trek(value: str) -> str:
    """YES for yes/true/y/1 (any case), NO for everything else including empty."""
    return SNOW_YES if value.strip().lower() in _SNOW_TRUE else SNOW_NO


def _is_cloudinary(text: str) -> bool:
    return text.startswith(_CLOUDINARY_PREFIX) or any(m in text for m in _CLOUDINARY_MARKERS)


def find_image_url(row: Sequence[Any], header_index: Mapping[str, int]) -> str:
    """Resolve the image URL for a row.

    Order: a URL in the resolved image column, then the first text cell
    anywhere in the row that points at Cloudinary, else "".
    """
    if "image" in header_index:
        candidate = _header_cell(row, header_index, "image").as_text()
        if candidate.lower().startswith(_URL_PREFIXES):
            return candidate
    for raw in row:
        cell = Cell.from_raw(raw)
        if not cell.is_text:
            continue
        text = cell.as_text()
        if _is_cloudinary(text):
            return text
    return ""


def normalize(
    row: Sequence[Any], header_index: Mapping[str, int], row_position: int
) -> TrekRecord | None:
    """Build a TrekRecord from one data row.

    Parameters
    ----------
    row: 生セル列 (Cell または pandas / openpyxl の値)
    header_index: ``resolve`` の結果
    row_position: 1-based data row counter (header excluded), serial fallback

    Returns None when trek name or state is empty (row skipped).
    """
    trek_name = _field_cell(row, header_index, "trekName").as_text()
    state = _field_cell(row, header_index, "state").as_text()
    if not trek_name or not state:
        return None

    serial = _field_cell(row, header_index, "serialNumber").as_int()

    return TrekRecord(
        serial_number=serial if serial is not None else row_position,
        state=state,
        trek_name=trek_name,
        trek_type=_field_cell(row, header_index, "trekType").as_text(),
        difficulty_level=_field_cell(row, header_index, "difficultyLevel").as_text(),
        season=_field_cell(row, header_index, "season").as_text(),
        duration=_field_cell(row, header_index, "duration").as_text(),
        distance=_field_cell(row, header_index, "distance").as_text(),
        max_altitude=_field_cell(row, header_index, "maxAltitude").as_text(),
        description=_field_cell(row, header_index, "trekDescription").as_text(),
        age_group=_header_cell(row, header_index, "ageGroup").as_text(),
        recommended_gear=_header_cell(row, header_index, "recommendedGear").as_text(),
        guide_needed=canonicalize_guide_needed(
            _header_cell(row, header_index, "guideNeeded").as_text()
        ),
        snow_trek=parse_snow_trek(_header_cell(row, header_index, "snowTrek").as_text()),
        image_url=find_image_url(row, header_index),
    )
