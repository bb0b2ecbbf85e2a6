from __future__ import annotations

import re
from collections.abc import Sequence
from enum import Enum

from ..models.cell import Cell

"""Header resolver: raw header row -> semantic field index.

Spreadsheet authors spell the same column many ways ("Sr No.", "S.No",
"Serial Number"). Header cells are normalized (lowercase, punctuation runs
collapsed to one space) and then matched against an ordered alias list per
semantic field; the first alias present wins.
"""

__all__ = [
    "FIELD_ALIASES",
    "DuplicateHeaderPolicy",
    "HeaderIndex",
    "build_header_lookup",
    "normalize_header",
    "resolve",
]

HeaderIndex = dict[str, int]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# 順序に意味あり: 先に一致したエイリアスを採用
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "serialNumber": ("serial no", "serial number", "s no", "sno", "sr no"),
    "trekName": ("trek name", "name"),
    "state": ("state",),
    "trekType": ("trek type", "type"),
    "difficultyLevel": ("difficulty", "difficulty level"),
    "season": ("season", "best season", "best time"),
    "duration": ("duration",),
    "distance": ("distance",),
    "maxAltitude": ("max altitude", "altitude", "height", "maxaltitude"),
    "trekDescription": ("description", "trek description", "about"),
    "image": ("image", "image url", "image link", "cloudinary url", "photo"),
    "ageGroup": ("age group", "age", "recommended age"),
    "guideNeeded": ("guide needed", "guide need", "need guide", "guide required"),
    "snowTrek": ("snow trek", "snow", "is snow trek"),
    "recommendedGear": ("recommended gear", "gear", "gears", "what to carry"),
}


class DuplicateHeaderPolicy(Enum):
    """Which column wins when two headers normalize to the same text."""
    LAST = "last"
    FIRST = "first"


def normalize_header(text: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to one space, trim.

    >>> normalize_header("  Sr. No. ")
    'sr no'
    >>> normalize_header("Max_Altitude(m)")
    'max altitude m'
    """
    return _NON_ALNUM.sub(" ", text.lower()).strip()


def _header_text(value: Cell | str | None) -> str:
    if isinstance(value, Cell):
        return value.as_text()
    if value is None:
        return ""
    return Cell.from_raw(value).as_text()


def build_header_lookup(
    headers: Sequence[Cell | str | None],
    policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.LAST,
) -> dict[str, int]:
    """Map normalized header text to its column index.

    Blank headers are not entered. Duplicates are settled by ``policy``:
    LAST overwrites earlier columns, FIRST keeps the earliest one.
    """
    lookup: dict[str, int] = {}
    for idx, raw in enumerate(headers):
        key = normalize_header(_header_text(raw))
        if not key:
            continue
        if policy is DuplicateHeaderPolicy.FIRST and key in lookup:
            continue
        lookup[key] = idx
    return lookup


def resolve(
    headers: Sequence[Cell | str | None],
    duplicate_policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.LAST,
) -> HeaderIndex:
    """Resolve a raw header row into a HeaderIndex.

    Fields without a matching alias are absent from the result. Never fails;
    an empty header row yields an empty mapping.
    """
    lookup = build_header_lookup(headers, duplicate_policy)
    index: HeaderIndex = {}
    for field_key, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            if alias in lookup:
                index[field_key] = lookup[alias]
                break
    return index
