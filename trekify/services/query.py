from __future__ import annotations

from collections.abc import Iterable

from ..models.trek_record import TrekRecord

"""Read-only queries over an ingested record sequence.

Mirrors the data routes of the trek API: list all, filter by state
(case-insensitive substring) and lookup by serial number.
"""

__all__ = [
    "QueryError",
    "filter_by_state",
    "get_by_serial",
    "list_all",
]


class QueryError(ValueError):
    """Raised for invalid query input (e.g. a blank state name)."""


def list_all(records: Iterable[TrekRecord]) -> list[TrekRecord]:
    return list(records)


def filter_by_state(records: Iterable[TrekRecord], state: str) -> list[TrekRecord]:
    """Records whose state contains ``state``, ignoring case.

    Raises:
        QueryError: state is empty or whitespace only
    """
    needle = (state or "").strip().lower()
    if not needle:
        raise QueryError("state name is required")
    return [r for r in records if needle in r.state.lower()]


def get_by_serial(records: Iterable[TrekRecord], serial: int) -> TrekRecord | None:
    """First record with exactly this serial number, or None."""
    for r in records:
        if r.serial_number == serial:
            return r
    return None
