from __future__ import annotations

import pytest

from trekify.models.trek_record import TrekRecord
from trekify.services.query import QueryError, filter_by_state, get_by_serial, list_all

RECORDS = (
    TrekRecord(serial_number=1, state="Uttarakhand", trek_name="Valley of Flowers"),
    TrekRecord(serial_number=2, state="Himachal Pradesh", trek_name="Hampta Pass"),
    TrekRecord(serial_number=3, state="Uttarakhand", trek_name="Kedarkantha"),
    TrekRecord(serial_number=3, state="Sikkim", trek_name="Goechala"),
)


def test_list_all_keeps_order():
    assert list_all(RECORDS) == list(RECORDS)


def test_filter_by_state_case_insensitive_substring():
    assert [r.trek_name for r in filter_by_state(RECORDS, "uttar")] == [
        "Valley of Flowers", "Kedarkantha",
    ]
    assert [r.trek_name for r in filter_by_state(RECORDS, "  PRADESH ")] == ["Hampta Pass"]


def test_filter_by_state_no_match():
    assert filter_by_state(RECORDS, "Kerala") == []


@pytest.mark.parametrize("state", ["", "   ", None])
def test_filter_by_state_requires_name(state):
    with pytest.raises(QueryError):
        filter_by_state(RECORDS, state)


def test_get_by_serial_exact_first_match():
    assert get_by_serial(RECORDS, 3).trek_name == "Kedarkantha"
    assert get_by_serial(RECORDS, 2).state == "Himachal Pradesh"
    assert get_by_serial(RECORDS, 99) is None
