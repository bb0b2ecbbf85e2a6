from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from trekify.excel.reader import (
    SourceError,
    SourceMalformed,
    SourceUnavailable,
    read_first_sheet,
    sheet_rows_from_frame,
)
from trekify.models.cell import CellKind


def test_read_first_sheet_header_and_rows(temp_workdir: Path, excel_writer):
    excel = excel_writer(
        temp_workdir / "treks.xlsx",
        {
            "Treks": [
                ["Sr No.", "Trek Name", "State"],
                [1, "Valley of Flowers", "Uttarakhand"],
                [2, "Hampta Pass", "Himachal Pradesh"],
            ]
        },
    )
    sheet = read_first_sheet(excel)
    assert sheet.sheet_name == "Treks"
    assert [c.as_text() for c in sheet.header] == ["Sr No.", "Trek Name", "State"]
    assert len(sheet.rows) == 2
    assert sheet.rows[0][0].kind is CellKind.NUMBER
    assert sheet.rows[1][1].as_text() == "Hampta Pass"


def test_read_first_sheet_ignores_later_sheets(temp_workdir: Path, excel_writer):
    excel = excel_writer(
        temp_workdir / "multi.xlsx",
        {
            "First": [["Trek Name", "State"], ["A", "B"]],
            "Second": [["Other"], ["x"], ["y"], ["z"]],
        },
    )
    sheet = read_first_sheet(excel)
    assert sheet.sheet_name == "First"
    assert len(sheet.rows) == 1


def test_blank_rows_between_data_are_kept(temp_workdir: Path, excel_writer):
    excel = excel_writer(
        temp_workdir / "gaps.xlsx",
        {
            "Treks": [
                ["Trek Name", "State"],
                ["A", "Sikkim"],
                [None, None],
                ["B", "Goa"],
            ]
        },
    )
    sheet = read_first_sheet(excel)
    assert len(sheet.rows) == 3
    assert all(c.is_empty for c in sheet.rows[1])


def test_missing_source_raises_unavailable(temp_workdir: Path):
    with pytest.raises(SourceUnavailable):
        read_first_sheet(temp_workdir / "nope.xlsx")


def test_directory_source_raises_unavailable(temp_workdir: Path):
    with pytest.raises(SourceUnavailable):
        read_first_sheet(temp_workdir / "data")


def test_corrupt_file_raises_unavailable(temp_workdir: Path):
    bad = temp_workdir / "bad.xlsx"
    bad.write_bytes(b"this is not a workbook")
    with pytest.raises(SourceUnavailable) as e:
        read_first_sheet(bad)
    assert e.value.__cause__ is not None


def test_empty_frame_raises_malformed():
    with pytest.raises(SourceMalformed):
        sheet_rows_from_frame(pd.DataFrame(), "Empty")


def test_empty_csv_raises_malformed(temp_workdir: Path):
    csv = temp_workdir / "empty.csv"
    csv.write_text("", encoding="utf-8")
    with pytest.raises(SourceMalformed):
        read_first_sheet(csv)


def test_csv_source(temp_workdir: Path):
    csv = temp_workdir / "treks.csv"
    csv.write_text("Sr No.,Trek Name,State\n1,Valley of Flowers,Uttarakhand\n", encoding="utf-8")
    sheet = read_first_sheet(csv)
    assert sheet.sheet_name == "treks"
    assert sheet.rows[0][0].as_int() == 1
    assert sheet.rows[0][2].as_text() == "Uttarakhand"


def test_source_errors_share_base_class():
    assert issubclass(SourceUnavailable, SourceError)
    assert issubclass(SourceMalformed, SourceError)


def test_na_like_text_is_kept_in_xlsx(temp_workdir: Path, excel_writer):
    excel = excel_writer(
        temp_workdir / "na.xlsx",
        {
            "Treks": [
                ["Sr No.", "Trek Name", "State", "Guide Needed", "Snow Trek"],
                [1, "Kedarkantha", "Uttarakhand", "N/A", "yes"],
                [2, "NA", "Sikkim", "null", None],
            ]
        },
    )
    sheet = read_first_sheet(excel)
    assert sheet.rows[0][3].as_text() == "N/A"
    assert sheet.rows[1][1].as_text() == "NA"
    assert sheet.rows[1][3].as_text() == "null"
    assert sheet.rows[1][4].is_empty


def test_na_like_text_is_kept_in_csv(temp_workdir: Path):
    csv = temp_workdir / "na.csv"
    csv.write_text("Trek Name,State,Guide Needed\nNA,Sikkim,None\nGoechala,,N/A\n", encoding="utf-8")
    sheet = read_first_sheet(csv)
    assert [c.as_text() for c in sheet.rows[0]] == ["NA", "Sikkim", "None"]
    assert sheet.rows[1][1].is_empty
    assert sheet.rows[1][2].as_text() == "N/A"


def test_blank_csv_lines_are_kept(temp_workdir: Path):
    csv = temp_workdir / "gaps.csv"
    csv.write_text("Sr No.,Trek Name,State\nx,A,S1\n\nx,B,S2\n", encoding="utf-8")
    sheet = read_first_sheet(csv)
    assert len(sheet.rows) == 3
    assert all(c.is_empty for c in sheet.rows[1])
    assert sheet.rows[2][1].as_text() == "B"


def test_ragged_csv_raises_malformed(temp_workdir: Path):
    csv = temp_workdir / "ragged.csv"
    csv.write_text("Trek Name,State\nA,B\nC,D,E,F\n", encoding="utf-8")
    with pytest.raises(SourceMalformed):
        read_first_sheet(csv)


def test_undecodable_csv_raises_unavailable(temp_workdir: Path):
    csv = temp_workdir / "binary.csv"
    csv.write_bytes(b"Trek Name,State\n\xff\xfeA,B\n")
    with pytest.raises(SourceUnavailable) as e:
        read_first_sheet(csv)
    assert isinstance(e.value.__cause__, UnicodeDecodeError)
