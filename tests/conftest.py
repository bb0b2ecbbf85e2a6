# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from trekify.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("EXCEL_DATA_PATH", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    # CLI テストごとに capsys の stdout へハンドラを張り直す
    reset_logging()
    yield
    reset_logging()


def write_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write raw rows (no pandas header) to an xlsx file, one entry per sheet."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_excel(temp_workdir: Path) -> Callable[..., Path]:
    def _make(rows: list[list[object]], name: str = "treks.xlsx", sheet: str = "Treks") -> Path:
        return write_excel(temp_workdir / "data" / name, {sheet: rows})
    return _make


@pytest.fixture()
def sample_rows() -> list[list[object]]:
    return [
        ["Sr No.", "Trek Name", "State", "Trek Type", "Difficulty Level", "Season",
         "Duration", "Distance", "Max Altitude", "Trek Description", "Guide Needed",
         "Snow Trek", "Image"],
        [1, "Valley of Flowers", "Uttarakhand", "Multi-day", "Moderate", "Jul-Sep",
         "6 days", "38 km", "4389 m", "Alpine meadows", "Recommended", "No",
         "https://res.cloudinary.com/demo/image/upload/vof.jpg"],
        [2, "Hampta Pass", "Himachal Pradesh", "Pass", "Moderate", "Jun-Sep",
         "5 days", "26 km", "4270 m", "Crossover trek", "Required", "Yes", ""],
        [3, "Rajmachi", "Maharashtra", "Fort", "Easy", "Jun-Feb",
         "2 days", "15 km", "830 m", "Monsoon fort trek", "Not Needed", "", None],
        [4, "", "Maharashtra", "Fort", "Easy", "", "", "", "", "", "", "", ""],
        [5, "Kedarkantha", "Uttarakhand", "Summit", "Easy-Moderate", "Dec-Apr",
         "6 days", "20 km", "3810 m", "Winter summit", "Optional", "TRUE", None],
    ]


@pytest.fixture()
def sample_excel(make_excel, sample_rows) -> Path:
    return make_excel(sample_rows)


@pytest.fixture()
def write_config(temp_workdir: Path, sample_excel: Path) -> Path:
    cfg = temp_workdir / "config" / "trekify.yml"
    cfg.write_text(
        "source_path: ./data/treks.xlsx\n"
        "duplicate_headers: last\n"
        "cache:\n"
        "  max_age_seconds: 60\n"
        "  reload_on_change: true\n"
        "database:\n"
        "  host: localhost\n"
        "  port: 5432\n"
        "  table: treks\n",
        encoding="utf-8",
    )
    return cfg


@pytest.fixture()
def excel_writer() -> Callable[[Path, dict[str, list[list[object]]]], Path]:
    return write_excel
