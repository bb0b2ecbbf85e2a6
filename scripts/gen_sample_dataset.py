#!/usr/bin/env python3
"""Sample trek spreadsheet generator.

Writes a synthetic trek workbook with the kind of noise seen in real source
files: varying header spellings, numeric serials mixed with text, free-text
guide values and image URLs parked in an unlabeled column. Useful for manual
runs of ``python -m trekify.cli --inspect-data`` and for timing ingestion of
large sheets.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

STATES = ["Uttarakhand", "Himachal Pradesh", "Maharashtra", "Sikkim", "Karnataka", "Ladakh"]
TREK_TYPES = ["Day Hike", "Multi-day", "Fort", "Lake", "Pass", "Summit"]
DIFFICULTIES = ["Easy", "Moderate", "Difficult", "Easy-Moderate"]
SEASONS = ["Jun-Sep", "Oct-Mar", "Apr-Jun", "All year"]
GUIDE_VALUES = ["Required", "Not Needed", "Recommended", "Optional", "Sometimes", ""]
SNOW_VALUES = ["Yes", "No", "TRUE", "", "1"]

# 見出しの揺れを再現する (どれも同じ意味)
HEADER_VARIANTS: dict[str, list[str]] = {
    "serial": ["Sr No.", "S.No", "Serial Number"],
    "name": ["Trek Name", "Name"],
    "state": ["State", "STATE"],
    "type": ["Trek Type", "Type"],
    "difficulty": ["Difficulty Level", "Difficulty"],
    "season": ["Season", "Best Time"],
    "duration": ["Duration"],
    "distance": ["Distance"],
    "altitude": ["Max Altitude", "Altitude", "Height"],
    "description": ["Trek Description", "About"],
    "guide": ["Guide Needed", "Guide Required"],
    "snow": ["Snow Trek", "Is Snow Trek"],
    "age": ["Age Group", "Recommended Age"],
    "gear": ["Recommended Gear", "What to carry"],
}


def generate_trek_rows(rows: int, seed: int = 42) -> list[list[Any]]:
    """Generate ``rows`` data rows in the column order of HEADER_VARIANTS.

    Every 10th row gets a textual serial to exercise the row-position
    fallback; every 25th row leaves the trek name blank (dropped on ingest).
    The trailing unlabeled column carries a Cloudinary URL.
    """
    rng = np.random.default_rng(seed)
    out: list[list[Any]] = []
    for i in range(1, rows + 1):
        serial: Any = i if i % 10 else f"#{i}"
        name = "" if i % 25 == 0 else f"Trek {i:05d}"
        out.append([
            serial,
            name,
            str(rng.choice(STATES)),
            str(rng.choice(TREK_TYPES)),
            str(rng.choice(DIFFICULTIES)),
            str(rng.choice(SEASONS)),
            f"{int(rng.integers(1, 9))} days",
            f"{int(rng.integers(4, 80))} km",
            f"{int(rng.integers(900, 6200))} m",
            f"Synthetic description for trek {i}",
            str(rng.choice(GUIDE_VALUES)),
            str(rng.choice(SNOW_VALUES)),
            f"{int(rng.integers(8, 16))}+",
            "Boots, rain jacket, water bottle",
            f"https://res.cloudinary.com/demo/image/upload/trek_{i}.jpg",
        ])
    return out


def build_header(seed: int = 42) -> list[str]:
    rng = np.random.default_rng(seed)
    header = [str(rng.choice(variants)) for variants in HEADER_VARIANTS.values()]
    header.append("")  # 画像URL列は見出しなし
    return header


def create_excel_file(output_path: Path, rows: int, seed: int = 42, sheet: str = "Treks") -> None:
    """Write header + rows to the first sheet of ``output_path``."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    sheet_data = [build_header(seed)] + generate_trek_rows(rows, seed)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(sheet_data).to_excel(writer, sheet_name=sheet, header=False, index=False)
    print(f"Created Excel file: {output_path}")
    print(f"  Sheet: {sheet}")
    print(f"  Rows: {rows} (+ 1 header row)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic trek spreadsheet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/treks.xlsx
  %(prog)s data/large.xlsx --rows 50000 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output Excel file path")
    parser.add_argument("--rows", type=int, default=200, help="Number of data rows (default: 200)")
    parser.add_argument("--sheet", default="Treks", help="Sheet name (default: Treks)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    try:
        create_excel_file(args.output, args.rows, args.seed, args.sheet)
    except OSError as e:
        print(f"Error generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
