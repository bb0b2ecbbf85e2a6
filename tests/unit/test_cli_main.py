from __future__ import annotations

import json
from pathlib import Path

import pytest

import trekify.cli.__main__ as cli_mod
from trekify.cli import main as cli_main
from trekify.db.trek_store import SeedResult, StoreError


def _json_tail(out: str):
    """Parse the JSON document printed after the log lines."""
    lines = out.splitlines()
    start = next(i for i, line in enumerate(lines) if line in ("[", "{", "[]"))
    return json.loads("\n".join(lines[start:]))


def test_cli_default_run_prints_summary(write_config, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO Reading trek data from: data/treks.xlsx" in out
    assert "SUMMARY source=treks.xlsx sheet=Treks rows=5 records=4 skipped=1 elapsed_sec=" in out


def test_cli_onboarding_needs_no_config(temp_workdir: Path, capsys):
    code = cli_main(["--onboarding"])
    slides = json.loads(capsys.readouterr().out)
    assert code == 0
    assert [s["title"] for s in slides] == [
        "Welcome to Trekify!", "Discover Your Path", "Track Your Journey",
    ]
    assert slides[0]["isVideo"] is True


def test_cli_missing_config(temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: config file not found" in out


def test_cli_source_flag_without_config(sample_excel: Path, capsys):
    code = cli_main(["--source", str(sample_excel), "--id", "2"])
    out = capsys.readouterr().out
    assert code == 0
    record = _json_tail(out)
    assert record["trekName"] == "Hampta Pass"
    assert record["guideNeeded"] == "YES"


def test_cli_env_source_overrides_config(write_config, make_excel, monkeypatch, capsys):
    other = make_excel(
        [["Sr No.", "Trek Name", "State"], [7, "Goechala", "Sikkim"]], name="other.xlsx"
    )
    monkeypatch.setenv("EXCEL_DATA_PATH", str(other))
    code = cli_main(["--state", "sikkim"])
    out = capsys.readouterr().out
    assert code == 0
    assert [r["trekName"] for r in _json_tail(out)] == ["Goechala"]


def test_cli_state_query(write_config, capsys):
    code = cli_main(["--state", "UTTARAKHAND"])
    records = _json_tail(capsys.readouterr().out)
    assert code == 0
    assert [r["trekName"] for r in records] == ["Valley of Flowers", "Kedarkantha"]


def test_cli_state_not_found(write_config, capsys):
    code = cli_main(["--state", "Kerala"])
    out = capsys.readouterr().out
    assert code == 2
    assert "WARN no treks found for state: Kerala" in out


def test_cli_blank_state_is_fatal(write_config, capsys):
    code = cli_main(["--state", "   "])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR query: state name is required" in out


def test_cli_id_not_found(write_config, capsys):
    code = cli_main(["--id", "99"])
    out = capsys.readouterr().out
    assert code == 2
    assert "WARN trek not found: 99" in out


def test_cli_inspect_data(write_config, capsys):
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: treks.xlsx" in out
    assert "SHEET: Treks" in out
    assert "'trekName': 1" in out
    assert "sample_records=" in out
    assert "SUMMARY" not in out


def test_cli_debug_flag(write_config, capsys):
    code = cli_main(["--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG row 4 skipped: missing trek name or state" in out


def test_cli_missing_source_writes_error_log(temp_workdir: Path, capsys):
    code = cli_main(["--source", "data/missing.xlsx"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR source:" in out
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    entry = json.loads(logs[0].read_text(encoding="utf-8").strip())
    assert entry["error_type"] == "SOURCE_UNAVAILABLE"
    assert entry["source"] == "missing.xlsx"
    assert entry["row"] == -1


def test_cli_empty_csv_is_malformed(temp_workdir: Path, capsys):
    csv = temp_workdir / "data" / "empty.csv"
    csv.write_text("", encoding="utf-8")
    code = cli_main(["--source", str(csv)])
    assert code == 1
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    entry = json.loads(logs[0].read_text(encoding="utf-8").strip())
    assert entry["error_type"] == "SOURCE_MALFORMED"


class _FakeConnection:
    def __init__(self):
        self.entered = 0

    def __call__(self, db_cfg):
        return self

    def __enter__(self):
        self.entered += 1
        return object()

    def __exit__(self, exc_type, exc, tb):
        return False


def test_cli_seed_db(write_config, monkeypatch, capsys):
    seen = {}

    def fake_seed(cur, records, table, *, replace=False):
        seen["count"] = len(records)
        seen["table"] = table
        seen["replace"] = replace
        return SeedResult(table=table, inserted_rows=len(records), skipped=False)

    monkeypatch.setattr(cli_mod, "_db_connection", _FakeConnection())
    monkeypatch.setattr(cli_mod, "seed_treks", fake_seed)
    code = cli_main(["--seed-db", "--replace"])
    out = capsys.readouterr().out
    assert code == 0
    assert seen == {"count": 4, "table": "treks", "replace": True}
    assert "INFO mode=seed table=treks inserted=4 skipped=False" in out


def test_cli_seed_db_failure(write_config, temp_workdir: Path, monkeypatch, capsys):
    def failing_seed(cur, records, table, *, replace=False):
        raise StoreError("seeding treks failed: connection refused")

    monkeypatch.setattr(cli_mod, "_db_connection", _FakeConnection())
    monkeypatch.setattr(cli_mod, "seed_treks", failing_seed)
    code = cli_main(["--seed-db"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR seed: seeding treks failed" in out
    entry = json.loads(next((temp_workdir / "logs").glob("errors-*.log")).read_text(encoding="utf-8"))
    assert entry["error_type"] == "DB_EXPORT_FAILED"
    assert entry["sheet"] == "Treks"


def test_cli_env_source_without_config(make_excel, monkeypatch, capsys):
    excel = make_excel([["Sr No.", "Trek Name", "State"], [3, "Brahmatal", "Uttarakhand"]])
    monkeypatch.setenv("EXCEL_DATA_PATH", str(excel))
    code = cli_main(["--id", "3"])
    out = capsys.readouterr().out
    assert code == 0
    assert "ERROR config" not in out
    assert _json_tail(out)["trekName"] == "Brahmatal"


def test_cli_builds_catalog_from_cache_config(write_config, monkeypatch, capsys):
    seen = {}
    original = cli_mod.TrekCatalog.from_config

    def spy(source_path, cache, **kwargs):
        catalog = original(source_path, cache, **kwargs)
        seen["catalog"] = catalog
        return catalog

    monkeypatch.setattr(cli_mod.TrekCatalog, "from_config", spy)
    code = cli_main(["--state", "Uttarakhand"])
    capsys.readouterr()
    assert code == 0
    catalog = seen["catalog"]
    assert catalog.max_age_seconds == 60
    assert catalog.reload_on_change is True
    assert catalog.generation == 1  # クエリはキャッシュ済みスナップショットを使う


def test_cli_replace_requires_seed_db(write_config, capsys):
    with pytest.raises(SystemExit) as e:
        cli_main(["--replace"])
    assert e.value.code == 2
    assert "--replace requires --seed-db" in capsys.readouterr().err
