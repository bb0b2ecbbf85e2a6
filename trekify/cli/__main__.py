from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from trekify.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from trekify.db.trek_store import seed_treks
from trekify.excel.reader import SourceError, SourceMalformed, read_first_sheet
from trekify.ingest.header_resolver import resolve
from trekify.ingest.record_normalizer import normalize
from trekify.logging.error_log import ErrorLogBuffer, ErrorRecord
from trekify.logging.init import log_summary, set_debug, setup_logging
from trekify.models.config_models import DatabaseConfig, TrekifyConfig
from trekify.services.catalog import TrekCatalog
from trekify.services.ingestion import parse_duplicate_policy
from trekify.services.onboarding import onboarding_payload
from trekify.services.query import QueryError, filter_by_state, get_by_serial
from trekify.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (override) and the YAML config
- Resolve the source path (--source > EXCEL_DATA_PATH > config)
- Load the records through a TrekCatalog built from the cache section and
  print the SUMMARY line
- Optionally answer a query (--state / --id), inspect the sheet, print the
  onboarding payload, or seed PostgreSQL (--seed-db)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_NOT_FOUND = 2


@contextmanager
def _db_connection(db_cfg: DatabaseConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Provide a psycopg2 cursor; commit on success, rollback on error.

    接続情報の優先順位:
        1. DATABASE_URL / PGDSN (DSN 全体)
        2. 個別 PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        3. config の database セクション
    """
    import psycopg2

    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "trekify")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    conn = psycopg2.connect(dsn)
    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; values override the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="trekify", description="Trek spreadsheet ingestion")
    p.add_argument("--config", type=Path, default=None, help="YAML config path")
    p.add_argument("--source", type=Path, default=None, help="Override the source spreadsheet")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--inspect-data", action="store_true", help="Print headers & first records then exit")
    mode.add_argument("--onboarding", action="store_true", help="Print the onboarding payload as JSON")
    mode.add_argument("--state", default=None, help="Print treks whose state contains NAME")
    mode.add_argument("--id", type=int, default=None, dest="serial", help="Print the trek with this serial number")
    mode.add_argument("--seed-db", action="store_true", help="Seed the PostgreSQL treks table")
    p.add_argument("--replace", action="store_true", help="With --seed-db: replace existing rows")
    args = p.parse_args(argv)
    if args.replace and not args.seed_db:
        p.error("--replace requires --seed-db")
    return args


def _resolve_config(args: argparse.Namespace) -> TrekifyConfig:
    """Load the config file, tolerating its absence when the source comes from
    --source or EXCEL_DATA_PATH.

    Source precedence: --source > EXCEL_DATA_PATH > config source_path.
    """
    if args.source is not None:
        override = str(args.source)
    else:
        override = os.getenv("EXCEL_DATA_PATH") or None

    config_path = args.config or DEFAULT_CONFIG_PATH
    if not config_path.exists() and override is not None:
        cfg = TrekifyConfig(source_path=override)
    else:
        cfg = load_config(config_path)

    return dataclasses.replace(cfg, source_path=override or cfg.source_path)


def _print_json(obj: Any) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def _record_failure(error_log: ErrorLogBuffer, source: Path, sheet: str, error_type: str, message: str) -> None:
    error_log.append(ErrorRecord.create(source.name, sheet, -1, error_type, message))
    error_log.flush()


def _inspect_data(source: Path, cfg: TrekifyConfig) -> int:
    sheet = read_first_sheet(source)
    index = resolve(sheet.header, parse_duplicate_policy(cfg.duplicate_headers))
    print(f"FILE: {source.name}")
    print(f"  SHEET: {sheet.sheet_name} cols={[c.as_text() for c in sheet.header]}")
    print(f"  header_index={index}")
    sample = []
    for position, row in enumerate(sheet.rows, start=1):
        record = normalize(row, index, position)
        if record is not None:
            sample.append(record.to_dict())
        if len(sample) >= 3:
            break
    print("    sample_records=", sample)
    return EXIT_SUCCESS


def _run_query(args: argparse.Namespace, catalog: TrekCatalog, logger: logging.Logger) -> int:
    records = catalog.records()
    if args.state is not None:
        try:
            matches = filter_by_state(records, args.state)
        except QueryError as e:
            logger.error(f"query: {e}")
            return EXIT_FATAL
        if not matches:
            logger.warning(f"no treks found for state: {args.state}")
            return EXIT_NOT_FOUND
        _print_json([r.to_dict() for r in matches])
        return EXIT_SUCCESS

    record = get_by_serial(records, args.serial)
    if record is None:
        logger.warning(f"trek not found: {args.serial}")
        return EXIT_NOT_FOUND
    _print_json(record.to_dict())
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.onboarding:
        _print_json(onboarding_payload())
        return EXIT_SUCCESS

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    source = Path(cfg.source_path)
    error_log = ErrorLogBuffer()
    logger.info(f"Reading trek data from: {source}")
    catalog = TrekCatalog.from_config(source, cfg.cache, duplicate_policy=cfg.duplicate_headers)

    try:
        if args.inspect_data:
            return _inspect_data(source, cfg)
        catalog.records()
    except SourceError as e:
        error_type = "SOURCE_MALFORMED" if isinstance(e, SourceMalformed) else "SOURCE_UNAVAILABLE"
        logger.error(f"source: {e}")
        _record_failure(error_log, source, "", error_type, str(e))
        return EXIT_FATAL

    result = catalog.last_result
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if args.state is not None or args.serial is not None:
        return _run_query(args, catalog, logger)

    if args.seed_db:
        try:
            with _db_connection(cfg.database) as cur:
                seeded = seed_treks(
                    cur,
                    result.records,
                    cfg.database.table,
                    replace=args.replace,
                )
        except Exception as e:  # StoreError / psycopg2.Error (接続失敗含む)
            logger.error(f"seed: {e}")
            _record_failure(error_log, source, result.sheet_name, "DB_EXPORT_FAILED", str(e))
            return EXIT_FATAL
        logger.info(f"mode=seed table={seeded.table} inserted={seeded.inserted_rows} skipped={seeded.skipped}")

    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
