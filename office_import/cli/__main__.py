from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from office_import.config.loader import ConfigError, load_config
from office_import.excel.normalizer import normalize_records
from office_import.excel.reader import read_office_sheet
from office_import.logging.init import enable_debug, log_summary, setup_logging
from office_import.models.config_models import AppConfig
from office_import.models.import_result import ImportResult
from office_import.services.session import ImplementationSession
from office_import.services.summary import render_status_report, render_summary_line
from office_import.tools.router import ToolRouter, serve

"""CLI entrypoint.

    python -m office_import.cli [--debug] [--config PATH] import  OFFICES.xlsx
    python -m office_import.cli [--debug] [--config PATH] license SCRIPT.sql
    python -m office_import.cli [--debug] [--config PATH] status
    python -m office_import.cli [--debug] [--config PATH] inspect OFFICES.xlsx
    python -m office_import.cli [--debug] [--config PATH] serve

Exit codes: 0 success, 2 partial (validation abort, rejected rows or nothing
imported), 1 fatal (config error, unreadable input, database unavailable).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = Path("config/import.yml")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True: .env values win over variables already in the environment,
    so connection settings in .env take precedence.
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="office-import", description="Excel -> PostgreSQL office importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to import.yml")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Validate and import an office spreadsheet")
    imp.add_argument("source", type=Path)
    lic = sub.add_parser("license", help="Run the SQL licensing script")
    lic.add_argument("script", type=Path)
    sub.add_parser("status", help="Show office / employee / client row counts")
    ins = sub.add_parser("inspect", help="Print normalized sample rows then exit (no database)")
    ins.add_argument("source", type=Path)
    ins.add_argument("--rows", type=int, default=3, help="Number of sample rows")
    sub.add_parser("serve", help="Answer JSON tool requests on stdin/stdout")
    return p.parse_args(argv)


def _exit_code(result: ImportResult) -> int:
    if any(e.field == "general" for e in result.errors):
        return EXIT_FATAL
    if not result.success or result.critical_errors or any(e.field == "database" for e in result.errors):
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _run_import(cfg: AppConfig, source: Path) -> int:
    logger = setup_logging()
    if not source.exists():
        logger.error(f"file not found: {source}")
        return EXIT_FATAL
    with ImplementationSession.from_config(cfg) as session:
        result = session.import_office_records(source)

    logger.info(result.message)
    for name, code in (result.generated_codes or {}).items():
        logger.info(f"generated code {code} for '{name}'")
    for err in result.errors:
        line = f"row={err.row} field={err.field} {err.message}"
        if err.is_critical:
            logger.error(line)
        else:
            logger.warning(line)

    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return _exit_code(result)


def _run_license(cfg: AppConfig, script: Path) -> int:
    logger = setup_logging()
    with ImplementationSession.from_config(cfg) as session:
        result = session.run_licensing_script(script)
    if result.success:
        logger.info(result.message)
        return EXIT_SUCCESS_ALL
    logger.error(result.message)
    return EXIT_FATAL


def _run_status(cfg: AppConfig) -> int:
    logger = setup_logging()
    try:
        with ImplementationSession.from_config(cfg) as session:
            status = session.get_status()
    except Exception as e:
        logger.error(f"status: {e}")
        return EXIT_FATAL
    for line in render_status_report(status).splitlines():
        if line:
            logger.info(line)
    return EXIT_SUCCESS_ALL


def _inspect_data(cfg: AppConfig, source: Path, rows: int) -> int:
    settings = cfg.settings
    try:
        raw = read_office_sheet(source, skip_rows=settings.skip_rows, row_offset=settings.data_row_offset)
    except Exception as e:
        print(f"inspect: read_error: {e}")
        return EXIT_FATAL
    records = normalize_records(raw, settings.null_sentinels)
    print(f"FILE: {source.name} rows={len(records)}")
    if raw:
        print(f"  columns={list(raw[0].values.keys())}")
    for record in records[:rows]:
        print("    sample_row=", json.dumps({"row": record.row_number, **record.column_values()}, ensure_ascii=False))
    return EXIT_SUCCESS_ALL


def _run_serve(cfg: AppConfig) -> int:
    router = ToolRouter(ImplementationSession(cfg.settings, cfg.tables))
    try:
        serve(router, sys.stdin, sys.stdout)
    finally:
        router.session.close()
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # Only read sys.argv when argv is None: an explicit [] must not pick up pytest's own args
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    # stdout carries the JSON protocol in serve mode
    logger = setup_logging(sys.stderr if args.command == "serve" else None)
    if args.debug:
        enable_debug()

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "import":
        return _run_import(cfg, args.source)
    if args.command == "license":
        return _run_license(cfg, args.script)
    if args.command == "status":
        return _run_status(cfg)
    if args.command == "inspect":
        return _inspect_data(cfg, args.source, args.rows)
    return _run_serve(cfg)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
