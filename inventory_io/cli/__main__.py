from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path

import pandas as pd
import psycopg2
from dotenv import load_dotenv

from inventory_io.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from inventory_io.csvio.parser import read_csv_file
from inventory_io.db.store import DeviceFilter, DeviceStore, StoreError
from inventory_io.logging.error_log import ErrorLogBuffer
from inventory_io.logging.init import get_logger, log_summary, setup_logging
from inventory_io.models.config_models import InventoryConfig
from inventory_io.models.device import DeviceStatus
from inventory_io.services.devices import DeviceValidationError, build_device_record, save_device
from inventory_io.services.importer import export_devices, import_devices
from inventory_io.services.labels import select_labels, write_label_sheet
from inventory_io.services.reconciler import ImportValidationError
from inventory_io.services.summary import render_summary_line

"""CLI entrypoint.

Commands: import, preview, export, list, add, edit, delete, labels.
Every command except ``preview`` needs config/inventory.yml and a database.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_VALIDATION = 2

PREVIEW_ROWS = 10


@contextmanager
def _db_connection(cfg: InventoryConfig):  # pragma: no cover (thin wrapper)
    """Yield a psycopg2 cursor; commit on success, roll back on any error.

    Connection parameter priority:
        1. DATABASE_URL / PGDSN (environment, .env already loaded with override)
        2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        3. the ``database`` section of config/inventory.yml
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    try:
        conn = psycopg2.connect(dsn)
    except psycopg2.Error as e:
        raise StoreError(f"connection failed: {e}") from e
    try:
        conn.autocommit = False
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv (override=True: .env wins over the process env)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--status", choices=sorted(DeviceStatus.values()), help="Filter by status")
    p.add_argument("--department", type=int, dest="department_id", help="Filter by department id")
    p.add_argument("--search", help="Substring of asset tag, serial number or model")


def _add_device_args(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--asset-tag", required=required)
    p.add_argument("--serial-no", required=required)
    p.add_argument("--status", default=None)
    p.add_argument("--model", default=None)
    p.add_argument("--brand", default=None)
    p.add_argument("--department-id", type=int, default=None)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="device-inventory", description="Device inventory CSV import/export")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import devices from CSV (upsert by asset tag)")
    imp.add_argument("csv", type=Path)
    imp.add_argument("--dry-run", action="store_true", help="Reconcile without writing")

    prev = sub.add_parser("preview", help="Parse a CSV file and show the first rows")
    prev.add_argument("csv", type=Path)
    prev.add_argument("--rows", type=int, default=PREVIEW_ROWS)

    exp = sub.add_parser("export", help="Export devices to CSV")
    exp.add_argument("--output", type=Path, default=None)
    _add_filter_args(exp)

    lst = sub.add_parser("list", help="List devices")
    _add_filter_args(lst)

    add = sub.add_parser("add", help="Add a device")
    _add_device_args(add, required=True)

    edit = sub.add_parser("edit", help="Edit a device")
    edit.add_argument("id")
    _add_device_args(edit, required=True)

    delete = sub.add_parser("delete", help="Soft delete devices")
    delete.add_argument("ids", nargs="+")

    labels = sub.add_parser("labels", help="Render printable QR labels")
    labels.add_argument("ids", nargs="+")
    labels.add_argument("--output", type=Path, default=Path("labels.html"))
    return p.parse_args(argv)


def _device_filter(args: argparse.Namespace) -> DeviceFilter:
    return DeviceFilter(status=args.status, department_id=args.department_id, search=args.search)


def _preview(args: argparse.Namespace, logger: logging.Logger) -> int:
    try:
        table = read_csv_file(args.csv)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"preview: {e}")
        return EXIT_FATAL
    print(f"FILE: {args.csv.name} rows={len(table)} cols={table.headers}")
    if len(table):
        print(table.to_frame().head(args.rows).to_string(index=False))
    return EXIT_SUCCESS


def _run_import(args: argparse.Namespace, store: DeviceStore, cfg: InventoryConfig) -> int:
    result = import_devices(
        args.csv,
        store,
        dry_run=args.dry_run,
        error_log=ErrorLogBuffer(Path(cfg.error_log_dir)),
    )
    # log_summary adds its own "SUMMARY " label
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_SUCCESS


def _run_list(args: argparse.Namespace, store: DeviceStore) -> int:
    devices = store.fetch_devices(_device_filter(args))
    if not devices:
        print("no devices")
        return EXIT_SUCCESS
    frame = pd.DataFrame(
        [
            {
                "id": d.id,
                "asset_tag": d.asset_tag,
                "serial_no": d.serial_no,
                "status": d.status,
                "model": d.model,
                "brand": d.brand,
                "department_id": d.department_id,
                "last_seen": d.last_seen,
            }
            for d in devices
        ]
    )
    print(frame.to_string(index=False))
    return EXIT_SUCCESS


def _run_command(args: argparse.Namespace, store: DeviceStore, cfg: InventoryConfig) -> int:
    logger = get_logger()
    if args.command == "import":
        return _run_import(args, store, cfg)
    if args.command == "export":
        target = args.output or Path(cfg.export_filename)
        export_devices(target, store, _device_filter(args))
        return EXIT_SUCCESS
    if args.command == "list":
        return _run_list(args, store)
    if args.command in ("add", "edit"):
        record = build_device_record(
            args.asset_tag,
            args.serial_no,
            status=args.status,
            model=args.model,
            brand=args.brand,
            department_id=args.department_id,
        )
        device_id = save_device(store, record, args.id if args.command == "edit" else None)
        print(device_id)
        return EXIT_SUCCESS
    if args.command == "delete":
        count = store.soft_delete_devices(args.ids)
        logger.info(f"deleted {count} device(s)")
        return EXIT_SUCCESS
    if args.command == "labels":
        devices = store.fetch_devices(DeviceFilter(ids=args.ids))
        requests = select_labels(devices, args.ids)
        if not requests:
            logger.error("labels: no matching devices")
            return EXIT_VALIDATION
        write_label_sheet(args.output, requests, cfg.labels)
        return EXIT_SUCCESS
    raise ValueError(f"unknown command: {args.command}")  # pragma: no cover


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] must not fall back to sys.argv (pytest flags)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    if args.command == "preview":
        return _preview(args, logger)

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        with _db_connection(cfg) as cur:
            return _run_command(args, DeviceStore(cur, cfg.tables), cfg)
    except (ImportValidationError, DeviceValidationError) as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_VALIDATION
    except StoreError as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
