"""Command line interface for importing a contact CSV into a store."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import ConfigurationError, ImportSettings, load_configuration
from .errors import BatchImportError, ContactImportError, ImportCancelledError
from .factory import build_contact_store
from .ingestion.exporters import REPORT_SUFFIXES, export_import_report
from .ingestion.parser import CSV_MODES
from .io import read_import_text
from .models import ImportResult
from .orchestrator import ImportOrchestrator
from .orchestrator.progress import log_progress

LOGGER = logging.getLogger(__name__)


def build_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description="Import contacts from a CSV file into a store's audience")
    parser.add_argument("input", help="Path to the contact file (CSV or XLSX)")
    parser.add_argument("--store-id", required=True, help="Identifier of the store receiving the contacts")
    parser.add_argument("--admin-id", required=True, help="Identifier of the admin performing the import")
    parser.add_argument(
        "--config",
        help="Path to the import configuration file (YAML or JSON)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Number of contacts sent to the store per call (default 500)",
    )
    parser.add_argument(
        "--csv-mode",
        choices=list(CSV_MODES),
        default=None,
        help="'quoted' honours quoted fields; 'legacy' splits on every comma",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and validate the file without contacting the store",
    )
    parser.add_argument(
        "--report",
        help="Optional CSV/XLSX path where rejected rows, store errors and warnings are written",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _write_report(path: str | None, result: ImportResult) -> bool:
    if not path:
        return True
    try:
        destination = export_import_report(result, path)
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not write import report to %s: %s", path, exc)
        return False
    LOGGER.info("Import report written to %s", destination.resolve())
    return True


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    try:
        config = load_configuration(args.config) if args.config else {}
        settings = ImportSettings.from_config(config).override(batch_size=args.batch_size, csv_mode=args.csv_mode)
        store = build_contact_store(config)
    except ConfigurationError as exc:
        LOGGER.error("%s", exc)
        return 2

    if args.report and Path(args.report).suffix.lower() not in REPORT_SUFFIXES:
        LOGGER.error("Unsupported report format %s; expected one of %s", args.report, ", ".join(REPORT_SUFFIXES))
        return 2

    try:
        text = read_import_text(args.input)
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not read %s: %s", args.input, exc)
        return 1

    orchestrator = ImportOrchestrator(store, batch_size=settings.batch_size, csv_mode=settings.csv_mode)

    try:
        if args.dry_run:
            preview = orchestrator.preview(text)
            LOGGER.info(
                "Dry run: %s valid contacts, %s rejected rows, %s warnings",
                len(preview.records),
                len(preview.rejected),
                len(preview.warnings),
            )
            report_ok = _write_report(args.report, ImportResult(rejected=preview.rejected, warnings=preview.warnings))
            return 0 if report_ok else 1

        result = orchestrator.import_text(
            text,
            store_id=args.store_id,
            admin_user_id=args.admin_id,
            progress_callback=log_progress,
        )
    except (BatchImportError, ImportCancelledError) as exc:
        LOGGER.error("Import stopped: %s", exc)
        _write_report(args.report, exc.partial_result)
        return 1
    except ContactImportError as exc:
        LOGGER.error("Import failed: %s", exc)
        return 1

    LOGGER.info("Import finished: %s", result.summary())
    for message in result.errors:
        LOGGER.warning("Store rejected %s", message)
    return 0 if _write_report(args.report, result) else 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
