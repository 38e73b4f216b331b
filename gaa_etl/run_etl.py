"""
ETL Pipeline Orchestrator

Coordinates the complete workflow for one workbook:
- Read match and player statistics sheets
- Validate each sheet through the six validation layers
- Transform valid sheets into match records
- Load each match-unit in its own transaction
- Aggregate counts, warnings and errors into an EtlResult
"""

import argparse
import json
import logging
import os
import sys
import threading
import time
from typing import List, Optional

from config.settings import Settings
from config.validation import ValidationConfig
from db.connection import DatabaseConnection
from db.repository import PostgresStore
from gaa_etl.extract import ExcelWorkbookReader
from gaa_etl.load import TransactionalLoader
from gaa_etl.models import (
    CANCELLED,
    FILE_NOT_FOUND,
    LOAD_FAILED,
    NO_SHEETS,
    READ_FAILED,
    EtlResult,
    RawSheetRecord,
)
from gaa_etl.transform import MatchTransformer
from gaa_etl.validators import ValidationPipeline

logger = logging.getLogger(__name__)


class EtlOrchestrator:
    """
    Orchestrates validation, transformation and loading of a workbook.

    Sheets are processed one at a time. A sheet with validation errors is
    skipped; a unit that fails to load is rolled back. Neither stops the
    remaining sheets.
    """

    def __init__(
        self,
        store,
        config: Optional[ValidationConfig] = None,
        home_team_name: str = "Drum",
        reader: Optional[ExcelWorkbookReader] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        """
        Initialize ETL orchestrator.

        Args:
            store: Transaction provider for the loader (e.g. PostgresStore)
            config: Validation thresholds
            home_team_name: Name of the tracked team
            reader: Workbook reader (defaults to ExcelWorkbookReader)
            cancel_event: Set to stop processing before the next unit
        """
        self.home_team_name = home_team_name
        self.reader = reader or ExcelWorkbookReader(home_team_name)
        self.pipeline = ValidationPipeline(config)
        self.transformer = MatchTransformer(home_team_name)
        self.loader = TransactionalLoader(store)
        self.cancel_event = cancel_event or threading.Event()

    @classmethod
    def from_settings(cls, settings: Settings, cancel_event: Optional[threading.Event] = None) -> "EtlOrchestrator":
        """Build an orchestrator backed by PostgreSQL from application settings."""
        return cls(
            store=PostgresStore(),
            config=settings.validation_config(),
            home_team_name=settings.HOME_TEAM_NAME,
            cancel_event=cancel_event,
        )

    def process(self, file_path: str) -> EtlResult:
        """
        Run the pipeline over a workbook.

        Args:
            file_path: Path to the workbook

        Returns:
            EtlResult; success is True only when no errors were recorded
        """
        started = time.monotonic()
        logger.info("=" * 60)
        logger.info(f"Starting ETL for {file_path}")
        logger.info("=" * 60)

        try:
            records = self.reader.read(file_path)
        except FileNotFoundError as e:
            result = EtlResult()
            result.add_error(FILE_NOT_FOUND, str(e), file=file_path)
            return self._finish(result, started)
        except ValueError as e:
            result = EtlResult()
            result.add_error(READ_FAILED, str(e), file=file_path)
            return self._finish(result, started)

        if not records:
            result = EtlResult()
            result.add_error(NO_SHEETS, "No match sheets found in workbook", file=file_path)
            return self._finish(result, started)

        return self.process_records(records, started=started)

    def process_records(self, records: List[RawSheetRecord], started: Optional[float] = None) -> EtlResult:
        """
        Validate, transform and load already-read sheets.

        Args:
            records: Sheets in processing order
            started: time.monotonic() value the duration is measured from

        Returns:
            EtlResult aggregated over all sheets
        """
        started = time.monotonic() if started is None else started
        result = EtlResult()

        for index, record in enumerate(records):
            if self.cancel_event.is_set():
                remaining = len(records) - index
                logger.warning(f"Cancelled with {remaining} sheets not processed")
                result.add_error(
                    CANCELLED,
                    f"Processing cancelled; {remaining} sheets not processed",
                    sheet=record.sheet_name,
                )
                break
            self._process_sheet(record, result)

        return self._finish(result, started)

    def _process_sheet(self, record: RawSheetRecord, result: EtlResult) -> None:
        logger.info(f"Processing sheet '{record.sheet_name}'")

        validation = self.pipeline.validate(record)
        result.warnings.extend(validation.warnings)
        if not validation.is_valid:
            result.errors.extend(validation.errors)
            result.sheets_rejected += 1
            logger.warning(
                f"Sheet '{record.sheet_name}' rejected with {len(validation.errors)} errors"
            )
            for issue in validation.errors:
                logger.debug(f"  {issue}")
            return

        try:
            match = self.transformer.transform(record)
        except ValueError as e:
            logger.error(f"Failed to transform '{record.sheet_name}': {e}")
            result.add_error(LOAD_FAILED, str(e), sheet=record.sheet_name)
            return

        load = self.loader.load_unit(match)
        if not load.success:
            result.errors.append(load.error)
            return

        result.units_processed += 1
        result.rows_created += load.rows_created
        for entity, count in load.references_created.items():
            result.references_created[entity] = result.references_created.get(entity, 0) + count

    def _finish(self, result: EtlResult, started: float) -> EtlResult:
        result.success = not result.errors
        result.duration_ms = int((time.monotonic() - started) * 1000)
        self._log_summary(result)
        return result

    def _log_summary(self, result: EtlResult) -> None:
        """Log ETL execution summary."""
        logger.info("=" * 60)
        logger.info(f"ETL {'completed successfully' if result.success else 'completed with errors'}")
        logger.info(f"Duration: {result.duration_ms / 1000:.2f} seconds")
        logger.info(f"Match units loaded: {result.units_processed}")
        logger.info(f"Rows created: {result.rows_created}")
        logger.info(f"Sheets rejected: {result.sheets_rejected}")
        if result.references_created:
            created = ", ".join(f"{k}={v}" for k, v in sorted(result.references_created.items()))
            logger.info(f"Reference rows created: {created}")
        logger.info(f"Warnings: {len(result.warnings)}")
        logger.info(f"Errors: {len(result.errors)}")
        for issue in result.errors:
            logger.info(f"  {issue}")
        logger.info("=" * 60)


def setup_logging(log_file: str = "logs/etl.log", level: str = "INFO") -> None:
    """
    Configure logging for ETL pipeline.

    Args:
        log_file: Path to log file
        level: Console log level
    """
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # File handler
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(formatter)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gaastat-etl",
        description="Validate and load a match statistics workbook into PostgreSQL.",
    )
    parser.add_argument("workbook", help="Path to the .xlsx workbook")
    parser.add_argument("--log-file", default=None, help="Log file path (default: LOG_FILE setting)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for ETL pipeline."""
    args = parse_args(argv)
    setup_logging(args.log_file or Settings.LOG_FILE, Settings.LOG_LEVEL)

    try:
        settings = Settings()
        DatabaseConnection.initialize(
            host=settings.DB_HOST,
            port=settings.DB_PORT,
            database=settings.DB_NAME,
            user=settings.DB_USER,
            password=settings.DB_PASSWORD,
            statement_timeout_ms=settings.DB_STATEMENT_TIMEOUT_MS,
        )
        orchestrator = EtlOrchestrator.from_settings(settings)
        result = orchestrator.process(args.workbook)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        DatabaseConnection.close_all()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
