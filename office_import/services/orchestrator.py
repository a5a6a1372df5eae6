from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..db.office_insert import persist_offices
from ..excel.normalizer import normalize_records
from ..excel.reader import RawRecord, read_office_sheet
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportSettings
from ..models.import_result import ImportResult
from ..models.validation import ErrorCategory, Severity, ValidationError
from .code_reconciler import reconcile_codes
from .progress import ProgressTracker
from .validator import validate_offices

"""Office import orchestration.

Stages, strictly sequential:

    ingest -> normalize (drop blank rows) -> validate -> abort on critical
    -> filter (has description, not a template row) -> reconcile codes
    -> persist row by row -> aggregate

Validation findings travel in the returned ImportResult. Exceptions raised
while reading the file or talking to the store are caught here, and only
here, and turned into a single `general` finding.
"""

__all__ = [
    "RowReader",
    "import_offices",
]

logger = logging.getLogger(__name__)

RowReader = Callable[..., Sequence[RawRecord]]


def _elapsed(start: datetime) -> float:
    return (datetime.now(UTC) - start).total_seconds()


def _flush(error_log: ErrorLogBuffer | None, file_name: str, errors: Sequence[ValidationError]) -> None:
    if error_log is None or not errors:
        return
    error_log.extend_from(file_name, errors)
    try:
        path = error_log.flush()
    except OSError as e:
        # error log output must not change the import outcome
        logger.warning("failed to write error log: %s", e)
        return
    if path is not None:
        logger.info("error log written: %s", path)


def import_offices(
    source_path: Path | str,
    db: Any,
    settings: ImportSettings | None = None,
    *,
    reader: RowReader = read_office_sheet,
    error_log: ErrorLogBuffer | None = None,
) -> ImportResult:
    """Run the full office import for one spreadsheet.

    Args:
        source_path: Excel file with the office sheet
        db: connection handle exposing a `cursor()` context manager
            (DatabaseSession); only used once validation has passed
        settings: country id, row numbering, sentinels and target table
        reader: spreadsheet reader returning RawRecords
        error_log: optional JSON Lines buffer for critical / database / general errors

    Returns:
        ImportResult; success is True iff at least one record was inserted
    """
    settings = settings or ImportSettings()
    path = Path(source_path)
    start = datetime.now(UTC)
    try:
        raw_records = reader(path, skip_rows=settings.skip_rows, row_offset=settings.data_row_offset)
        records = [
            r for r in normalize_records(raw_records, settings.null_sentinels) if not r.is_blank()
        ]
        logger.debug("file=%s raw_rows=%d records=%d", path.name, len(raw_records), len(records))

        findings = validate_offices(records, settings.template_codes)
        critical = [e for e in findings if e.is_critical]
        if critical:
            logger.warning(
                "file=%s validation failed critical=%d total_findings=%d",
                path.name,
                len(critical),
                len(findings),
            )
            _flush(error_log, path.name, critical)
            return ImportResult(
                success=False,
                records_imported=0,
                errors=tuple(findings),
                message=f"Validation failed with {len(critical)} critical error(s)",
                elapsed_seconds=_elapsed(start),
            )

        offices = [
            r for r in records
            if r.has_description and r.office_code not in settings.template_codes
        ]
        generated = reconcile_codes(offices)
        for desc, code in generated.items():
            logger.debug("generated office code %s for %r", code, desc)

        with db.cursor() as cursor, ProgressTracker(len(offices)) as progress:
            outcome = persist_offices(
                cursor,
                offices,
                country_id=settings.country_id,
                table=settings.office_table,
                on_row=lambda _record, ok: progress.advance(ok),
            )
    except Exception as e:
        logger.error("file=%s import failed: %s", path.name, e)
        general = ValidationError(
            row=0,
            field="general",
            value="",
            message=str(e),
            severity=Severity.CRITICAL,
            category=ErrorCategory.INFRASTRUCTURE,
        )
        _flush(error_log, path.name, [general])
        return ImportResult(
            success=False,
            records_imported=0,
            errors=(general,),
            message=f"Failed to import offices: {e}",
            elapsed_seconds=_elapsed(start),
        )

    errors = [*findings, *outcome.errors]
    _flush(error_log, path.name, outcome.errors)
    logger.info(
        "file=%s imported=%d/%d generated=%d warnings=%d",
        path.name,
        outcome.records_imported,
        len(offices),
        len(generated),
        len(errors),
    )
    return ImportResult(
        success=outcome.records_imported > 0,
        records_imported=outcome.records_imported,
        errors=tuple(errors),
        message=f"Successfully imported {outcome.records_imported} of {len(offices)} office(s)",
        generated_codes=generated or None,
        records_attempted=len(offices),
        elapsed_seconds=_elapsed(start),
    )
