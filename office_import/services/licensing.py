from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from ..models.import_result import LicensingResult
from ..models.validation import ErrorCategory, Severity, ValidationError

"""Licensing script runner.

The licensing script is a plain SQL file whose batches are separated by lines
holding only `GO` (any case, surrounding whitespace allowed). Batches run in
order on the session connection; the first failing batch stops the run.
"""

__all__ = [
    "split_batches",
    "run_licensing_script",
]

logger = logging.getLogger(__name__)

_BATCH_SEPARATOR = re.compile(r"^\s*GO\s*$", re.IGNORECASE | re.MULTILINE)


def split_batches(script: str) -> list[str]:
    """Split on GO lines, trim, drop empty batches."""
    return [b.strip() for b in _BATCH_SEPARATOR.split(script) if b.strip()]


def run_licensing_script(script_path: Path | str, db: Any) -> LicensingResult:
    path = Path(script_path)
    executed = 0
    try:
        batches = split_batches(path.read_text(encoding="utf-8"))
        with db.cursor() as cursor:
            for idx, batch in enumerate(batches, start=1):
                logger.debug("script=%s batch=%d/%d", path.name, idx, len(batches))
                cursor.execute(batch)
                executed += 1
    except Exception as e:
        logger.error("script=%s licensing failed: %s", path.name, e)
        return LicensingResult(
            success=False,
            batches_executed=executed,
            message=f"Failed to license database: {e}",
            errors=(
                ValidationError(
                    row=0,
                    field="script",
                    value="",
                    message=str(e),
                    severity=Severity.CRITICAL,
                    category=ErrorCategory.INFRASTRUCTURE,
                ),
            ),
        )
    logger.info("script=%s batches=%d executed", path.name, len(batches))
    return LicensingResult(
        success=True,
        batches_executed=len(batches),
        message=f"Database licensed successfully. Executed {len(batches)} SQL batches.",
    )
