from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .validation import ValidationError

"""ErrorRecord model for the JSON Lines error log.

One record per finding worth keeping after the run (critical validation
findings, persistence failures, infrastructure faults). row=-1 marks
file-level errors where no spreadsheet row applies.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Spreadsheet (or script) file name being processed
        row: Row number as seen in the file. -1 when unknown
        field: Offending field header, or a synthetic name ("database", "general")
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    field: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, field: str, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            field=field,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_validation_error(file: str, error: ValidationError) -> ErrorRecord:
        """Map a finding onto the log schema (CONSISTENCY_ERROR, PERSISTENCE_ERROR, ...)."""
        return ErrorRecord.create(
            file=file,
            row=error.row if error.row > 0 else -1,
            field=error.field,
            error_type=f"{error.category.name}_ERROR",
            message=error.message,
        )

    def to_json_line(self) -> str:
        # asdict keeps the key set fixed to the dataclass fields
        return json.dumps(asdict(self), ensure_ascii=False)
