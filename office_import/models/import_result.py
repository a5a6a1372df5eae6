from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .validation import ValidationError

"""Result models returned by the import, licensing and status operations."""

__all__ = [
    "ImportResult",
    "LicensingResult",
    "ImplementationStatus",
]


@dataclass(frozen=True)
class ImportResult:
    """Terminal output of one office import run.

    success is True iff at least one record was persisted. generated_codes maps
    office description -> auto-generated code and is None when nothing was
    generated (or the run aborted before reconciliation).
    """
    success: bool
    records_imported: int
    errors: tuple[ValidationError, ...]
    message: str
    generated_codes: dict[str, str] | None = None
    records_attempted: int = 0
    elapsed_seconds: float = 0.0

    @property
    def critical_errors(self) -> list[ValidationError]:
        return [e for e in self.errors if e.is_critical]

    @property
    def warnings(self) -> list[ValidationError]:
        return [e for e in self.errors if not e.is_critical]

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "recordsImported": self.records_imported,
            "recordsAttempted": self.records_attempted,
            "errors": [e.to_dict() for e in self.errors],
            "message": self.message,
            "generatedCodes": dict(self.generated_codes) if self.generated_codes else None,
        }


@dataclass(frozen=True)
class LicensingResult:
    success: bool
    batches_executed: int
    message: str
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "batchesExecuted": self.batches_executed,
            "errors": [e.to_dict() for e in self.errors],
            "message": self.message,
        }


@dataclass(frozen=True)
class ImplementationStatus:
    offices: int
    employees: int
    clients: int
    status: str = "In Progress"
