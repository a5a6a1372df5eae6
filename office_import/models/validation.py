from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Validation finding model.

Findings are data, not exceptions: they travel inside ImportResult. Each one
carries an explicit severity so that control flow (abort vs. continue) never
depends on message text.
"""

__all__ = [
    "Severity",
    "ErrorCategory",
    "ValidationError",
]


class Severity(Enum):
    """CRITICAL aborts the run before persistence; ADVISORY is reported only."""
    CRITICAL = "critical"
    ADVISORY = "advisory"


class ErrorCategory(Enum):
    STRUCTURAL = "structural"  # missing code / description
    CONSISTENCY = "consistency"  # duplicate code within the batch
    CONSTRAINT = "constraint"  # length overruns
    PERSISTENCE = "persistence"  # store rejected one insert
    INFRASTRUCTURE = "infrastructure"  # unreadable file, connection fault


@dataclass(frozen=True)
class ValidationError:
    """One finding about one row (row=0 when the row is unknown).

    `field` is the spreadsheet header of the offending attribute, or a
    synthetic name: "database", "general" or "script".
    """
    row: int
    field: str
    value: Any
    message: str
    severity: Severity = Severity.ADVISORY
    category: ErrorCategory = ErrorCategory.STRUCTURAL

    @property
    def is_critical(self) -> bool:
        return self.severity is Severity.CRITICAL

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row,
            "field": self.field,
            "value": self.value,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
        }
