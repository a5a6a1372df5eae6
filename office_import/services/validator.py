from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..models.config_models import DEFAULT_TEMPLATE_CODES
from ..models.office_fields import OFFICE_FIELDS, FieldSpec
from ..models.office_record import OfficeRecord
from ..models.validation import ErrorCategory, Severity, ValidationError

"""Office record validator.

Rules are evaluated per record in file order and, within a record, rule by rule
across the field table:

  presence   - required field missing            -> CRITICAL
             - auto-generated field missing      -> ADVISORY
  uniqueness - value already seen in this batch  -> CRITICAL (first seen wins)
  length     - value longer than max_length      -> ADVISORY

Each rule carries its severity explicitly; nothing downstream inspects message
text to decide whether a finding blocks the run.
"""

__all__ = [
    "ValidationRule",
    "RULES",
    "validate_offices",
    "has_critical",
]


@dataclass
class _BatchState:
    seen: dict[str, set[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationRule:
    name: str
    severity: Severity
    category: ErrorCategory
    applies: Callable[[FieldSpec], bool]
    # (spec, value, state) -> message, or None when the value passes
    check: Callable[[FieldSpec, Any, _BatchState], str | None]


def _missing_required(spec: FieldSpec, value: Any, state: _BatchState) -> str | None:
    if value is None:
        return f"{spec.display_name} is required"
    return None


def _missing_generated(spec: FieldSpec, value: Any, state: _BatchState) -> str | None:
    if value is None:
        return f"{spec.display_name} is required and will be auto-generated if missing"
    return None


def _duplicate(spec: FieldSpec, value: Any, state: _BatchState) -> str | None:
    if value is None:
        return None
    seen = state.seen.setdefault(spec.attr, set())
    message = f"Duplicate {spec.display_name}: {value}" if value in seen else None
    seen.add(value)
    return message


def _too_long(spec: FieldSpec, value: Any, state: _BatchState) -> str | None:
    if value is not None and spec.max_length is not None and len(value) > spec.max_length:
        return f"{spec.display_name} must be {spec.max_length} characters or less"
    return None


RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        "generated_missing", Severity.ADVISORY, ErrorCategory.STRUCTURAL,
        lambda s: s.auto_generated, _missing_generated,
    ),
    ValidationRule(
        "required_missing", Severity.CRITICAL, ErrorCategory.STRUCTURAL,
        lambda s: s.required, _missing_required,
    ),
    ValidationRule(
        "duplicate", Severity.CRITICAL, ErrorCategory.CONSISTENCY,
        lambda s: s.unique, _duplicate,
    ),
    ValidationRule(
        "max_length", Severity.ADVISORY, ErrorCategory.CONSTRAINT,
        lambda s: s.max_length is not None, _too_long,
    ),
)


def validate_offices(
    records: Iterable[OfficeRecord],
    template_codes: frozenset[str] | set[str] = DEFAULT_TEMPLATE_CODES,
    fields: Sequence[FieldSpec] = OFFICE_FIELDS,
    rules: Sequence[ValidationRule] = RULES,
) -> list[ValidationError]:
    """Validate normalized records, returning findings in file order.

    Records whose office code is a header/template sentinel are skipped.
    """
    errors: list[ValidationError] = []
    state = _BatchState()
    for record in records:
        if record.office_code in template_codes:
            continue
        for rule in rules:
            for spec in fields:
                if not rule.applies(spec):
                    continue
                value = getattr(record, spec.attr)
                message = rule.check(spec, value, state)
                if message is None:
                    continue
                errors.append(
                    ValidationError(
                        row=record.row_number,
                        field=spec.header,
                        value=value,
                        message=message,
                        severity=rule.severity,
                        category=rule.category,
                    )
                )
    return errors


def has_critical(errors: Iterable[ValidationError]) -> bool:
    return any(e.is_critical for e in errors)
