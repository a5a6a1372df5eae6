from __future__ import annotations

import pytest

from office_import.models.office_record import OfficeRecord
from office_import.models.validation import ErrorCategory, Severity
from office_import.services.validator import RULES, has_critical, validate_offices


def _rec(row: int, code: str | None, desc: str | None) -> OfficeRecord:
    return OfficeRecord(row_number=row, office_code=code, office_desc=desc)


def test_valid_batch_has_no_findings():
    errors = validate_offices([_rec(2, "HQ", "Head Office"), _rec(3, "CPT", "Cape Town")])
    assert errors == []


def test_missing_code_is_advisory():
    errors = validate_offices([_rec(2, None, "Head Office")])
    assert len(errors) == 1
    err = errors[0]
    assert err.row == 2
    assert err.field == "OfficeCode"
    assert err.value is None
    assert err.message == "Office Code is required and will be auto-generated if missing"
    assert err.severity is Severity.ADVISORY
    assert err.category is ErrorCategory.STRUCTURAL
    assert not has_critical(errors)


def test_missing_description_is_critical():
    errors = validate_offices([_rec(3, "HQ", None)])
    assert [e.message for e in errors] == ["Office Name is required"]
    assert errors[0].field == "OfficeDesc"
    assert errors[0].is_critical
    assert has_critical(errors)


def test_duplicate_code_first_seen_wins():
    errors = validate_offices([_rec(2, "HQ", "Head Office"), _rec(3, "CPT", "Cape Town"), _rec(4, "HQ", "Other")])
    assert len(errors) == 1
    dup = errors[0]
    assert dup.row == 4
    assert dup.message == "Duplicate Office Code: HQ"
    assert dup.severity is Severity.CRITICAL
    assert dup.category is ErrorCategory.CONSISTENCY


def test_third_occurrence_also_reported():
    errors = validate_offices([_rec(2, "A", "a"), _rec(3, "A", "b"), _rec(4, "A", "c")])
    assert [e.row for e in errors] == [3, 4]


def test_length_overruns_are_advisory():
    errors = validate_offices([_rec(2, "ABCDEFGHIJK", "x" * 101)])
    assert [e.message for e in errors] == [
        "Office Code must be 10 characters or less",
        "Office Name must be 100 characters or less",
    ]
    assert all(e.category is ErrorCategory.CONSTRAINT for e in errors)
    assert not has_critical(errors)


def test_boundary_lengths_pass():
    assert validate_offices([_rec(2, "A" * 10, "d" * 100)]) == []


def test_template_rows_are_skipped():
    records = [
        _rec(2, "OfficeCode", "OfficeDesc"),
        _rec(3, "Data", None),
        _rec(4, "Context", None),
        _rec(5, "HQ", "Head Office"),
    ]
    assert validate_offices(records) == []


def test_findings_ordered_by_row_then_rule():
    errors = validate_offices([_rec(2, "LONGCODE1234", "Head"), _rec(3, None, None), _rec(4, "LONGCODE1234", "x")])
    assert [(e.row, e.field) for e in errors] == [
        (2, "OfficeCode"),
        (3, "OfficeCode"),
        (3, "OfficeDesc"),
        (4, "OfficeCode"),  # duplicate
        (4, "OfficeCode"),  # length
    ]


@pytest.mark.parametrize(
    "rule_name, severity",
    [
        ("generated_missing", Severity.ADVISORY),
        ("required_missing", Severity.CRITICAL),
        ("duplicate", Severity.CRITICAL),
        ("max_length", Severity.ADVISORY),
    ],
)
def test_rule_severity_is_explicit(rule_name, severity):
    rule = next(r for r in RULES if r.name == rule_name)
    records = [_rec(2, None, None), _rec(3, "TOOLONGCODE1", "x" * 120), _rec(4, "TOOLONGCODE1", "y")]
    produced = validate_offices(records, rules=[rule])
    assert produced, f"rule {rule_name} produced no finding"
    assert {e.severity for e in produced} == {severity}
