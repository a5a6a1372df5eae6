from __future__ import annotations

import logging

from office_import.models.office_record import OfficeRecord
from office_import.services.code_reconciler import (
    FALLBACK_BASE,
    base_code,
    next_free_code,
    reconcile_codes,
)


def _rec(row: int, code: str | None, desc: str | None) -> OfficeRecord:
    return OfficeRecord(row_number=row, office_code=code, office_desc=desc)


def test_base_code_strips_then_truncates():
    assert base_code("Cape Town Branch!!") == "CAPETOWNBR"
    assert base_code("acme corp") == "ACMECORP"
    assert base_code("Dépôt Nord-Est 2") == "DPTNORDEST"
    assert base_code("!!!") == FALLBACK_BASE


def test_next_free_code_appends_counter():
    assert next_free_code("ACMECORP", set()) == "ACMECORP"
    assert next_free_code("ACMECORP", {"ACMECORP"}) == "ACMECORP01"
    assert next_free_code("ACMECORP", {"ACMECORP", "ACMECORP01"}) == "ACMECORP02"
    assert next_free_code("CAPETOWNBR", {"CAPETOWNBR"}) == "CAPETOWN01"


def test_next_free_code_wide_counter_stays_within_limit():
    taken = {"SHORT"} | {f"SHORT{n:02d}" for n in range(1, 100)}
    code = next_free_code("SHORT", taken)
    assert code == "SHORT100"
    assert len(code) <= 10
    taken = {"LONGERBASE"} | {f"LONGERBA{n:02d}" for n in range(1, 100)}
    code = next_free_code("LONGERBASE", taken)
    assert code == "LONGERB100"


def test_reconcile_fills_missing_codes_in_place():
    records = [_rec(2, "HQ", "Head Office"), _rec(3, None, "Cape Town Branch!!")]
    generated = reconcile_codes(records)
    assert generated == {"Cape Town Branch!!": "CAPETOWNBR"}
    assert records[1].office_code == "CAPETOWNBR"
    assert records[0].office_code == "HQ"


def test_reconcile_collides_with_explicit_code():
    records = [_rec(2, "ACMECORP", "Acme HQ"), _rec(3, None, "Acme Corp")]
    generated = reconcile_codes(records)
    assert generated == {"Acme Corp": "ACMECORP01"}


def test_reconcile_explicit_code_later_in_file_still_reserved():
    records = [_rec(2, None, "Acme Corp"), _rec(3, "ACMECORP", "Acme HQ")]
    reconcile_codes(records)
    assert records[0].office_code == "ACMECORP01"


def test_reconcile_assigned_codes_participate_in_later_checks():
    records = [
        _rec(2, None, "Johannesburg North"),
        _rec(3, None, "Johannesburg South"),
        _rec(4, None, "Johannesburg East"),
    ]
    generated = reconcile_codes(records)
    codes = [r.office_code for r in records]
    assert codes == ["JOHANNESBU", "JOHANNES01", "JOHANNES02"]
    assert len(set(codes)) == len(codes)
    assert all(c is not None and len(c) <= 10 for c in codes)
    assert generated["Johannesburg East"] == "JOHANNES02"


def test_reconcile_skips_records_without_description():
    records = [_rec(2, None, None), _rec(3, None, "Durban")]
    generated = reconcile_codes(records)
    assert records[0].office_code is None
    assert generated == {"Durban": "DURBAN"}


def test_reconcile_is_deterministic():
    def batch():
        return [_rec(2, "ACMECORP", "Acme"), _rec(3, None, "Acme Corp"), _rec(4, None, "ACME-CORP")]

    first, second = batch(), batch()
    assert reconcile_codes(first) == reconcile_codes(second)
    assert [r.office_code for r in first] == [r.office_code for r in second] == [
        "ACMECORP",
        "ACMECORP01",
        "ACMECORP02",
    ]


def test_reconcile_shared_description_warns(caplog):
    records = [_rec(3, None, "Durban"), _rec(4, None, "Durban")]
    with caplog.at_level(logging.WARNING, logger="office_import"):
        generated = reconcile_codes(records)
    assert [r.office_code for r in records] == ["DURBAN", "DURBAN01"]
    assert generated == {"Durban": "DURBAN01"}
    (record,) = caplog.records
    assert record.getMessage() == "description 'Durban' already got code DURBAN; row 4 gets DURBAN01"


def test_reconcile_distinct_descriptions_do_not_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="office_import"):
        reconcile_codes([_rec(3, None, "Durban"), _rec(4, None, "Durban North")])
    assert caplog.records == []
