from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..models.config_models import DEFAULT_NULL_SENTINELS
from ..models.office_fields import OFFICE_FIELDS, FieldSpec
from ..models.office_record import OfficeRecord
from .reader import RawRecord

"""Row normalizer: spreadsheet headers -> canonical office fields.

Pure functions, no validation. Sentinel strings ("NULL", "null", ...) become
None; every other value passes through unchanged.
"""

__all__ = [
    "normalize_row",
    "normalize_records",
]


def _sanitize(value: Any, null_sentinels: frozenset[str] | set[str]) -> Any:
    if isinstance(value, str) and value.strip().upper() in null_sentinels:
        return None
    return value


def normalize_row(
    raw: Mapping[str, Any],
    fields: Iterable[FieldSpec] = OFFICE_FIELDS,
    null_sentinels: frozenset[str] | set[str] = DEFAULT_NULL_SENTINELS,
) -> dict[str, Any]:
    """Map one raw row onto the configured fields (attr -> value).

    Headers that are not configured are dropped; configured headers missing
    from the row map to None.
    """
    return {spec.attr: _sanitize(raw.get(spec.header), null_sentinels) for spec in fields}


def normalize_records(
    raw_records: Iterable[RawRecord],
    null_sentinels: frozenset[str] | set[str] = DEFAULT_NULL_SENTINELS,
) -> list[OfficeRecord]:
    return [
        OfficeRecord.from_mapping(raw.row_number, normalize_row(raw.values, OFFICE_FIELDS, null_sentinels))
        for raw in raw_records
    ]
