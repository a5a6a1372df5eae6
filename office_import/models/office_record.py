from __future__ import annotations

import math
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any

from .office_fields import OFFICE_FIELDS

"""OfficeRecord model: the canonical unit of work of one import run.

Built from a normalized row mapping (see excel.normalizer). All descriptive
fields are text; spreadsheet numbers and dates are rendered as strings on
construction. Only `office_code` is ever mutated afterwards (reconciliation).
"""

__all__ = [
    "OfficeRecord",
    "as_text",
]


def as_text(value: Any) -> str | None:
    """Render a cell value as text. Blank strings and NaN count as missing."""
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return None
        # Excel stores every number as float: 1001.0 -> "1001"
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass
class OfficeRecord:
    """One office row after normalization (row_number = file row as the user sees it)."""
    row_number: int
    office_code: str | None = None
    office_desc: str | None = None
    postal_address: str | None = None
    business_address: str | None = None
    telephone: str | None = None
    fax: str | None = None
    bank: str | None = None
    branch: str | None = None
    branch_no: str | None = None
    bank_account: str | None = None
    registration_no: str | None = None
    tax_no: str | None = None
    url: str | None = None
    email: str | None = None

    @classmethod
    def from_mapping(cls, row_number: int, values: dict[str, Any]) -> OfficeRecord:
        known = {f.name for f in fields(cls)}
        kwargs = {
            spec.attr: as_text(values.get(spec.attr))
            for spec in OFFICE_FIELDS
            if spec.attr in known
        }
        return cls(row_number=row_number, **kwargs)

    @property
    def has_description(self) -> bool:
        return self.office_desc is not None

    def is_blank(self) -> bool:
        return all(getattr(self, spec.attr) is None for spec in OFFICE_FIELDS)

    def column_values(self) -> dict[str, str | None]:
        """DB column -> value for every declared office field."""
        return {spec.column: getattr(self, spec.attr) for spec in OFFICE_FIELDS}
