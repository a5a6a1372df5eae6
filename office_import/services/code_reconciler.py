from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..models.office_fields import CODE_FIELD
from ..models.office_record import OfficeRecord

"""Office code reconciliation.

Fills every missing office code from the office description. Candidates are
checked against all codes of the batch (explicit ones and the ones assigned
earlier in the same pass), so no two records of one run share a code. Codes
already stored in the database are not consulted; such clashes surface as
insert failures.
"""

__all__ = [
    "CODE_LENGTH",
    "COUNTER_PREFIX_LENGTH",
    "FALLBACK_BASE",
    "base_code",
    "next_free_code",
    "reconcile_codes",
]

CODE_LENGTH = CODE_FIELD.max_length or 10
COUNTER_PREFIX_LENGTH = 8
FALLBACK_BASE = "OFFICE"

_NON_ALNUM = re.compile(r"[^A-Z0-9]")

logger = logging.getLogger(__name__)


def base_code(description: str) -> str:
    """Uppercase, keep ASCII letters/digits only, truncate to CODE_LENGTH."""
    base = _NON_ALNUM.sub("", description.upper())[:CODE_LENGTH]
    return base or FALLBACK_BASE


def next_free_code(base: str, taken: set[str]) -> str:
    """Return base if free, else base[:8] + 2-digit counter (01, 02, ...).

    Past 99 the counter widens and the prefix shrinks to stay within CODE_LENGTH.
    """
    if base not in taken:
        return base
    counter = 1
    while True:
        suffix = f"{counter:02d}"
        prefix = base[: min(COUNTER_PREFIX_LENGTH, CODE_LENGTH - len(suffix))]
        candidate = f"{prefix}{suffix}"
        if candidate not in taken:
            return candidate
        counter += 1


def reconcile_codes(records: Sequence[OfficeRecord]) -> dict[str, str]:
    """Assign codes in place to records lacking one; returns description -> code.

    Records without a description are left untouched. Two codeless records
    sharing a description both get codes, but the mapping keeps the later one.
    """
    taken = {r.office_code for r in records if r.office_code is not None}
    generated: dict[str, str] = {}
    for record in records:
        if record.office_code is not None or record.office_desc is None:
            continue
        code = next_free_code(base_code(record.office_desc), taken)
        record.office_code = code
        taken.add(code)
        if record.office_desc in generated:
            logger.warning(
                "description %r already got code %s; row %d gets %s",
                record.office_desc,
                generated[record.office_desc],
                record.row_number,
                code,
            )
        generated[record.office_desc] = code
    return generated
