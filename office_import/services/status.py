from __future__ import annotations

from typing import Any

from ..db.office_insert import count_rows
from ..models.config_models import TableConfig
from ..models.import_result import ImplementationStatus

"""Implementation status: row counts of the office / employee / client tables."""

STATUS_LABEL = "In Progress"


def get_status(db: Any, tables: TableConfig | None = None) -> ImplementationStatus:
    tables = tables or TableConfig()
    with db.cursor() as cursor:
        offices, employees, clients = count_rows(cursor, [tables.office, tables.employee, tables.client])
    return ImplementationStatus(
        offices=offices,
        employees=employees,
        clients=clients,
        status=STATUS_LABEL,
    )
