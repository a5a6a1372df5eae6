from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.config_models import first_data_row

"""Excel reader for the office sheet.

Layout: `skip_rows` leading rows (title / instructions) are ignored, the next
row is the header, everything below is data. Only the first worksheet is read.
Empty cells come back as None (never absent). Pandas' default NA strings are
disabled so that texts like "NA" or "NULL" reach the normalizer untouched.
"""

__all__ = [
    "RawRecord",
    "SheetHeaderError",
    "read_office_sheet",
]


class SheetHeaderError(Exception):
    """Raised when the header row is missing."""


@dataclass(frozen=True)
class RawRecord:
    row_number: int  # Row number reported to the user (data index + row_offset)
    values: dict[str, Any]  # Header -> raw cell value (None for empty cells)


def _header_names(header: pd.Series) -> list[str]:
    names = []
    for idx, cell in enumerate(header.tolist()):
        if cell is None or (not isinstance(cell, str) and pd.isna(cell)):
            names.append(f"Unnamed: {idx}")
        else:
            names.append(str(cell).strip())
    return names


def _cell(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    return value


def read_office_sheet(path: Path, skip_rows: int = 1, row_offset: int | None = None) -> list[RawRecord]:
    """Read the first worksheet of an Excel file into RawRecords.

    Parameters
    ----------
    path: Excel file path
    skip_rows: rows above the header row
    row_offset: row number reported for the first data row, by default the
        file row below the header (skip_rows + 2); numbering counts skipped
        blank rows so it stays aligned with the file
    """
    df = pd.read_excel(
        path,
        sheet_name=0,
        header=None,
        dtype=object,
        keep_default_na=False,
        na_values=[""],
    )
    if df.shape[0] < skip_rows + 1:
        raise SheetHeaderError(f"'{Path(path).name}' lacks a header row after {skip_rows} skipped row(s)")

    if row_offset is None:
        row_offset = first_data_row(skip_rows)
    columns = _header_names(df.iloc[skip_rows])
    records: list[RawRecord] = []
    for index, (_, raw) in enumerate(df.iloc[skip_rows + 1:].iterrows()):
        if raw.isna().all():
            continue
        values = {col: _cell(val) for col, val in zip(columns, raw.tolist(), strict=False)}
        records.append(RawRecord(row_number=index + row_offset, values=values))
    return records
