from .normalizer import normalize_records, normalize_row
from .reader import RawRecord, SheetHeaderError, read_office_sheet

__all__ = ["RawRecord", "SheetHeaderError", "normalize_records", "normalize_row", "read_office_sheet"]
