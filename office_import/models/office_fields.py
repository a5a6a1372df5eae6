from __future__ import annotations

from dataclasses import dataclass

"""Static field table for the office sheet.

Every column the importer knows about is declared exactly once here. The
normalizer reads `header`, the validator reads `max_length` / `required` /
`auto_generated` / `unique`, and the persister reads `column`. Adding a field
is a single new entry in OFFICE_FIELDS.
"""

__all__ = [
    "FieldSpec",
    "OFFICE_FIELDS",
    "CODE_FIELD",
    "DESC_FIELD",
]


@dataclass(frozen=True)
class FieldSpec:
    """One spreadsheet column mapped onto an OfficeRecord attribute and a DB column."""
    header: str  # Spreadsheet header text
    attr: str  # OfficeRecord attribute name
    column: str  # Target table column
    max_length: int | None = None  # Enforced (advisory) length limit
    required: bool = False  # Missing value is a critical finding
    auto_generated: bool = False  # Missing value is filled by reconciliation
    unique: bool = False  # Must be unique within one batch
    label: str | None = None  # Name used in messages (defaults to header)

    @property
    def display_name(self) -> str:
        return self.label or self.header


CODE_FIELD = FieldSpec(
    header="OfficeCode",
    attr="office_code",
    column="OfficeCode",
    max_length=10,
    auto_generated=True,
    unique=True,
    label="Office Code",
)
DESC_FIELD = FieldSpec(
    header="OfficeDesc",
    attr="office_desc",
    column="OfficeDesc",
    max_length=100,
    required=True,
    label="Office Name",
)

OFFICE_FIELDS: tuple[FieldSpec, ...] = (
    CODE_FIELD,
    DESC_FIELD,
    FieldSpec("OfficePAddress", "postal_address", "OfficePAddress"),
    FieldSpec("OfficeBussAdd", "business_address", "OfficeBussAdd"),
    FieldSpec("OfficeTel", "telephone", "OfficeTel"),
    FieldSpec("OfficeFax", "fax", "OfficeFax"),
    FieldSpec("OfficeBank", "bank", "OfficeBank"),
    FieldSpec("OfficeBranch", "branch", "OfficeBranch"),
    FieldSpec("OfficeBranchNo", "branch_no", "OfficeBranchNo"),
    FieldSpec("OfficeBankAcc", "bank_account", "OfficeBankAcc"),
    FieldSpec("OfficeRegNo", "registration_no", "OfficeRegNo"),
    FieldSpec("OfficeTaxNo", "tax_no", "OfficeTaxNo"),
    FieldSpec("OfficeURL", "url", "OfficeURL"),
    FieldSpec("OfficeEmail", "email", "OfficeEmail"),
)
