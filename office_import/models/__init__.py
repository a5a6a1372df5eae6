"""Domain models for the office importer.

This package contains the domain model classes used throughout the application:
configuration, the static office field table, records, findings and results.
"""

from .config_models import AppConfig, DatabaseConfig, ImportSettings, TableConfig
from .error_record import ErrorRecord
from .import_result import ImplementationStatus, ImportResult, LicensingResult
from .office_fields import CODE_FIELD, DESC_FIELD, OFFICE_FIELDS, FieldSpec
from .office_record import OfficeRecord
from .validation import ErrorCategory, Severity, ValidationError

__all__ = [
    # Configuration models
    "AppConfig",
    "DatabaseConfig",
    "ImportSettings",
    "TableConfig",
    # Field table
    "FieldSpec",
    "OFFICE_FIELDS",
    "CODE_FIELD",
    "DESC_FIELD",
    # Processing models
    "OfficeRecord",
    "ErrorCategory",
    "Severity",
    "ValidationError",
    "ErrorRecord",
    # Results
    "ImportResult",
    "LicensingResult",
    "ImplementationStatus",
]
