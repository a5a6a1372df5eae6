from .code_reconciler import reconcile_codes
from .orchestrator import import_offices
from .session import ImplementationSession, NotConfiguredError
from .validator import has_critical, validate_offices

__all__ = [
    "ImplementationSession",
    "NotConfiguredError",
    "has_critical",
    "import_offices",
    "reconcile_codes",
    "validate_offices",
]
