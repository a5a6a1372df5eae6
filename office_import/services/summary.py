from __future__ import annotations

from ..models.import_result import ImplementationStatus, ImportResult

"""Rendering of results for people: the SUMMARY log line and the text reports
returned by the tool router.
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
    "render_import_report",
    "render_status_report",
]


def format_seconds(value: float) -> str:
    """Integers without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for one import run.

    Format:
    SUMMARY imported={n}/{attempted} errors={critical} warnings={advisory}
    generated={codes} elapsed_sec={elapsed}

    Examples:
        >>> r = ImportResult(success=True, records_imported=7, errors=(), message="",
        ...                  records_attempted=10, elapsed_seconds=2.0)
        >>> render_summary_line(r)
        'SUMMARY imported=7/10 errors=0 warnings=0 generated=0 elapsed_sec=2'
    """
    generated = len(result.generated_codes) if result.generated_codes else 0
    return (
        f"SUMMARY imported={result.records_imported}/{result.records_attempted} "
        f"errors={len(result.critical_errors)} "
        f"warnings={len(result.warnings)} "
        f"generated={generated} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )


def render_import_report(result: ImportResult) -> str:
    """Message, then the generated code block, then every finding."""
    message = result.message

    if result.generated_codes:
        message += "\n\n**Auto-generated Office Codes:**\n"
        for name, code in result.generated_codes.items():
            message += f"  • {name}: {code}\n"

    if result.errors:
        message += "\n\n**Validation Warnings:**\n"
        for error in result.errors:
            message += f"  • Row {error.row}, {error.field}: {error.message}\n"

    return message


def render_status_report(status: ImplementationStatus) -> str:
    return (
        "**GreatSoft Implementation Status**\n\n"
        f"Offices: {status.offices}\n"
        f"Employees: {status.employees}\n"
        f"Clients: {status.clients}\n\n"
        f"Status: {status.status}"
    )
