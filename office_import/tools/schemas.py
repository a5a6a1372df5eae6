from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Tool definitions: name, description and JSON schema of the arguments."""

__all__ = [
    "ToolDefinition",
    "TOOLS",
    "tool_by_name",
]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


CONFIGURE_DATABASE = ToolDefinition(
    name="configure_database",
    description=(
        "Configure the PostgreSQL connection for the GreatSoft implementation. Must be called first."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "server": {"type": "string", "description": "Database server hostname or IP"},
            "database": {"type": "string", "description": "Database name"},
            "user": {"type": "string", "description": "Database username"},
            "password": {"type": "string", "description": "Database password"},
            "port": {"type": "integer", "minimum": 1, "description": "Server port (default: 5432)"},
            "countryId": {"type": "integer", "minimum": 1, "description": "Country ID for offices (default: 1)"},
        },
        "required": ["server", "database", "user", "password"],
        "additionalProperties": False,
    },
)

LICENSE_DATABASE = ToolDefinition(
    name="license_database",
    description="Run the SQL licensing script to prepare the database for client data import.",
    input_schema={
        "type": "object",
        "properties": {
            "scriptPath": {"type": "string", "description": "Path to the SQL licensing script file"},
        },
        "required": ["scriptPath"],
        "additionalProperties": False,
    },
)

IMPORT_OFFICES = ToolDefinition(
    name="import_offices",
    description=(
        "Import office data from the client's completed Excel file. "
        "Validates data and auto-generates office codes if missing."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "sourcePath": {"type": "string", "description": "Path to the GreatSoft Office Excel file"},
        },
        "required": ["sourcePath"],
        "additionalProperties": False,
    },
)

GET_IMPLEMENTATION_STATUS = ToolDefinition(
    name="get_implementation_status",
    description=(
        "Get current implementation status showing counts of offices, employees, and clients imported."
    ),
    input_schema={"type": "object", "properties": {}, "additionalProperties": False},
)

TOOLS: tuple[ToolDefinition, ...] = (
    CONFIGURE_DATABASE,
    LICENSE_DATABASE,
    IMPORT_OFFICES,
    GET_IMPLEMENTATION_STATUS,
)


def tool_by_name(name: str) -> ToolDefinition | None:
    for tool in TOOLS:
        if tool.name == name:
            return tool
    return None
