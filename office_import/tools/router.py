from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

import jsonschema
from jsonschema.exceptions import ValidationError as SchemaValidationError

from ..services.session import ImplementationSession, NotConfiguredError
from ..services.summary import render_import_report, render_status_report
from .schemas import TOOLS, tool_by_name

"""Tool router: name -> handler dispatch over one ImplementationSession.

Arguments are checked against each tool's JSON schema before dispatch. Every
failure (unknown tool, bad arguments, unconfigured session, handler
exception) becomes an error response; nothing escapes call_tool().

serve() exposes the router as a JSON Lines loop: one request object per input
line, one response object per output line.
"""

__all__ = [
    "ToolResponse",
    "ToolRouter",
    "serve",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResponse:
    text: str
    is_error: bool = False
    data: dict[str, Any] | None = None  # Machine-readable result, sent as structuredContent

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }
        if self.data is not None:
            payload["structuredContent"] = self.data
        return payload


def _error(message: str) -> ToolResponse:
    return ToolResponse(text=f"❌ Error: {message}", is_error=True)


class ToolRouter:
    def __init__(self, session: ImplementationSession | None = None) -> None:
        self.session = session if session is not None else ImplementationSession()
        self._handlers: dict[str, Callable[[dict[str, Any]], str | ToolResponse]] = {
            "configure_database": self._configure_database,
            "license_database": self._license_database,
            "import_offices": self._import_offices,
            "get_implementation_status": self._get_implementation_status,
        }

    def list_tools(self) -> list[dict[str, Any]]:
        return [t.to_dict() for t in TOOLS]

    def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        arguments = arguments or {}
        tool = tool_by_name(name)
        handler = self._handlers.get(name)
        if tool is None or handler is None:
            return _error(f"Unknown tool: {name}")
        try:
            jsonschema.validate(arguments, tool.input_schema)
        except SchemaValidationError as e:
            return _error(f"invalid arguments for {name}: {e.message}")
        try:
            outcome = handler(arguments)
        except NotConfiguredError as e:
            return _error(str(e))
        except Exception as e:
            logger.error("tool=%s failed: %s", name, e)
            return _error(str(e))
        return outcome if isinstance(outcome, ToolResponse) else ToolResponse(text=outcome)

    def _configure_database(self, args: dict[str, Any]) -> str:
        return self.session.configure_connection(
            server=args["server"],
            database=args["database"],
            user=args["user"],
            password=args["password"],
            port=args.get("port"),
            country_id=args.get("countryId", 1),
        )

    def _license_database(self, args: dict[str, Any]) -> str:
        result = self.session.run_licensing_script(args["scriptPath"])
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

    def _import_offices(self, args: dict[str, Any]) -> ToolResponse:
        result = self.session.import_office_records(args["sourcePath"])
        return ToolResponse(text=render_import_report(result), data=result.to_dict())

    def _get_implementation_status(self, args: dict[str, Any]) -> str:
        return render_status_report(self.session.get_status())


def _handle_line(router: ToolRouter, line: str) -> dict[str, Any]:
    try:
        request = json.loads(line)
    except json.JSONDecodeError as e:
        return _error(f"malformed request: {e.msg}").to_dict()
    if not isinstance(request, dict):
        return _error("malformed request: expected a JSON object").to_dict()

    response: dict[str, Any]
    if request.get("method") == "list_tools":
        response = {"tools": router.list_tools()}
    elif isinstance(request.get("tool"), str):
        arguments = request.get("arguments")
        if arguments is not None and not isinstance(arguments, dict):
            response = _error("malformed request: arguments must be an object").to_dict()
        else:
            response = router.call_tool(request["tool"], arguments).to_dict()
    else:
        response = _error("malformed request: expected 'tool' or 'method'").to_dict()
    if "id" in request:
        response["id"] = request["id"]
    return response


def serve(router: ToolRouter, stdin: TextIO, stdout: TextIO) -> int:
    """Answer requests until stdin closes; returns the number of requests handled."""
    handled = 0
    logger.info("tool server ready (%d tools)", len(TOOLS))
    for line in stdin:
        if not line.strip():
            continue
        stdout.write(json.dumps(_handle_line(router, line), ensure_ascii=False) + "\n")
        stdout.flush()
        handled += 1
    return handled
