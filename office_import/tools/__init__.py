from .router import ToolResponse, ToolRouter, serve
from .schemas import TOOLS, ToolDefinition

__all__ = ["TOOLS", "ToolDefinition", "ToolResponse", "ToolRouter", "serve"]
