"""MCP tools for CueSpec MCP Server."""

from .record_tools import register_record_tools
from .drawing_tools import register_drawing_tools
from .system_tools import register_system_tools

__all__ = [
    "register_record_tools",
    "register_drawing_tools",
    "register_system_tools",
]
