"""MCP server, tool registry and tool handlers for Jira."""

from .main import app, run_server
from .registry import TOOL_DEFINITIONS, TOOL_HANDLERS, dispatch

__all__ = ["app", "run_server", "dispatch", "TOOL_DEFINITIONS", "TOOL_HANDLERS"]
