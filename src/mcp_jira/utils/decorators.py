import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

from mcp.types import TextContent

from mcp_jira.exceptions import MCPJiraError, MCPJiraValidationError

logger = logging.getLogger("mcp-jira.tools")

ToolHandler = Callable[[dict[str, Any]], Awaitable[list[TextContent]]]


def handle_tool_errors(func: ToolHandler) -> ToolHandler:
    """
    Decorator that turns any exception raised by a tool handler into the
    error envelope, so a failing tool call never escapes as an exception.
    """

    @wraps(func)
    async def wrapper(arguments: dict[str, Any]) -> list[TextContent]:
        from mcp_jira.formatters import format_error

        tool_name = getattr(func, "__name__", "tool")
        try:
            return await func(arguments)
        except MCPJiraValidationError as e:
            logger.warning(f"Invalid input for {tool_name}: {e}")
            return [TextContent(type="text", text=format_error(e))]
        except MCPJiraError as e:
            logger.error(
                f"{tool_name} failed ({type(e).__name__}"
                f"{f', HTTP {e.status_code}' if e.status_code else ''}): {e}"
            )
            return [TextContent(type="text", text=format_error(e))]
        except Exception as e:  # noqa: BLE001
            logger.error(f"Unexpected error in {tool_name}: {e}")
            logger.debug(f"Full exception details for {tool_name}:", exc_info=True)
            return [TextContent(type="text", text=format_error(e))]

    return wrapper
