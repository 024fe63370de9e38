"""MCP server exposing the Jira tools and attachment resources."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import Resource, ResourceTemplate, TextContent, Tool
from pydantic import AnyUrl

from ..jira.constants import ATTACHMENT_URI_PREFIX
from ..jira.utils import parse_attachment_uri
from ..utils.env import is_dry_run
from .dependencies import get_jira_fetcher
from .registry import TOOL_DEFINITIONS, dispatch

logger = logging.getLogger("mcp-jira.servers.main")


@dataclass
class AppContext:
    """Application context for MCP Jira."""

    connected: bool | None = None  # None when the connectivity check was skipped


@asynccontextmanager
async def server_lifespan(server: Server) -> AsyncIterator[AppContext]:
    """Check connectivity on startup unless running dry."""
    logger.info("Starting MCP Jira server")
    context = AppContext()
    if is_dry_run():
        logger.info("Dry-run mode: skipping Jira connectivity check")
    else:
        try:
            context.connected = await asyncio.to_thread(
                get_jira_fetcher().test_connection
            )
        except ValueError as e:
            # Missing credentials: keep serving so tools can report the problem
            logger.error(str(e))
            context.connected = False
        if not context.connected:
            logger.warning("Jira is not reachable; tool calls will report errors")
    try:
        yield context
    finally:
        logger.info("Shutting down MCP Jira server")


app = Server("mcp-jira", lifespan=server_lifespan)


@app.list_tools()
async def list_tools() -> list[Tool]:
    return TOOL_DEFINITIONS


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    return await dispatch(name, arguments if isinstance(arguments, dict) else {})


@app.list_resources()
async def list_resources() -> list[Resource]:
    # Attachments are discovered through jira_list_issue_attachments
    return []


@app.list_resource_templates()
async def list_resource_templates() -> list[ResourceTemplate]:
    return [
        ResourceTemplate(
            uriTemplate=f"{ATTACHMENT_URI_PREFIX}{{attachmentId}}",
            name="Jira attachment",
            description="Content of a Jira attachment, base64-encoded",
        ),
        ResourceTemplate(
            uriTemplate=f"{ATTACHMENT_URI_PREFIX}{{attachmentId}}/thumbnail",
            name="Jira attachment thumbnail",
            description="Thumbnail image of a Jira attachment",
        ),
    ]


@app.read_resource()
async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
    """Read an attachment (or its thumbnail); bytes are sent as a blob."""
    attachment_id, thumbnail = parse_attachment_uri(str(uri))
    jira = get_jira_fetcher()
    metadata = await asyncio.to_thread(jira.get_attachment_metadata, attachment_id)
    content = await asyncio.to_thread(
        jira.get_attachment_content, attachment_id, thumbnail=thumbnail
    )
    mime_type = "image/png" if thumbnail else metadata.mime_type
    logger.info(
        f"Read attachment {attachment_id}{' thumbnail' if thumbnail else ''} "
        f"({len(content)} bytes)"
    )
    return [
        ReadResourceContents(
            content=content,
            mime_type=mime_type or "application/octet-stream",
        )
    ]


async def run_server(transport: str = "stdio", port: int = 8000) -> None:
    """Run the MCP Jira server with the specified transport."""
    if transport == "sse":
        from mcp.server.sse import SseServerTransport
        from starlette.applications import Starlette
        from starlette.requests import Request
        from starlette.responses import Response
        from starlette.routing import Mount, Route

        sse = SseServerTransport("/messages/")

        async def handle_sse(request: Request) -> Response:
            async with sse.connect_sse(
                request.scope, request.receive, request._send
            ) as streams:
                await app.run(
                    streams[0], streams[1], app.create_initialization_options()
                )
            return Response()

        starlette_app = Starlette(
            routes=[
                Route("/sse", endpoint=handle_sse),
                Mount("/messages/", app=sse.handle_post_message),
            ],
        )

        import uvicorn

        config = uvicorn.Config(starlette_app, host="0.0.0.0", port=port)  # noqa: S104
        server = uvicorn.Server(config)
        # serve() keeps us in the current event loop
        await server.serve()
    else:
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream, write_stream, app.create_initialization_options()
            )
