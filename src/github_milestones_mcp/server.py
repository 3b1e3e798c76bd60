"""MCP server wiring for github-milestones-mcp.

The server advertises the milestone tools and forwards calls to an injected
``ToolDispatcher``. Failed calls are raised back to the MCP runtime, which
reports them to the caller as error results and keeps serving.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

try:
    from mcp.server import Server
    from mcp.types import TextContent, Tool
except ImportError as exc:  # pragma: no cover
    raise ImportError("MCP library not installed. Install with: pip install mcp") from exc

from .errors import SafeError, to_error_result
from .tools import TOOL_METADATA, ToolDispatcher, build_dispatcher_from_env

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

SERVER_NAME = "github-milestones-mcp"


def catalog_tools() -> list[Tool]:
    """Build MCP ``Tool`` objects for every catalog entry."""
    return [
        Tool(name=name, description=meta["description"], inputSchema=meta["inputSchema"])
        for name, meta in TOOL_METADATA.items()
    ]


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Create an MCP server whose tool handlers delegate to ``dispatcher``."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List all available tools."""
        tools = [
            Tool(name=d["name"], description=d["description"], inputSchema=d["inputSchema"])
            for d in dispatcher.list_tools()
        ]
        logger.info("Listed %s tools", len(tools))
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Execute a tool and return MCP-compliant TextContent."""
        logger.info("Tool called: %s", name)
        try:
            envelope = await dispatcher.dispatch(name, arguments)
        except SafeError as err:
            logger.error("Tool %s failed: %s", name, json.dumps(to_error_result(err)))
            raise

        return [TextContent(type="text", text=item["text"]) for item in envelope["content"]]

    return server


async def run_server() -> None:
    """Run the server over stdio."""
    # Fail fast on a missing token before the transport is opened.
    try:
        dispatcher = build_dispatcher_from_env()
    except SafeError as exc:
        logger.error("Startup configuration error: %s", exc.message)
        raise

    from mcp.server.stdio import stdio_server

    server = create_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("GitHub Milestones MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def test_server() -> None:
    """Lightweight self-test to ensure the tool catalog builds.

    Needs neither a token nor network access.
    """
    tools = catalog_tools()
    logger.info("Self-test OK: %s tools (%s)", len(tools), ", ".join(t.name for t in tools))
