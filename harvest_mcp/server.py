"""MCP server entry point: wires the tool registry to stdio or SSE."""

import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

import uvicorn
from mcp import types
from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from harvest_mcp import __version__
from harvest_mcp.client import HarvestClient
from harvest_mcp.config import LOG_LEVELS, Config, configure_logging
from harvest_mcp.errors import ConfigError
from harvest_mcp.registry import ToolRegistry
from harvest_mcp.tools import build_registry

logger = logging.getLogger("harvest-mcp")

SERVER_NAME = "harvest-mcp-server"


class ToolExecutionError(Exception):
    """Raised from the call_tool handler so the SDK answers with ``isError: true``."""


async def dispatch_tool(
    registry: ToolRegistry, name: str, arguments: Optional[Dict[str, Any]]
) -> List[types.TextContent]:
    """Run a tool through the registry and unwrap its result for the SDK.

    Raises:
        ToolExecutionError: Carrying the error text when the tool failed
    """
    result = await registry.call(name, arguments)
    if result.isError:
        raise ToolExecutionError(result.content[0].text)
    return result.content


def create_server(registry: ToolRegistry) -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return registry.list_tools()

    # arguments are validated by the registry's own models
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        return await dispatch_tool(registry, name, arguments)

    return server


async def run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def create_sse_app(server: Server) -> Starlette:
    sse = SseServerTransport("/messages/")

    async def handle_sse(request: Request) -> Response:
        """Handle SSE connections."""
        async with sse.connect_sse(request.scope, request.receive, request._send) as streams:
            await server.run(streams[0], streams[1], server.create_initialization_options())
        return Response()

    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "healthy", "server": SERVER_NAME, "version": __version__})

    return Starlette(
        routes=[
            Route("/health", health_check, methods=["GET"]),
            Route("/sse", handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse.handle_post_message),
        ],
    )


async def run_sse(server: Server, host: str, port: int) -> None:
    app = create_sse_app(server)
    logger.info(f"SSE endpoint: http://{host}:{port}/sse")
    await uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level="info")).serve()


def main() -> None:
    configure_logging()
    try:
        config = Config.from_env()
        config.validate()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    logging.getLogger().setLevel(LOG_LEVELS[config.log_level])

    registry = build_registry(HarvestClient(config))
    server = create_server(registry)
    logger.info(
        f"Starting Harvest MCP Server with {len(registry.names())} tools "
        f"in {len(registry.categories())} categories over {config.transport}"
    )

    if config.transport == "sse":
        asyncio.run(run_sse(server, config.host, config.port))
    else:
        asyncio.run(run_stdio(server))
