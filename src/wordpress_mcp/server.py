"""
WordPress MCP Server - Main entry point.

An MCP server that exposes WordPress content and taxonomy operations as tools.
"""

import asyncio
import json
import logging
import sys
from typing import Any, Optional

import anyio
import uvicorn
from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from . import __version__
from .auth import BearerTokenAuth
from .client import RestWordPressService, WordPressService
from .config import ServerConfig, load_config
from .error_handling import ToolFailure, ToolOutcome
from .executor import LoggingToolLogger, ToolExecutor
from .http_app import create_http_app
from .tools import build_registry

logger = logging.getLogger("wordpress-mcp")

SITE_INFO_URI = "wordpress://site/info"


def configure_logging() -> None:
    """Send log output to stderr; stdout belongs to the stdio transport."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _render(outcome: ToolOutcome) -> list[types.TextContent]:
    return [
        types.TextContent(
            type="text",
            text=json.dumps(outcome.to_dict(), indent=2, default=str),
        )
    ]


def create_server(config: ServerConfig, store: Optional[WordPressService] = None) -> Server:
    """Create and configure the MCP server.

    Args:
        config: Server configuration
        store: WordPress backend; a REST client for config.wordpress_url by default

    Returns:
        Low-level MCP server with tools and the site info resource registered
    """
    if store is None:
        store = RestWordPressService(config)

    server = Server("wordpress-mcp", version=__version__)

    logger.info("Registering WordPress tools...")
    registry = build_registry(store)
    executor = ToolExecutor(safe_mode=config.safe_mode, tool_logger=LoggingToolLogger())
    if config.safe_mode:
        logger.info("Safe mode enabled: destructive tools are blocked")

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema(),
            )
            for tool in registry
        ]

    # The rule engine is the only input gate; the SDK's jsonschema pass is off.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[dict[str, Any]]) -> list[types.TextContent]:
        tool = registry.get(name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {name}")
            return _render(ToolFailure(error=f"Unknown tool: {name}"))

        outcome = await anyio.to_thread.run_sync(executor.execute, tool, arguments or {})
        return _render(outcome)

    logger.info("Registering resources...")

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return [
            types.Resource(
                uri=SITE_INFO_URI,
                name="site_info",
                description="WordPress site name, URLs and content counts",
                mimeType="application/json",
            )
        ]

    @server.read_resource()
    async def read_resource(uri) -> list[ReadResourceContents]:
        if str(uri) != SITE_INFO_URI:
            raise ValueError(f"Unknown resource: {uri}")

        info = await anyio.to_thread.run_sync(store.get_site_info)
        return [
            ReadResourceContents(
                content=json.dumps(info, indent=2, default=str),
                mime_type="application/json",
            )
        ]

    return server


async def run_stdio(server: Server) -> None:
    """Serve over stdin/stdout."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Server started, waiting for connections...")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


async def run_http(server: Server, config: ServerConfig) -> None:
    """Serve streamable HTTP on config.host:config.port."""
    app = create_http_app(server, BearerTokenAuth(config.bearer_token))
    uvicorn_config = uvicorn.Config(app, host=config.host, port=config.port, log_level="info")
    logger.info(f"Listening on http://{config.host}:{config.port}/mcp")
    await uvicorn.Server(uvicorn_config).serve()


async def run_server(config: ServerConfig) -> None:
    """Run the MCP server on the configured transport."""
    logger.info(f"Starting WordPress MCP Server v{__version__}")

    server = create_server(config)

    if config.transport == "http":
        await run_http(server, config)
    else:
        await run_stdio(server)


def main() -> None:
    """Main entry point."""
    configure_logging()
    try:
        config = load_config()
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
