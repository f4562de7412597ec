"""
Streamable HTTP transport for the WordPress MCP server.

Serves MCP at /mcp behind bearer token authentication.
"""

import contextlib
import logging
from typing import AsyncIterator

from mcp.server import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from .auth import BearerAuthMiddleware, BearerTokenAuth

logger = logging.getLogger("wordpress-mcp.http")

MCP_PATH = "/mcp"


class _MCPEndpoint:
    """ASGI endpoint forwarding requests to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


def create_http_app(server: Server, auth: BearerTokenAuth, json_response: bool = False) -> Starlette:
    """Build the Starlette application for the HTTP transport.

    Args:
        server: The configured MCP server
        auth: Bearer token gate applied to every HTTP request
        json_response: Return plain JSON instead of SSE streams

    Returns:
        Starlette app with the MCP endpoint mounted at /mcp
    """
    session_manager = StreamableHTTPSessionManager(
        app=server,
        json_response=json_response,
        stateless=True,
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info(f"MCP endpoint ready at {MCP_PATH}")
            yield

    if auth.is_enabled():
        logger.info("Bearer token authentication enabled")
    else:
        logger.warning("Bearer token authentication disabled - set bearer_token to protect the server")

    return Starlette(
        routes=[Route(MCP_PATH, endpoint=_MCPEndpoint(session_manager))],
        middleware=[Middleware(BearerAuthMiddleware, auth=auth)],
        lifespan=lifespan,
    )
