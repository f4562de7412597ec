"""
Bearer token authentication for the HTTP transport.

If no token is configured, authentication is disabled and every request is
allowed. If a token is configured, each request must present it in either
the Authorization header (Bearer scheme) or the X-MCP-API-Key header.
"""

import hashlib
import hmac
import logging
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger("wordpress-mcp.auth")

REALM = "MCP Server"

_BEARER_PATTERN = re.compile(rb"^Bearer\s+(.+)$", re.IGNORECASE | re.DOTALL)


def _challenge(description: str) -> dict[str, str]:
    return {
        "WWW-Authenticate": (
            f'Bearer realm="{REALM}", error="invalid_token", '
            f'error_description="{description}"'
        )
    }


@dataclass(frozen=True)
class AuthResult:
    """Outcome of checking a request's credentials."""
    authenticated: bool
    error: Optional[str] = None
    challenge_headers: dict[str, str] = field(default_factory=dict)


class BearerTokenAuth:
    """Validates requests against a single shared bearer token."""

    def __init__(self, expected_token: Optional[str] = None):
        """Initialize the gate.

        Args:
            expected_token: The token to accept. None or empty disables auth.
        """
        self._expected_token = expected_token or None

    def is_enabled(self) -> bool:
        """Check if authentication is enabled."""
        return self._expected_token is not None

    def validate(self, headers: Mapping[str, str]) -> AuthResult:
        """Validate the credentials carried by a request's headers.

        Args:
            headers: Request headers. Names are matched case-insensitively.

        Returns:
            AuthResult describing whether the request may proceed. Never raises.
        """
        if not self.is_enabled():
            return AuthResult(authenticated=True)

        provided = self._extract_token(headers)

        if provided is None:
            return AuthResult(
                authenticated=False,
                error="Authentication required",
                challenge_headers=_challenge("Bearer token required"),
            )

        if not self._verify_token(provided):
            return AuthResult(
                authenticated=False,
                error="Invalid or expired token",
                challenge_headers=_challenge("Invalid bearer token"),
            )

        return AuthResult(authenticated=True)

    def _extract_token(self, headers: Mapping[str, str]) -> Optional[bytes]:
        """Pull the candidate token from Authorization, then X-MCP-API-Key."""
        auth_header = _get_header(headers, "Authorization")
        if auth_header is not None:
            match = _BEARER_PATTERN.match(auth_header)
            if match:
                return match.group(1).strip()

        api_key = _get_header(headers, "X-MCP-API-Key")
        if api_key is not None:
            return api_key.strip()

        return None

    def _verify_token(self, provided: bytes) -> bool:
        """Compare tokens in constant time.

        Both sides are hashed first so the comparison takes the same time
        whatever the lengths of the two tokens. The configured token is
        matched as UTF-8 bytes.
        """
        if self._expected_token is None:
            return False
        expected_digest = hashlib.sha256(self._expected_token.encode("utf-8")).digest()
        provided_digest = hashlib.sha256(provided).digest()
        return hmac.compare_digest(expected_digest, provided_digest)


def _get_header(headers: Mapping[str, str], name: str) -> Optional[bytes]:
    """Header value as the bytes the client sent.

    Starlette decodes header values as latin-1, so encoding them back the
    same way restores the raw bytes. Plain mappings hold text and are
    encoded as UTF-8.
    """
    if isinstance(headers, Headers):
        value = headers.get(name)
        return None if value is None else value.encode("latin-1")
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value.encode("utf-8")
    return None


def unauthorized_response(error: str, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    """Build the 401 response sent when a request is rejected."""
    return JSONResponse(
        status_code=401,
        content={"error": "Unauthorized", "message": error},
        headers=dict(headers or {}),
    )


class BearerAuthMiddleware:
    """ASGI middleware that runs BearerTokenAuth once per HTTP request."""

    def __init__(self, app: ASGIApp, auth: BearerTokenAuth):
        self.app = app
        self.auth = auth

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        result = self.auth.validate(Headers(scope=scope))
        if not result.authenticated:
            logger.warning(f"Rejected request to {scope.get('path', '')}: {result.error}")
            response = unauthorized_response(result.error or "Unauthorized", result.challenge_headers)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
