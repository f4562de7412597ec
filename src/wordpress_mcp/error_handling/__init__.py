"""
Error handling utilities for the WordPress MCP server.

Provides the tool error taxonomy, the result envelope, and HTTP error mapping.
"""

from .errors import (
    FailureKind,
    ToolError,
    ValidationFailed,
    SafeModeViolation,
    DomainError,
)
from .envelope import (
    ToolSuccess,
    ToolFailure,
    ToolOutcome,
)
from .http_handlers import (
    map_http_error,
)

__all__ = [
    # Errors
    "FailureKind",
    "ToolError",
    "ValidationFailed",
    "SafeModeViolation",
    "DomainError",
    # Envelope
    "ToolSuccess",
    "ToolFailure",
    "ToolOutcome",
    # HTTP handlers
    "map_http_error",
]
