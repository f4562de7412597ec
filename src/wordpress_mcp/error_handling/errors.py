"""
Tool error taxonomy.

Every failure a tool call can produce is one of three categories. Anything
else raised while a tool runs is wrapped as a DomainError by the executor.
"""

from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Terminal failure states of a tool invocation."""
    VALIDATION_FAILED = "validation_failed"
    SAFE_MODE_BLOCKED = "safe_mode_blocked"
    DOMAIN_ERROR = "domain_error"


class ToolError(Exception):
    """Base class for errors surfaced to MCP clients.

    Attributes:
        message: Human-readable error message
        errors: Optional structured details (field name to message)
        code: Optional numeric error code
    """

    kind: FailureKind = FailureKind.DOMAIN_ERROR

    def __init__(
        self,
        message: str,
        errors: Optional[dict[str, str]] = None,
        code: int = 0,
    ):
        super().__init__(message)
        self.message = message
        self.errors = dict(errors or {})
        self.code = code


class ValidationFailed(ToolError):
    """One or more parameters violate the tool's schema."""

    kind = FailureKind.VALIDATION_FAILED

    def __init__(self, message: str, errors: dict[str, str]):
        super().__init__(message, errors)


class SafeModeViolation(ToolError):
    """A destructive operation was requested while safe mode is enabled."""

    kind = FailureKind.SAFE_MODE_BLOCKED

    def __init__(self, operation: str):
        super().__init__(
            f"Operation blocked: Safe mode is enabled. {operation} is not allowed.",
            {"safe_mode": "enabled"},
        )
        self.operation = operation


class DomainError(ToolError):
    """The content store reported an error, or the tool failed unexpectedly."""

    kind = FailureKind.DOMAIN_ERROR

    def __init__(self, message: str, code: int = 0):
        super().__init__(f"WordPress Error: {message}", code=code)
        self.detail = message
