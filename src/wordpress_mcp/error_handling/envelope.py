"""
Uniform result envelope returned by every tool invocation.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .errors import FailureKind, ToolError


@dataclass
class ToolSuccess:
    """A tool finished and produced data."""
    data: Any
    message: Optional[str] = None

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        response: dict[str, Any] = {"success": True, "data": self.data}
        if self.message is not None:
            response["message"] = self.message
        return response


@dataclass
class ToolFailure:
    """A tool call ended in one of the terminal failure states."""
    error: str
    kind: FailureKind = FailureKind.DOMAIN_ERROR
    errors: dict[str, str] = field(default_factory=dict)
    code: int = 0

    @property
    def success(self) -> bool:
        return False

    @classmethod
    def from_error(cls, exc: ToolError) -> "ToolFailure":
        return cls(error=exc.message, kind=exc.kind, errors=dict(exc.errors), code=exc.code)

    def to_dict(self) -> dict[str, Any]:
        response: dict[str, Any] = {"success": False, "error": self.error}
        if self.errors:
            response["errors"] = self.errors
        return response


ToolOutcome = Union[ToolSuccess, ToolFailure]
