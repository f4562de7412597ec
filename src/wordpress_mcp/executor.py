"""
Tool execution pipeline.

Runs a single tool call through validation, the safe mode gate, and the
tool body, and turns every result into a ToolSuccess or ToolFailure.
"""

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

from .error_handling import (
    DomainError,
    FailureKind,
    SafeModeViolation,
    ToolError,
    ToolFailure,
    ToolOutcome,
)
from .validation import assert_valid

if TYPE_CHECKING:
    from .tools.base import Tool

logger = logging.getLogger("wordpress-mcp.executor")


class ToolLogger:
    """Receives tool lifecycle events. The base implementation does nothing."""

    def start(self, tool_name: str, parameters: Mapping[str, Any]) -> None:
        pass

    def success(self, tool_name: str) -> None:
        pass

    def failure(self, tool_name: str, kind: FailureKind, detail: Mapping[str, Any]) -> None:
        pass


NullToolLogger = ToolLogger


class LoggingToolLogger(ToolLogger):
    """Writes tool lifecycle events to a standard library logger."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logging.getLogger("wordpress-mcp.tools")

    def start(self, tool_name: str, parameters: Mapping[str, Any]) -> None:
        self.log.info(f"Executing tool: {tool_name}", extra={"parameters": dict(parameters)})

    def success(self, tool_name: str) -> None:
        self.log.info(f"Tool executed successfully: {tool_name}")

    def failure(self, tool_name: str, kind: FailureKind, detail: Mapping[str, Any]) -> None:
        errors = detail.get("errors")
        if errors:
            self.log.error(f"Tool execution failed: {tool_name} ({kind.value}): {detail.get('error')} {errors}")
        else:
            self.log.error(f"Tool execution failed: {tool_name} ({kind.value}): {detail.get('error')}")


class ToolExecutor:
    """Validates, gates, and invokes tools.

    The safe mode flag is fixed at construction and shared by every call.
    """

    def __init__(self, safe_mode: bool = False, tool_logger: Optional[ToolLogger] = None):
        self._safe_mode = bool(safe_mode)
        self.tool_logger = tool_logger or NullToolLogger()

    @property
    def safe_mode(self) -> bool:
        return self._safe_mode

    def execute(self, tool: "Tool", parameters: Optional[Mapping[str, Any]] = None) -> ToolOutcome:
        """Run one tool invocation.

        Args:
            tool: The tool to run
            parameters: Raw arguments from the client. None values count as absent.

        Returns:
            ToolSuccess on success, otherwise a ToolFailure whose kind names
            the terminal state (validation, safe mode, or domain error)
        """
        params = {k: v for k, v in (parameters or {}).items() if v is not None}

        try:
            self.tool_logger.start(tool.name, params)
            assert_valid(params, tool.schema)

            if tool.destructive and self._safe_mode:
                raise SafeModeViolation(tool.operation_label)

            outcome = tool.run(params)

        except ToolError as e:
            failure = ToolFailure.from_error(e)

        except Exception as e:
            logger.exception(f"Unexpected error in tool: {tool.name}")
            code = getattr(e, "code", 0)
            failure = ToolFailure.from_error(
                DomainError(str(e), code if isinstance(code, int) else 0)
            )

        else:
            self.tool_logger.success(tool.name)
            return outcome

        self.tool_logger.failure(
            tool.name,
            failure.kind,
            {"error": failure.error, "errors": failure.errors},
        )
        return failure
