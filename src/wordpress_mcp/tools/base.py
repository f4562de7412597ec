"""
Base class for WordPress MCP tools.

A tool declares its name, description and rule schema as class attributes
and implements run(). Validation, safe mode and error wrapping are done by
ToolExecutor, so run() only sees parameters that passed the schema.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..client import WordPressService
from ..error_handling import DomainError, ToolSuccess
from ..validation import Rule, compile_input_schema, freeze_schema


class Tool(ABC):
    """A named, schema-described operation exposed to MCP clients.

    Attributes:
        name: Unique tool name
        description: Human-readable description shown to clients
        schema: Field name to ordered validation rules
        destructive: True for delete-class tools blocked by safe mode
        operation: Label used in safe mode messages (defaults to the name)
    """

    name: str = ""
    description: str = ""
    schema: dict[str, tuple[Rule, ...]] = {}
    destructive: bool = False
    operation: Optional[str] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.schema = freeze_schema(cls.schema)

    def __init__(self, wp: WordPressService):
        self.wp = wp

    @property
    def operation_label(self) -> str:
        return self.operation or self.name

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema advertised to clients for this tool's arguments."""
        return compile_input_schema(self.schema)

    @abstractmethod
    def run(self, parameters: dict[str, Any]) -> ToolSuccess:
        """Tool-specific logic.

        Args:
            parameters: Validated parameters

        Returns:
            The successful result

        Raises:
            ToolError: For expected failures (not found, WordPress errors)
        """

    def success(self, data: Any, message: Optional[str] = None) -> ToolSuccess:
        return ToolSuccess(data=data, message=message)

    def check(self, value: Any, action: str) -> Any:
        """Raise DomainError if value is a WordPress error, else return it."""
        if self.wp.is_error(value):
            raise DomainError(f"Failed to {action}: {value.get_error_message()}")
        return value

    def format_post_summary(self, post) -> dict[str, Any]:
        """Common identifying fields of a post."""
        return {
            "id": post.id,
            "title": post.title,
            "slug": post.slug,
            "type": post.type,
            "status": post.status,
            "url": post.link,
            "edit_url": self.wp.get_edit_post_link(post.id),
        }
