"""
Tool registry mapping tool names to tool instances.
"""

from typing import Iterator, Optional

from .base import Tool


class ToolRegistry:
    """Ordered collection of tools keyed by name."""

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Add a tool.

        Raises:
            ValueError: If the name is empty or already registered
        """
        if not tool.name:
            raise ValueError(f"Tool {type(tool).__name__} has no name")
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
