"""MCP tools for WordPress content and taxonomy operations.

Tools are plain classes; register_content_tools and register_taxonomy_tools
instantiate them against a WordPressService and add them to a registry.
"""

from ..client import WordPressService
from .base import Tool
from .content import CONTENT_TOOLS
from .registry import ToolRegistry
from .taxonomy import TAXONOMY_TOOLS


def register_content_tools(registry: ToolRegistry, wp: WordPressService) -> None:
    """Register the content tools (posts, pages, custom post types)."""
    for tool_class in CONTENT_TOOLS:
        registry.register(tool_class(wp))


def register_taxonomy_tools(registry: ToolRegistry, wp: WordPressService) -> None:
    """Register the taxonomy and term tools."""
    for tool_class in TAXONOMY_TOOLS:
        registry.register(tool_class(wp))


def build_registry(wp: WordPressService) -> ToolRegistry:
    """Create a registry holding every WordPress tool."""
    registry = ToolRegistry()
    register_content_tools(registry, wp)
    register_taxonomy_tools(registry, wp)
    return registry


__all__ = [
    "Tool",
    "ToolRegistry",
    "CONTENT_TOOLS",
    "TAXONOMY_TOOLS",
    "register_content_tools",
    "register_taxonomy_tools",
    "build_registry",
]
