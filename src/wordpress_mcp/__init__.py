"""
WordPress MCP - MCP server for WordPress content management.

This package provides a Model Context Protocol (MCP) server that exposes
WordPress content and taxonomy operations as validated tools, guarded by
a bearer token gate and an optional safe mode.
"""

__version__ = "0.1.0"
