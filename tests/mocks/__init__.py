"""Mock implementations for wordpress-mcp tests.

Provides mock objects for:
- The WordPress content store
"""

from .mock_wordpress import MockWordPressService, SITE_URL

__all__ = ["MockWordPressService", "SITE_URL"]
