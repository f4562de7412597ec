"""Shared pytest fixtures for wordpress-mcp tests.

All tests run against in-memory or mocked collaborators; none need a live
WordPress site.
"""

from pathlib import Path
from typing import Generator

import pytest
import yaml

from wordpress_mcp.config import ServerConfig
from wordpress_mcp.executor import ToolExecutor

from tests.mocks import MockWordPressService

TEST_TOKEN = "abc123"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "slow: Long-running tests")


@pytest.fixture
def clean_env(monkeypatch):
    """Provide a clean environment without WordPress MCP config vars.

    Removes environment variables that might interfere with config tests.
    """
    env_vars = [
        "WORDPRESS_MCP_CONFIG_PATH",
        "WORDPRESS_URL",
        "WORDPRESS_USERNAME",
        "WORDPRESS_APP_PASSWORD",
        "WORDPRESS_TIMEOUT",
        "MCP_BEARER_TOKEN",
        "MCP_SAFE_MODE",
        "MCP_TRANSPORT",
        "MCP_HOST",
        "MCP_PORT",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def mock_wordpress_config(tmp_path: Path) -> dict:
    """Create a mock WordPress MCP config file.

    Returns:
        Dictionary with the path to the config and its contents
    """
    config_data = {
        "wordpress_url": "https://blog.example.test",
        "username": "editor",
        "application_password": "abcd efgh ijkl mnop",
        "bearer_token": TEST_TOKEN,
        "safe_mode": True,
        "transport": "http",
        "host": "0.0.0.0",
        "port": 9000,
        "timeout": 10,
    }

    config_file = tmp_path / "wordpress-mcp.yaml"
    with open(config_file, "w") as f:
        yaml.dump(config_data, f)

    return {
        "config_path": str(config_file),
        "config_data": config_data,
    }


@pytest.fixture
def server_config() -> ServerConfig:
    """Configuration pointing at the mock site, safe mode off."""
    return ServerConfig(
        wordpress_url="https://blog.example.test",
        username="editor",
        application_password="secret",
        bearer_token=TEST_TOKEN,
    )


@pytest.fixture
def mock_wp() -> Generator[MockWordPressService, None, None]:
    """An in-memory WordPress store with a small amount of seed content.

    Seed data:
        posts: 1 "Hello World" (post), 2 "About Us" (page),
               3 "Draft Notes" (post, draft), 4 "Getting Started" (documentation)
        terms: 1 "Uncategorized", 2 "News" (category), 3 "python" (post_tag)
        post 1 is in category 1
    """
    wp = MockWordPressService()
    wp.add_post("Hello World", content="<p>Welcome to WordPress. This is your first post.</p>")
    wp.add_post("About Us", post_type="page", slug="about")
    wp.add_post("Draft Notes", status="draft")
    wp.add_post("Getting Started", post_type="documentation")
    wp.add_term("Uncategorized", count=1)
    wp.add_term("News", description="Company news")
    wp.add_term("python", taxonomy="post_tag")
    wp.object_terms[(1, "category")] = [1]
    wp.calls.clear()
    yield wp


@pytest.fixture
def executor() -> ToolExecutor:
    return ToolExecutor(safe_mode=False)


@pytest.fixture
def safe_executor() -> ToolExecutor:
    return ToolExecutor(safe_mode=True)
