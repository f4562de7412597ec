"""
Configuration loading for the WordPress MCP server.

Configuration comes from a YAML file or from environment variables and is
frozen once loaded. The bearer token and the safe mode flag are read by
every request and never change while the process runs.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

TRANSPORTS = ("stdio", "http")

_TRUTHY = ("1", "true", "yes", "on")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ServerConfig:
    """Settings for connecting to WordPress and serving MCP clients.

    Attributes:
        wordpress_url: Base URL of the WordPress site
        username: WordPress user for REST API requests
        application_password: Application password for that user
        bearer_token: Shared secret for HTTP clients (None = auth disabled)
        safe_mode: Block destructive tools (delete_content, delete_term)
        transport: "stdio" or "http"
        host: Bind address for the HTTP transport
        port: Bind port for the HTTP transport
        timeout: Timeout in seconds for WordPress REST requests
    """
    wordpress_url: str
    username: Optional[str] = None
    application_password: Optional[str] = None
    bearer_token: Optional[str] = None
    safe_mode: bool = False
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    timeout: float = 30.0

    @classmethod
    def from_config_file(cls, path: str) -> "ServerConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            The loaded configuration

        Raises:
            FileNotFoundError: If the file does not exist
        """
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(
            wordpress_url=data.get("wordpress_url", ""),
            username=data.get("username"),
            application_password=data.get("application_password"),
            bearer_token=data.get("bearer_token") or None,
            safe_mode=_as_bool(data.get("safe_mode", False)),
            transport=data.get("transport", "stdio"),
            host=data.get("host", "127.0.0.1"),
            port=int(data.get("port", 8000)),
            timeout=float(data.get("timeout", 30.0)),
        )

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        return cls(
            wordpress_url=os.environ.get("WORDPRESS_URL", ""),
            username=os.environ.get("WORDPRESS_USERNAME"),
            application_password=os.environ.get("WORDPRESS_APP_PASSWORD"),
            bearer_token=os.environ.get("MCP_BEARER_TOKEN") or None,
            safe_mode=_as_bool(os.environ.get("MCP_SAFE_MODE")),
            transport=os.environ.get("MCP_TRANSPORT", "stdio"),
            host=os.environ.get("MCP_HOST", "127.0.0.1"),
            port=int(os.environ.get("MCP_PORT", "8000")),
            timeout=float(os.environ.get("WORDPRESS_TIMEOUT", "30")),
        )

    @property
    def auth_enabled(self) -> bool:
        return bool(self.bearer_token)

    def validate(self) -> None:
        """Check that the configuration is usable.

        Raises:
            ValueError: If a setting is missing or out of range
        """
        if not self.wordpress_url:
            raise ValueError("WordPress URL is required")
        if self.transport not in TRANSPORTS:
            raise ValueError(
                f"Unknown transport '{self.transport}'. Available: {', '.join(TRANSPORTS)}"
            )
        if self.port <= 0:
            raise ValueError(f"Port must be positive, got {self.port}")


def load_config() -> ServerConfig:
    """Load configuration from the best available source.

    Order: WORDPRESS_MCP_CONFIG_PATH file, then environment variables.

    Raises:
        ValueError: If no configuration source is available
    """
    config_path = os.environ.get("WORDPRESS_MCP_CONFIG_PATH")
    if config_path:
        config = ServerConfig.from_config_file(config_path)
    elif os.environ.get("WORDPRESS_URL"):
        config = ServerConfig.from_env()
    else:
        raise ValueError(
            "No WordPress configuration found. "
            "Set WORDPRESS_MCP_CONFIG_PATH to a YAML config file, "
            "or set WORDPRESS_URL, WORDPRESS_USERNAME and WORDPRESS_APP_PASSWORD."
        )

    config.validate()
    return config
