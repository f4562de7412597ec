"""
Bearer token generator for the HTTP transport.
"""

import argparse
import base64
import secrets
from typing import Optional, Sequence

MIN_LENGTH = 16
MAX_LENGTH = 256


def generate_token(length: int = 32) -> str:
    """Generate a random bearer token.

    Args:
        length: Number of random bytes before encoding

    Returns:
        Base64 encoded token with padding stripped

    Raises:
        ValueError: If length is outside 16-256
    """
    if not MIN_LENGTH <= length <= MAX_LENGTH:
        raise ValueError(f"Token length must be between {MIN_LENGTH} and {MAX_LENGTH} bytes")

    return base64.b64encode(secrets.token_bytes(length)).decode("ascii").rstrip("=")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="wordpress-mcp-token",
        description="Generate a bearer token for the WordPress MCP HTTP transport.",
    )
    parser.add_argument(
        "--length",
        type=int,
        default=32,
        help=f"random bytes to encode ({MIN_LENGTH}-{MAX_LENGTH}, default 32)",
    )
    args = parser.parse_args(argv)

    try:
        token = generate_token(args.length)
    except ValueError as e:
        parser.error(str(e))

    print(f"Generated token: {token}")
    print()
    print("Set it in the server environment:")
    print(f"  export MCP_BEARER_TOKEN={token}")
    print()
    print("or in the YAML config file:")
    print(f"  bearer_token: {token}")
    print()
    print("Clients send it as:")
    print(f"  Authorization: Bearer {token}")


if __name__ == "__main__":
    main()
