"""Tests for WordPress MCP.

Test Structure:
    tests/
    ├── conftest.py          # Shared pytest fixtures
    ├── unit/                # Unit tests (no external deps)
    │   ├── test_validation.py
    │   ├── test_auth.py
    │   ├── test_executor.py
    │   ├── test_error_handling.py
    │   ├── test_config.py
    │   ├── test_client.py
    │   ├── test_server.py
    │   ├── test_token.py
    │   └── tools/
    └── mocks/               # Mock implementations
        └── mock_wordpress.py

Usage:
    # Run all tests
    pytest

    # Run only unit tests
    pytest -m unit

    # Run with verbose output
    pytest -v
"""
