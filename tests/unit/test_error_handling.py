"""
Unit tests for error handling utilities.

Tests the tool error taxonomy, the result envelope, and HTTP error mapping.
"""

import httpx
import pytest

from wordpress_mcp.error_handling import (
    DomainError,
    FailureKind,
    SafeModeViolation,
    ToolError,
    ToolFailure,
    ToolSuccess,
    ValidationFailed,
    map_http_error,
)


# ==================== Error Taxonomy Tests ====================


@pytest.mark.unit
def test_validation_failed_carries_errors():
    error = ValidationFailed("Validation failed", {"title": "Field 'title' is required"})
    assert error.kind is FailureKind.VALIDATION_FAILED
    assert error.errors == {"title": "Field 'title' is required"}
    assert str(error) == "Validation failed"


@pytest.mark.unit
def test_safe_mode_violation_message():
    error = SafeModeViolation("Deleting terms")
    assert error.kind is FailureKind.SAFE_MODE_BLOCKED
    assert error.message == "Operation blocked: Safe mode is enabled. Deleting terms is not allowed."
    assert error.errors == {"safe_mode": "enabled"}
    assert error.operation == "Deleting terms"


@pytest.mark.unit
def test_domain_error_prefix():
    error = DomainError("Term not found", code=404)
    assert error.kind is FailureKind.DOMAIN_ERROR
    assert error.message == "WordPress Error: Term not found"
    assert error.detail == "Term not found"
    assert error.code == 404
    assert error.errors == {}


@pytest.mark.unit
def test_all_tool_errors_share_base():
    for error in (ValidationFailed("x", {}), SafeModeViolation("y"), DomainError("z")):
        assert isinstance(error, ToolError)


# ==================== Envelope Tests ====================


@pytest.mark.unit
def test_success_envelope_with_message():
    assert ToolSuccess({"id": 1}, "Content created successfully").to_dict() == {
        "success": True,
        "data": {"id": 1},
        "message": "Content created successfully",
    }


@pytest.mark.unit
def test_success_envelope_without_message():
    """message is omitted, not null."""
    assert ToolSuccess([]).to_dict() == {"success": True, "data": []}


@pytest.mark.unit
def test_failure_envelope_omits_empty_errors():
    failure = ToolFailure.from_error(DomainError("Content with ID 9 not found"))
    assert failure.to_dict() == {
        "success": False,
        "error": "WordPress Error: Content with ID 9 not found",
    }
    assert failure.success is False


@pytest.mark.unit
def test_failure_envelope_includes_field_errors():
    failure = ToolFailure.from_error(ValidationFailed("Validation failed", {"content_id": "bad"}))
    assert failure.kind is FailureKind.VALIDATION_FAILED
    assert failure.to_dict()["errors"] == {"content_id": "bad"}


@pytest.mark.unit
def test_failure_errors_are_copied():
    """Mutating the envelope does not touch the exception."""
    error = ValidationFailed("Validation failed", {"a": "b"})
    failure = ToolFailure.from_error(error)
    failure.errors["c"] = "d"
    assert error.errors == {"a": "b"}


# ==================== HTTP Error Mapping Tests ====================


REQUEST = httpx.Request("GET", "https://blog.example.test/wp-json/wp/v2/posts/9")


def _status_error(status, body=None):
    if body is None:
        response = httpx.Response(status, request=REQUEST)
    else:
        response = httpx.Response(status, json=body, request=REQUEST)
    return httpx.HTTPStatusError("error", request=REQUEST, response=response)


@pytest.mark.unit
def test_map_timeout():
    error = map_http_error(httpx.ReadTimeout("timed out", request=REQUEST), "fetching content 9")
    assert error.code == "http_request_timeout"
    assert "did not respond in time while fetching content 9" in error.message
    assert error.status is None


@pytest.mark.unit
def test_map_connect_error():
    error = map_http_error(httpx.ConnectError("refused", request=REQUEST), "fetching content 9")
    assert error.code == "http_request_failed"
    assert error.message == "Could not connect to WordPress while fetching content 9"


@pytest.mark.unit
def test_map_rest_error_body():
    """WordPress REST error codes and messages are preserved."""
    error = map_http_error(
        _status_error(404, {"code": "rest_post_invalid_id", "message": "Invalid post ID."}),
        "fetching content 9",
    )
    assert error.code == "rest_post_invalid_id"
    assert error.message == "Resource not found while fetching content 9: Invalid post ID."
    assert error.status == 404


@pytest.mark.unit
@pytest.mark.parametrize("status,prefix", [
    (401, "Authentication with WordPress failed while"),
    (403, "Permission denied while"),
    (404, "Resource not found while"),
    (500, "WordPress server error while"),
    (503, "WordPress server error while"),
    (400, "WordPress rejected the request while"),
])
def test_map_status_codes(status, prefix):
    error = map_http_error(_status_error(status), "updating term 3")
    assert error.message.startswith(f"{prefix} updating term 3")
    assert error.code == f"http_{status}"
    assert error.status == status


@pytest.mark.unit
def test_map_non_json_body_uses_reason_phrase():
    response = httpx.Response(502, text="<html>Bad Gateway</html>", request=REQUEST)
    error = map_http_error(
        httpx.HTTPStatusError("error", request=REQUEST, response=response),
        "listing taxonomies",
    )
    assert error.message == "WordPress server error while listing taxonomies: Bad Gateway"
