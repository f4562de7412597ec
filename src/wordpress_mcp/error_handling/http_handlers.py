"""
HTTP error handling utilities.

Maps failures talking to the WordPress REST API to WPError values with
user-friendly messages.
"""

from typing import Any

import httpx

from ..models import WPError


def _rest_error_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a WordPress REST error body ({"code": ..., "message": ...})."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def map_http_error(error: httpx.HTTPError, operation: str) -> WPError:
    """Map an httpx error to a WPError.

    Args:
        error: The httpx error
        operation: Description of the operation that failed (e.g., "fetching post 5")

    Returns:
        WPError carrying a WordPress-style code, a readable message, and the
        HTTP status when one was received
    """
    if isinstance(error, httpx.TimeoutException):
        return WPError(
            code="http_request_timeout",
            message=f"WordPress did not respond in time while {operation}",
        )

    if isinstance(error, httpx.ConnectError):
        return WPError(
            code="http_request_failed",
            message=f"Could not connect to WordPress while {operation}",
        )

    if not isinstance(error, httpx.HTTPStatusError):
        return WPError(
            code="http_request_failed",
            message=f"HTTP error while {operation}: {error}",
        )

    response = error.response
    status = response.status_code
    body = _rest_error_body(response)
    code = body.get("code") or f"http_{status}"
    detail = body.get("message") or response.reason_phrase

    if status == 401:
        message = f"Authentication with WordPress failed while {operation}"
    elif status == 403:
        message = f"Permission denied while {operation}"
    elif status == 404:
        message = f"Resource not found while {operation}"
    elif status >= 500:
        message = f"WordPress server error while {operation}"
    else:
        message = f"WordPress rejected the request while {operation}"

    if detail:
        message = f"{message}: {detail}"

    return WPError(code=code, message=message, status=status)
