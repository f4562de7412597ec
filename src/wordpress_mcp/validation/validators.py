"""
Parameter validation engine for MCP tools.

Evaluates a tool's rule schema against the raw arguments sent by a client.
Every field is checked; within a field the first failing rule wins.
"""

import re
from collections.abc import Mapping, Sized
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

from . import rules as r
from ..error_handling.errors import ValidationFailed

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

URL_SCHEMES = ("http", "https", "ftp", "ftps")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_valid_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme.lower() in URL_SCHEMES and bool(parts.netloc)


def _matches_type(kind: r.ValueType, value: Any) -> bool:
    if kind is r.ValueType.STRING:
        return isinstance(value, str)
    if kind is r.ValueType.INT:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind is r.ValueType.FLOAT:
        return isinstance(value, float)
    if kind is r.ValueType.BOOL:
        return isinstance(value, bool)
    if kind is r.ValueType.ARRAY:
        return isinstance(value, (list, tuple, Mapping))
    if kind is r.ValueType.EMAIL:
        return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None
    if kind is r.ValueType.URL:
        return isinstance(value, str) and _is_valid_url(value)
    raise TypeError(f"Unhandled value type: {kind!r}")


def _check_type(rule: r.TypeIs, value: Any) -> Optional[str]:
    if _matches_type(rule.kind, value):
        return None
    if rule.kind is r.ValueType.EMAIL:
        return "must be a valid email"
    if rule.kind is r.ValueType.URL:
        return "must be a valid URL"
    return f"must be of type {rule.kind.value}"


def _measure(value: Any) -> Optional[float]:
    """Numeric size of a value for Min/Max bounds, or None if not comparable."""
    if _is_number(value):
        return value
    if isinstance(value, Sized):
        return len(value)
    return None


def _check_min(rule: r.Min, value: Any) -> Optional[str]:
    size = _measure(value)
    if size is None or size < rule.limit:
        return f"must be at least {rule.limit}"
    return None


def _check_max(rule: r.Max, value: Any) -> Optional[str]:
    size = _measure(value)
    if size is None or size > rule.limit:
        return f"must be at most {rule.limit}"
    return None


def _check_min_length(rule: r.MinLength, value: Any) -> Optional[str]:
    if not isinstance(value, str) or len(value) < rule.length:
        return f"must have a length of at least {rule.length}"
    return None


def _check_max_length(rule: r.MaxLength, value: Any) -> Optional[str]:
    if not isinstance(value, str) or len(value) > rule.length:
        return f"must have a length of at most {rule.length}"
    return None


def _check_one_of(rule: r.OneOf, value: Any) -> Optional[str]:
    if isinstance(value, str) and value in rule.values:
        return None
    return f"must be one of: {', '.join(rule.values)}"


def _check_not_empty(rule: r.NotEmpty, value: Any) -> Optional[str]:
    if isinstance(value, Sized) and len(value) == 0:
        return "must not be empty"
    return None


_CHECKS: dict[type, Callable[[Any, Any], Optional[str]]] = {
    r.TypeIs: _check_type,
    r.Min: _check_min,
    r.Max: _check_max,
    r.MinLength: _check_min_length,
    r.MaxLength: _check_max_length,
    r.OneOf: _check_one_of,
    r.NotEmpty: _check_not_empty,
}


def check_rule(rule: r.Rule, value: Any) -> Optional[str]:
    """Apply a single value rule.

    Args:
        rule: The rule to apply (not Required/Optional)
        value: The value to check

    Returns:
        A violation message without the field prefix, or None if it passes
    """
    try:
        check = _CHECKS[type(rule)]
    except KeyError:
        raise TypeError(f"Unsupported validation rule: {rule!r}") from None
    return check(rule, value)


def validate_field(name: str, rules: tuple[r.Rule, ...], value: Any) -> Optional[str]:
    """Validate one field, returning its error message or None."""
    if value is None:
        if r.is_required(rules):
            return f"Field '{name}' is required"
        return None

    for rule in rules:
        if isinstance(rule, (r.Required, r.Optional)):
            continue
        problem = check_rule(rule, value)
        if problem is not None:
            return f"Field '{name}' {problem}"

    return None


def validate(parameters: Mapping[str, Any], schema: r.Schema) -> dict[str, str]:
    """Validate parameters against a rule schema.

    Args:
        parameters: Raw tool arguments
        schema: Mapping of field name to ordered rules

    Returns:
        Mapping of field name to error message. Empty when valid.
    """
    errors: dict[str, str] = {}
    for name, rules in schema.items():
        problem = validate_field(name, rules, parameters.get(name))
        if problem is not None:
            errors[name] = problem
    return errors


def assert_valid(parameters: Mapping[str, Any], schema: r.Schema) -> None:
    """Validate parameters and raise if any field fails.

    Raises:
        ValidationFailed: With the per-field error report
    """
    errors = validate(parameters, schema)
    if errors:
        raise ValidationFailed("Validation failed", errors)
