"""
Validation rule vocabulary for tool parameter schemas.

A schema maps each parameter name to an ordered tuple of rules. Rules are
immutable values built once when a tool is defined.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping


class ValueType(Enum):
    """Value types a TypeIs rule can demand."""
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    ARRAY = "array"
    EMAIL = "email"
    URL = "url"


class Rule:
    """Base class for all validation rules."""

    __slots__ = ()


@dataclass(frozen=True)
class Required(Rule):
    """The field must be present and not None."""


@dataclass(frozen=True)
class Optional(Rule):
    """The field may be omitted; rules only run when a value is given."""


@dataclass(frozen=True)
class TypeIs(Rule):
    """The value must be of the given type."""
    kind: ValueType


@dataclass(frozen=True)
class Min(Rule):
    """Inclusive lower bound for numbers (or length for countables)."""
    limit: float


@dataclass(frozen=True)
class Max(Rule):
    """Inclusive upper bound for numbers (or length for countables)."""
    limit: float


@dataclass(frozen=True)
class MinLength(Rule):
    """Inclusive lower bound on string length."""
    length: int


@dataclass(frozen=True)
class MaxLength(Rule):
    """Inclusive upper bound on string length."""
    length: int


@dataclass(frozen=True)
class OneOf(Rule):
    """Exact, case-sensitive membership in a fixed set of strings."""
    values: tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class NotEmpty(Rule):
    """The raw value must have non-zero length."""


# Shorthands used by tool definitions
REQUIRED = Required()
OPTIONAL = Optional()
NOT_EMPTY = NotEmpty()
STRING = TypeIs(ValueType.STRING)
INT = TypeIs(ValueType.INT)
FLOAT = TypeIs(ValueType.FLOAT)
BOOL = TypeIs(ValueType.BOOL)
ARRAY = TypeIs(ValueType.ARRAY)
EMAIL = TypeIs(ValueType.EMAIL)
URL = TypeIs(ValueType.URL)

Schema = Mapping[str, tuple[Rule, ...]]


def is_required(rules: Iterable[Rule]) -> bool:
    """Return True if the field's rules mark it as required."""
    return any(isinstance(rule, Required) for rule in rules)


def freeze_schema(schema: Mapping[str, Iterable[Any]]) -> dict[str, tuple[Rule, ...]]:
    """Check a schema definition and return it with tuple rule lists.

    Args:
        schema: Mapping of field name to rules

    Returns:
        A new dict with each rule list converted to a tuple

    Raises:
        ValueError: If a field mixes Required and Optional, or carries
            something that is not a Rule
    """
    frozen: dict[str, tuple[Rule, ...]] = {}
    for field_name, rules in schema.items():
        rules = tuple(rules)
        for rule in rules:
            if not isinstance(rule, Rule):
                raise ValueError(
                    f"Field '{field_name}' has an invalid rule: {rule!r}"
                )
        if is_required(rules) and any(isinstance(r, Optional) for r in rules):
            raise ValueError(
                f"Field '{field_name}' cannot be both required and optional"
            )
        frozen[field_name] = rules
    return frozen
