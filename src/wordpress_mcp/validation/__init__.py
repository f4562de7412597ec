"""
Parameter validation for WordPress MCP tools.

Provides the rule vocabulary, the validation engine, and the JSON input
schema compiler that all derive from the same rule declarations.
"""

from .rules import (
    Rule,
    ValueType,
    Required,
    Optional,
    TypeIs,
    Min,
    Max,
    MinLength,
    MaxLength,
    OneOf,
    NotEmpty,
    Schema,
    freeze_schema,
    is_required,
)
from .validators import (
    validate,
    validate_field,
    assert_valid,
    check_rule,
)
from .schema import (
    compile_input_schema,
    infer_json_type,
)

__all__ = [
    # Rules
    "Rule",
    "ValueType",
    "Required",
    "Optional",
    "TypeIs",
    "Min",
    "Max",
    "MinLength",
    "MaxLength",
    "OneOf",
    "NotEmpty",
    "Schema",
    "freeze_schema",
    "is_required",
    # Engine
    "validate",
    "validate_field",
    "assert_valid",
    "check_rule",
    # Schema compiler
    "compile_input_schema",
    "infer_json_type",
]
