"""
JSON input schema generation for tool advertisement.

The document produced here tells MCP clients what shape a tool expects.
It is never used to validate calls; validators.validate does that.
"""

from typing import Any

from . import rules as r

# Rule types that change the advertised JSON type. Other TypeIs kinds
# (float, email, url) leave the current inference alone.
_ADVERTISED_TYPES = {
    r.ValueType.STRING: "string",
    r.ValueType.INT: "integer",
    r.ValueType.BOOL: "boolean",
    r.ValueType.ARRAY: "array",
}


def infer_json_type(rules: tuple[r.Rule, ...]) -> str:
    """Infer the advertised JSON type for a field. The last type rule wins."""
    json_type = "string"
    for rule in rules:
        if isinstance(rule, r.TypeIs) and rule.kind in _ADVERTISED_TYPES:
            json_type = _ADVERTISED_TYPES[rule.kind]
    return json_type


def compile_input_schema(schema: r.Schema) -> dict[str, Any]:
    """Build the JSON Schema object advertised for a tool.

    Args:
        schema: Mapping of field name to ordered rules

    Returns:
        Dictionary with keys:
        - type: always "object"
        - properties: field name to {"type": ...}
        - required: names of fields carrying a Required rule
    """
    properties = {}
    required = []

    for name, rules in schema.items():
        if r.is_required(rules):
            required.append(name)
        properties[name] = {"type": infer_json_type(rules)}

    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }
