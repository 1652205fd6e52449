"""
Parameter Schema Conversion
Converts Composio JSON schemas into the ElevenLabs webhook tool schema.

ElevenLabs rejects leaf parameters without a description, so one is
synthesized wherever the source omits it. Conversion is total: malformed
input degrades to an empty object or a string leaf instead of raising.
"""

from typing import Any, Dict, List, Optional

MAX_DEPTH = 32

LEAF_DESCRIPTIONS = {
    "integer": "Integer value",
    "number": "Number value",
    "boolean": "Boolean value",
    "string": "String value",
}


def _empty_object() -> Dict[str, Any]:
    return {"type": "object", "properties": {}, "required": []}


def _string_leaf(description: str = "Parameter value") -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _declared_type(node: Dict[str, Any]) -> Optional[str]:
    """Primary type of a node; unions like ["string", "null"] resolve to the first non-null"""
    declared = node.get("type")
    if isinstance(declared, str):
        return declared
    if isinstance(declared, list):
        for member in declared:
            if isinstance(member, str) and member != "null":
                return member
    return None


def _description(node: Dict[str, Any]) -> Optional[str]:
    description = node.get("description")
    if isinstance(description, str) and description.strip():
        return description
    return None


def _first_variant(node: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """First non-null branch of an anyOf/oneOf node"""
    for key in ("anyOf", "oneOf"):
        variants = node.get(key)
        if not isinstance(variants, list):
            continue
        for variant in variants:
            if isinstance(variant, dict) and _declared_type(variant) != "null":
                return variant
    return None


def convert_schema(node: Any, _depth: int = 0) -> Dict[str, Any]:
    """
    Convert an object schema to {"type": "object", "properties", "required"}

    Anything that is not an object schema converts to an empty object.
    """
    if not isinstance(node, dict) or _declared_type(node) != "object":
        return _empty_object()
    if _depth >= MAX_DEPTH:
        return _empty_object()

    properties: Dict[str, Any] = {}
    required: List[str] = []

    declared_properties = node.get("properties")
    declared_required = node.get("required")
    if not isinstance(declared_required, list):
        declared_required = []

    if isinstance(declared_properties, dict):
        for key, prop in declared_properties.items():
            name = str(key)
            properties[name] = convert_property(prop, _depth + 1)
            if key in declared_required:
                required.append(name)

    result = {"type": "object", "properties": properties, "required": required}

    description = _description(node)
    if description:
        result["description"] = description

    return result


def convert_property(node: Any, _depth: int = 0) -> Dict[str, Any]:
    """Convert a single property schema into an ElevenLabs parameter descriptor"""
    if not isinstance(node, dict) or _depth >= MAX_DEPTH:
        return _string_leaf()

    declared = _declared_type(node)

    if declared is None:
        variant = _first_variant(node)
        if variant is not None:
            merged = dict(variant)
            if _description(node):
                merged["description"] = node["description"]
            return convert_property(merged, _depth + 1)

    if declared == "array":
        items = node.get("items")
        return {
            "type": "array",
            "description": _description(node) or "Array parameter",
            "items": (
                convert_property(items, _depth + 1)
                if items
                else _string_leaf("Array item")
            ),
        }

    if declared == "object":
        return convert_schema(node, _depth)

    leaf_type = declared or "string"
    result = {
        "type": leaf_type,
        "description": _description(node) or LEAF_DESCRIPTIONS.get(leaf_type, "Parameter value"),
    }

    enum = node.get("enum")
    if isinstance(enum, list):
        result["enum"] = enum

    return result
