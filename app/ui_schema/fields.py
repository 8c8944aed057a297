"""Field extraction from resolved object schemas."""
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from app.ui_schema.naming import humanize, stringify_enum_value
from app.ui_schema.resolver import resolve_object_schema, resolve_schema
from app.ui_schema.types import UiField

_DIRECT_TYPES = {"string", "number", "integer", "boolean", "array"}


def _composite_type(schema: Dict[str, Any]) -> Optional[str]:
    if "oneOf" in schema or "anyOf" in schema:
        return "unknown"
    return None


def declared_type(schema: Dict[str, Any]) -> Any:
    """The schema's `type`, taking the first non-null entry of a list type."""
    declared = schema.get("type")
    if isinstance(declared, list):
        # OpenAPI 3.1 style ["string", "null"]
        declared = next((t for t in declared if t != "null"), None)
    return declared


def _declared_type(schema: Dict[str, Any]) -> Optional[str]:
    declared = declared_type(schema)
    if declared in _DIRECT_TYPES:
        return declared
    return None


def _object_type(schema: Dict[str, Any]) -> Optional[str]:
    if declared_type(schema) == "object" or isinstance(schema.get("properties"), dict):
        return "object"
    return None


# Tried in order; the first non-None result is the field type
FIELD_TYPE_STRATEGIES: Sequence[Callable[[Dict[str, Any]], Optional[str]]] = (
    _composite_type,
    _declared_type,
    _object_type,
)


def field_type(schema: Dict[str, Any]) -> str:
    for strategy in FIELD_TYPE_STRATEGIES:
        result = strategy(schema)
        if result is not None:
            return result
    return "unknown"


def enum_values(schema: Dict[str, Any]) -> Optional[Tuple[str, ...]]:
    raw = schema.get("enum")
    if not isinstance(raw, list):
        return None
    return tuple(sorted({stringify_enum_value(v) for v in raw}))


def build_field(name: str, schema: Dict[str, Any], required: bool) -> UiField:
    fmt = schema.get("format")
    return UiField(
        name=name,
        label=humanize(name),
        type=field_type(schema),
        required=required,
        format=fmt if isinstance(fmt, str) else None,
        read_only=schema.get("readOnly") is True,
        write_only=schema.get("writeOnly") is True,
        enum=enum_values(schema),
    )


def extract_fields(schema: Any, schemas: Dict[str, Any]) -> List[UiField]:
    """Turn a (possibly referenced, array-wrapped) object schema into sorted fields."""
    resolved = resolve_object_schema(schema, schemas)
    if resolved is None:
        return []

    properties = resolved.get("properties")
    if not isinstance(properties, dict):
        return []
    required = resolved.get("required")
    required_names = {r for r in required if isinstance(r, str)} if isinstance(required, list) else set()

    fields = []
    for name, prop in sorted(((str(k), v) for k, v in properties.items()), key=lambda kv: kv[0]):
        prop_schema = resolve_schema(prop, schemas)
        fields.append(build_field(name, prop_schema, name in required_names))
    return fields
