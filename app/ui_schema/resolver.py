"""Schema resolver: follows $ref, merges allOf, unwraps array items.

Resolution never mutates the document. Cycle protection uses the set of
component names visited on the current resolution chain; the set is a
frozenset handed down by value so sibling allOf branches never see each
other's visits.
"""
import logging
from typing import Any, Dict, FrozenSet, Optional

from app.core.workflow import CompileStage

log = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"

# Keywords where the last allOf branch that sets them wins
_LAST_WINS_KEYS = ("type", "format", "items", "enum", "oneOf", "anyOf")


def component_schemas(document: Dict[str, Any]) -> Dict[str, Any]:
    components = document.get("components") or {}
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas") or {}
    return schemas if isinstance(schemas, dict) else {}


def ref_name(schema: Any) -> Optional[str]:
    """Component schema name of a `#/components/schemas/<name>` reference."""
    if not isinstance(schema, dict):
        return None
    ref = schema.get("$ref")
    if not isinstance(ref, str) or not ref.startswith(SCHEMA_REF_PREFIX):
        return None
    name = ref[len(SCHEMA_REF_PREFIX):]
    return name or None


def schema_ref(name: str) -> Dict[str, str]:
    return {"$ref": f"{SCHEMA_REF_PREFIX}{name}"}


def resolve_schema(
    schema: Any,
    schemas: Dict[str, Any],
    seen: FrozenSet[str] = frozenset(),
) -> Dict[str, Any]:
    """Resolve `schema` against the component `schemas`.

    Returns a new dict with references followed and allOf merged. A reference
    to a missing component, or to a component already on this chain, is
    returned as-is (the ref node itself) so resolution always terminates.
    """
    if not isinstance(schema, dict):
        return {}

    if "$ref" in schema:
        name = ref_name(schema)
        if name is None or name not in schemas or name in seen:
            log.debug(
                f"Leaving reference unresolved: {schema.get('$ref')}",
                extra={"stage": CompileStage.RESOLVE_SCHEMA.value},
            )
            return schema
        return resolve_schema(schemas[name], schemas, seen | {name})

    branches = schema.get("allOf")
    if not isinstance(branches, list) or not branches:
        return dict(schema)

    merged = {k: v for k, v in schema.items() if k != "allOf"}
    for branch in branches:
        merged = merge_schemas(merged, resolve_schema(branch, schemas, seen))
    return merged


def merge_schemas(base: Dict[str, Any], branch: Dict[str, Any]) -> Dict[str, Any]:
    """Fold one resolved allOf branch into the accumulated schema."""
    merged = dict(base)

    for key in _LAST_WINS_KEYS:
        if key in branch:
            merged[key] = branch[key]

    for flag in ("readOnly", "writeOnly"):
        if base.get(flag) is True or branch.get(flag) is True:
            merged[flag] = True

    required = _names(base.get("required")) | _names(branch.get("required"))
    if required:
        merged["required"] = sorted(required)

    base_props = base.get("properties")
    branch_props = branch.get("properties")
    if isinstance(base_props, dict) or isinstance(branch_props, dict):
        properties = dict(base_props) if isinstance(base_props, dict) else {}
        if isinstance(branch_props, dict):
            properties.update(branch_props)
        merged["properties"] = properties

    return merged


def _names(value: Any) -> set:
    if not isinstance(value, list):
        return set()
    return {v for v in value if isinstance(v, str)}


def is_object_shaped(schema: Dict[str, Any]) -> bool:
    return schema.get("type") == "object" or isinstance(schema.get("properties"), dict)


def resolve_object_schema(schema: Any, schemas: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Resolve a schema down to the object whose properties become fields.

    Arrays are unwrapped to their items; a chain of array/ref hops that comes
    back to a component already visited stops with None.
    """
    seen: FrozenSet[str] = frozenset()
    current = schema
    while isinstance(current, dict):
        name = ref_name(current)
        if name is not None:
            if name in seen:
                return None
            resolved = resolve_schema(current, schemas, seen)
            seen = seen | {name}
        else:
            resolved = resolve_schema(current, schemas, seen)

        if resolved.get("type") == "array" and isinstance(resolved.get("items"), dict):
            current = resolved["items"]
            continue
        return resolved if is_object_shaped(resolved) else None
    return None
