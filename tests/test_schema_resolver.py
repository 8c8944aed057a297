"""Tests for $ref resolution, allOf merging and cycle protection."""
import copy
from app.ui_schema.resolver import (
    is_object_shaped,
    ref_name,
    resolve_object_schema,
    resolve_schema,
)


def ref(name):
    return {"$ref": f"#/components/schemas/{name}"}


def test_ref_name():
    assert ref_name(ref("User")) == "User"
    assert ref_name({"$ref": "#/components/responses/NotFound"}) is None
    assert ref_name({"$ref": "other.yaml#/User"}) is None
    assert ref_name({"type": "string"}) is None
    assert ref_name(None) is None


def test_follows_reference_chain():
    schemas = {
        "A": ref("B"),
        "B": {"type": "object", "properties": {"x": {"type": "string"}}},
    }
    assert resolve_schema(ref("A"), schemas) == schemas["B"]


def test_missing_reference_returns_ref_node():
    node = ref("Missing")
    assert resolve_schema(node, {}) is node


def test_self_reference_terminates():
    schemas = {"A": {"allOf": [ref("A")]}}
    resolved = resolve_schema(ref("A"), schemas)
    assert "allOf" not in resolved
    assert not is_object_shaped(resolved)


def test_mutual_reference_terminates():
    schemas = {"A": ref("B"), "B": ref("A")}
    assert resolve_schema(ref("A"), schemas) == ref("A")


def test_all_of_merge_rules():
    schemas = {
        "Base": {
            "type": "object",
            "required": ["id", "name"],
            "properties": {"id": {"type": "string"}, "name": {"type": "string"}},
        },
    }
    schema = {
        "allOf": [
            ref("Base"),
            {
                "format": "custom",
                "readOnly": True,
                "required": ["name", "age"],
                "properties": {"name": {"type": "integer"}, "age": {"type": "integer"}},
            },
            {"type": "object", "writeOnly": False},
        ]
    }
    merged = resolve_schema(schema, schemas)
    assert merged["type"] == "object"
    assert merged["format"] == "custom"
    assert merged["readOnly"] is True
    assert "writeOnly" not in merged
    assert merged["required"] == ["age", "id", "name"]
    assert merged["properties"] == {
        "id": {"type": "string"},
        "name": {"type": "integer"},
        "age": {"type": "integer"},
    }


def test_sibling_branches_do_not_share_visited_names():
    """The same component may appear in two sibling branches."""
    schemas = {
        "Stamp": {"properties": {"createdAt": {"type": "string"}}},
        "Owner": {"allOf": [ref("Stamp"), {"properties": {"owner": {"type": "string"}}}]},
    }
    merged = resolve_schema({"allOf": [ref("Stamp"), ref("Owner")]}, schemas)
    assert set(merged["properties"]) == {"createdAt", "owner"}


def test_one_of_is_not_merged():
    schema = {"oneOf": [{"type": "string"}, {"type": "integer"}]}
    assert resolve_schema(schema, {}) == schema


def test_resolution_does_not_mutate_document():
    schemas = {
        "Base": {"required": ["a"], "properties": {"a": {"type": "string"}}},
        "Child": {"allOf": [ref("Base"), {"required": ["b"], "properties": {"b": {"type": "string"}}}]},
    }
    snapshot = copy.deepcopy(schemas)
    resolve_schema(ref("Child"), schemas)
    assert schemas == snapshot


def test_resolve_object_schema_unwraps_arrays():
    schemas = {"Item": {"type": "object", "properties": {"sku": {"type": "string"}}}}
    resolved = resolve_object_schema({"type": "array", "items": ref("Item")}, schemas)
    assert resolved == schemas["Item"]


def test_resolve_object_schema_stops_on_array_cycle():
    schemas = {"List": {"type": "array", "items": ref("List")}}
    assert resolve_object_schema(ref("List"), schemas) is None


def test_resolve_object_schema_rejects_scalars():
    assert resolve_object_schema({"type": "string"}, {}) is None
    assert resolve_object_schema(ref("Missing"), {}) is None


def test_all_of_keeps_composite_keywords():
    schemas = {"Shape": {"type": "object", "anyOf": [{"required": ["r"]}, {"required": ["w"]}]}}
    merged = resolve_schema({"allOf": [ref("Shape")]}, schemas)
    assert merged["anyOf"] == [{"required": ["r"]}, {"required": ["w"]}]
    assert merged["type"] == "object"
