"""Tests for field extraction and field typing."""
from app.ui_schema.fields import enum_values, extract_fields, field_type


def ref(name):
    return {"$ref": f"#/components/schemas/{name}"}


class TestFieldType:
    """Field typing strategies, in priority order."""

    def test_composites_are_unknown(self):
        assert field_type({"type": "string", "oneOf": [{}]}) == "unknown"
        assert field_type({"anyOf": [{"type": "integer"}]}) == "unknown"

    def test_direct_types(self):
        for t in ("string", "number", "integer", "boolean", "array"):
            assert field_type({"type": t}) == t

    def test_object_types(self):
        assert field_type({"type": "object"}) == "object"
        assert field_type({"properties": {}}) == "object"

    def test_nullable_type_list(self):
        assert field_type({"type": ["null", "integer"]}) == "integer"

    def test_unknown_fallback(self):
        assert field_type({}) == "unknown"
        assert field_type({"type": "file"}) == "unknown"
        assert field_type(ref("Missing")) == "unknown"


def test_enum_values_are_stringified_and_sorted():
    assert enum_values({"enum": ["b", "a", "b"]}) == ("a", "b")
    assert enum_values({"enum": [3, 1, 2]}) == ("1", "2", "3")
    assert enum_values({"enum": [True, False, None]}) == ("false", "null", "true")
    assert enum_values({"type": "string"}) is None


def test_extract_fields_sorted_with_metadata():
    schemas = {
        "Status": {"type": "string", "enum": ["open", "closed"]},
        "Address": {"type": "object", "properties": {"city": {"type": "string"}}},
    }
    schema = {
        "type": "object",
        "required": ["title", "status"],
        "properties": {
            "title": {"type": "string"},
            "status": ref("Status"),
            "address": ref("Address"),
            "tags": {"type": "array", "items": {"type": "string"}},
            "secret": {"type": "string", "writeOnly": True},
            "choice": {"oneOf": [{"type": "string"}, {"type": "integer"}]},
        },
    }
    fields = extract_fields(schema, schemas)
    assert [f.name for f in fields] == ["address", "choice", "secret", "status", "tags", "title"]

    by_name = {f.name: f for f in fields}
    assert by_name["address"].type == "object"
    assert by_name["choice"].type == "unknown"
    assert by_name["secret"].write_only is True
    assert by_name["status"].type == "string"
    assert by_name["status"].enum == ("closed", "open")
    assert by_name["status"].required is True
    assert by_name["tags"].type == "array"
    assert by_name["title"].required is True
    assert by_name["tags"].required is False


def test_extract_fields_from_array_of_refs():
    schemas = {"Item": {"properties": {"sku": {"type": "string"}}}}
    fields = extract_fields({"type": "array", "items": ref("Item")}, schemas)
    assert [f.name for f in fields] == ["sku"]


def test_extract_fields_from_all_of_composition():
    schemas = {
        "Base": {"type": "object", "required": ["id"], "properties": {"id": {"type": "string", "readOnly": True}}},
        "Pet": {"allOf": [ref("Base"), {"required": ["name"], "properties": {"name": {"type": "string"}}}]},
    }
    fields = extract_fields(ref("Pet"), schemas)
    assert [(f.name, f.required, f.read_only) for f in fields] == [
        ("id", True, True),
        ("name", True, False),
    ]


def test_non_object_schemas_yield_no_fields():
    assert extract_fields({"type": "string"}, {}) == []
    assert extract_fields({"oneOf": [{"type": "object", "properties": {"a": {}}}]}, {}) == []
    assert extract_fields(ref("Missing"), {}) == []
    assert extract_fields(None, {}) == []


def test_composite_behind_all_of_stays_unknown():
    schemas = {
        "Pet": {
            "type": "object",
            "oneOf": [{"properties": {"bark": {"type": "boolean"}}}, {"properties": {"purr": {"type": "boolean"}}}],
        },
    }
    parent = {"properties": {"direct": ref("Pet"), "wrapped": {"allOf": [ref("Pet")]}}}
    fields = {f.name: f.type for f in extract_fields(parent, schemas)}
    assert fields == {"direct": "unknown", "wrapped": "unknown"}


def test_nullable_object_type_list():
    assert field_type({"type": ["object", "null"]}) == "object"
    assert field_type({"type": ["null", "object"]}) == "object"
