"""Tests for the HTTP API: compiler endpoints and the mock backend."""
import pytest
from fastapi.testclient import TestClient
from app.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def test_health(client):
    resp = client.get("/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_loaded_ui_schema_is_sample(client):
    resp = client.get("/v1/ui-schema")
    assert resp.status_code == 200
    data = resp.json()
    assert data["version"] == 1
    assert list(data["entities"]) == ["Todo"]
    assert data["entities"]["Todo"]["primaryKey"] == "id"


def test_compile_document(client):
    document = {
        "openapi": "3.0.0",
        "paths": {
            "/books": {"get": {}, "post": {}},
            "/books/{isbn}": {"get": {}},
        },
    }
    resp = client.post("/v1/ui-schema", json=document)
    assert resp.status_code == 200
    book = resp.json()["entities"]["Book"]
    assert book["resourcePath"] == "/books"
    assert sorted(book["endpoints"]) == ["create", "list", "read"]
    assert book["fields"] == []


def test_compile_rejects_swagger_2(client):
    resp = client.post("/v1/ui-schema", json={"swagger": "2.0", "paths": {}})
    assert resp.status_code == 422
    assert "OpenAPI" in resp.json()["detail"]


class TestMockRecords:
    """Mock CRUD routes over the sample Todo entity."""

    def test_list(self, client):
        client.post("/v1/mock/Todo/reset")
        resp = client.get("/v1/mock/Todo/records")
        assert resp.status_code == 200
        body = resp.json()
        assert body["entity_id"] == "Todo"
        assert body["total"] == len(body["items"]) == 5

    def test_create_read_update_delete(self, client):
        client.post("/v1/mock/Todo/reset")
        resp = client.post(
            "/v1/mock/Todo/records",
            json={"values": {"title": "Ship it", "done": False, "priority": "high"}},
        )
        assert resp.status_code == 201
        record_id = resp.json()["record_id"]
        assert record_id == "6"

        resp = client.get(f"/v1/mock/Todo/records/{record_id}")
        assert resp.status_code == 200
        assert resp.json()["record"]["title"] == "Ship it"

        resp = client.patch(f"/v1/mock/Todo/records/{record_id}", json={"values": {"done": True}})
        assert resp.status_code == 200
        assert resp.json()["record"]["done"] is True

        resp = client.delete(f"/v1/mock/Todo/records/{record_id}")
        assert resp.status_code == 200
        assert resp.json() == {"deleted": True}

        resp = client.get(f"/v1/mock/Todo/records/{record_id}")
        assert resp.status_code == 404

    def test_create_validation_error(self, client):
        resp = client.post("/v1/mock/Todo/records", json={"values": {"title": "Only a title"}})
        assert resp.status_code == 422
        assert resp.json()["detail"]["missing"] == ["done", "priority"]

    def test_unknown_entity(self, client):
        assert client.get("/v1/mock/Ghost/records").status_code == 404
        assert client.post("/v1/mock/Ghost/reset").status_code == 404


def test_undeclared_action_is_not_allowed(client):
    """Actions missing from the entity's endpoints are refused."""
    from app.mock.store import MockBackend
    from app.ui_schema.parser import parse_openapi_to_ui_schema

    ui = parse_openapi_to_ui_schema({"openapi": "3.0.0", "paths": {"/logs": {"get": {}}}})
    original = client.app.state.mock_backend
    client.app.state.mock_backend = MockBackend.from_ui_schema(ui, seed_rows=1)
    try:
        assert client.get("/v1/mock/Log/records").status_code == 200
        assert client.post("/v1/mock/Log/records", json={"values": {}}).status_code == 405
        assert client.delete("/v1/mock/Log/records/Log:0").status_code == 405
    finally:
        client.app.state.mock_backend = original


def test_create_conflicts_on_taken_primary_key(client):
    from app.mock.store import MockBackend
    from app.ui_schema.parser import parse_openapi_to_ui_schema

    note = {"type": "object", "properties": {"id": {"type": "string"}, "body": {"type": "string"}}}
    document = {
        "openapi": "3.0.3",
        "paths": {
            "/notes": {
                "post": {"requestBody": {"content": {"application/json": {"schema": note}}}},
            },
        },
    }
    original = client.app.state.mock_backend
    client.app.state.mock_backend = MockBackend.from_ui_schema(parse_openapi_to_ui_schema(document), seed_rows=2)
    try:
        resp = client.post("/v1/mock/Note/records", json={"values": {"id": "2", "body": "clash"}})
        assert resp.status_code == 409
        resp = client.post("/v1/mock/Note/records", json={"values": {"body": "fresh"}})
        assert resp.status_code == 201
        assert resp.json()["record_id"] == "3"
    finally:
        client.app.state.mock_backend = original
