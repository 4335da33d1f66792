"""
Notes API — HTTP Endpoint Tests
================================

What:  End-to-end tests through the FastAPI app with an HTTPX AsyncClient.
How:   ASGITransport, a fresh app per test, data file in tmp_path.

What we test:
    ✅ CRUD scenarios, including restart from the persisted file
    ✅ 400 for malformed ids and bodies, 404 for unknown ids
    ✅ Error bodies carry an `error` string
    ✅ CORS headers and 204 preflight
    ✅ Static /docs catalog and /health
    ✅ 404/405 router errors and unhandled 500s use the same error body
"""

import json

import pytest
from httpx import AsyncClient, ASGITransport

from notes_api.config import Settings


class TestCreateAndList:

    @pytest.mark.asyncio
    async def test_create_on_empty_store(self, test_client):
        response = await test_client.post("/notes", json={"title": "A", "content": "B"})
        assert response.status_code == 201
        assert response.json() == {"id": 1, "title": "A", "content": "B"}

    @pytest.mark.asyncio
    async def test_list_returns_all_in_order(self, test_client):
        for title in ("one", "two"):
            await test_client.post("/notes", json={"title": title, "content": ""})

        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "title": "one", "content": ""},
            {"id": 2, "title": "two", "content": ""},
        ]

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_client_id_is_ignored(self, test_client):
        response = await test_client.post(
            "/notes", json={"id": 42, "title": "x", "content": "y"}
        )
        assert response.status_code == 201
        assert response.json()["id"] == 1

    @pytest.mark.asyncio
    async def test_missing_fields_default_to_empty(self, test_client):
        response = await test_client.post("/notes", json={"title": "only title"})
        assert response.status_code == 201
        assert response.json() == {"id": 1, "title": "only title", "content": ""}

    @pytest.mark.asyncio
    async def test_null_fields_become_empty(self, test_client):
        response = await test_client.post("/notes", json={"title": None, "content": "B"})
        assert response.status_code == 201
        assert response.json() == {"id": 1, "title": "", "content": "B"}

    @pytest.mark.asyncio
    async def test_create_persists_to_file(self, test_client, data_file):
        await test_client.post("/notes", json={"title": "A", "content": "B"})
        assert json.loads(data_file.read_text(encoding="utf-8")) == [
            {"id": 1, "title": "A", "content": "B"}
        ]


class TestInvalidBody:

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client):
        response = await test_client.post(
            "/notes",
            content=b'{"title": "A", ',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert isinstance(response.json()["error"], str)
        assert response.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_wrong_field_type(self, test_client):
        response = await test_client.post("/notes", json={"title": 5, "content": "B"})
        assert response.status_code == 400
        assert "title" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_array_body(self, test_client):
        response = await test_client.post("/notes", json=[{"title": "A"}])
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_body(self, test_client):
        response = await test_client.post("/notes")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_body_creates_nothing(self, test_client, data_file):
        await test_client.post("/notes", json={"title": ["not", "a", "string"]})
        assert (await test_client.get("/notes")).json() == []
        assert not data_file.exists()

    @pytest.mark.asyncio
    async def test_update_with_invalid_body(self, test_client):
        await test_client.post("/notes", json={"title": "A", "content": "B"})
        response = await test_client.put("/notes/1", json={"content": 1.5})
        assert response.status_code == 400
        assert (await test_client.get("/notes/1")).json()["content"] == "B"


class TestGetById:

    @pytest.mark.asyncio
    async def test_get_existing_and_missing(self, test_client):
        await test_client.post("/notes", json={"title": "A", "content": "B"})

        found = await test_client.get("/notes/1")
        missing = await test_client.get("/notes/99")

        assert found.status_code == 200
        assert found.json() == {"id": 1, "title": "A", "content": "B"}
        assert missing.status_code == 404
        assert missing.json()["error"] == "Note not found"
        assert missing.json()["code"] == "not_found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["abc", "1.5", "1e3", " 1", "0x10", "1_000"])
    async def test_non_numeric_id(self, test_client, bad_id):
        response = await test_client.get(f"/notes/{bad_id}")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid ID"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "bad_id",
        [
            "99999999999999999999999",
            "9223372036854775808",
            "-9223372036854775809",
            "1" * 5000,
        ],
    )
    async def test_id_outside_64_bit_range(self, test_client, bad_id):
        response = await test_client.get(f"/notes/{bad_id}")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid ID"

    @pytest.mark.asyncio
    async def test_largest_64_bit_id_is_valid(self, test_client):
        response = await test_client.get("/notes/9223372036854775807")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_signed_id_is_numeric(self, test_client):
        await test_client.post("/notes", json={"title": "A", "content": "B"})
        assert (await test_client.get("/notes/+1")).status_code == 200
        assert (await test_client.get("/notes/-1")).status_code == 404


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_existing(self, test_client):
        await test_client.post("/notes", json={"title": "A", "content": "B"})

        response = await test_client.put("/notes/1", json={"title": "X", "content": "Y"})

        assert response.status_code == 200
        assert response.json() == {"id": 1, "title": "X", "content": "Y"}
        assert (await test_client.get("/notes/1")).json() == response.json()

    @pytest.mark.asyncio
    async def test_update_cannot_change_id(self, test_client):
        await test_client.post("/notes", json={"title": "A", "content": "B"})
        response = await test_client.put(
            "/notes/1", json={"id": 7, "title": "X", "content": "Y"}
        )
        assert response.json()["id"] == 1
        assert (await test_client.get("/notes/7")).status_code == 404

    @pytest.mark.asyncio
    async def test_update_with_null_fields(self, test_client):
        await test_client.post("/notes", json={"title": "A", "content": "B"})
        response = await test_client.put("/notes/1", json={"title": None, "content": None})
        assert response.status_code == 200
        assert response.json() == {"id": 1, "title": "", "content": ""}

    @pytest.mark.asyncio
    async def test_update_missing(self, test_client):
        response = await test_client.put("/notes/5", json={"title": "X", "content": "Y"})
        assert response.status_code == 404
        assert (await test_client.get("/notes")).json() == []

    @pytest.mark.asyncio
    async def test_update_invalid_id(self, test_client):
        response = await test_client.put("/notes/abc", json={"title": "X", "content": "Y"})
        assert response.status_code == 400


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_then_get(self, test_client):
        await test_client.post("/notes", json={"title": "A", "content": "B"})

        response = await test_client.delete("/notes/1")

        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted"}
        assert (await test_client.get("/notes/1")).status_code == 404

    @pytest.mark.asyncio
    async def test_second_delete_is_not_found(self, test_client):
        await test_client.post("/notes", json={"title": "A", "content": "B"})
        await test_client.delete("/notes/1")
        response = await test_client.delete("/notes/1")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_invalid_id(self, test_client):
        response = await test_client.delete("/notes/abc")
        assert response.status_code == 400


class TestRestart:

    @pytest.mark.asyncio
    async def test_notes_survive_restart(self, client_factory, data_file):
        async with client_factory(data_file) as client:
            created = await client.post("/notes", json={"title": "A", "content": "B"})
            assert created.status_code == 201

        async with client_factory(data_file) as restarted:
            response = await restarted.get("/notes")
            assert response.status_code == 200
            assert response.json() == [{"id": 1, "title": "A", "content": "B"}]

            second = await restarted.post("/notes", json={"title": "C", "content": "D"})
            assert second.json()["id"] == 2

    @pytest.mark.asyncio
    async def test_malformed_file_starts_empty(self, client_factory, data_file):
        data_file.write_text("this is not json", encoding="utf-8")

        async with client_factory(data_file) as client:
            assert (await client.get("/notes")).json() == []
            health = (await client.get("/health")).json()
            assert health["status"] == "degraded"
            assert health["store"] == "not_loaded"

            created = await client.post("/notes", json={"title": "A", "content": "B"})
            assert created.json()["id"] == 1


class TestCrossOrigin:

    @pytest.mark.asyncio
    async def test_headers_on_success(self, test_client):
        response = await test_client.get("/notes")
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "DELETE" in response.headers["Access-Control-Allow-Methods"]
        assert "Content-Type" in response.headers["Access-Control-Allow-Headers"]

    @pytest.mark.asyncio
    async def test_headers_on_error(self, test_client):
        response = await test_client.get("/notes/99")
        assert response.status_code == 404
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/notes", "/notes/1", "/docs"])
    async def test_preflight_is_empty_204(self, test_client, path):
        response = await test_client.options(
            path,
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "PUT",
            },
        )
        assert response.status_code == 204
        assert response.content == b""
        assert response.headers["Access-Control-Allow-Origin"] == "*"


class TestServiceEndpoints:

    @pytest.mark.asyncio
    async def test_docs_catalog(self, test_client):
        response = await test_client.get("/docs")
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Notes API"
        assert {(e["method"], e["path"]) for e in body["endpoints"]} == {
            ("GET", "/notes"),
            ("POST", "/notes"),
            ("GET", "/notes/{id}"),
            ("PUT", "/notes/{id}"),
            ("DELETE", "/notes/{id}"),
        }

    @pytest.mark.asyncio
    async def test_health(self, test_client, data_file):
        await test_client.post("/notes", json={"title": "A", "content": "B"})
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == "loaded"
        assert body["note_count"] == 1
        assert body["data_file"] == str(data_file)

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/notes/99", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
        assert response.json()["request_id"] == "abc123"

    @pytest.mark.asyncio
    async def test_unusable_request_id_is_replaced(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "x" * 100})
        assert response.headers["X-Request-ID"] != "x" * 100
        assert len(response.headers["X-Request-ID"]) == 8


class TestRouterErrors:
    """Unknown paths and unsupported methods use the same error body."""

    @pytest.mark.asyncio
    async def test_unknown_path(self, test_client):
        response = await test_client.get("/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"
        assert response.json()["code"] == "not_found"
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.asyncio
    async def test_unsupported_method(self, test_client):
        response = await test_client.patch("/notes/1", json={"title": "X"})
        assert response.status_code == 405
        assert response.json()["error"] == "Method Not Allowed"
        assert response.json()["code"] == "method_not_allowed"
        assert "Allow" in response.headers


class TestUnexpectedError:
    """Unhandled exceptions become a 500 that still carries CORS headers."""

    @pytest.mark.asyncio
    async def test_500_has_error_body_and_cors_headers(self, data_file):
        from notes_api.main import create_app

        app = create_app(Settings(data_file=str(data_file), log_level="WARNING"))

        async def explode():
            raise RuntimeError("disk on fire")

        app.add_api_route("/explode", explode, methods=["GET"])
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/explode", headers={"X-Request-ID": "trace-7"})

        assert response.status_code == 500
        assert response.json()["error"] == "An unexpected error occurred."
        assert response.json()["code"] == "internal_server_error"
        assert response.json()["request_id"] == "trace-7"
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["X-Request-ID"] == "trace-7"
        assert "disk on fire" not in response.text
