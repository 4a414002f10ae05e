"""
DocStore API — Route Tests
===========================

What:  End-to-end HTTP tests for the root, users and health endpoints.
How:   HTTPX AsyncClient over ASGITransport; FirestoreService is backed by a
       mock client through FastAPI dependency overrides.

What we test:
    ✅ Status codes and JSON shapes for every users endpoint
    ✅ Error handler output (400, 404, 422, 500) with request IDs
    ✅ Health check reporting for initialized/uninitialized clients
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core import exceptions as google_exceptions

from app.services.firestore_service import FirestoreService, get_firestore_service


class TestRootRoute:

    @pytest.mark.asyncio
    async def test_hello(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.text == "Hello World!"
        assert response.headers["content-type"].startswith("text/plain")


class TestUsersRoutes:

    @pytest.mark.asyncio
    async def test_list_users(self, test_client, mock_firestore_client, make_snapshot):
        mock_firestore_client.collection.return_value.get = AsyncMock(
            return_value=[make_snapshot("a", {"name": "Ada"}), make_snapshot("b", {"name": "Alan"})]
        )

        response = await test_client.get("/users")

        assert response.status_code == 200
        assert response.json() == [{"id": "a", "name": "Ada"}, {"id": "b", "name": "Alan"}]
        mock_firestore_client.collection.assert_called_with("users")

    @pytest.mark.asyncio
    async def test_list_users_empty(self, test_client):
        response = await test_client.get("/users")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_get_user(self, test_client, mock_firestore_client, make_snapshot):
        document = mock_firestore_client.collection.return_value.document.return_value
        document.get.return_value = make_snapshot("a", {"name": "Ada", "tags": ["math"]})

        response = await test_client.get("/users/a")

        assert response.status_code == 200
        assert response.json() == {"id": "a", "name": "Ada", "tags": ["math"]}

    @pytest.mark.asyncio
    async def test_get_missing_user_returns_null(self, test_client, mock_firestore_client, make_snapshot):
        document = mock_firestore_client.collection.return_value.document.return_value
        document.get.return_value = make_snapshot("ghost", None, exists=False)

        response = await test_client.get("/users/ghost")

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_create_user(self, test_client, mock_firestore_client):
        doc_ref = MagicMock()
        doc_ref.id = "new-id"
        mock_firestore_client.collection.return_value.add = AsyncMock(
            return_value=(MagicMock(), doc_ref)
        )
        payload = {"name": "Grace", "age": 85, "active": True}

        response = await test_client.post("/users", json=payload)

        assert response.status_code == 201
        assert response.json() == {"id": "new-id", **payload}
        mock_firestore_client.collection.return_value.add.assert_awaited_once_with(payload)

    @pytest.mark.asyncio
    async def test_create_user_rejects_non_object_body(self, test_client):
        response = await test_client.post(
            "/users", json=["not", "an", "object"], headers={"X-Request-ID": "req-422"}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["request_id"] == "req-422"
        assert body["details"]["errors"]
        assert "detail" not in body

    @pytest.mark.asyncio
    async def test_create_user_malformed_json(self, test_client):
        response = await test_client.post(
            "/users", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["errors"][0]["type"] == "json_invalid"
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_update_user(self, test_client, mock_firestore_client):
        document = mock_firestore_client.collection.return_value.document.return_value

        response = await test_client.put("/users/a", json={"age": 37})

        assert response.status_code == 200
        assert response.json() == {"id": "a", "age": 37}
        document.update.assert_awaited_once_with({"age": 37})

    @pytest.mark.asyncio
    async def test_update_missing_user(self, test_client, mock_firestore_client):
        document = mock_firestore_client.collection.return_value.document.return_value
        document.update.side_effect = google_exceptions.NotFound("No document to update")

        response = await test_client.put(
            "/users/ghost", json={"age": 1}, headers={"X-Request-ID": "req-404"}
        )

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert "ghost" in body["message"]
        assert body["request_id"] == "req-404"
        assert response.headers["X-Request-ID"] == "req-404"

    @pytest.mark.asyncio
    async def test_update_with_empty_body(self, test_client, mock_firestore_client):
        document = mock_firestore_client.collection.return_value.document.return_value
        document.update.side_effect = ValueError("Cannot update with an empty document.")

        response = await test_client.put("/users/a", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_delete_user(self, test_client, mock_firestore_client):
        document = mock_firestore_client.collection.return_value.document.return_value

        response = await test_client.delete("/users/a")

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully", "id": "a"}
        document.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_query_users(self, test_client, mock_firestore_client, make_snapshot):
        collection = mock_firestore_client.collection.return_value
        collection.where.return_value.get = AsyncMock(
            return_value=[make_snapshot("a", {"age": 40})]
        )

        response = await test_client.post(
            "/users/query", json={"field": "age", "operator": ">=", "value": 18}
        )

        assert response.status_code == 200
        assert response.json() == [{"id": "a", "age": 40}]
        field_filter = collection.where.call_args.kwargs["filter"]
        assert (field_filter.field_path, field_filter.op_string, field_filter.value) == ("age", ">=", 18)

    @pytest.mark.asyncio
    async def test_query_users_array_contains(self, test_client, mock_firestore_client):
        collection = mock_firestore_client.collection.return_value

        response = await test_client.post(
            "/users/query", json={"field": "tags", "operator": "array-contains", "value": "math"}
        )

        assert response.status_code == 200
        assert collection.where.call_args.kwargs["filter"].op_string == "array_contains"

    @pytest.mark.asyncio
    async def test_query_invalid_operator(self, test_client, mock_firestore_client):
        mock_firestore_client.collection.return_value.where.side_effect = ValueError(
            "Operator string 'like' is invalid."
        )

        response = await test_client.post(
            "/users/query", json={"field": "name", "operator": "like", "value": "A"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "name"

    @pytest.mark.asyncio
    async def test_database_error_hides_details(self, test_client, mock_firestore_client):
        mock_firestore_client.collection.return_value.get = AsyncMock(
            side_effect=google_exceptions.InternalServerError("stack details here")
        )

        response = await test_client.get("/users")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "stack details" not in body["message"]
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_uninitialized_client_returns_server_error(self, test_client):
        from app.main import app

        app.dependency_overrides[get_firestore_service] = lambda: FirestoreService()

        response = await test_client.get("/users")

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"


class TestHealthRoute:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client, mock_firestore_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["firestore"] == "connected"
        mock_firestore_client.collection.return_value.limit.assert_called_once_with(1)

    @pytest.mark.asyncio
    async def test_unreachable(self, test_client, mock_firestore_client):
        mock_firestore_client.collection.return_value.limit.return_value.get = AsyncMock(
            side_effect=google_exceptions.ServiceUnavailable("down")
        )

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["firestore"] == "disconnected"

    @pytest.mark.asyncio
    async def test_not_initialized(self, test_client):
        from app.main import app

        app.dependency_overrides[get_firestore_service] = lambda: FirestoreService()

        response = await test_client.get("/health")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["firestore"] == "not_initialized"
        assert body["credential_source"] is None
