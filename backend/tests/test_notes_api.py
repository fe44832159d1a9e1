"""
Markpad Backend — Notes API Tests
===================================

What:  End-to-end behaviour of /api/notes through the FastAPI app.
How:   httpx AsyncClient over ASGITransport, temp SQLite database per test.

What we test:
    ✅ Authentication failures → 401 with the resolver's messages
    ✅ Create → 201 camelCase body; validation failures → 400, nothing stored
    ✅ List filters, ordering and X-Total-Count
    ✅ Owner scoping: another user's note is 404 for get/update/delete
    ✅ Malformed id → 400 "Invalid note ID"
    ✅ Error body shape {"error", "code", "request_id"}
"""

from uuid import uuid4

import pytest

from app.security import create_access_token


async def _create(client, headers, **body):
    body.setdefault("title", "A note")
    body.setdefault("content", "Some content")
    response = await client.post("/api/notes", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestNotesAuth:

    @pytest.mark.asyncio
    async def test_missing_token(self, test_client, users):
        response = await test_client.get("/api/notes")
        assert response.status_code == 401
        assert response.json()["error"] == "No token provided. Authentication required."

    @pytest.mark.asyncio
    async def test_invalid_token(self, test_client, users):
        response = await test_client.get(
            "/api/notes", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token. Please authenticate."

    @pytest.mark.asyncio
    async def test_token_for_unknown_user(self, test_client, users):
        headers = {"Authorization": f"Bearer {create_access_token(uuid4())}"}
        response = await test_client.get("/api/notes", headers=headers)
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token. User not found."


class TestNotesCreate:

    @pytest.mark.asyncio
    async def test_create_returns_camel_case_record(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/notes",
            json={"title": " Hello ", "content": "World", "tags": "a, b #a", "isFavorite": True},
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Hello"
        assert body["content"] == "World"
        assert body["tags"] == ["a", "b"]
        assert body["isFavorite"] is True
        assert {"id", "createdAt", "updatedAt"} <= set(body)
        assert "user_id" not in body and "userId" not in body

    @pytest.mark.asyncio
    async def test_create_without_content_is_400_and_not_persisted(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/notes", json={"title": "No body"}, headers=auth_headers
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Content is required"
        assert body["code"] == "validation_error"
        assert body["request_id"]
        assert response.headers["X-Request-ID"] == body["request_id"]

        listing = await test_client.get("/api/notes", headers=auth_headers)
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_wrong_field_type_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/notes", json={"title": 5, "content": "x"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "title" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/notes",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, test_client, auth_headers):
        response = await test_client.get(
            "/api/notes", headers={**auth_headers, "X-Request-ID": "trace-123"}
        )
        assert response.headers["X-Request-ID"] == "trace-123"


class TestNotesList:

    @pytest.mark.asyncio
    async def test_newest_first_with_total_header(self, test_client, auth_headers):
        for title in ("first", "second", "third"):
            await _create(test_client, auth_headers, title=title)

        response = await test_client.get("/api/notes", headers=auth_headers)

        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["third", "second", "first"]
        assert response.headers["X-Total-Count"] == "3"

    @pytest.mark.asyncio
    async def test_filters(self, test_client, auth_headers):
        await _create(test_client, auth_headers, title="Meeting notes", tags=["work"])
        await _create(test_client, auth_headers, title="Shopping", tags=["home"], isFavorite=True)
        await _create(test_client, auth_headers, title="Misc", tags=["other"])

        by_q = await test_client.get("/api/notes", params={"q": "meeting"}, headers=auth_headers)
        assert [n["title"] for n in by_q.json()] == ["Meeting notes"]

        by_tags = await test_client.get(
            "/api/notes", params={"tags": "work,home"}, headers=auth_headers
        )
        assert [n["title"] for n in by_tags.json()] == ["Shopping", "Meeting notes"]

        favorites = await test_client.get(
            "/api/notes", params={"favorite": "true"}, headers=auth_headers
        )
        assert [n["title"] for n in favorites.json()] == ["Shopping"]

    @pytest.mark.asyncio
    async def test_only_own_notes_listed(self, test_client, auth_headers, other_auth_headers):
        await _create(test_client, auth_headers, title="mine")
        await _create(test_client, other_auth_headers, title="theirs")

        response = await test_client.get("/api/notes", headers=auth_headers)
        assert [n["title"] for n in response.json()] == ["mine"]


class TestNotesById:

    @pytest.mark.asyncio
    async def test_get_update_delete_round(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers, title="Draft", tags=["x"])
        url = f"/api/notes/{note['id']}"

        fetched = await test_client.get(url, headers=auth_headers)
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Draft"

        updated = await test_client.put(url, json={"title": "Final"}, headers=auth_headers)
        assert updated.status_code == 200
        assert updated.json()["title"] == "Final"
        assert updated.json()["content"] == note["content"]
        assert updated.json()["tags"] == ["x"]

        deleted = await test_client.delete(url, headers=auth_headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Note deleted successfully"}

        gone = await test_client.get(url, headers=auth_headers)
        assert gone.status_code == 404
        assert gone.json()["error"] == "Note not found"

    @pytest.mark.asyncio
    async def test_update_with_blank_content_is_400(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers)
        response = await test_client.put(
            f"/api/notes/{note['id']}", json={"content": "  "}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Content is required"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    async def test_other_users_note_is_404(
        self, test_client, auth_headers, other_auth_headers, method
    ):
        note = await _create(test_client, other_auth_headers, title="private")
        kwargs = {"headers": auth_headers}
        if method == "put":
            kwargs["json"] = {"title": "hijacked"}

        response = await getattr(test_client, method)(f"/api/notes/{note['id']}", **kwargs)

        assert response.status_code == 404
        assert response.json()["error"] == "Note not found"

        still_there = await test_client.get(f"/api/notes/{note['id']}", headers=other_auth_headers)
        assert still_there.json()["title"] == "private"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    async def test_malformed_id_is_400(self, test_client, auth_headers, method):
        kwargs = {"headers": auth_headers}
        if method == "put":
            kwargs["json"] = {"title": "x"}

        response = await getattr(test_client, method)("/api/notes/not-an-id", **kwargs)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid note ID"
        assert response.json()["code"] == "invalid_id"
