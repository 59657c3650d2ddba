"""
HTTP tests for the link shortener API.

Runs the full application (lifespan, middleware, routes) against a
temporary SQLite database through FastAPI's TestClient.
"""

import pytest

from shortlink.core.exceptions import DatabaseError


def create(client, url="https://example.com", **extra):
    return client.post("/api/links", json={"url": url, **extra})


class TestHealth:
    """Test the health endpoint."""

    def test_healthz(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "version": "1.0"}

    def test_healthz_reports_unreachable_store(self, client, fake_store):
        fake_store.find_error = DatabaseError("unreachable")
        client.app.state.link_store = fake_store

        response = client.get("/healthz")

        assert response.status_code == 503
        assert response.json()["ok"] is False

    def test_requests_are_timed(self, client):
        response = client.get("/healthz")
        assert "X-Process-Time" in response.headers


class TestCreateLink:
    """Test POST /api/links."""

    def test_create_with_generated_code(self, client):
        response = create(client)

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {
            "id", "original_url", "short_code", "click_count", "created_at", "last_clicked_at"
        }
        assert body["original_url"] == "https://example.com"
        assert len(body["short_code"]) == 6
        assert body["short_code"].isalnum()
        assert body["click_count"] == 0
        assert body["last_clicked_at"] is None

    def test_create_with_custom_code(self, client):
        response = create(client, shortCode="MyLink1")

        assert response.status_code == 201
        assert response.json()["short_code"] == "MyLink1"

    def test_snake_case_custom_code_is_accepted(self, client):
        response = create(client, short_code="snake01")

        assert response.status_code == 201
        assert response.json()["short_code"] == "snake01"

    @pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": "   "}, {"url": None}])
    def test_missing_url(self, client, payload):
        response = client.post("/api/links", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "URL is required"

    @pytest.mark.parametrize("code", ["ab", "abc!23", "123456789"])
    def test_malformed_custom_code(self, client, code):
        response = create(client, shortCode=code)

        assert response.status_code == 400
        assert response.json()["detail"] == "Short code must be 6-8 alphanumeric characters."

    def test_taken_custom_code(self, client):
        assert create(client, "https://example.com/one", shortCode="taken1").status_code == 201

        response = create(client, "https://example.com/two", shortCode="taken1")

        assert response.status_code == 409
        assert response.json()["detail"] == "Short code already exists."
        stored = client.get("/api/links/taken1").json()
        assert stored["original_url"] == "https://example.com/one"

    def test_store_failure_is_not_leaked(self, client, make_fake_store):
        client.app.state.link_store = make_fake_store(
            insert_errors=[DatabaseError("password authentication failed for user 'admin'")]
        )

        response = create(client)

        assert response.status_code == 500
        assert response.json()["detail"] == "Server error"


class TestReadAndDelete:
    """Test listing, fetching and deleting links."""

    def test_list_links_newest_first(self, client):
        for code in ["first1", "second", "third3"]:
            create(client, f"https://example.com/{code}", shortCode=code)

        response = client.get("/api/links")

        assert response.status_code == 200
        assert [link["short_code"] for link in response.json()] == ["third3", "second", "first1"]

    def test_list_links_empty(self, client):
        assert client.get("/api/links").json() == []

    def test_get_link(self, client):
        create(client, shortCode="abc123")

        response = client.get("/api/links/abc123")

        assert response.status_code == 200
        assert response.json()["short_code"] == "abc123"

    def test_get_unknown_link(self, client):
        response = client.get("/api/links/nope42")

        assert response.status_code == 404
        assert response.json()["detail"] == "Link not found"

    def test_delete_link(self, client):
        create(client, shortCode="abc123")

        response = client.delete("/api/links/abc123")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get("/api/links/abc123").status_code == 404

    def test_delete_unknown_link(self, client):
        assert client.delete("/api/links/nope42").status_code == 404


class TestRedirect:
    """Test GET /{short_code}."""

    def test_redirect_counts_click(self, client):
        create(client, shortCode="abc123")

        response = client.get("/abc123", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com"
        stats = client.get("/api/links/abc123").json()
        assert stats["click_count"] == 1
        assert stats["last_clicked_at"] is not None

    def test_unknown_code_is_plain_404(self, client):
        response = client.get("/nope42", follow_redirects=False)

        assert response.status_code == 404
        assert response.text == "Link not found"

    def test_malformed_code_is_404(self, client):
        response = client.get("/favicon.ico", follow_redirects=False)

        assert response.status_code == 404

    def test_store_failure_on_redirect(self, client, fake_store):
        fake_store.find_error = DatabaseError("timed out")
        client.app.state.link_store = fake_store

        response = client.get("/abc123", follow_redirects=False)

        assert response.status_code == 503

    def test_api_routes_are_not_shadowed(self, client):
        assert client.get("/api/links").status_code == 200
        assert client.get("/healthz").status_code == 200


class TestEndToEnd:
    """Create, visit and delete a link through the API."""

    def test_lifecycle(self, client):
        created = create(client, "https://example.com")
        assert created.status_code == 201
        link = created.json()
        code = link["short_code"]
        assert len(code) == 6
        assert link["click_count"] == 0

        redirect = client.get(f"/{code}", follow_redirects=False)
        assert redirect.status_code == 302
        assert redirect.headers["location"] == "https://example.com"
        assert client.get(f"/api/links/{code}").json()["click_count"] == 1

        assert client.delete(f"/api/links/{code}").status_code == 204
        assert client.get(f"/{code}", follow_redirects=False).status_code == 404
