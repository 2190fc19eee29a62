"""API endpoint tests."""

from fastapi.testclient import TestClient


def test_health_check(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestAuthAPI:

    def test_register_user(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "newuser@example.com", "password": "password123", "name": "New User"},
        )
        assert response.status_code == 201

        data = response.json()
        assert "access_token" in data
        assert data["user"]["email"] == "newuser@example.com"
        assert data["user"]["verified"] is False
        assert "password_hash" not in data["user"]

    def test_register_duplicate_email(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": auth_headers.email, "password": "password123"},
        )
        assert response.status_code == 409
        assert "already registered" in response.json()["detail"]

    def test_register_invalid_email(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "nope", "password": "password123"},
        )
        assert response.status_code == 422

    def test_login(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == auth_headers.user_id

    def test_login_wrong_password(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/v1/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
        )
        assert response.status_code == 401

    def test_get_current_user(self, client: TestClient, auth_headers):
        response = client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["email"] == auth_headers.email

    def test_me_with_bad_token(self, client: TestClient):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_change_password(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/v1/auth/password",
            headers=auth_headers,
            json={"old_password": "testpass123", "new_password": "newpass456"},
        )
        assert response.status_code == 200

        response = client.post(
            "/api/v1/auth/login", json={"email": auth_headers.email, "password": "newpass456"}
        )
        assert response.status_code == 200


class TestURLAPI:

    def test_requires_authentication(self, client: TestClient):
        response = client.post("/api/v1/urls/", json={"long_url": "https://www.google.com/"})
        assert response.status_code in (401, 403)

    def test_create_short_url(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/v1/urls/", headers=auth_headers, json={"long_url": "https://www.google.com/"}
        )
        assert response.status_code == 201

        data = response.json()
        assert data["alias"]
        assert data["short_url"].endswith(f"/{data['alias']}")
        assert data["long_url"] == "https://www.google.com/"
        assert data["owner_id"] == auth_headers.user_id
        assert data["total_hits"] == 0

    def test_custom_alias_conflict(self, client: TestClient, auth_headers):
        body = {"long_url": "https://www.google.com/", "alias": "goog"}

        assert client.post("/api/v1/urls/", headers=auth_headers, json=body).status_code == 201
        response = client.post("/api/v1/urls/", headers=auth_headers, json=body)
        assert response.status_code == 409

    def test_invalid_url(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/v1/urls/", headers=auth_headers, json={"long_url": "not-a-valid-url"}
        )
        assert response.status_code == 422

    def test_list_only_own_urls(self, client: TestClient, auth_headers, other_auth_headers):
        client.post("/api/v1/urls/", headers=auth_headers, json={"long_url": "https://a.com/", "alias": "mine"})
        client.post("/api/v1/urls/", headers=other_auth_headers, json={"long_url": "https://b.com/", "alias": "theirs"})

        response = client.get("/api/v1/urls/", headers=auth_headers)
        assert response.status_code == 200
        assert [u["alias"] for u in response.json()] == ["mine"]

    def test_other_users_url_is_not_found(self, client: TestClient, auth_headers, other_auth_headers):
        client.post("/api/v1/urls/", headers=auth_headers, json={"long_url": "https://a.com/", "alias": "mine"})

        assert client.get("/api/v1/urls/mine", headers=other_auth_headers).status_code == 404
        assert client.delete("/api/v1/urls/mine", headers=other_auth_headers).status_code == 404
        assert client.get("/api/v1/urls/mine", headers=auth_headers).status_code == 200

    def test_update_url(self, client: TestClient, auth_headers):
        client.post("/api/v1/urls/", headers=auth_headers, json={"long_url": "https://a.com/", "alias": "mine"})

        response = client.patch(
            "/api/v1/urls/mine", headers=auth_headers, json={"long_url": "https://b.com/"}
        )
        assert response.status_code == 200
        assert response.json()["long_url"] == "https://b.com/"

    def test_delete_twice(self, client: TestClient, auth_headers):
        client.post("/api/v1/urls/", headers=auth_headers, json={"long_url": "https://a.com/", "alias": "mine"})

        assert client.delete("/api/v1/urls/mine", headers=auth_headers).status_code == 204
        assert client.delete("/api/v1/urls/mine", headers=auth_headers).status_code == 404
        assert client.get("/mine", follow_redirects=False).status_code == 404


class TestRedirect:

    def test_redirect_url(self, client: TestClient, auth_headers):
        client.post(
            "/api/v1/urls/", headers=auth_headers,
            json={"long_url": "https://www.github.com/", "alias": "gh"},
        )

        response = client.get("/gh", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

        stats = client.get("/api/v1/urls/gh/stats", headers=auth_headers).json()
        assert stats["total_hits"] == 1

    def test_redirect_nonexistent_url(self, client: TestClient):
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404

    def test_redirect_expired_url(self, client: TestClient, auth_headers):
        client.post(
            "/api/v1/urls/", headers=auth_headers,
            json={"long_url": "https://www.github.com/", "alias": "old", "expires_at": "2000-01-01T00:00:00Z"},
        )

        response = client.get("/old", follow_redirects=False)
        assert response.status_code == 404
