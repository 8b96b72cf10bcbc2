"""Tests for the authentication API routes."""

import tempfile
from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.main import create_app
from src.modules.auth.tokens import TokenConfig, TokenService

TEST_SECRET = "test-secret-key-for-testing-only"

REGISTRATION = {
    "firstName": "Ann",
    "lastName": "Lee",
    "email": "a@x.com",
    "password": "Abcdef1",
}


@pytest.fixture
def settings() -> Iterator[Settings]:
    """Settings pointing at a temporary database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Settings(
            _env_file=None,
            database_path=str(Path(tmpdir) / "test.db"),
            jwt_secret_key=TEST_SECRET,
            bcrypt_rounds=4,
        )


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Create a test client with a running application."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def user_count(client: TestClient) -> int:
    """Count stored users through the running app's repository."""
    repository = client.app.state.user_repository  # type: ignore[attr-defined]
    return client.portal.call(repository.count)  # type: ignore[union-attr]


def register(client: TestClient, **overrides: object) -> dict:
    response = client.post("/api/auth/register", json={**REGISTRATION, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_returns_user_and_token(self, client: TestClient) -> None:
        """Should create the user and return it with a token."""
        body = register(client)

        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        user = body["data"]["user"]
        assert user["firstName"] == "Ann"
        assert user["lastName"] == "Lee"
        assert user["email"] == "a@x.com"
        assert isinstance(user["id"], int)
        assert "createdAt" in user
        assert body["data"]["token"]
        assert user_count(client) == 1

    def test_register_never_returns_password(self, client: TestClient) -> None:
        """Should strip every password field from the user."""
        user = register(client)["data"]["user"]

        assert not any("password" in key.lower() for key in user)

    def test_register_with_optional_fields(self, client: TestClient) -> None:
        """Should store phone and date of birth."""
        user = register(client, phone="+15551234", dateOfBirth="1990-05-01")["data"][
            "user"
        ]

        assert user["phone"] == "+15551234"
        assert user["dateOfBirth"] == "1990-05-01"

    def test_register_duplicate_email(self, client: TestClient) -> None:
        """Should reject a second registration with 409."""
        register(client)

        response = client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "message": "User with this email already exists",
        }
        assert user_count(client) == 1

    def test_register_validation_errors(self, client: TestClient) -> None:
        """Should list every invalid field and write nothing."""
        future = (date.today() + timedelta(days=30)).isoformat()
        response = client.post(
            "/api/auth/register",
            json={
                "firstName": "A",
                "lastName": "Lee",
                "email": "not-an-email",
                "password": "short",
                "phone": "abc",
                "dateOfBirth": future,
            },
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        fields = {error["field"] for error in body["errors"]}
        assert fields == {"firstName", "email", "password", "phone", "dateOfBirth"}
        assert user_count(client) == 0

    def test_register_weak_password_message(self, client: TestClient) -> None:
        """Should explain which character classes are missing."""
        response = client.post(
            "/api/auth/register", json={**REGISTRATION, "password": "abcdefg"}
        )

        assert response.status_code == 400
        [error] = response.json()["errors"]
        assert error["field"] == "password"
        assert "uppercase letter" in error["message"]
        assert "number" in error["message"]

    def test_register_missing_fields(self, client: TestClient) -> None:
        """Should report missing required fields."""
        response = client.post("/api/auth/register", json={"email": "a@x.com"})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"firstName", "lastName", "password"} <= fields


class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success(self, client: TestClient) -> None:
        """Should return user and token."""
        register(client)

        response = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "Abcdef1"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["email"] == "a@x.com"
        assert body["data"]["token"]

    def test_login_wrong_password(self, client: TestClient) -> None:
        """Should reject a wrong password with the generic message."""
        register(client)

        response = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Invalid email or password",
        }
        assert response.headers["www-authenticate"] == "Bearer"

    def test_login_unknown_email_matches_wrong_password(
        self, client: TestClient
    ) -> None:
        """Should not reveal whether the account exists."""
        register(client)

        wrong_password = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "wrong"}
        )
        unknown = client.post(
            "/api/auth/login", json={"email": "nobody@x.com", "password": "Abcdef1"}
        )

        assert unknown.status_code == wrong_password.status_code == 401
        assert unknown.json() == wrong_password.json()


class TestProtectedRoutes:
    """Tests for the bearer-token gate."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/auth/profile"),
            ("PUT", "/api/auth/profile"),
            ("POST", "/api/auth/logout"),
            ("GET", "/api/auth/verify"),
        ],
    )
    def test_missing_token(self, client: TestClient, method: str, path: str) -> None:
        """Should require a bearer token."""
        response = client.request(method, path, json={})

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Access token required",
        }

    def test_invalid_token(self, client: TestClient) -> None:
        """Should reject a malformed token."""
        response = client.get("/api/auth/profile", headers=bearer("not.a.token"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_expired_token(self, client: TestClient, settings: Settings) -> None:
        """Should reject a token past its expiry."""
        user_id = register(client)["data"]["user"]["id"]
        tokens = TokenService(TokenConfig.from_settings(settings))
        expired = tokens.issue(
            user_id, "a@x.com", now=datetime.now(UTC) - timedelta(hours=25)
        )

        response = client.get("/api/auth/profile", headers=bearer(expired.token))

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    def test_token_for_deleted_user(self, client: TestClient) -> None:
        """Should reject a token whose user no longer exists."""
        body = register(client)
        repository = client.app.state.user_repository  # type: ignore[attr-defined]
        client.portal.call(repository.delete, body["data"]["user"]["id"])  # type: ignore[union-attr]

        response = client.get("/api/auth/verify", headers=bearer(body["data"]["token"]))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token - user not found"


class TestProfile:
    """Tests for GET/PUT /auth/profile."""

    def test_get_profile(self, client: TestClient) -> None:
        """Should return the token's user."""
        token = register(client)["data"]["token"]

        response = client.get("/api/auth/profile", headers=bearer(token))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["email"] == "a@x.com"
        assert "password" not in str(body)

    def test_update_profile(self, client: TestClient) -> None:
        """Should update allowed fields."""
        token = register(client)["data"]["token"]

        response = client.put(
            "/api/auth/profile",
            headers=bearer(token),
            json={"firstName": "Anna", "phone": "+15551234"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile updated successfully"
        assert body["data"]["user"]["firstName"] == "Anna"
        assert body["data"]["user"]["phone"] == "+15551234"
        assert body["data"]["user"]["lastName"] == "Lee"

    def test_update_ignores_email_and_password(self, client: TestClient) -> None:
        """Should leave email and password untouched."""
        token = register(client)["data"]["token"]

        response = client.put(
            "/api/auth/profile",
            headers=bearer(token),
            json={"email": "new@x.com", "password": "x", "lastName": "Leigh"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == "a@x.com"
        login = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "Abcdef1"}
        )
        assert login.status_code == 200

    def test_update_with_only_dropped_fields(self, client: TestClient) -> None:
        """Should return 400 when nothing valid is left."""
        token = register(client)["data"]["token"]

        response = client.put(
            "/api/auth/profile",
            headers=bearer(token),
            json={"email": "new@x.com", "password": "x"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "No valid fields provided for update",
        }

    def test_update_with_null_fields(self, client: TestClient) -> None:
        """Should treat null-only bodies as empty."""
        token = register(client)["data"]["token"]

        response = client.put(
            "/api/auth/profile",
            headers=bearer(token),
            json={"firstName": None, "phone": None},
        )

        assert response.status_code == 400

    def test_update_validation_error(self, client: TestClient) -> None:
        """Should validate present fields like registration does."""
        token = register(client)["data"]["token"]

        response = client.put(
            "/api/auth/profile", headers=bearer(token), json={"lastName": "L"}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "lastName"


class TestLogoutAndVerify:
    """Tests for POST /auth/logout and GET /auth/verify."""

    def test_logout(self, client: TestClient) -> None:
        """Should always succeed for an authenticated user."""
        token = register(client)["data"]["token"]

        response = client.post("/api/auth/logout", headers=bearer(token))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logout successful"}

    def test_token_still_valid_after_logout(self, client: TestClient) -> None:
        """Should not revoke tokens server-side."""
        token = register(client)["data"]["token"]
        client.post("/api/auth/logout", headers=bearer(token))

        response = client.get("/api/auth/verify", headers=bearer(token))

        assert response.status_code == 200

    def test_verify(self, client: TestClient) -> None:
        """Should confirm a valid token."""
        token = register(client)["data"]["token"]

        response = client.get("/api/auth/verify", headers=bearer(token))

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Token is valid"
        assert body["data"]["user"]["email"] == "a@x.com"


class TestEndToEnd:
    """Register, login, fetch profile, then fail a login."""

    def test_full_flow(self, client: TestClient) -> None:
        """Should follow the documented happy and unhappy paths."""
        registered = client.post("/api/auth/register", json=REGISTRATION)
        assert registered.status_code == 201
        assert user_count(client) == 1
        assert "password" not in registered.json()["data"]["user"]

        login = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "Abcdef1"}
        )
        assert login.status_code == 200
        token = login.json()["data"]["token"]

        profile = client.get("/api/auth/profile", headers=bearer(token))
        assert profile.status_code == 200
        assert profile.json()["data"]["user"] == registered.json()["data"]["user"]

        bad = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "wrong"}
        )
        assert bad.status_code == 401
        assert bad.json()["message"] == "Invalid email or password"


class TestApplication:
    """Tests for application-level behaviour."""

    def test_unknown_route(self, client: TestClient) -> None:
        """Should render 404s in the error envelope."""
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}

    def test_startup_fails_without_secret(self, tmp_path: Path) -> None:
        """Should refuse to start without a JWT secret."""
        from src.modules.auth.exceptions import ConfigurationError

        settings = Settings(
            _env_file=None,
            database_path=str(tmp_path / "test.db"),
            jwt_secret_key=None,
        )

        with pytest.raises(ConfigurationError):
            with TestClient(create_app(settings)):
                pass
