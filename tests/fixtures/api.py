from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from src.accounts.core.services import UserManagementService
from src.accounts.entities.core.user import Role


@pytest.fixture
def client() -> Generator[TestClient]:
    """Test client with startup/shutdown run; every test gets an empty store."""
    from src.accounts.api.http.app import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Create a user through the API and return its public document."""

    def _register(name: str, email: str, **extra: Any) -> dict[str, Any]:
        response = client.post("/api/users", json={"name": name, "email": email, **extra})
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _register


@pytest.fixture
def auth_headers(client: TestClient) -> Callable[[str], dict[str, str]]:
    """Log in by email and return the matching ``Authorization`` header."""

    def _login(email: str) -> dict[str, str]:
        response = client.post("/api/users/login", json={"email": email})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def promote_to_admin(client: TestClient) -> Callable[[str], None]:
    """Grant the admin role out of band, as the CLI does."""

    def _promote(email: str) -> None:
        database_service = client.app.state.app_dependencies.database_service
        with database_service.session_scope() as session:
            UserManagementService(session).set_role(email, Role.ADMIN)

    return _promote
