"""
Authentication Routes Integration Tests
========================================

Integration tests for:
- POST /auth/login
- GET /auth/me
"""

import pytest
from fastapi.testclient import TestClient

from memberportal.models import Organization, User


pytestmark = pytest.mark.integration


class TestLoginEndpoint:
    """Integration tests for POST /auth/login endpoint."""

    def test_login_success(self, client: TestClient, member: User):
        # Act
        response = client.post(
            "/auth/login",
            json={"login_name": "member", "password": "MemberPassword123!"},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"

    def test_login_invalid_password(self, client: TestClient, member: User):
        response = client.post(
            "/auth/login",
            json={"login_name": "member", "password": "WrongPassword123!"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid login name or password"

    def test_login_pending_registration(
        self, client: TestClient, make_registration, organization: Organization
    ):
        make_registration(
            organization, "pending", "Pia", "Pending", "pia@example.org", password="PendingPassword1!"
        )

        response = client.post(
            "/auth/login",
            json={"login_name": "pending", "password": "PendingPassword1!"},
        )

        assert response.status_code == 401
        assert "not been approved" in response.json()["message"]

    def test_login_missing_fields(self, client: TestClient):
        response = client.post("/auth/login", json={"login_name": "member"})

        assert response.status_code == 422
        assert response.json()["message"] == "Validation error"


class TestMeEndpoint:
    """Integration tests for GET /auth/me endpoint."""

    def test_me_returns_current_user(self, client: TestClient, member: User, member_auth_headers: dict):
        response = client.get("/auth/me", headers=member_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["uuid"] == member.uuid
        assert data["role"] == "MEMBER"

    def test_me_without_token(self, client: TestClient):
        response = client.get("/auth/me")

        assert response.status_code == 401

    def test_me_with_invalid_token(self, client: TestClient):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
