"""
Unit tests for authentication functionality
"""

import pytest

from conftest import client, register


def signup(**overrides):
    user_data = {
        "name": "Test User",
        "email": "test@example.com",
        "password": "TestPass123",
        "role": "customer",
    }
    user_data.update(overrides)
    return client.post("/api/auth/signup", json=user_data)


class TestUserRegistration:
    """Test cases for user registration"""

    def test_signup_success(self):
        response = signup(phone_number="+91 98765 43210")
        assert response.status_code == 201

        data = response.json()
        assert data["name"] == "Test User"
        assert data["email"] == "test@example.com"
        assert data["role"] == "customer"
        assert data["is_active"] is True
        assert "hashed_password" not in data
        assert "password" not in data

    def test_signup_as_chef(self):
        response = signup(email="chef@example.com", role="chef")
        assert response.status_code == 201
        assert response.json()["role"] == "chef"

    def test_signup_duplicate_email(self):
        assert signup(email="duplicate@example.com").status_code == 201

        response = signup(email="duplicate@example.com", name="Someone Else")
        assert response.status_code == 400
        assert "Email already registered" in response.json()["detail"]

    def test_signup_cannot_claim_admin(self):
        response = signup(role="admin")
        assert response.status_code == 400

    def test_signup_invalid_password(self):
        for index, password in enumerate(["short1", "nodigitshere", "1234567890", "a1" * 40]):
            response = signup(email=f"user{index}@example.com", password=password)
            assert response.status_code == 400

    def test_signup_invalid_email(self):
        response = signup(email="not-an-email")
        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Validation error"
        assert body["errors"]


class TestUserLogin:
    """Test cases for user login"""

    @pytest.fixture(autouse=True)
    def account(self, fresh_database):
        response = signup(email="login@example.com", password="LoginPass123")
        assert response.status_code == 201

    def test_login_success(self):
        response = client.post("/api/auth/login", json={"email": "login@example.com", "password": "LoginPass123"})
        assert response.status_code == 200

        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 1800
        assert data["user"]["email"] == "login@example.com"

    @pytest.mark.parametrize("email,password", [
        ("login@example.com", "WrongPass123"),
        ("nobody@example.com", "LoginPass123"),
    ])
    def test_login_rejected(self, email, password):
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"


class TestAuthenticatedEndpoints:
    """Test cases for authenticated endpoints"""

    def test_get_current_user(self):
        headers = register("chef", "Meera Iyer")
        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "Meera Iyer"
        assert data["role"] == "chef"

    def test_unauthorized_access(self):
        response = client.get("/api/auth/me")
        assert response.status_code in (401, 403)

    def test_invalid_token(self):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer invalid_token"})
        assert response.status_code == 401
