"""
Tests for authentication endpoints.
"""

from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User


class TestRegisterView:
    """POST /api/v1/auth/register/"""

    def test_register_returns_token_pair(self, api_client, db):
        response = api_client.post(
            "/api/v1/auth/register/",
            {"email": "new@uni.edu", "password": "Str0ngPassw0rd!", "full_name": "New Student"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["user"]["email"] == "new@uni.edu"
        assert response.data["access"]
        assert User.objects.filter(email="new@uni.edu").exists()

    def test_duplicate_email_is_422(self, api_client, user):
        response = api_client.post(
            "/api/v1/auth/register/",
            {"email": user.email, "password": "Str0ngPassw0rd!", "full_name": "Dup"},
            format="json",
        )

        assert response.status_code == 422
        assert "email" in response.data["details"]


class TestTokenObtain:
    """POST /api/v1/auth/token/"""

    def test_obtain_pair_with_credentials(self, api_client, user):
        response = api_client.post(
            "/api/v1/auth/token/",
            {"email": user.email, "password": "TestPass123!"},
            format="json",
        )

        assert response.status_code == 200
        assert {"access", "refresh"} <= set(response.data)


class TestMeView:
    """GET /api/v1/auth/me/"""

    def test_returns_current_user(self, authenticated_client, user):
        response = authenticated_client.get("/api/v1/auth/me/")

        assert response.status_code == 200
        assert response.data["id"] == user.id
        assert response.data["full_name"] == "Ada Student"

    def test_requires_authentication(self, api_client, db):
        response = api_client.get("/api/v1/auth/me/")

        assert response.status_code == 401

    def test_suspended_user_is_rejected(self, api_client, suspended_user):
        token = RefreshToken.for_user(suspended_user).access_token
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get("/api/v1/auth/me/")

        assert response.status_code == 401
