"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/auth/me/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminFactory, UserFactory


@pytest.fixture
def user(db):
    """Create a basic active user."""
    return UserFactory(full_name="Ada Student")


@pytest.fixture
def admin_user(db):
    """Create a platform administrator."""
    return AdminFactory()


@pytest.fixture
def suspended_user(db):
    """Create a suspended user."""
    return UserFactory(is_suspended=True, suspended_reason="Spam")


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """API client authenticated with a JWT access token for ``user``."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client
