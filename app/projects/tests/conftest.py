"""
Test configuration and fixtures for project tests.

Usage:
    def test_example(project, owner_client):
        response = owner_client.get(f"/api/v1/projects/{project.id}/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminFactory, UserFactory
from projects.tests.factories import (
    CollaborationFactory,
    CollaborationRequestFactory,
    FundingRequestFactory,
    ProjectFactory,
)


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def owner(db):
    """Owner of ``project``."""
    return UserFactory(full_name="Olivia Owner")


@pytest.fixture
def student(db):
    """A user with no relation to ``project``."""
    return UserFactory(full_name="Sam Student")


@pytest.fixture
def funder(db):
    return UserFactory(full_name="Frank Funder")


@pytest.fixture
def admin_user(db):
    return AdminFactory()


# =============================================================================
# Project Fixtures
# =============================================================================


@pytest.fixture
def project(owner):
    return ProjectFactory(owner=owner, title="Solar Car")


@pytest.fixture
def collaborator(project):
    """A member of ``project``."""
    return CollaborationFactory(project=project, user=UserFactory(full_name="Cleo Member")).user


@pytest.fixture
def collaboration_request(project, student):
    return CollaborationRequestFactory(project=project, user=student)


@pytest.fixture
def funding_request(project, funder):
    return FundingRequestFactory(project=project, funder=funder)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def owner_client(owner):
    return _client_for(owner)


@pytest.fixture
def student_client(student):
    return _client_for(student)


@pytest.fixture
def funder_client(funder):
    return _client_for(funder)


@pytest.fixture
def admin_api_client(admin_user):
    return _client_for(admin_user)
