"""
Test configuration and fixtures for moderation tests.

Usage:
    def test_example(admin_user, admin_api_client, report):
        response = admin_api_client.get("/api/v1/moderation/reports/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminFactory, UserFactory
from moderation.tests.factories import ReportFactory
from projects.tests.factories import CommentFactory, ProjectFactory


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def user(db):
    return UserFactory(full_name="Rex Reporter")


@pytest.fixture
def author(db):
    """Owner of ``project`` and author of ``comment``."""
    return UserFactory(full_name="Amy Author")


@pytest.fixture
def admin_user(db):
    return AdminFactory(full_name="Moe Moderator")


@pytest.fixture
def project(author):
    return ProjectFactory(owner=author, title="Robot Arm")


@pytest.fixture
def comment(project, author):
    return CommentFactory(project=project, user=author, content="Servo specs attached")


@pytest.fixture
def report(project, user):
    return ReportFactory(reporter=user, target_kind="project", target_id=project.id)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_client(user):
    return _client_for(user)


@pytest.fixture
def admin_api_client(admin_user):
    return _client_for(admin_user)
