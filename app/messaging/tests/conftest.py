"""
Test configuration and fixtures for messaging tests.

Usage:
    def test_example(sender, receiver, message):
        assert message.receiver == receiver
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from messaging import topics
from messaging.tests.factories import MessageFactory
from projects.tests.factories import ProjectFactory


def access_token_for(user) -> str:
    return str(RefreshToken.for_user(user).access_token)


def _client_for(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token_for(user)}")
    return client


@pytest.fixture
def registry(monkeypatch):
    """A fresh process registry, so subscriptions never leak between tests."""
    fresh = topics.TopicRegistry(send_timeout=1.0)
    monkeypatch.setattr(topics, "_registry", fresh)
    return fresh


@pytest.fixture
def sender(db):
    return UserFactory(full_name="Sid Sender")


@pytest.fixture
def receiver(db):
    return UserFactory(full_name="Rita Receiver")


@pytest.fixture
def outsider(db):
    return UserFactory(full_name="Otto Outsider")


@pytest.fixture
def project(sender):
    return ProjectFactory(owner=sender, title="Solar Car")


@pytest.fixture
def message(sender, receiver):
    return MessageFactory(sender=sender, receiver=receiver, content="Are you free on Friday?")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def sender_client(sender):
    return _client_for(sender)


@pytest.fixture
def receiver_client(receiver):
    return _client_for(receiver)


@pytest.fixture
def outsider_client(outsider):
    return _client_for(outsider)
