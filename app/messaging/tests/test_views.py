"""
API tests for the message history endpoints.
"""

from django.urls import reverse
from rest_framework import status

from messaging.tests.factories import MessageFactory


class TestMessageEndpoints:
    def test_requires_authentication(self, api_client, db):
        response = api_client.get(reverse("messaging:message-list"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list(self, receiver_client, sender, message):
        response = receiver_client.get(reverse("messaging:message-list"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        item = response.data["results"][0]
        assert item["id"] == message.id
        assert item["sender"]["id"] == sender.id
        assert item["is_read"] is False

    def test_list_filters_by_partner(self, sender_client, sender, receiver, outsider, message):
        MessageFactory(sender=sender, receiver=outsider)

        response = sender_client.get(reverse("messaging:message-list"), {"with_user": receiver.id})

        assert [item["id"] for item in response.data["results"]] == [message.id]

    def test_outsider_cannot_retrieve(self, outsider_client, message):
        response = outsider_client.get(reverse("messaging:message-detail", kwargs={"pk": message.id}))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_unread_count(self, receiver_client, message):
        response = receiver_client.get(reverse("messaging:message-unread-count"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"unread_count": 1}

    def test_mark_read(self, receiver_client, message):
        response = receiver_client.post(reverse("messaging:message-read", kwargs={"pk": message.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["is_read"] is True
        assert response.data["read_at"] is not None

    def test_sender_cannot_mark_read(self, sender_client, message):
        response = sender_client.post(reverse("messaging:message-read", kwargs={"pk": message.id}))

        message.refresh_from_db()
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {
            "error": "Message not found or unauthorized",
            "error_code": "MESSAGE_NOT_FOUND",
        }
        assert not message.is_read
