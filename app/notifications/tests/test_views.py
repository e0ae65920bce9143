"""
API tests for notification endpoints.

Test Classes:
    TestNotificationList: GET /api/v1/notifications/
    TestNotificationDetail: GET / DELETE /api/v1/notifications/{id}/
    TestUnreadCount: GET /api/v1/notifications/unread-count/
    TestMarkRead: POST /api/v1/notifications/{id}/read/ and /unread/
    TestMarkAllRead: POST /api/v1/notifications/read-all/
"""

from django.urls import reverse
from rest_framework import status

from notifications.models import Notification, NotificationType
from notifications.tests.factories import NotificationFactory


class TestNotificationList:
    """
    Verifies:
    - Returns only the user's notifications, newest first
    - Serialized shape (type, target, actor)
    - Filtering by read state and type
    - Authentication requirement
    """

    def test_returns_own_notifications(
        self, authenticated_client, unread_notification, other_user_notification
    ):
        response = authenticated_client.get(reverse("notifications:notification-list"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        item = response.data["results"][0]
        assert item["id"] == unread_notification.id
        assert item["type"] == NotificationType.COLLABORATION_REQUEST
        assert item["actor_id"] == unread_notification.actor_id
        assert item["actor_name"] == unread_notification.actor.display_name
        assert item["is_read"] is False

    def test_target_is_serialized(self, authenticated_client, user):
        NotificationFactory(
            recipient=user, target_kind="project", target_id=12, actor=None
        )

        response = authenticated_client.get(reverse("notifications:notification-list"))

        item = response.data["results"][0]
        assert item["target"] == {"kind": "project", "id": 12}
        assert item["actor_name"] is None

    def test_filter_unread(self, authenticated_client, unread_notification, read_notification):
        url = reverse("notifications:notification-list")

        unread = authenticated_client.get(url, {"unread": "true"})
        read = authenticated_client.get(url, {"unread": "false"})

        assert [n["id"] for n in unread.data["results"]] == [unread_notification.id]
        assert [n["id"] for n in read.data["results"]] == [read_notification.id]

    def test_filter_type(self, authenticated_client, user, unread_notification):
        NotificationFactory(recipient=user, notification_type=NotificationType.FUNDING_VERIFIED)

        response = authenticated_client.get(
            reverse("notifications:notification-list"), {"type": "funding_verified"}
        )

        assert response.data["count"] == 1
        assert response.data["results"][0]["type"] == "funding_verified"

    def test_requires_authentication(self, api_client, db):
        response = api_client.get(reverse("notifications:notification-list"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestNotificationDetail:
    def test_get_own(self, authenticated_client, unread_notification):
        url = reverse("notifications:notification-detail", kwargs={"pk": unread_notification.id})

        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["message"] == unread_notification.message

    def test_other_users_notification_is_404(self, authenticated_client, other_user_notification):
        url = reverse(
            "notifications:notification-detail", kwargs={"pk": other_user_notification.id}
        )

        assert authenticated_client.get(url).status_code == status.HTTP_404_NOT_FOUND
        assert authenticated_client.delete(url).status_code == status.HTTP_404_NOT_FOUND
        assert Notification.objects.filter(pk=other_user_notification.id).exists()

    def test_delete_own(self, authenticated_client, unread_notification):
        url = reverse("notifications:notification-detail", kwargs={"pk": unread_notification.id})

        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Notification.objects.filter(pk=unread_notification.id).exists()


class TestUnreadCount:
    def test_counts_only_unread_own(
        self, authenticated_client, unread_notification, read_notification, other_user_notification
    ):
        response = authenticated_client.get(reverse("notifications:notification-unread-count"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"unread_count": 1}


class TestMarkRead:
    def test_mark_read_then_unread(self, authenticated_client, unread_notification):
        read_url = reverse("notifications:notification-read", kwargs={"pk": unread_notification.id})
        unread_url = reverse(
            "notifications:notification-unread", kwargs={"pk": unread_notification.id}
        )

        response = authenticated_client.post(read_url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data["is_read"] is True
        assert response.data["read_at"] is not None

        response = authenticated_client.post(unread_url)
        assert response.data["is_read"] is False
        assert response.data["read_at"] is None

    def test_mark_other_users_notification_is_404(
        self, authenticated_client, other_user_notification
    ):
        url = reverse("notifications:notification-read", kwargs={"pk": other_user_notification.id})

        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "NOTIFICATION_NOT_FOUND"


class TestMarkAllRead:
    def test_marks_all(self, authenticated_client, user, unread_notification):
        NotificationFactory(recipient=user)

        response = authenticated_client.post(reverse("notifications:notification-read-all"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"marked_count": 2}
        assert not Notification.objects.filter(recipient=user, is_read=False).exists()
