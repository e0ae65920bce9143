"""
Views for notification API.

ViewSets:
    NotificationViewSet: Inbox for the authenticated user

Endpoints:
    GET    /api/v1/notifications/                 - List notifications (paginated, filtered)
    GET    /api/v1/notifications/{id}/            - Get notification detail
    DELETE /api/v1/notifications/{id}/            - Delete notification
    GET    /api/v1/notifications/unread-count/    - Get unread count
    POST   /api/v1/notifications/{id}/read/       - Mark single notification as read
    POST   /api/v1/notifications/{id}/unread/     - Mark single notification as unread
    POST   /api/v1/notifications/read-all/        - Mark all notifications as read

Users only ever see their own notifications; another user's id is a 404.
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import NotFoundError
from notifications.serializers import (
    MarkAllReadResponseSerializer,
    NotificationSerializer,
    UnreadCountSerializer,
)
from notifications.services import NotificationStore


def _parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes")


@extend_schema_view(
    list=extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        description=(
            "Get paginated list of notifications for the authenticated user, "
            "newest first. Supports filtering by read status and type."
        ),
        parameters=[
            OpenApiParameter(
                name="unread",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Only unread (true) or only read (false) notifications",
                required=False,
            ),
            OpenApiParameter(
                name="type",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Filter by notification type",
                required=False,
            ),
        ],
        tags=["Notifications"],
    ),
    retrieve=extend_schema(
        operation_id="get_notification",
        summary="Get notification",
        tags=["Notifications"],
    ),
)
class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Provides:
    - list: GET / - List user's notifications with filtering
    - retrieve: GET /{id}/ - Get notification detail
    - destroy: DELETE /{id}/ - Delete notification
    - unread_count: GET /unread-count/ - Get badge count
    - read / unread: POST /{id}/read/, /{id}/unread/
    - read_all: POST /read-all/ - Mark all as read
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return NotificationStore.for_user(
            self.request.user,
            unread=_parse_bool(self.request.query_params.get("unread")),
            notification_type=self.request.query_params.get("type"),
        )

    @extend_schema(
        operation_id="delete_notification",
        summary="Delete notification",
        responses={204: None, 404: OpenApiResponse(description="Notification not found")},
        tags=["Notifications"],
    )
    def destroy(self, request, pk=None):
        result = NotificationStore.delete(pk, request.user)
        if not result:
            raise NotFoundError(result.error, error_code=result.error_code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        responses={200: UnreadCountSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        count = NotificationStore.unread_count(request.user)
        return Response(UnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        description=(
            "Mark a single notification as read. "
            "Idempotent: already-read notifications return success."
        ),
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description="Notification not found"),
        },
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = NotificationStore.mark_as_read(pk, request.user)
        if not result:
            raise NotFoundError(result.error, error_code=result.error_code)
        return Response(self.get_serializer(result.data).data)

    @extend_schema(
        operation_id="mark_notification_unread",
        summary="Mark notification as unread",
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description="Notification not found"),
        },
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"])
    def unread(self, request, pk=None):
        result = NotificationStore.mark_as_unread(pk, request.user)
        if not result:
            raise NotFoundError(result.error, error_code=result.error_code)
        return Response(self.get_serializer(result.data).data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        request=None,
        responses={200: MarkAllReadResponseSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        result = NotificationStore.mark_all_as_read(request.user)
        return Response(MarkAllReadResponseSerializer({"marked_count": result.data}).data)
