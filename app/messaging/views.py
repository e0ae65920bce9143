"""
Views for the messaging API.

Sending happens over the WebSocket (messaging.consumers); REST exposes the
history only.

Endpoints:
    GET  /api/v1/messages/                 - Messages the user sent or received
    GET  /api/v1/messages/{id}/            - Message detail
    GET  /api/v1/messages/unread-count/    - Unread messages addressed to the user
    POST /api/v1/messages/{id}/read/       - Mark a received message as read
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import NotFoundError
from messaging.serializers import MessageSerializer, MessageUnreadCountSerializer
from messaging.services import MessagingService


@extend_schema_view(
    list=extend_schema(
        operation_id="list_messages",
        summary="List messages",
        description="Messages the authenticated user sent or received, newest first.",
        parameters=[
            OpenApiParameter(
                name="project_id",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Only messages about this project",
                required=False,
            ),
            OpenApiParameter(
                name="with_user",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Only the conversation with this user",
                required=False,
            ),
        ],
        tags=["Messages"],
    ),
    retrieve=extend_schema(
        operation_id="get_message",
        summary="Get message",
        tags=["Messages"],
    ),
)
class MessageViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated]
    serializer_class = MessageSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return MessagingService.history(
            self.request.user,
            project_id=self.request.query_params.get("project_id"),
            with_user=self.request.query_params.get("with_user"),
        )

    @extend_schema(
        operation_id="get_unread_message_count",
        summary="Get unread message count",
        responses={200: MessageUnreadCountSerializer},
        tags=["Messages"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        count = MessagingService.unread_count(request.user)
        return Response(MessageUnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_message_read",
        summary="Mark message as read",
        request=None,
        responses={
            200: MessageSerializer,
            404: OpenApiResponse(description="Message not found or unauthorized"),
        },
        tags=["Messages"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = MessagingService.mark_as_read(pk, request.user)
        if not result:
            raise NotFoundError(result.error, error_code=result.error_code)
        return Response(self.get_serializer(result.data).data)
