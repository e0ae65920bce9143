"""
Serializers for the messaging API.

The WebSocket frames are built in messaging.events; these serializers only
back the REST history endpoints.
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from messaging.models import Message


class MessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)
    receiver = UserSummarySerializer(read_only=True)
    project_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "sender",
            "receiver",
            "project_id",
            "content",
            "sent_at",
            "is_read",
            "read_at",
        ]
        read_only_fields = fields


class MessageUnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()
