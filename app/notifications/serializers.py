"""
Serializers for notification API.

Serializers:
    NotificationSerializer: Read-only serializer for notification details
    UnreadCountSerializer: Response for unread count endpoint
    MarkAllReadResponseSerializer: Response for mark all read endpoint

Usage:
    from notifications.serializers import NotificationSerializer

    serializer = NotificationSerializer(notification)
    data = serializer.data
"""

from __future__ import annotations

from rest_framework import serializers

from notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """
    Serializer for Notification model.

    Read-only serializer that includes:
    - Basic notification fields (id, type, message, metadata, is_read, created_at)
    - target as {"kind", "id"} or null
    - actor_name derived from actor user (handles SET_NULL)
    """

    type = serializers.CharField(source="notification_type", read_only=True)
    actor_id = serializers.IntegerField(read_only=True, allow_null=True)
    actor_name = serializers.SerializerMethodField()
    target = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "message",
            "metadata",
            "target",
            "actor_id",
            "actor_name",
            "is_read",
            "read_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_actor_name(self, obj: Notification) -> str | None:
        """None for system notifications or when the actor was deleted."""
        if obj.actor is None:
            return None
        return obj.actor.display_name

    def get_target(self, obj: Notification) -> dict | None:
        target = obj.target
        if target is None:
            return None
        return {"kind": target.kind, "id": target.id}


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class MarkAllReadResponseSerializer(serializers.Serializer):
    marked_count = serializers.IntegerField()
