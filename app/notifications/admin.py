"""Django admin configuration for notifications."""

from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    Admin configuration for Notification.

    Provides read-only view of notifications for debugging and support.
    """

    list_display = [
        "id",
        "notification_type",
        "recipient",
        "message",
        "is_read",
        "created_at",
    ]
    list_filter = ["is_read", "notification_type", "created_at"]
    search_fields = ["message", "recipient__email"]
    ordering = ["-created_at"]
    readonly_fields = [
        "notification_type",
        "recipient",
        "actor",
        "message",
        "metadata",
        "target_kind",
        "target_id",
        "read_at",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["recipient", "actor"]

    def has_add_permission(self, request):
        """Notifications are created by the system, not manually."""
        return False
