"""Django admin configuration for messaging."""

from django.contrib import admin

from messaging.models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["id", "sender", "receiver", "project", "is_read", "sent_at"]
    list_filter = ["is_read", "sent_at"]
    search_fields = ["content", "sender__email", "receiver__email"]
    ordering = ["-sent_at"]
    readonly_fields = ["sender", "receiver", "project", "content", "sent_at", "read_at"]
    raw_id_fields = ["sender", "receiver", "project"]

    def has_add_permission(self, request):
        return False
