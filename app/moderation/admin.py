"""Django admin configuration for moderation."""

from django.contrib import admin

from moderation.models import AuditLog, Report


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ["id", "target_kind", "target_id", "reason", "status", "reporter", "created_at"]
    list_filter = ["status", "reason", "target_kind"]
    search_fields = ["reporter__email", "description"]
    ordering = ["-created_at"]
    raw_id_fields = ["reporter", "resolved_by"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only: entries are written by moderation.audit.AuditTrail."""

    list_display = ["id", "action", "target_kind", "target_id", "actor", "ip_address", "created_at"]
    list_filter = ["action", "target_kind"]
    search_fields = ["actor__email", "details"]
    ordering = ["-created_at"]
    raw_id_fields = ["actor"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
