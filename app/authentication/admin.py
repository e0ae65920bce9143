"""
Django admin configuration for the User model.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin configuration for User, customized for email-based login."""

    list_display = (
        "email",
        "full_name",
        "system_role",
        "is_active",
        "is_suspended",
        "date_joined",
    )
    list_filter = (
        "system_role",
        "is_active",
        "is_suspended",
        "is_reported",
        "is_staff",
    )
    search_fields = ("email", "full_name")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("email", "password", "full_name")}),
        (
            "Status",
            {"fields": ("system_role", "is_active", "is_staff", "is_superuser")},
        ),
        (
            "Moderation",
            {
                "fields": (
                    "is_reported",
                    "is_suspended",
                    "suspended_at",
                    "suspended_reason",
                    "suspended_by",
                )
            },
        ),
        (
            "Permissions",
            {"fields": ("groups", "user_permissions")},
        ),
        (
            "Important dates",
            {"fields": ("date_joined", "last_login")},
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "full_name", "password1", "password2"),
            },
        ),
    )

    raw_id_fields = ("suspended_by",)
    readonly_fields = ("date_joined", "last_login", "suspended_at")
