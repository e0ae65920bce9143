"""Django app configuration for authentication."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Custom user model, token verification and auth endpoints."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Authentication"
