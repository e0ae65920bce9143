"""
Authentication models.

This module defines the platform user:
- User: email-based login, display name, platform role and suspension state

Related files:
    - managers.py: Custom user manager for email-based creation
    - tokens.py: Access token verification for WebSocket connections

Security:
    - User passwords hashed with Django's PBKDF2
    - Suspended users cannot authenticate (see tokens.TokenVerifier)
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class SystemRole(models.TextChoices):
    """Platform-wide role, independent of per-project collaboration roles."""

    ADMIN = "admin", "Admin"
    USER = "user", "User"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        full_name: Display name used in notifications and messages
        system_role: admin or user
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        is_suspended: Set by moderators; suspended users cannot connect
        suspended_at / suspended_reason / suspended_by: Suspension audit
        is_reported: At least one report has been filed against this user
        date_joined: When the user account was created
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    full_name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Display name",
    )
    system_role = models.CharField(
        max_length=10,
        choices=SystemRole.choices,
        default=SystemRole.USER,
        db_index=True,
        help_text="Platform role",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    # Moderation
    is_suspended = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this account is suspended by a moderator",
    )
    suspended_at = models.DateTimeField(null=True, blank=True)
    suspended_reason = models.CharField(max_length=255, blank=True, default="")
    suspended_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    is_reported = models.BooleanField(default=False)

    # Timestamps
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    def get_full_name(self):
        """Return the display name, falling back to the email address."""
        return self.full_name or self.email

    def get_short_name(self):
        """Return the first word of the display name or the email local part."""
        if self.full_name:
            return self.full_name.split()[0]
        return self.email.split("@")[0]

    @property
    def display_name(self) -> str:
        return self.get_full_name()

    @property
    def is_admin(self) -> bool:
        return self.system_role == SystemRole.ADMIN
