"""
Model mixins providing reusable functionality for Django models.

This module contains abstract mixin classes that can be combined with
BaseModel to add specific functionality.

Available Mixins:
    ModerationFlagsMixin: Hidden/reported flags for user-generated content

Usage:
    from core.models import BaseModel
    from core.model_mixins import ModerationFlagsMixin

    class Comment(ModerationFlagsMixin, BaseModel):
        content = models.TextField()

    comment.hide(by=admin, reason="Off-topic")
    Comment.objects.filter(is_hidden=False)

Note:
    - Always list mixins before BaseModel in inheritance
    - Mixins are abstract and don't create database tables
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone


class ModerationFlagsMixin(models.Model):
    """
    Moderation state shared by projects and comments.

    Fields:
        is_hidden: Content is hidden from non-admin listings
        is_reported: At least one report (manual or automatic) was filed
        hidden_at: When the content was hidden
        hidden_reason: Reason shown to the content owner
        hidden_by: Admin who hid the content (null for automatic hides)

    Usage:
        project.hide(by=None, reason="Auto-hidden: High spam score (85)")
        project.unhide()
    """

    is_hidden = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this content is hidden from public listings",
    )
    is_reported = models.BooleanField(
        default=False,
        help_text="Whether this content has been reported",
    )
    hidden_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp when this content was hidden",
    )
    hidden_reason = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Reason the content was hidden",
    )
    hidden_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Admin who hid this content",
    )

    class Meta:
        abstract = True

    def hide(self, by=None, reason: str = "") -> None:
        """Hide this content and persist the moderation fields."""
        self.is_hidden = True
        self.hidden_at = timezone.now()
        self.hidden_reason = reason
        self.hidden_by = by
        self.save(
            update_fields=[
                "is_hidden",
                "hidden_at",
                "hidden_reason",
                "hidden_by",
                "updated_at",
            ]
        )

    def unhide(self) -> None:
        """Restore hidden content."""
        self.is_hidden = False
        self.hidden_at = None
        self.hidden_reason = ""
        self.hidden_by = None
        self.save(
            update_fields=[
                "is_hidden",
                "hidden_at",
                "hidden_reason",
                "hidden_by",
                "updated_at",
            ]
        )

    def mark_reported(self) -> None:
        """Flag this content as reported."""
        if self.is_reported:
            return
        self.is_reported = True
        self.save(update_fields=["is_reported", "updated_at"])
