"""
Notification models.

- NotificationType: the closed set of notification kinds
- Notification: one in-app notification for one recipient

Design Decisions:
    - Notification inherits from BaseModel (timestamps, ordering)
    - Actor uses SET_NULL (preserve notification when actor deleted)
    - The triggering entity is a tagged (target_kind, target_id) pair,
      resolved through notifications.targets.TARGET_MODELS
    - Rows are only created through NotificationStore and only mutated by
      read/unread toggles

Usage:
    from notifications.services import NotificationStore

    NotificationStore.for_user(user, unread=True)
"""

from __future__ import annotations

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone

from core.models import BaseModel
from notifications.targets import TargetKind, TargetRef


# =============================================================================
# Enums
# =============================================================================


class NotificationType(models.TextChoices):
    """Notification kinds shown in the client's notification center."""

    COLLABORATION_REQUEST = "collaboration_request", "Collaboration request"
    COLLABORATION_APPROVED = "collaboration_approved", "Collaboration approved"
    COLLABORATION_REJECTED = "collaboration_rejected", "Collaboration rejected"
    FUNDING_REQUEST = "funding_request", "Funding request"
    FUNDING_VERIFIED = "funding_verified", "Funding verified"
    FUNDING_REJECTED = "funding_rejected", "Funding rejected"
    PROJECT_COMMENT = "project_comment", "Project comment"
    PROJECT_VOTE = "project_vote", "Project vote"
    PROJECT_MILESTONE = "project_milestone", "Project milestone"
    COMMENT_REPLY = "comment_reply", "Comment reply"
    COMMENT_LIKED = "comment_liked", "Comment liked"
    NEW_MESSAGE = "new_message", "New message"
    RESOURCE_ADDED = "resource_added", "Resource added"
    PROJECT_REPORTED = "project_reported", "Project reported"
    USER_REPORTED = "user_reported", "User reported"
    CONTENT_REPORTED = "content_reported", "Content reported"
    USER_SUSPENDED = "user_suspended", "User suspended"
    USER_UNSUSPENDED = "user_unsuspended", "User unsuspended"
    CONTENT_HIDDEN = "content_hidden", "Content hidden"


# =============================================================================
# Models
# =============================================================================


class Notification(BaseModel):
    """
    An in-app notification.

    Fields:
        recipient: User who sees the notification
        actor: User who triggered it (null for system events)
        notification_type: NotificationType value
        target_kind / target_id: Entity the notification is about
        message: Rendered text
        metadata: Ids and display names for client deep-linking
        is_read / read_at: Read state
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notification_type = models.CharField(
        max_length=40,
        choices=NotificationType.choices,
        db_index=True,
    )
    target_kind = models.CharField(
        max_length=30,
        choices=TargetKind.choices,
        blank=True,
        default="",
    )
    target_id = models.PositiveBigIntegerField(null=True, blank=True)
    message = models.CharField(max_length=500)
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta(BaseModel.Meta):
        db_table = "notifications_notification"
        indexes = [
            models.Index(
                fields=["recipient", "is_read", "-created_at"],
                name="notif_recipient_unread_idx",
            ),
            models.Index(
                fields=["target_kind", "target_id"],
                name="notif_target_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Notification({self.id}, {self.notification_type}, to={self.recipient_id})"

    @property
    def target(self) -> TargetRef | None:
        if not self.target_kind or self.target_id is None:
            return None
        return TargetRef(kind=self.target_kind, id=self.target_id)

    def mark_as_read(self) -> bool:
        """Set read state; returns False if it was already read."""
        if self.is_read:
            return False
        self.is_read = True
        self.read_at = timezone.now()
        self.save(update_fields=["is_read", "read_at", "updated_at"])
        return True

    def mark_as_unread(self) -> bool:
        if not self.is_read:
            return False
        self.is_read = False
        self.read_at = None
        self.save(update_fields=["is_read", "read_at", "updated_at"])
        return True
