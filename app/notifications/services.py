"""
Notification store.

NotificationStore is the only writer of Notification rows. The dispatcher
(notifications.dispatcher) decides who gets what; the store persists it and
serves the read API.

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures (wrong owner, missing row) return ServiceResult.failure()
    - Batch creation uses a single savepoint so a failed batch leaves the
      caller's transaction usable

Usage:
    from notifications.services import NotificationStore

    NotificationStore.create(
        recipient=owner,
        notification_type=NotificationType.COLLABORATION_REQUEST,
        message="Ada requested to collaborate on Solar Car",
        actor=ada,
        target=TargetRef.for_instance(request),
        metadata={"project_id": project.id},
    )

    result = NotificationStore.mark_as_read(notification_id, user)
    result = NotificationStore.mark_all_as_read(user)
    count = NotificationStore.unread_count(user)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.utils import timezone

from core.services import BaseService, ServiceResult
from notifications.models import Notification, NotificationType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from django.db.models import QuerySet

    from authentication.models import User
    from notifications.targets import TargetRef


@dataclass
class NotificationDraft:
    """A notification that has been rendered but not yet stored."""

    recipient: User
    notification_type: str
    message: str
    actor: User | None = None
    target: TargetRef | None = None
    metadata: dict = field(default_factory=dict)

    def to_model(self) -> Notification:
        return Notification(
            recipient=self.recipient,
            actor=self.actor,
            notification_type=self.notification_type,
            message=self.message[:500],
            metadata=self.metadata,
            target_kind=self.target.kind if self.target else "",
            target_id=self.target.id if self.target else None,
        )


class NotificationStore(BaseService):
    """
    Persistence and queries for notifications.

    Methods:
        create: Store a single notification
        create_many: Store a batch of drafts atomically
        for_user: Recipient's notifications, newest first, optional filters
        unread_count: Number of unread notifications
        mark_as_read / mark_as_unread: Toggle one notification
        mark_all_as_read: Bulk mark as read
        delete: Remove one notification
    """

    @classmethod
    def create(
        cls,
        recipient: User,
        notification_type: str,
        message: str,
        actor: User | None = None,
        target: TargetRef | None = None,
        metadata: dict | None = None,
    ) -> Notification:
        notification = NotificationDraft(
            recipient=recipient,
            notification_type=notification_type,
            message=message,
            actor=actor,
            target=target,
            metadata=metadata or {},
        ).to_model()
        notification.save()
        cls.get_logger().debug(
            f"Stored {notification.notification_type} notification {notification.id} "
            f"for user {recipient.id}"
        )
        return notification

    @classmethod
    def create_many(cls, drafts: Iterable[NotificationDraft]) -> list[Notification]:
        """Store drafts in one savepoint; either all rows are written or none."""
        drafts = list(drafts)
        if not drafts:
            return []

        with cls.atomic():
            notifications = [draft.to_model() for draft in drafts]
            for notification in notifications:
                notification.save()

        cls.get_logger().info(
            f"Stored {len(notifications)} {notifications[0].notification_type} notification(s)"
        )
        return notifications

    @classmethod
    def for_user(
        cls,
        user: User,
        unread: bool | None = None,
        notification_type: str | None = None,
    ) -> QuerySet[Notification]:
        queryset = Notification.objects.filter(recipient=user).select_related("actor")
        if unread is not None:
            queryset = queryset.filter(is_read=not unread)
        if notification_type:
            if notification_type not in NotificationType.values:
                return queryset.none()
            queryset = queryset.filter(notification_type=notification_type)
        return queryset.order_by("-created_at", "-id")

    @classmethod
    def unread_count(cls, user: User) -> int:
        return Notification.objects.filter(recipient=user, is_read=False).count()

    @classmethod
    def _get_owned(cls, notification_id, user: User) -> ServiceResult[Notification]:
        notification = Notification.objects.filter(pk=notification_id).first()
        if notification is None:
            return ServiceResult.failure(
                "Notification not found", error_code="NOTIFICATION_NOT_FOUND"
            )
        if notification.recipient_id != user.id:
            cls.get_logger().warning(
                f"User {user.id} attempted to access notification {notification.id} "
                f"owned by user {notification.recipient_id}"
            )
            return ServiceResult.failure(
                "Notification not found", error_code="NOTIFICATION_NOT_FOUND"
            )
        return ServiceResult.success(notification)

    @classmethod
    def mark_as_read(cls, notification_id, user: User) -> ServiceResult[Notification]:
        """
        Mark a single notification as read (idempotent).

        Error codes:
            NOTIFICATION_NOT_FOUND: Missing or owned by another user
        """
        result = cls._get_owned(notification_id, user)
        if result:
            result.data.mark_as_read()
        return result

    @classmethod
    def mark_as_unread(cls, notification_id, user: User) -> ServiceResult[Notification]:
        result = cls._get_owned(notification_id, user)
        if result:
            result.data.mark_as_unread()
        return result

    @classmethod
    def mark_all_as_read(cls, user: User) -> ServiceResult[int]:
        """Bulk update; returns the number of notifications changed."""
        now = timezone.now()
        count = Notification.objects.filter(recipient=user, is_read=False).update(
            is_read=True, read_at=now, updated_at=now
        )
        cls.get_logger().info(f"Marked {count} notifications as read for user {user.id}")
        return ServiceResult.success(count)

    @classmethod
    def delete(cls, notification_id, user: User) -> ServiceResult[int]:
        result = cls._get_owned(notification_id, user)
        if not result:
            return result
        notification_pk = result.data.pk
        result.data.delete()
        return ServiceResult.success(notification_pk)
