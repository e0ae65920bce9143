"""
Messaging service layer.

MessagingService persists messages and read receipts. It is synchronous;
the WebSocket consumer calls it through database_sync_to_async and turns
failed results into error frames.

Usage:
    from messaging.services import MessagingService

    result = MessagingService.send_message(sender, receiver_id=42, content="Hi")
    if not result:
        ...  # result.error is safe to show to the sender
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DatabaseError
from django.db.models import Q

from authentication.models import User
from core.services import BaseService, ServiceResult
from messaging.models import Message
from projects.models import Project

if TYPE_CHECKING:
    from django.db.models import QuerySet

MISSING_FIELDS_ERROR = "Missing required fields: receiver_id and content are required"
INVALID_CONTENT_ERROR = "Invalid content: expected text"
SEND_FAILED_ERROR = "Message could not be sent, please try again"
NOT_FOUND_OR_UNAUTHORIZED = "Message not found or unauthorized"


def _as_id(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class MessagingService(BaseService):
    """
    Methods:
        send_message: Persist a message from sender to receiver
        mark_as_read: Receiver's read receipt
        history: Messages the user sent or received
        unread_count: Unread messages addressed to the user
    """

    @classmethod
    def send_message(
        cls,
        sender: User,
        receiver_id,
        content: str,
        project_id=None,
    ) -> ServiceResult[Message]:
        """
        Error codes:
            VALIDATION_ERROR: receiver_id or content missing, or content not text
            MESSAGE_TOO_LONG: content exceeds MESSAGE_MAX_LENGTH
            RECEIVER_NOT_FOUND: no active user with that id
            PROJECT_NOT_FOUND: project_id given but unknown
            SEND_FAILED: the message could not be stored
        """
        validation = cls.validate_required(receiver_id=receiver_id, content=content)
        if validation is not None:
            validation.error = MISSING_FIELDS_ERROR
            return validation
        if not isinstance(content, str):
            return ServiceResult.failure(INVALID_CONTENT_ERROR, error_code="VALIDATION_ERROR")

        content = content.strip()
        max_length = settings.MESSAGE_MAX_LENGTH
        if len(content) > max_length:
            return ServiceResult.failure(
                f"Message is too long (maximum {max_length} characters)",
                error_code="MESSAGE_TOO_LONG",
            )

        receiver_pk = _as_id(receiver_id)
        receiver = (
            User.objects.filter(pk=receiver_pk, is_active=True).first()
            if receiver_pk is not None
            else None
        )
        if receiver is None:
            return ServiceResult.failure("Receiver not found", error_code="RECEIVER_NOT_FOUND")
        if receiver.pk == sender.pk:
            return ServiceResult.failure(
                "You cannot send a message to yourself", error_code="INVALID_RECEIVER"
            )

        project = None
        if project_id not in (None, ""):
            project_pk = _as_id(project_id)
            project = (
                Project.objects.filter(pk=project_pk).first() if project_pk is not None else None
            )
            if project is None:
                return ServiceResult.failure("Project not found", error_code="PROJECT_NOT_FOUND")

        try:
            message = Message.objects.create(
                sender=sender,
                receiver=receiver,
                project=project,
                content=content,
            )
        except DatabaseError:
            cls.get_logger().exception(
                f"Failed to store message from user {sender.id} to user {receiver.id}"
            )
            return ServiceResult.failure(SEND_FAILED_ERROR, error_code="SEND_FAILED")

        cls.get_logger().info(
            f"Message {message.id} sent from user {sender.id} to user {receiver.id}"
            + (f" on project {project.id}" if project else "")
        )
        return ServiceResult.success(message)

    @classmethod
    def mark_as_read(cls, message_id, user: User) -> ServiceResult[Message]:
        """
        Mark a message addressed to ``user`` as read (idempotent).

        Error codes:
            MESSAGE_NOT_FOUND: missing, or not addressed to ``user``
        """
        message_pk = _as_id(message_id)
        message = (
            Message.objects.select_related("sender").filter(pk=message_pk, receiver=user).first()
            if message_pk is not None
            else None
        )
        if message is None:
            cls.get_logger().warning(
                f"User {user.id} attempted to mark message {message_id} as read"
            )
            return ServiceResult.failure(NOT_FOUND_OR_UNAUTHORIZED, error_code="MESSAGE_NOT_FOUND")

        message.mark_as_read()
        return ServiceResult.success(message)

    @classmethod
    def history(cls, user: User, project_id=None, with_user=None) -> QuerySet[Message]:
        queryset = Message.objects.filter(Q(sender=user) | Q(receiver=user)).select_related(
            "sender", "receiver"
        )
        if project_id not in (None, ""):
            queryset = queryset.filter(project_id=_as_id(project_id))
        if with_user not in (None, ""):
            other = _as_id(with_user)
            queryset = queryset.filter(Q(sender_id=other) | Q(receiver_id=other))
        return queryset.order_by("-sent_at", "-id")

    @classmethod
    def unread_count(cls, user: User) -> int:
        return Message.objects.filter(receiver=user, is_read=False).count()
