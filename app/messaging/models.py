"""
Messaging models.

- Message: a direct message, optionally scoped to a project

Messages are created on send and mutated once, when the receiver reads
them. They are never deleted by the messaging layer.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import BaseModel


class Message(BaseModel):
    """
    A message from ``sender`` to ``receiver``.

    Fields:
        sender / receiver: Participants
        project: Project the conversation is about (optional)
        content: Message text
        sent_at: When the message was sent
        is_read / read_at: Receiver's read receipt
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
    )
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="messages",
    )
    content = models.TextField()
    sent_at = models.DateTimeField(default=timezone.now, db_index=True)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta(BaseModel.Meta):
        ordering = ["-sent_at", "-id"]
        indexes = [
            models.Index(fields=["receiver", "is_read"], name="message_receiver_unread_idx"),
            models.Index(fields=["sender", "receiver", "-sent_at"], name="message_pair_idx"),
        ]

    def __str__(self) -> str:
        return f"Message({self.id}, {self.sender_id} -> {self.receiver_id})"

    def mark_as_read(self) -> bool:
        """Set the read receipt; returns False if already read."""
        if self.is_read:
            return False
        self.is_read = True
        self.read_at = timezone.now()
        self.save(update_fields=["is_read", "read_at", "updated_at"])
        return True
