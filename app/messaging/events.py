"""
Outbound WebSocket frames.

Every frame is a JSON object with an ``event`` key. Timestamps are ISO 8601.

Frames:
    subscription:confirmed   {event, topic}
    subscription:removed     {event, topic}
    message:receive          {event, message_id, sender_id, sender_name,
                              receiver_id, project_id, content, timestamp, is_read}
    message:sent             {event, message_id, timestamp, status}
    message:typing           {event, sender_id, sender_name, project_id, timestamp}
    message:read             {event, message_id, read_by, read_at}
    message:read_confirmed   {event, message_id, status}
    error                    {event, error}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from django.utils import timezone

if TYPE_CHECKING:
    from authentication.models import User
    from messaging.models import Message


def subscription_confirmed(topic: str) -> dict[str, Any]:
    return {"event": "subscription:confirmed", "topic": topic}


def subscription_removed(topic: str) -> dict[str, Any]:
    return {"event": "subscription:removed", "topic": topic}


def message_receive(message: Message) -> dict[str, Any]:
    return {
        "event": "message:receive",
        "message_id": message.id,
        "sender_id": message.sender_id,
        "sender_name": message.sender.display_name,
        "receiver_id": message.receiver_id,
        "project_id": message.project_id,
        "content": message.content,
        "timestamp": message.sent_at.isoformat(),
        "is_read": message.is_read,
    }


def message_sent(message: Message) -> dict[str, Any]:
    return {
        "event": "message:sent",
        "message_id": message.id,
        "timestamp": message.sent_at.isoformat(),
        "status": "delivered",
    }


def message_typing(sender: User, project_id=None) -> dict[str, Any]:
    return {
        "event": "message:typing",
        "sender_id": sender.id,
        "sender_name": sender.display_name,
        "project_id": project_id,
        "timestamp": timezone.now().isoformat(),
    }


def message_read(message: Message) -> dict[str, Any]:
    return {
        "event": "message:read",
        "message_id": message.id,
        "read_by": message.receiver_id,
        "read_at": message.read_at.isoformat() if message.read_at else None,
    }


def message_read_confirmed(message: Message) -> dict[str, Any]:
    return {"event": "message:read_confirmed", "message_id": message.id, "status": "read"}


def error(message: str) -> dict[str, Any]:
    return {"event": "error", "error": message}
