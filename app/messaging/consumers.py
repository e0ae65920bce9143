"""
WebSocket consumer for direct and project messages.

Consumers:
    MessagesConsumer: One instance per connection on ws/messages/

Authentication:
    TokenAuthMiddleware puts the user in self.scope["user"]. Anonymous
    connections are closed with code 4001 before they are accepted.

Delivery:
    Consumers do not talk to each other directly. Every cross-connection
    event goes through the TopicRegistry (messaging.topics), which calls
    deliver() on each subscribed consumer.

Actions (from client, {"action": <name>, ...}):
    - subscribe: {project_id?}
    - unsubscribe: {project_id?}
    - send_message: {receiver_id, content, project_id?}
    - typing: {receiver_id, project_id?}
    - mark_as_read: {message_id}

Events (to client): see messaging.events
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from messaging import events
from messaging.services import MessagingService
from messaging.topics import get_registry, project_topic, user_topic
from notifications.dispatcher import NotificationDispatcher, NotificationEvent

logger = logging.getLogger(__name__)

CLOSE_UNAUTHENTICATED = 4001


class MessagesConsumer(AsyncJsonWebsocketConsumer):
    """
    Real-time messaging endpoint.

    Attributes:
        user: Authenticated user (after connect)
        registry: Topic registry this connection subscribes through
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None
        self.registry = None
        self.handlers = {
            "subscribe": self.handle_subscribe,
            "unsubscribe": self.handle_unsubscribe,
            "send_message": self.handle_send_message,
            "typing": self.handle_typing,
            "mark_as_read": self.handle_mark_as_read,
        }

    def __repr__(self) -> str:
        user_id = self.user.id if self.user is not None else "anonymous"
        return f"<MessagesConsumer user={user_id} channel={getattr(self, 'channel_name', None)}>"

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    async def connect(self):
        user = self.scope.get("user")
        if not user or isinstance(user, AnonymousUser) or not user.is_authenticated:
            logger.warning("Rejected unauthenticated messaging connection")
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return

        self.user = user
        self.registry = get_registry()
        await self.accept()
        logger.info(f"User {user.id} connected to messaging")

    async def disconnect(self, close_code):
        if self.registry is None:
            return
        topics = self.registry.unsubscribe_all(self)
        logger.info(
            f"User {self.user.id} disconnected from messaging "
            f"(code={close_code}, topics={sorted(topics)})"
        )

    async def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            await self.send_error("Invalid frame: expected a JSON object")
            return

        action = content.get("action")
        handler = self.handlers.get(action)
        if handler is None:
            await self.send_error(f"Unknown action: {action}")
            return
        await handler(content)

    async def deliver(self, event):
        """Called by the TopicRegistry for every event published to a subscribed topic."""
        await self.send_json(event)

    async def send_error(self, message: str):
        await self.send_json(events.error(message))

    # =========================================================================
    # Action handlers
    # =========================================================================

    def _topic_for(self, content) -> str:
        project_id = content.get("project_id")
        if project_id not in (None, ""):
            return project_topic(project_id)
        return user_topic(self.user.id)

    async def handle_subscribe(self, content):
        topic = self._topic_for(content)
        self.registry.subscribe(topic, self)
        await self.send_json(events.subscription_confirmed(topic))

    async def handle_unsubscribe(self, content):
        topic = self._topic_for(content)
        self.registry.unsubscribe(topic, self)
        await self.send_json(events.subscription_removed(topic))

    async def handle_send_message(self, content):
        result = await self._send_message(
            receiver_id=content.get("receiver_id"),
            content=content.get("content"),
            project_id=content.get("project_id"),
        )
        if not result:
            await self.send_error(result.error)
            return

        message = result.data
        payload = events.message_receive(message)
        await self.registry.publish(user_topic(message.receiver_id), payload)
        if message.project_id is not None:
            await self.registry.publish(project_topic(message.project_id), payload)

        await self._dispatch_message_received(message)
        await self.send_json(events.message_sent(message))

    async def handle_typing(self, content):
        receiver_id = content.get("receiver_id")
        if receiver_id in (None, ""):
            return

        project_id = content.get("project_id")
        payload = events.message_typing(self.user, project_id=project_id)
        await self.registry.publish(user_topic(receiver_id), payload)
        if project_id not in (None, ""):
            await self.registry.publish(project_topic(project_id), payload)

    async def handle_mark_as_read(self, content):
        message_id = content.get("message_id")
        if message_id in (None, ""):
            await self.send_error("Missing required field: message_id")
            return

        result = await self._mark_as_read(message_id)
        if not result:
            await self.send_error(result.error)
            return

        message = result.data
        await self.registry.publish(user_topic(message.sender_id), events.message_read(message))
        await self.send_json(events.message_read_confirmed(message))

    # =========================================================================
    # Database helpers
    # =========================================================================

    @database_sync_to_async
    def _send_message(self, receiver_id, content, project_id):
        return MessagingService.send_message(
            self.user, receiver_id=receiver_id, content=content, project_id=project_id
        )

    @database_sync_to_async
    def _mark_as_read(self, message_id):
        return MessagingService.mark_as_read(message_id, self.user)

    @database_sync_to_async
    def _dispatch_message_received(self, message):
        return NotificationDispatcher.dispatch(
            NotificationEvent.MESSAGE_RECEIVED, message, actor=self.user
        )
