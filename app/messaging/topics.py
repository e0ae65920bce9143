"""
In-process topic registry for real-time delivery.

Topics:
    user:{id}      everything addressed to one user
    project:{id}   everything posted in one project's conversation

A connection handle is any object with an ``async deliver(event)`` method;
MessagesConsumer instances are the handles in production.

Locking:
    The registry maps are guarded by a threading.Lock. The lock is only held
    while copying or mutating the maps and never across an await, so a slow
    connection cannot block subscribe/unsubscribe on other connections.

Delivery:
    publish() snapshots the subscribers of a topic and delivers to all of
    them concurrently. Each send is bounded by the registry timeout; a slow
    or failing handle is logged and skipped. There is no retry and no
    redelivery.

The registry is per process. Running several ASGI workers requires a shared
broker, which is not provided here.

Usage:
    from messaging.topics import get_registry, user_topic

    registry = get_registry()
    registry.subscribe(user_topic(user.id), consumer)
    await registry.publish(user_topic(user.id), {"event": "message:receive", ...})
    registry.unsubscribe_all(consumer)
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from typing import Any, Protocol

from django.conf import settings

logger = logging.getLogger(__name__)


class ConnectionHandle(Protocol):
    async def deliver(self, event: dict[str, Any]) -> None: ...


def user_topic(user_id) -> str:
    return f"user:{user_id}"


def project_topic(project_id) -> str:
    return f"project:{project_id}"


class TopicRegistry:
    """Topic name → set of connection handles."""

    def __init__(self, send_timeout: float = 5.0):
        self.send_timeout = send_timeout
        self._lock = threading.Lock()
        self._subscribers: dict[str, set[ConnectionHandle]] = defaultdict(set)
        self._topics_by_handle: dict[ConnectionHandle, set[str]] = defaultdict(set)

    def subscribe(self, topic: str, handle: ConnectionHandle) -> bool:
        """Add ``handle`` to ``topic``; returns False if it was already subscribed."""
        with self._lock:
            if handle in self._subscribers[topic]:
                return False
            self._subscribers[topic].add(handle)
            self._topics_by_handle[handle].add(topic)
        logger.debug(f"Subscribed {handle!r} to {topic}")
        return True

    def unsubscribe(self, topic: str, handle: ConnectionHandle) -> bool:
        with self._lock:
            handles = self._subscribers.get(topic)
            if not handles or handle not in handles:
                return False
            handles.discard(handle)
            if not handles:
                del self._subscribers[topic]
            topics = self._topics_by_handle.get(handle)
            if topics is not None:
                topics.discard(topic)
                if not topics:
                    del self._topics_by_handle[handle]
        logger.debug(f"Unsubscribed {handle!r} from {topic}")
        return True

    def unsubscribe_all(self, handle: ConnectionHandle) -> set[str]:
        """Drop every subscription of ``handle``; returns the topics it left."""
        with self._lock:
            topics = self._topics_by_handle.pop(handle, set())
            for topic in topics:
                handles = self._subscribers.get(topic)
                if handles is None:
                    continue
                handles.discard(handle)
                if not handles:
                    del self._subscribers[topic]
        return topics

    def subscribers(self, topic: str) -> list[ConnectionHandle]:
        with self._lock:
            return list(self._subscribers.get(topic, ()))

    def topics_for(self, handle: ConnectionHandle) -> set[str]:
        with self._lock:
            return set(self._topics_by_handle.get(handle, ()))

    async def publish(self, topic: str, event: dict[str, Any]) -> int:
        """
        Deliver ``event`` to every current subscriber of ``topic``.

        Returns:
            Number of handles the event was delivered to
        """
        handles = self.subscribers(topic)
        if not handles:
            return 0
        results = await asyncio.gather(
            *(self._deliver(handle, topic, event) for handle in handles)
        )
        return sum(results)

    async def _deliver(self, handle: ConnectionHandle, topic: str, event: dict[str, Any]) -> bool:
        try:
            await asyncio.wait_for(handle.deliver(event), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Dropped {event.get('event')} on {topic}: send to {handle!r} "
                f"timed out after {self.send_timeout}s"
            )
            return False
        except Exception:
            logger.warning(
                f"Dropped {event.get('event')} on {topic}: send to {handle!r} failed",
                exc_info=True,
            )
            return False
        return True


_registry: TopicRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> TopicRegistry:
    """Return the process-wide registry, created on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = TopicRegistry(send_timeout=settings.REALTIME_SEND_TIMEOUT_SECONDS)
        return _registry
