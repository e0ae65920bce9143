"""
Notifications app: in-app notification center.

This app provides:
- Notification model, one row per recipient
- NotificationStore for persistence and the read API
- NotificationDispatcher mapping domain events to notifications
- REST API for listing and managing notifications

Usage:
    from notifications.dispatcher import NotificationDispatcher, NotificationEvent

    NotificationDispatcher.dispatch(
        NotificationEvent.COMMENT_POSTED, comment, actor=comment.user
    )
"""
