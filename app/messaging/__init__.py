"""
Messaging app: direct messages and the real-time channel layer.

This app provides:
- Message model for user-to-user (optionally project-scoped) messages
- TopicRegistry, the in-process pub/sub behind user:{id} and project:{id} topics
- MessagesConsumer, the WebSocket endpoint at ws/messages/
- TokenAuthMiddleware authenticating WebSocket connections with a JWT
- REST API for message history and unread counts
"""
