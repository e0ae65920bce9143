"""
WebSocket URL routing for messaging.

URL Patterns:
    ws/messages/ - The single messaging connection of a client

Authentication:
    JWT token passed as query parameter (?token=<jwt_access_token>) or as an
    Authorization: Bearer header. See messaging.middleware.
"""

from django.urls import path

from messaging import consumers

websocket_urlpatterns = [
    path("ws/messages/", consumers.MessagesConsumer.as_asgi()),
]
