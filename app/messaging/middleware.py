"""
WebSocket authentication middleware.

Resolves the connecting user from a JWT access token and stores it in
``scope["user"]``. Connections without a valid token get AnonymousUser;
MessagesConsumer closes those with code 4001.

Token Passing Methods:
    1. Query string: ws://host/ws/messages/?token=<jwt_token>
    2. Header: Authorization: Bearer <jwt_token>

Usage in config/asgi.py:
    from messaging.middleware import TokenAuthMiddleware

    application = ProtocolTypeRouter({
        "websocket": TokenAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        ),
    })
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser

from authentication.tokens import TokenVerifier
from core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@database_sync_to_async
def get_user_from_token(token):
    """Return the token's user, or AnonymousUser when the token is rejected."""
    try:
        return TokenVerifier.get_user(token)
    except AuthenticationError as exc:
        logger.warning(f"WebSocket authentication failed: {exc.message} ({exc.error_code})")
        return AnonymousUser()


class TokenAuthMiddleware(BaseMiddleware):
    """
    JWT authentication middleware for WebSocket connections.

    Token sources (in order of precedence):
        1. Query string: ?token=<jwt_token>
        2. Authorization header: Bearer <jwt_token>
    """

    async def __call__(self, scope, receive, send):
        token = self._get_token_from_query(scope) or self._get_token_from_header(scope)
        scope["user"] = await get_user_from_token(token)
        return await super().__call__(scope, receive, send)

    @staticmethod
    def _get_token_from_query(scope) -> str | None:
        query_string = scope.get("query_string", b"").decode()
        tokens = parse_qs(query_string).get("token")
        return tokens[0] if tokens else None

    @staticmethod
    def _get_token_from_header(scope) -> str | None:
        for name, value in scope.get("headers", []):
            if name.lower() != b"authorization":
                continue
            scheme, _, credentials = value.decode().partition(" ")
            if scheme.lower() == "bearer" and credentials:
                return credentials.strip()
        return None
