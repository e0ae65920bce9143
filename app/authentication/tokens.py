"""
Access token verification.

The REST API authenticates through SimpleJWT's DRF authentication class.
WebSocket connections have no DRF request, so messaging.middleware calls
TokenVerifier directly with the raw token string.

Both paths reject suspended accounts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from authentication.models import User
from core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedToken:
    """Claims extracted from a valid access token."""

    user_id: int | str


class TokenVerifier:
    """
    Verify signed access tokens issued by /api/v1/auth/token/.

    Usage:
        verified = TokenVerifier.verify(token)      # claims only
        user = TokenVerifier.get_user(token)        # claims + active account
    """

    @staticmethod
    def verify(token: str | None) -> VerifiedToken:
        """
        Validate signature and expiry and return the user id claim.

        Raises:
            AuthenticationError: token missing, malformed, expired or without user claim
        """
        if not token:
            raise AuthenticationError("Authentication token missing", error_code="TOKEN_MISSING")

        try:
            access = AccessToken(token)
        except TokenError as exc:
            raise AuthenticationError(str(exc), error_code="TOKEN_INVALID") from exc

        user_id = access.get(api_settings.USER_ID_CLAIM)
        if user_id is None:
            raise AuthenticationError(
                "Token contains no user identifier", error_code="TOKEN_INVALID"
            )
        return VerifiedToken(user_id=user_id)

    @classmethod
    def get_user(cls, token: str | None) -> User:
        """
        Resolve the token to an active, non-suspended user.

        Raises:
            AuthenticationError: invalid token, unknown/inactive user or suspended account
        """
        verified = cls.verify(token)
        user = User.objects.filter(pk=verified.user_id, is_active=True).first()
        if user is None:
            raise AuthenticationError("User not found or inactive", error_code="USER_INACTIVE")
        if user.is_suspended:
            logger.info(f"Rejected token for suspended user {user.id}")
            raise AuthenticationError("Account is suspended", error_code="ACCOUNT_SUSPENDED")
        return user


class SuspensionAwareJWTAuthentication(JWTAuthentication):
    """SimpleJWT authentication that also refuses suspended accounts."""

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if getattr(user, "is_suspended", False):
            raise AuthenticationFailed("Account is suspended", code="account_suspended")
        return user
