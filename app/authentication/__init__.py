"""
Authentication application.

Key components:
    - User model: email-based login, display name, platform role, suspension
    - TokenVerifier: access token verification for WebSocket connections
    - SuspensionAwareJWTAuthentication: DRF authentication class

Usage:
    from authentication.models import User
    from authentication.tokens import TokenVerifier
"""
