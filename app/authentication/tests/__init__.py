"""
Tests for authentication app.

- test_managers.py: UserManager and queryset helpers
- test_tokens.py: TokenVerifier and suspension-aware JWT authentication
- test_views.py: registration, token obtain and current-user endpoints
"""
