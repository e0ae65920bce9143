"""
Permission classes for moderation API.

- IsPlatformAdmin: user has system_role=admin

ModerationService repeats the admin check, so services called outside the
API are protected too.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsPlatformAdmin(permissions.BasePermission):
    """Allows access only to authenticated platform administrators."""

    message = "Admin access required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))
