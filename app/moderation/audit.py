"""
Audit trail for admin moderation actions.

Recording never fails the action being audited: a database error is logged
and the entry is dropped.

Usage:
    from moderation.audit import AuditTrail

    AuditTrail.record(admin, AuditAction.USER_SUSPENDED, TargetRef.for_instance(user),
                      details="Suspended: Spam", ip_address="10.0.0.4")
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from django.db import DatabaseError
from django.db.models import Count
from django.utils import timezone

from core.exceptions import AuthorizationError
from core.services import BaseService
from moderation.models import AuditLog

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User
    from notifications.targets import TargetRef


class AuditTrail(BaseService):
    """
    Methods:
        record: Append one entry; returns None if it could not be stored
        entries: Admin listing, newest first
        stats: Totals for today, the last week and per action
    """

    @classmethod
    def record(
        cls,
        actor: User,
        action: str,
        target: TargetRef,
        details: str = "",
        ip_address: str | None = None,
    ) -> AuditLog | None:
        try:
            with cls.atomic():
                return AuditLog.objects.create(
                    actor=actor,
                    action=action,
                    target_kind=target.kind,
                    target_id=target.id,
                    details=details,
                    ip_address=ip_address or None,
                )
        except DatabaseError:
            cls.get_logger().exception(
                f"Failed to record audit entry {action} on {target.kind} {target.id} "
                f"by user {getattr(actor, 'id', None)}"
            )
            return None

    @classmethod
    def _require_admin(cls, user: User) -> None:
        if user is None or not user.is_admin:
            raise AuthorizationError("Admin access required", error_code="ADMIN_REQUIRED")

    @classmethod
    def entries(cls, admin: User) -> QuerySet[AuditLog]:
        cls._require_admin(admin)
        return AuditLog.objects.select_related("actor").order_by("-created_at", "-id")

    @classmethod
    def stats(cls, admin: User) -> dict:
        cls._require_admin(admin)
        now = timezone.now()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        by_action = AuditLog.objects.values("action").annotate(total=Count("id")).order_by("action")
        return {
            "total_actions": AuditLog.objects.count(),
            "actions_today": AuditLog.objects.filter(created_at__gte=start_of_day).count(),
            "actions_this_week": AuditLog.objects.filter(
                created_at__gte=now - timedelta(days=7)
            ).count(),
            "by_action": {row["action"]: row["total"] for row in by_action},
        }
