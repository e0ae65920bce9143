"""
Moderation service layer.

ModerationService holds every moderation decision:
- auto_moderate: inline spam check when projects and comments are created
- file_report / resolve_report: user reports and their review
- hide_content / unhide_content: admin visibility control for projects and comments
- suspend_user / unsuspend_user: admin account control

Admin-only operations raise AuthorizationError for non-admins. Notifications
are dispatched and audit entries recorded after the database work has
completed. Admin decisions accept the caller's ip_address for the audit trail.

Usage:
    from moderation.services import ModerationService

    outcome = ModerationService.auto_moderate(comment, comment.content)
    report = ModerationService.file_report(user, TargetRef.for_instance(project), "spam")
    ModerationService.suspend_user(user, admin, reason="Spam")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DatabaseError, models
from django.utils import timezone

from authentication.models import SystemRole, User
from core.exceptions import AuthorizationError, NotFoundError, StateError, ValidationError
from core.services import BaseService
from moderation.audit import AuditTrail
from moderation.models import (
    CLOSED_STATUSES,
    OPEN_STATUSES,
    REPORT_AUDIT_ACTIONS,
    REPORTABLE_KINDS,
    AuditAction,
    Report,
    ReportReason,
    ReportStatus,
)
from moderation.spam import SpamFilter
from notifications.dispatcher import NotificationDispatcher, NotificationEvent
from notifications.targets import TargetKind, TargetRef

if TYPE_CHECKING:
    from django.db.models import QuerySet

DEFAULT_SUSPEND_REASON = "Violated community guidelines"
DEFAULT_HIDE_REASON = "Violated content policy"


class ModerationOutcome(models.TextChoices):
    HIDDEN = "hidden", "Hidden"
    REPORTED = "reported", "Reported"
    APPROVED = "approved", "Approved"


class ModerationService(BaseService):
    """
    Methods:
        auto_moderate: Score content and hide/flag the entity
        system_user: The account automatic reports are filed under
        file_report: User reports a project, comment or user
        reports: Admin listing with filters
        resolve_report: Admin closes a report
        hide_content / unhide_content
        suspend_user / unsuspend_user
    """

    # =========================================================================
    # Automatic moderation
    # =========================================================================

    @classmethod
    def system_user(cls) -> User:
        """
        Return the moderation system account, creating it on first use.

        The account is inactive: it cannot log in and is not notified as an admin.
        """
        email = settings.MODERATION_SYSTEM_USER_EMAIL
        user = User.objects.filter(email=email).first()
        if user is None:
            user = User.objects.create_user(
                email=email,
                full_name="System",
                system_role=SystemRole.ADMIN,
                is_active=False,
            )
        return user

    @classmethod
    def auto_moderate(cls, entity, content: str, author: User | None = None) -> str:
        """
        Score ``content`` and act on ``entity`` (a Project or Comment).

        Outcomes:
            hidden: score >= SPAM_HIDE_THRESHOLD; entity hidden and reported
            reported: score >= SPAM_REPORT_THRESHOLD; entity flagged for review
            approved: nothing done

        Returns:
            ModerationOutcome value
        """
        score = SpamFilter.score(content)
        target = TargetRef.for_instance(entity)

        if score >= settings.SPAM_HIDE_THRESHOLD:
            entity.hide(by=None, reason=f"Auto-hidden: High spam score ({score})")
            entity.mark_reported()
            cls._file_system_report(target, score)
            outcome = ModerationOutcome.HIDDEN
        elif score >= settings.SPAM_REPORT_THRESHOLD:
            entity.mark_reported()
            cls._file_system_report(target, score)
            outcome = ModerationOutcome.REPORTED
        else:
            return ModerationOutcome.APPROVED

        cls.get_logger().warning(
            f"Auto-moderation {outcome} {target.kind} {target.id} with spam score {score}",
            extra={
                "target_kind": target.kind,
                "target_id": target.id,
                "spam_score": score,
                "author_id": getattr(author, "id", None),
            },
        )
        return outcome

    @classmethod
    def _file_system_report(cls, target: TargetRef, score: int) -> Report | None:
        try:
            with cls.atomic():
                return Report.objects.create(
                    reporter=cls.system_user(),
                    target_kind=target.kind,
                    target_id=target.id,
                    reason=ReportReason.SPAM,
                    description=f"Auto-detected spam with score: {score}",
                )
        except DatabaseError:
            cls.get_logger().exception(
                f"Failed to file spam report for {target.kind} {target.id}"
            )
            return None

    # =========================================================================
    # Reports
    # =========================================================================

    @classmethod
    def _require_admin(cls, user: User) -> None:
        if user is None or not user.is_admin:
            raise AuthorizationError("Admin access required", error_code="ADMIN_REQUIRED")

    @classmethod
    def _owner_of(cls, kind: str, entity) -> int | None:
        if kind == TargetKind.USER:
            return entity.id
        if kind == TargetKind.PROJECT:
            return entity.owner_id
        return entity.user_id

    @classmethod
    def file_report(
        cls,
        reporter: User,
        target: TargetRef,
        reason: str,
        description: str = "",
    ) -> Report:
        """
        File a report and flag the target as reported.

        Raises:
            ValidationError: unknown reason or target kind, self-report, or
                an open report by the same reporter on the same target
            NotFoundError: target does not exist
        """
        if reason not in ReportReason.values:
            raise ValidationError(
                f"Invalid reason: {reason}",
                error_code="INVALID_REASON",
                details={"reason": [f"Must be one of: {', '.join(ReportReason.values)}"]},
            )
        if target.kind not in REPORTABLE_KINDS:
            raise ValidationError(
                f"{target.kind} cannot be reported",
                error_code="INVALID_TARGET",
            )

        entity = target.resolve()
        if entity is None:
            raise NotFoundError(f"{target.kind.capitalize()} not found")
        if cls._owner_of(target.kind, entity) == reporter.id:
            raise ValidationError(
                "You cannot report your own content",
                error_code="SELF_REPORT",
            )

        with cls.atomic():
            if Report.objects.filter(
                reporter=reporter,
                target_kind=target.kind,
                target_id=target.id,
                status__in=OPEN_STATUSES,
            ).exists():
                raise ValidationError(
                    "You have already reported this",
                    error_code="DUPLICATE_REPORT",
                )
            report = Report.objects.create(
                reporter=reporter,
                target_kind=target.kind,
                target_id=target.id,
                reason=reason,
                description=description or "",
            )
            entity.is_reported = True
            entity.save(update_fields=["is_reported", "updated_at"])

        cls.get_logger().info(
            f"Report {report.id} filed by user {reporter.id} on {target.kind} {target.id} ({reason})"
        )
        NotificationDispatcher.dispatch(NotificationEvent.REPORT_FILED, report, actor=reporter)
        return report

    @classmethod
    def reports(cls, admin: User, status: str | None = None, kind: str | None = None) -> QuerySet[Report]:
        cls._require_admin(admin)
        queryset = Report.objects.select_related("reporter", "resolved_by")
        if status:
            queryset = queryset.filter(status=status)
        if kind:
            queryset = queryset.filter(target_kind=kind)
        return queryset.order_by("-created_at", "-id")

    @classmethod
    def resolve_report(
        cls,
        report_id,
        admin: User,
        status: str = ReportStatus.RESOLVED,
        note: str = "",
        ip_address: str | None = None,
    ) -> Report:
        """
        Move a report to reviewing, resolved or dismissed.

        Raises:
            AuthorizationError: not an admin
            NotFoundError: no such report
            ValidationError: status is not reviewing/resolved/dismissed
            StateError: report already closed
        """
        cls._require_admin(admin)
        if status not in (ReportStatus.REVIEWING, *CLOSED_STATUSES):
            raise ValidationError(
                f"Invalid status: {status}",
                error_code="INVALID_STATUS",
                details={"status": ["Must be one of: reviewing, resolved, dismissed"]},
            )

        with cls.atomic():
            report = Report.objects.select_for_update().filter(pk=report_id).first()
            if report is None:
                raise NotFoundError("Report not found", error_code="REPORT_NOT_FOUND")
            if not report.is_open:
                raise StateError(
                    f"Report has already been {report.status}",
                    error_code="ALREADY_PROCESSED",
                )

            report.status = status
            report.resolution_note = note or ""
            if status in CLOSED_STATUSES:
                report.resolved_by = admin
                report.resolved_at = timezone.now()
            report.save()

        cls.get_logger().info(f"Report {report.id} marked {status} by admin {admin.id}")
        AuditTrail.record(
            admin,
            REPORT_AUDIT_ACTIONS[status],
            TargetRef.for_instance(report),
            details=(
                f"Report #{report.id} on {report.target_kind} #{report.target_id} marked {status}."
                + (f" Note: {report.resolution_note}" if report.resolution_note else "")
            ),
            ip_address=ip_address,
        )
        return report

    # =========================================================================
    # Content visibility
    # =========================================================================

    @classmethod
    def hide_content(
        cls, entity, admin: User, reason: str = "", ip_address: str | None = None
    ) -> None:
        """Hide a project or comment and notify its owner."""
        cls._require_admin(admin)
        if entity.is_hidden:
            raise StateError("Content is already hidden", error_code="ALREADY_HIDDEN")

        reason = reason or DEFAULT_HIDE_REASON
        entity.hide(by=admin, reason=reason)
        target = TargetRef.for_instance(entity)
        cls.get_logger().info(f"{target.kind} {target.id} hidden by admin {admin.id}: {reason}")
        AuditTrail.record(
            admin, AuditAction.CONTENT_HIDDEN, target, details=reason, ip_address=ip_address
        )
        NotificationDispatcher.dispatch(
            NotificationEvent.CONTENT_HIDDEN, entity, actor=admin, reason=reason
        )

    @classmethod
    def unhide_content(cls, entity, admin: User, ip_address: str | None = None) -> None:
        cls._require_admin(admin)
        if not entity.is_hidden:
            raise StateError("Content is not hidden", error_code="NOT_HIDDEN")
        entity.unhide()
        target = TargetRef.for_instance(entity)
        cls.get_logger().info(f"{target.kind} {target.id} unhidden by admin {admin.id}")
        AuditTrail.record(admin, AuditAction.CONTENT_UNHIDDEN, target, ip_address=ip_address)

    # =========================================================================
    # Accounts
    # =========================================================================

    @classmethod
    def suspend_user(
        cls, user: User, admin: User, reason: str = "", ip_address: str | None = None
    ) -> User:
        """
        Suspend an account. Suspended users are rejected at authentication.

        Raises:
            AuthorizationError: actor is not an admin
            ValidationError: target is an admin
            StateError: already suspended
        """
        cls._require_admin(admin)
        if user.is_admin:
            raise ValidationError("Admins cannot be suspended", error_code="CANNOT_SUSPEND_ADMIN")
        if user.is_suspended:
            raise StateError("User is already suspended", error_code="ALREADY_SUSPENDED")

        reason = reason or DEFAULT_SUSPEND_REASON
        user.is_suspended = True
        user.suspended_at = timezone.now()
        user.suspended_reason = reason
        user.suspended_by = admin
        user.save(
            update_fields=[
                "is_suspended",
                "suspended_at",
                "suspended_reason",
                "suspended_by",
                "updated_at",
            ]
        )

        cls.get_logger().warning(f"User {user.id} suspended by admin {admin.id}: {reason}")
        AuditTrail.record(
            admin,
            AuditAction.USER_SUSPENDED,
            TargetRef.for_instance(user),
            details=f"Suspended {user.email}: {reason}",
            ip_address=ip_address,
        )
        NotificationDispatcher.dispatch(
            NotificationEvent.USER_SUSPENDED, user, actor=admin, reason=reason
        )
        return user

    @classmethod
    def unsuspend_user(cls, user: User, admin: User, ip_address: str | None = None) -> User:
        cls._require_admin(admin)
        if not user.is_suspended:
            raise StateError("User is not suspended", error_code="NOT_SUSPENDED")

        user.is_suspended = False
        user.suspended_at = None
        user.suspended_reason = ""
        user.suspended_by = None
        user.save(
            update_fields=[
                "is_suspended",
                "suspended_at",
                "suspended_reason",
                "suspended_by",
                "updated_at",
            ]
        )

        cls.get_logger().info(f"User {user.id} unsuspended by admin {admin.id}")
        AuditTrail.record(
            admin,
            AuditAction.USER_UNSUSPENDED,
            TargetRef.for_instance(user),
            details=f"Restored {user.email}",
            ip_address=ip_address,
        )
        NotificationDispatcher.dispatch(NotificationEvent.USER_UNSUSPENDED, user, actor=admin)
        return user
