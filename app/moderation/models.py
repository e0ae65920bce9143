"""
Moderation models.

- ReportReason / ReportStatus: closed sets for reports
- Report: a user (or the moderation system user) flags a project, comment
  or user for review

The reported entity is a tagged (target_kind, target_id) pair, the same
representation notifications use.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel
from notifications.targets import TargetKind, TargetRef

REPORTABLE_KINDS = (TargetKind.PROJECT, TargetKind.COMMENT, TargetKind.USER)


class ReportReason(models.TextChoices):
    SPAM = "spam", "Spam"
    HARASSMENT = "harassment", "Harassment"
    INAPPROPRIATE = "inappropriate", "Inappropriate"
    MISINFORMATION = "misinformation", "Misinformation"
    COPYRIGHT = "copyright", "Copyright"
    OTHER = "other", "Other"


class ReportStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    REVIEWING = "reviewing", "Reviewing"
    RESOLVED = "resolved", "Resolved"
    DISMISSED = "dismissed", "Dismissed"


OPEN_STATUSES = (ReportStatus.PENDING, ReportStatus.REVIEWING)
CLOSED_STATUSES = (ReportStatus.RESOLVED, ReportStatus.DISMISSED)


class Report(BaseModel):
    """
    A report awaiting or past admin review.

    State Flow:
        PENDING → REVIEWING → RESOLVED | DISMISSED
        PENDING → RESOLVED | DISMISSED
    """

    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reports_filed",
    )
    target_kind = models.CharField(
        max_length=30,
        choices=[(kind.value, kind.label) for kind in REPORTABLE_KINDS],
    )
    target_id = models.PositiveBigIntegerField()
    reason = models.CharField(max_length=20, choices=ReportReason.choices)
    description = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=ReportStatus.choices,
        default=ReportStatus.PENDING,
        db_index=True,
    )
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    resolved_at = models.DateTimeField(null=True, blank=True)
    resolution_note = models.TextField(blank=True, default="")

    class Meta(BaseModel.Meta):
        indexes = [
            models.Index(fields=["target_kind", "target_id"], name="report_target_idx"),
            models.Index(fields=["reporter", "status"], name="report_reporter_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Report({self.id}, {self.target_kind}:{self.target_id}, {self.status})"

    @property
    def target(self) -> TargetRef:
        return TargetRef(kind=self.target_kind, id=self.target_id)

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES


class AuditAction(models.TextChoices):
    REPORT_REVIEWING = "report_reviewing", "Report under review"
    REPORT_RESOLVED = "report_resolved", "Report resolved"
    REPORT_DISMISSED = "report_dismissed", "Report dismissed"
    CONTENT_HIDDEN = "content_hidden", "Content hidden"
    CONTENT_UNHIDDEN = "content_unhidden", "Content unhidden"
    USER_SUSPENDED = "user_suspended", "User suspended"
    USER_UNSUSPENDED = "user_unsuspended", "User unsuspended"


REPORT_AUDIT_ACTIONS = {
    ReportStatus.REVIEWING: AuditAction.REPORT_REVIEWING,
    ReportStatus.RESOLVED: AuditAction.REPORT_RESOLVED,
    ReportStatus.DISMISSED: AuditAction.REPORT_DISMISSED,
}


class AuditLog(BaseModel):
    """
    One admin moderation action. Rows are append-only.

    ``actor`` is kept nullable so the trail survives the admin's account.
    """

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="audit_logs",
    )
    action = models.CharField(max_length=30, choices=AuditAction.choices, db_index=True)
    target_kind = models.CharField(max_length=30, choices=TargetKind.choices)
    target_id = models.PositiveBigIntegerField()
    details = models.TextField(blank=True, default="")
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    class Meta(BaseModel.Meta):
        indexes = [
            models.Index(fields=["target_kind", "target_id"], name="audit_target_idx"),
        ]

    def __str__(self) -> str:
        return f"AuditLog({self.id}, {self.action}, {self.target_kind}:{self.target_id})"

    @property
    def target(self) -> TargetRef:
        return TargetRef(kind=self.target_kind, id=self.target_id)
