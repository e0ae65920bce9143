"""
Serializers for moderation API.

Serializers:
    ReportSerializer: Report with reporter summary (read)
    ReportCreateSerializer: Input for filing a report
    ReportResolveSerializer: Input for resolving a report
    ReasonSerializer: Optional reason for hide/suspend actions
    ModerationUserSerializer: Account state after suspend/unsuspend
    ModeratedContentSerializer: Visibility state after hide/unhide
    AuditLogSerializer: Audit trail entry with actor summary
    AuditStatsSerializer: Audit trail totals
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.models import User
from authentication.serializers import UserSummarySerializer
from moderation.models import REPORTABLE_KINDS, AuditLog, Report, ReportReason, ReportStatus


class ReportSerializer(serializers.ModelSerializer):
    reporter = UserSummarySerializer(read_only=True)
    resolved_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Report
        fields = [
            "id",
            "reporter",
            "target_kind",
            "target_id",
            "reason",
            "description",
            "status",
            "resolved_by",
            "resolved_at",
            "resolution_note",
            "created_at",
        ]
        read_only_fields = fields


class ReportCreateSerializer(serializers.Serializer):
    target_kind = serializers.ChoiceField(choices=[kind.value for kind in REPORTABLE_KINDS])
    target_id = serializers.IntegerField(min_value=1)
    reason = serializers.ChoiceField(choices=ReportReason.choices)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ReportResolveSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[ReportStatus.REVIEWING, ReportStatus.RESOLVED, ReportStatus.DISMISSED],
        default=ReportStatus.RESOLVED,
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)


class ModerationUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "full_name", "is_suspended", "suspended_at", "suspended_reason"]
        read_only_fields = fields


class ModeratedContentSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    kind = serializers.CharField()
    is_hidden = serializers.BooleanField()
    is_reported = serializers.BooleanField()
    hidden_at = serializers.DateTimeField(allow_null=True)
    hidden_reason = serializers.CharField(allow_blank=True)


class AuditLogSerializer(serializers.ModelSerializer):
    actor = UserSummarySerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "actor",
            "action",
            "target_kind",
            "target_id",
            "details",
            "ip_address",
            "created_at",
        ]
        read_only_fields = fields


class AuditStatsSerializer(serializers.Serializer):
    total_actions = serializers.IntegerField()
    actions_today = serializers.IntegerField()
    actions_this_week = serializers.IntegerField()
    by_action = serializers.DictField(child=serializers.IntegerField())
