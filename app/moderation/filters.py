from django_filters import rest_framework as filters

from moderation.models import (
    REPORTABLE_KINDS,
    AuditAction,
    AuditLog,
    Report,
    ReportReason,
    ReportStatus,
)
from notifications.targets import TargetKind


class ReportFilter(filters.FilterSet):
    status = filters.ChoiceFilter(choices=ReportStatus.choices)
    kind = filters.ChoiceFilter(
        field_name="target_kind",
        choices=[(kind.value, kind.label) for kind in REPORTABLE_KINDS],
    )
    reason = filters.ChoiceFilter(choices=ReportReason.choices)

    class Meta:
        model = Report
        fields = ["status", "kind", "reason"]


class AuditLogFilter(filters.FilterSet):
    action = filters.ChoiceFilter(choices=AuditAction.choices)
    actor = filters.NumberFilter(field_name="actor_id")
    kind = filters.ChoiceFilter(field_name="target_kind", choices=TargetKind.choices)
    target_id = filters.NumberFilter()
    created_after = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = AuditLog
        fields = ["action", "actor", "kind", "target_id", "created_after", "created_before"]
