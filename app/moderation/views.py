"""
Views for moderation API.

Endpoints:
    POST /api/v1/moderation/reports/                     - File a report (any user)
    GET  /api/v1/moderation/reports/                     - List reports (admin; ?status=, ?kind=, ?reason=)
    GET  /api/v1/moderation/reports/{id}/                - Report detail (admin)
    POST /api/v1/moderation/reports/{id}/resolve/        - Resolve or dismiss (admin)
    POST /api/v1/moderation/users/{id}/suspend/          - Suspend account (admin)
    POST /api/v1/moderation/users/{id}/unsuspend/        - Restore account (admin)
    POST /api/v1/moderation/projects/{id}/hide|unhide/   - Project visibility (admin)
    POST /api/v1/moderation/comments/{id}/hide|unhide/   - Comment visibility (admin)
    GET  /api/v1/moderation/audit-logs/                  - Audit trail (admin; ?action=, ?actor=, ?kind=,
                                                           ?target_id=, ?created_after=, ?created_before=)
    GET  /api/v1/moderation/audit-logs/stats/            - Audit trail totals (admin)
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.models import User
from core.exceptions import NotFoundError
from moderation.audit import AuditTrail
from moderation.filters import AuditLogFilter, ReportFilter
from moderation.permissions import IsPlatformAdmin
from moderation.serializers import (
    AuditLogSerializer,
    AuditStatsSerializer,
    ModeratedContentSerializer,
    ModerationUserSerializer,
    ReasonSerializer,
    ReportCreateSerializer,
    ReportResolveSerializer,
    ReportSerializer,
)
from moderation.services import ModerationService
from notifications.targets import TargetRef


def client_ip(request) -> str | None:
    return request.META.get("REMOTE_ADDR") or None


@extend_schema_view(
    list=extend_schema(operation_id="list_reports", summary="List reports", tags=["Moderation"]),
    retrieve=extend_schema(operation_id="get_report", summary="Get report", tags=["Moderation"]),
)
class ReportViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = ReportSerializer
    lookup_value_regex = r"\d+"
    filter_backends = [DjangoFilterBackend]
    filterset_class = ReportFilter

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsPlatformAdmin()]

    def get_queryset(self):
        return ModerationService.reports(self.request.user)

    @extend_schema(
        operation_id="file_report",
        summary="File a report",
        request=ReportCreateSerializer,
        responses={201: ReportSerializer},
        tags=["Moderation"],
    )
    def create(self, request):
        serializer = ReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        report = ModerationService.file_report(
            request.user,
            TargetRef(kind=data["target_kind"], id=data["target_id"]),
            reason=data["reason"],
            description=data["description"],
        )
        return Response(ReportSerializer(report).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="resolve_report",
        summary="Resolve report",
        request=ReportResolveSerializer,
        responses={200: ReportSerializer},
        tags=["Moderation"],
    )
    @action(detail=True, methods=["post"])
    def resolve(self, request, pk=None):
        serializer = ReportResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report = ModerationService.resolve_report(
            pk,
            request.user,
            status=serializer.validated_data["status"],
            note=serializer.validated_data["note"],
            ip_address=client_ip(request),
        )
        return Response(ReportSerializer(report).data)


class UserSuspensionView(APIView):
    """POST suspends (``suspend=True``) or restores a user account."""

    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    suspend = True

    @extend_schema(
        summary="Suspend or unsuspend a user",
        request=ReasonSerializer,
        responses={200: ModerationUserSerializer},
        tags=["Moderation"],
    )
    def post(self, request, pk):
        user = get_object_or_404(User, pk=pk)
        if self.suspend:
            serializer = ReasonSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            ModerationService.suspend_user(
                user,
                request.user,
                reason=serializer.validated_data["reason"],
                ip_address=client_ip(request),
            )
        else:
            ModerationService.unsuspend_user(user, request.user, ip_address=client_ip(request))
        return Response(ModerationUserSerializer(user).data)


class ContentVisibilityView(APIView):
    """POST hides (``hide=True``) or unhides a project or comment."""

    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    kind = None
    hide = True

    @extend_schema(
        summary="Hide or unhide content",
        request=ReasonSerializer,
        responses={200: ModeratedContentSerializer},
        tags=["Moderation"],
    )
    def post(self, request, pk):
        entity = TargetRef(kind=self.kind, id=pk).resolve()
        if entity is None:
            raise NotFoundError(f"{self.kind.capitalize()} not found")

        if self.hide:
            serializer = ReasonSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            ModerationService.hide_content(
                entity,
                request.user,
                reason=serializer.validated_data["reason"],
                ip_address=client_ip(request),
            )
        else:
            ModerationService.unhide_content(entity, request.user, ip_address=client_ip(request))

        return Response(
            ModeratedContentSerializer(
                {
                    "id": entity.id,
                    "kind": self.kind,
                    "is_hidden": entity.is_hidden,
                    "is_reported": entity.is_reported,
                    "hidden_at": entity.hidden_at,
                    "hidden_reason": entity.hidden_reason,
                }
            ).data
        )


@extend_schema_view(
    list=extend_schema(operation_id="list_audit_logs", summary="List audit trail", tags=["Moderation"]),
)
class AuditLogViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_class = AuditLogFilter

    def get_queryset(self):
        return AuditTrail.entries(self.request.user)

    @extend_schema(
        operation_id="audit_log_stats",
        summary="Audit trail totals",
        responses={200: AuditStatsSerializer},
        tags=["Moderation"],
    )
    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(AuditStatsSerializer(AuditTrail.stats(request.user)).data)
