"""
URL configuration for moderation API.

Routes:
    /reports/                      - File (POST) / list (GET, admin)
    /reports/{id}/                 - Report detail (GET, admin)
    /reports/{id}/resolve/         - Resolve report (POST, admin)
    /users/{id}/suspend/           - Suspend user (POST, admin)
    /users/{id}/unsuspend/         - Unsuspend user (POST, admin)
    /projects/{id}/hide/           - Hide project (POST, admin)
    /projects/{id}/unhide/         - Unhide project (POST, admin)
    /comments/{id}/hide/           - Hide comment (POST, admin)
    /comments/{id}/unhide/         - Unhide comment (POST, admin)
    /audit-logs/                   - Audit trail (GET, admin)
    /audit-logs/stats/             - Audit trail totals (GET, admin)
"""

from django.urls import path
from rest_framework.routers import SimpleRouter

from moderation.views import (
    AuditLogViewSet,
    ContentVisibilityView,
    ReportViewSet,
    UserSuspensionView,
)
from notifications.targets import TargetKind

router = SimpleRouter()
router.register(r"reports", ReportViewSet, basename="report")
router.register(r"audit-logs", AuditLogViewSet, basename="audit-log")

app_name = "moderation"
urlpatterns = router.urls + [
    path("users/<int:pk>/suspend/", UserSuspensionView.as_view(suspend=True), name="user-suspend"),
    path(
        "users/<int:pk>/unsuspend/",
        UserSuspensionView.as_view(suspend=False),
        name="user-unsuspend",
    ),
    path(
        "projects/<int:pk>/hide/",
        ContentVisibilityView.as_view(kind=TargetKind.PROJECT, hide=True),
        name="project-hide",
    ),
    path(
        "projects/<int:pk>/unhide/",
        ContentVisibilityView.as_view(kind=TargetKind.PROJECT, hide=False),
        name="project-unhide",
    ),
    path(
        "comments/<int:pk>/hide/",
        ContentVisibilityView.as_view(kind=TargetKind.COMMENT, hide=True),
        name="comment-hide",
    ),
    path(
        "comments/<int:pk>/unhide/",
        ContentVisibilityView.as_view(kind=TargetKind.COMMENT, hide=False),
        name="comment-unhide",
    ),
]
