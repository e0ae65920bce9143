"""
URL configuration for project API.

Routes:
    /                                                   - List (GET) / create (POST)
    /{id}/                                              - Detail (GET, PATCH, DELETE)
    /{id}/vote/                                         - Vote (POST, DELETE)
    /{id}/milestones/                                   - Announce milestone (POST)
    /{id}/collaboration-requests/                       - Pending queue (GET) / request (POST)
    /{id}/collaboration-requests/{request_id}/approve/  - Approve (POST)
    /{id}/collaboration-requests/{request_id}/reject/   - Reject (POST)
    /{id}/collaborations/                               - Collaborators (GET)
    /{id}/collaborations/{collaboration_id}/            - Change role (PATCH) / remove (DELETE)
    /{id}/funding-requests/                             - List (GET) / offer (POST)
    /{id}/funding-requests/{request_id}/verify/         - Verify (POST)
    /{id}/funding-requests/{request_id}/reject/         - Reject (POST)
    /{id}/comments/                                     - List (GET) / post (POST)
    /{id}/comments/{comment_id}/like/                   - Like (POST) / unlike (DELETE)
    /{id}/resources/                                    - List (GET) / add (POST)
    /tags/                                              - Tag list (GET) / create (POST)
    /tags/{tag_id}/                                     - Tag with visible projects (GET)
"""

from django.urls import path
from rest_framework.routers import SimpleRouter

from projects.views import (
    CollaborationDetailView,
    CollaborationListView,
    CollaborationRequestDecisionView,
    CollaborationRequestListView,
    CommentLikeView,
    CommentListView,
    FundingRequestDecisionView,
    FundingRequestListView,
    ProjectViewSet,
    ResourceListView,
    TagViewSet,
)

router = SimpleRouter()
router.register(r"tags", TagViewSet, basename="tag")
router.register(r"", ProjectViewSet, basename="project")

app_name = "projects"
urlpatterns = [
    path(
        "<int:project_id>/collaboration-requests/",
        CollaborationRequestListView.as_view(),
        name="collaboration-request-list",
    ),
    path(
        "<int:project_id>/collaboration-requests/<int:pk>/approve/",
        CollaborationRequestDecisionView.as_view(decision="approve"),
        name="collaboration-request-approve",
    ),
    path(
        "<int:project_id>/collaboration-requests/<int:pk>/reject/",
        CollaborationRequestDecisionView.as_view(decision="reject"),
        name="collaboration-request-reject",
    ),
    path(
        "<int:project_id>/collaborations/",
        CollaborationListView.as_view(),
        name="collaboration-list",
    ),
    path(
        "<int:project_id>/collaborations/<int:pk>/",
        CollaborationDetailView.as_view(),
        name="collaboration-detail",
    ),
    path(
        "<int:project_id>/funding-requests/",
        FundingRequestListView.as_view(),
        name="funding-request-list",
    ),
    path(
        "<int:project_id>/funding-requests/<int:pk>/verify/",
        FundingRequestDecisionView.as_view(decision="verify"),
        name="funding-request-verify",
    ),
    path(
        "<int:project_id>/funding-requests/<int:pk>/reject/",
        FundingRequestDecisionView.as_view(decision="reject"),
        name="funding-request-reject",
    ),
    path("<int:project_id>/comments/", CommentListView.as_view(), name="comment-list"),
    path(
        "<int:project_id>/comments/<int:pk>/like/",
        CommentLikeView.as_view(),
        name="comment-like",
    ),
    path("<int:project_id>/resources/", ResourceListView.as_view(), name="resource-list"),
] + router.urls
