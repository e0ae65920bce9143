"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        register/                  - Create an account and return a token pair
        token/                     - Obtain access/refresh token pair
        token/refresh/             - Refresh access token
        me/                        - Current user
    /api/v1/projects/              - Project endpoints
        {id}/                                  - Project detail
        {id}/milestones/                       - Announce a milestone to collaborators
        {id}/collaboration-requests/           - List (owner) / create request
        {id}/collaboration-requests/{pk}/approve/ - Approve request
        {id}/collaboration-requests/{pk}/reject/  - Reject (delete) request
        {id}/collaborations/{pk}/              - Change role / remove collaborator
        {id}/funding-requests/                 - List / offer funding
        {id}/funding-requests/{pk}/verify/     - Verify funding offer
        {id}/funding-requests/{pk}/reject/     - Decline funding offer
        {id}/comments/                         - List / post comments
        {id}/comments/{pk}/like/               - Like / unlike a comment
        {id}/vote/                             - Cast, change or withdraw a vote
        {id}/resources/                        - List / add resources
        tags/                                  - Tag catalogue / create tag
        tags/{pk}/                             - Tag with the projects the caller can see
    /api/v1/notifications/         - Notification read API
        unread-count/              - Unread count
        read-all/                  - Mark all as read
        {id}/read/                 - Mark as read
        {id}/unread/               - Mark as unread
    /api/v1/messages/              - Direct message history
        unread-count/              - Unread message count
    /api/v1/moderation/            - Reports and admin moderation actions
        reports/                   - File report / list reports (admin)
        reports/{id}/resolve/      - Resolve or dismiss report (admin)
        users/{id}/suspend/        - Suspend user (admin)
        users/{id}/unsuspend/      - Restore user (admin)
        {kind}/{id}/hide/          - Hide project or comment (admin)
        {kind}/{id}/unhide/        - Unhide project or comment (admin)
        audit-logs/                - Audit trail of admin actions (admin)
        audit-logs/stats/          - Audit trail totals (admin)

WebSocket routes are declared in messaging.routing.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication
    path("auth/", include("authentication.urls")),
    # Projects, collaboration and funding requests
    path("projects/", include("projects.urls")),
    # Notifications
    path("notifications/", include("notifications.urls")),
    # Messages
    path("messages/", include("messaging.urls")),
    # Moderation
    path("moderation/", include("moderation.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Campus Collab Admin"
admin.site.site_title = "Campus Collab"
admin.site.index_title = "Moderation and project administration"
