"""Django admin configuration for project models."""

from django.contrib import admin

from projects.models import (
    Collaboration,
    CollaborationRequest,
    Comment,
    Fund,
    FundingRequest,
    Project,
    ProjectStat,
    Resource,
    Tag,
    Vote,
)


class ProjectStatInline(admin.StackedInline):
    model = ProjectStat
    can_delete = False
    readonly_fields = ["total_views", "total_votes", "total_comments"]


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "owner", "status", "visibility", "current_funding", "is_hidden"]
    list_filter = ["status", "visibility", "is_hidden", "is_reported"]
    search_fields = ["title", "owner__email"]
    raw_id_fields = ["owner", "hidden_by"]
    readonly_fields = ["current_funding", "created_at", "updated_at"]
    inlines = [ProjectStatInline]


@admin.register(CollaborationRequest)
class CollaborationRequestAdmin(admin.ModelAdmin):
    """Read-only: transitions go through CollaborationRequestService."""

    list_display = ["id", "project", "user", "status", "created_at"]
    list_filter = ["status"]
    raw_id_fields = ["project", "user"]
    readonly_fields = ["status", "created_at", "updated_at"]


@admin.register(Collaboration)
class CollaborationAdmin(admin.ModelAdmin):
    list_display = ["id", "project", "user", "role", "created_at"]
    list_filter = ["role"]
    raw_id_fields = ["project", "user"]


@admin.register(FundingRequest)
class FundingRequestAdmin(admin.ModelAdmin):
    """Read-only: transitions go through FundingRequestService."""

    list_display = ["id", "project", "funder", "amount", "status", "verified_at"]
    list_filter = ["status"]
    raw_id_fields = ["project", "funder", "verified_by"]
    readonly_fields = ["status", "verified_by", "verified_at", "created_at", "updated_at"]


@admin.register(Fund)
class FundAdmin(admin.ModelAdmin):
    list_display = ["id", "project", "funder", "amount", "funded_at"]
    raw_id_fields = ["project", "funder", "funding_request"]

    def has_add_permission(self, request):
        """Funds are only created by verifying a funding request."""
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ["id", "project", "user", "likes", "is_hidden", "created_at"]
    list_filter = ["is_hidden", "is_reported"]
    search_fields = ["content", "user__email"]
    raw_id_fields = ["project", "user", "parent", "hidden_by"]


@admin.register(Vote)
class VoteAdmin(admin.ModelAdmin):
    list_display = ["id", "project", "user", "vote_type"]
    raw_id_fields = ["project", "user"]


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "project", "added_by", "created_at"]
    raw_id_fields = ["project", "added_by"]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "created_at"]
    search_fields = ["name"]
