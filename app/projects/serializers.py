"""
Serializers for project API.

Read serializers render models; input serializers only validate request
bodies and hand plain values to projects.services.

Serializers:
    ProjectSerializer / ProjectWriteSerializer
    CollaborationRequestSerializer / CollaborationRequestCreateSerializer
    CollaborationSerializer / CollaborationRoleSerializer
    FundingRequestSerializer / FundingRequestCreateSerializer
    CommentSerializer / CommentCreateSerializer
    VoteSerializer, ResourceSerializer, MilestoneSerializer
    TagSerializer / TagCreateSerializer
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from projects.models import (
    Collaboration,
    CollaborationRequest,
    Comment,
    FundingRequest,
    Project,
    Resource,
    Tag,
)
from projects.states import CollaborationRole, ProjectStatus, ProjectVisibility, VoteType


class ProjectSerializer(serializers.ModelSerializer):
    owner = UserSummarySerializer(read_only=True)
    tags = serializers.SlugRelatedField(many=True, read_only=True, slug_field="name")
    stats = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            "id",
            "owner",
            "title",
            "description",
            "status",
            "visibility",
            "funding_goal",
            "current_funding",
            "is_hidden",
            "tags",
            "stats",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_stats(self, obj: Project) -> dict:
        stats = getattr(obj, "stats", None)
        if stats is None:
            return {"total_views": 0, "total_votes": 0, "total_comments": 0}
        return {
            "total_views": stats.total_views,
            "total_votes": stats.total_votes,
            "total_comments": stats.total_comments,
        }


class ProjectWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ProjectStatus.choices, required=False)
    visibility = serializers.ChoiceField(choices=ProjectVisibility.choices, required=False)
    funding_goal = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )
    tags = serializers.ListField(
        child=serializers.CharField(max_length=Tag.MAX_NAME_LENGTH, allow_blank=True),
        required=False,
        max_length=20,
    )


class CollaborationRequestSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = CollaborationRequest
        fields = ["id", "project_id", "user", "message", "status", "created_at"]
        read_only_fields = fields


class CollaborationRequestCreateSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, default="")


class CollaborationSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Collaboration
        fields = ["id", "project_id", "user", "role", "created_at"]
        read_only_fields = fields


class CollaborationRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(
        choices=[CollaborationRole.MEMBER, CollaborationRole.VIEWER],
    )


class FundingRequestSerializer(serializers.ModelSerializer):
    funder = UserSummarySerializer(read_only=True)
    verified_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = FundingRequest
        fields = [
            "id",
            "project_id",
            "funder",
            "amount",
            "note",
            "status",
            "verified_by",
            "verified_at",
            "created_at",
        ]
        read_only_fields = fields


class FundingRequestCreateSerializer(serializers.Serializer):
    amount = serializers.CharField(max_length=32)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class CommentSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Comment
        fields = [
            "id",
            "project_id",
            "user",
            "parent_id",
            "content",
            "likes",
            "is_hidden",
            "created_at",
        ]
        read_only_fields = fields


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField()
    parent_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class VoteSerializer(serializers.Serializer):
    vote_type = serializers.ChoiceField(choices=VoteType.choices)


class VoteTallySerializer(serializers.Serializer):
    vote_type = serializers.CharField(allow_null=True)
    upvotes = serializers.IntegerField()
    downvotes = serializers.IntegerField()


class ResourceSerializer(serializers.ModelSerializer):
    added_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Resource
        fields = ["id", "project_id", "added_by", "title", "url", "description", "created_at"]
        read_only_fields = fields


class ResourceCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    url = serializers.CharField(max_length=500)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class MilestoneSerializer(serializers.Serializer):
    milestone = serializers.CharField(max_length=200)


class MilestoneResponseSerializer(serializers.Serializer):
    milestone = serializers.CharField()
    notified = serializers.IntegerField()


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ["id", "name"]
        read_only_fields = fields


class TagCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=Tag.MAX_NAME_LENGTH)
