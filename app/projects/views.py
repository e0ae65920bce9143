"""
Views for project API.

ViewSets / Views:
    ProjectViewSet: CRUD plus vote and milestone actions
    CollaborationRequestListView: Owner queue (GET) and new requests (POST)
    CollaborationRequestDecisionView: approve / reject
    CollaborationListView / CollaborationDetailView: membership
    FundingRequestListView / FundingRequestDecisionView: verify / reject
    CommentListView / CommentLikeView
    ResourceListView
    TagViewSet: Tag catalogue and tagged projects

Views are thin: they validate input with serializers, resolve the project the
caller can see, and delegate to projects.services. Service exceptions are
rendered by core.exception_handler.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from projects.filters import ProjectFilter
from projects.models import Collaboration
from projects.serializers import (
    CollaborationRequestCreateSerializer,
    CollaborationRequestSerializer,
    CollaborationRoleSerializer,
    CollaborationSerializer,
    CommentCreateSerializer,
    CommentSerializer,
    FundingRequestCreateSerializer,
    FundingRequestSerializer,
    MilestoneResponseSerializer,
    MilestoneSerializer,
    ProjectSerializer,
    ProjectWriteSerializer,
    ResourceCreateSerializer,
    ResourceSerializer,
    TagCreateSerializer,
    TagSerializer,
    VoteSerializer,
    VoteTallySerializer,
)
from projects.services import (
    CollaborationRequestService,
    CollaborationService,
    CommentService,
    FundingRequestService,
    ProjectService,
    ResourceService,
    TagService,
    VoteService,
)


def _paginated(view: GenericAPIView, queryset, serializer_class):
    page = view.paginate_queryset(queryset)
    if page is None:
        return Response(serializer_class(queryset, many=True).data)
    return view.get_paginated_response(serializer_class(page, many=True).data)


class ProjectScopedView(GenericAPIView):
    """Base for views nested under /projects/{project_id}/."""

    permission_classes = [IsAuthenticated]

    def get_project(self):
        return ProjectService.get_visible(self.kwargs["project_id"], self.request.user)


# =============================================================================
# Projects
# =============================================================================


@extend_schema_view(
    list=extend_schema(operation_id="list_projects", summary="List projects", tags=["Projects"]),
    retrieve=extend_schema(operation_id="get_project", summary="Get project", tags=["Projects"]),
)
class ProjectViewSet(viewsets.GenericViewSet):
    """
    Provides:
    - list / retrieve / create / partial_update / destroy
    - vote: POST/DELETE /{id}/vote/
    - milestones: POST /{id}/milestones/
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ProjectSerializer
    lookup_value_regex = r"\d+"
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProjectFilter

    def get_queryset(self):
        return ProjectService.visible_to(self.request.user).order_by("-created_at", "-id")

    def get_project(self, pk):
        return ProjectService.get_visible(pk, self.request.user)

    def list(self, request):
        return _paginated(self, self.filter_queryset(self.get_queryset()), ProjectSerializer)

    def retrieve(self, request, pk=None):
        project = self.get_project(pk)
        ProjectService.record_view(project)
        return Response(ProjectSerializer(project).data)

    @extend_schema(
        operation_id="create_project",
        request=ProjectWriteSerializer,
        responses={201: ProjectSerializer},
        tags=["Projects"],
    )
    def create(self, request):
        serializer = ProjectWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = ProjectService.create_project(owner=request.user, **serializer.validated_data)
        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="update_project",
        request=ProjectWriteSerializer,
        responses={200: ProjectSerializer},
        tags=["Projects"],
    )
    def partial_update(self, request, pk=None):
        project = self.get_project(pk)
        serializer = ProjectWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        project = ProjectService.update_project(project, request.user, **serializer.validated_data)
        return Response(ProjectSerializer(project).data)

    @extend_schema(operation_id="delete_project", responses={204: None}, tags=["Projects"])
    def destroy(self, request, pk=None):
        ProjectService.delete_project(self.get_project(pk), request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="vote_project",
        request=VoteSerializer,
        responses={200: VoteTallySerializer},
        tags=["Projects - Community"],
    )
    @action(detail=True, methods=["post", "delete"])
    def vote(self, request, pk=None):
        project = self.get_project(pk)
        if request.method == "DELETE":
            VoteService.remove_vote(project, request.user)
            vote_type = None
        else:
            serializer = VoteSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            vote_type = VoteService.cast_vote(
                project, request.user, serializer.validated_data["vote_type"]
            ).vote_type

        tally = VoteService.tally(project)
        return Response(VoteTallySerializer({"vote_type": vote_type, **tally}).data)

    @extend_schema(
        operation_id="announce_milestone",
        request=MilestoneSerializer,
        responses={201: MilestoneResponseSerializer},
        tags=["Projects"],
    )
    @action(detail=True, methods=["post"])
    def milestones(self, request, pk=None):
        project = self.get_project(pk)
        serializer = MilestoneSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        milestone = serializer.validated_data["milestone"]

        notifications = ProjectService.announce_milestone(project, request.user, milestone)
        return Response(
            MilestoneResponseSerializer(
                {"milestone": milestone, "notified": len(notifications)}
            ).data,
            status=status.HTTP_201_CREATED,
        )


# =============================================================================
# Collaboration
# =============================================================================


class CollaborationRequestListView(ProjectScopedView):
    @extend_schema(
        operation_id="list_collaboration_requests",
        summary="Pending collaboration requests (owner only)",
        responses={200: CollaborationRequestSerializer(many=True)},
        tags=["Projects - Collaboration"],
    )
    def get(self, request, project_id):
        queryset = CollaborationRequestService.pending_for_project(self.get_project(), request.user)
        return _paginated(self, queryset, CollaborationRequestSerializer)

    @extend_schema(
        operation_id="create_collaboration_request",
        request=CollaborationRequestCreateSerializer,
        responses={201: CollaborationRequestSerializer},
        tags=["Projects - Collaboration"],
    )
    def post(self, request, project_id):
        serializer = CollaborationRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        collaboration_request = CollaborationRequestService.create(
            self.get_project(), request.user, message=serializer.validated_data["message"]
        )
        return Response(
            CollaborationRequestSerializer(collaboration_request).data,
            status=status.HTTP_201_CREATED,
        )


class CollaborationRequestDecisionView(ProjectScopedView):
    """POST approves (``decision="approve"``) or rejects a pending request."""

    decision = "approve"

    @extend_schema(
        request=None,
        responses={200: CollaborationRequestSerializer, 204: None},
        tags=["Projects - Collaboration"],
    )
    def post(self, request, project_id, pk):
        if self.decision == "approve":
            collaboration_request = CollaborationRequestService.approve(
                pk, request.user, project_id=project_id
            )
            return Response(CollaborationRequestSerializer(collaboration_request).data)

        CollaborationRequestService.reject(pk, request.user, project_id=project_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CollaborationListView(ProjectScopedView):
    @extend_schema(
        operation_id="list_collaborators",
        responses={200: CollaborationSerializer(many=True)},
        tags=["Projects - Collaboration"],
    )
    def get(self, request, project_id):
        queryset = (
            Collaboration.objects.filter(project=self.get_project())
            .select_related("user")
            .order_by("created_at", "id")
        )
        return _paginated(self, queryset, CollaborationSerializer)


class CollaborationDetailView(ProjectScopedView):
    @extend_schema(
        operation_id="change_collaborator_role",
        request=CollaborationRoleSerializer,
        responses={200: CollaborationSerializer},
        tags=["Projects - Collaboration"],
    )
    def patch(self, request, project_id, pk):
        serializer = CollaborationRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        collaboration = CollaborationService.change_role(
            pk, request.user, serializer.validated_data["role"], project_id=project_id
        )
        return Response(CollaborationSerializer(collaboration).data)

    @extend_schema(
        operation_id="remove_collaborator",
        responses={204: None},
        tags=["Projects - Collaboration"],
    )
    def delete(self, request, project_id, pk):
        CollaborationService.remove_collaborator(pk, request.user, project_id=project_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Funding
# =============================================================================


class FundingRequestListView(ProjectScopedView):
    @extend_schema(
        operation_id="list_funding_requests",
        summary="Funding requests (all for the owner, own requests for others)",
        responses={200: FundingRequestSerializer(many=True)},
        tags=["Projects - Funding"],
    )
    def get(self, request, project_id):
        project = self.get_project()
        queryset = FundingRequestService.for_project(project)
        if not project.is_owned_by(request.user):
            queryset = queryset.filter(funder=request.user)
        return _paginated(self, queryset, FundingRequestSerializer)

    @extend_schema(
        operation_id="create_funding_request",
        request=FundingRequestCreateSerializer,
        responses={201: FundingRequestSerializer},
        tags=["Projects - Funding"],
    )
    def post(self, request, project_id):
        serializer = FundingRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        funding_request = FundingRequestService.create(
            self.get_project(),
            request.user,
            serializer.validated_data["amount"],
            note=serializer.validated_data["note"],
        )
        return Response(
            FundingRequestSerializer(funding_request).data,
            status=status.HTTP_201_CREATED,
        )


class FundingRequestDecisionView(ProjectScopedView):
    """POST verifies (``decision="verify"``) or rejects a pending request."""

    decision = "verify"

    @extend_schema(
        request=None,
        responses={200: FundingRequestSerializer},
        tags=["Projects - Funding"],
    )
    def post(self, request, project_id, pk):
        if self.decision == "verify":
            funding_request = FundingRequestService.verify(pk, request.user, project_id=project_id)
        else:
            funding_request = FundingRequestService.reject(pk, request.user, project_id=project_id)
        return Response(FundingRequestSerializer(funding_request).data)


# =============================================================================
# Community
# =============================================================================


class CommentListView(ProjectScopedView):
    @extend_schema(
        operation_id="list_comments",
        responses={200: CommentSerializer(many=True)},
        tags=["Projects - Community"],
    )
    def get(self, request, project_id):
        queryset = CommentService.comments_for_project(self.get_project(), request.user)
        return _paginated(self, queryset, CommentSerializer)

    @extend_schema(
        operation_id="post_comment",
        request=CommentCreateSerializer,
        responses={201: CommentSerializer},
        tags=["Projects - Community"],
    )
    def post(self, request, project_id):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = CommentService.post_comment(
            self.get_project(),
            request.user,
            serializer.validated_data["content"],
            parent_id=serializer.validated_data.get("parent_id"),
        )
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)


class CommentLikeView(ProjectScopedView):
    @extend_schema(
        operation_id="like_comment",
        request=None,
        responses={200: CommentSerializer},
        tags=["Projects - Community"],
    )
    def post(self, request, project_id, pk):
        self.get_project()
        comment = CommentService.like_comment(pk, request.user, project_id=project_id)
        return Response(CommentSerializer(comment).data)

    @extend_schema(
        operation_id="unlike_comment",
        responses={200: CommentSerializer},
        tags=["Projects - Community"],
    )
    def delete(self, request, project_id, pk):
        self.get_project()
        comment = CommentService.unlike_comment(pk, request.user, project_id=project_id)
        return Response(CommentSerializer(comment).data)


class ResourceListView(ProjectScopedView):
    @extend_schema(
        operation_id="list_resources",
        responses={200: ResourceSerializer(many=True)},
        tags=["Projects - Community"],
    )
    def get(self, request, project_id):
        queryset = ResourceService.resources_for_project(self.get_project(), request.user)
        return _paginated(self, queryset, ResourceSerializer)

    @extend_schema(
        operation_id="add_resource",
        request=ResourceCreateSerializer,
        responses={201: ResourceSerializer},
        tags=["Projects - Community"],
    )
    def post(self, request, project_id):
        serializer = ResourceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resource = ResourceService.add_resource(
            self.get_project(), request.user, **serializer.validated_data
        )
        return Response(ResourceSerializer(resource).data, status=status.HTTP_201_CREATED)


# =============================================================================
# Tags
# =============================================================================


@extend_schema_view(
    list=extend_schema(operation_id="list_tags", summary="List tags", tags=["Projects - Tags"]),
    retrieve=extend_schema(
        operation_id="get_tag",
        summary="Tag with the projects the caller can see",
        tags=["Projects - Tags"],
    ),
)
class TagViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Provides:
    - list / retrieve: open to anonymous callers
    - create: authenticated; returns the existing tag when the name is taken
    """

    serializer_class = TagSerializer
    lookup_value_regex = r"\d+"
    pagination_class = None

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated()]
        return [AllowAny()]

    def get_queryset(self):
        return TagService.all()

    def retrieve(self, request, pk=None):
        tag = self.get_object()
        projects = ProjectService.visible_to(request.user).filter(tags=tag).order_by(
            "-created_at", "-id"
        )
        return Response(
            {**TagSerializer(tag).data, "projects": ProjectSerializer(projects, many=True).data}
        )

    @extend_schema(
        operation_id="create_tag",
        request=TagCreateSerializer,
        responses={200: TagSerializer, 201: TagSerializer},
        tags=["Projects - Tags"],
    )
    def create(self, request):
        serializer = TagCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tag, created = TagService.get_or_create(serializer.validated_data["name"])
        return Response(
            TagSerializer(tag).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
