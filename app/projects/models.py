"""
Project domain models.

Models:
    Project: A student/faculty project with a funding counter and moderation flags
    ProjectStat: Denormalized counters (views, votes, comments), one per project
    Collaboration: Membership of a user in a project, unique per (project, user)
    CollaborationRequest: Request to join a project (django-fsm state machine)
    FundingRequest: Offer to fund a project (django-fsm state machine)
    Fund: Immutable ledger entry created when a funding request is verified
    Comment / CommentLike: Project discussion with one level of replies
    Vote: Up/down vote, one per (project, user)
    Resource: Link shared with project members
    Tag: Topic label attached to projects

Invariants enforced outside the database (see projects.services):
    - At most one pending CollaborationRequest per (project, user)
    - At most one pending FundingRequest per (project, funder)
    - Collaboration and Fund rows are only created by the request services

Transitions are declared with django-fsm. The status fields are not
``protected`` so that services can ``refresh_from_db()`` after a rollback.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from core.model_mixins import ModerationFlagsMixin
from core.models import BaseModel
from projects.states import (
    CollaborationRequestStatus,
    CollaborationRole,
    FundingRequestStatus,
    ProjectStatus,
    ProjectVisibility,
    VoteType,
)


class Project(ModerationFlagsMixin, BaseModel):
    """
    A project owned by one user.

    ``current_funding`` is only ever changed with an in-place
    ``F("current_funding") + amount`` update by FundingRequestService.verify.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_projects",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=ProjectStatus.choices,
        default=ProjectStatus.IDEATION,
    )
    visibility = models.CharField(
        max_length=20,
        choices=ProjectVisibility.choices,
        default=ProjectVisibility.PUBLIC,
    )
    funding_goal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
    )
    current_funding = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    tags = models.ManyToManyField("Tag", related_name="projects", blank=True)

    class Meta(BaseModel.Meta):
        indexes = [
            models.Index(fields=["owner", "-created_at"], name="project_owner_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def is_owned_by(self, user) -> bool:
        return user is not None and self.owner_id == user.id

    def collaborator_ids(self) -> list[int]:
        return list(self.collaborations.values_list("user_id", flat=True))

    def has_collaborator(self, user) -> bool:
        return self.collaborations.filter(user=user).exists()


class ProjectStat(BaseModel):
    """Counters for a project, created alongside the project by ProjectService."""

    project = models.OneToOneField(
        Project,
        on_delete=models.CASCADE,
        related_name="stats",
    )
    total_views = models.PositiveIntegerField(default=0)
    total_votes = models.PositiveIntegerField(default=0)
    total_comments = models.PositiveIntegerField(default=0)

    def __str__(self) -> str:
        return f"ProjectStat(project={self.project_id})"


class Collaboration(BaseModel):
    """Membership of a user in a project."""

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="collaborations",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="collaborations",
    )
    role = models.CharField(
        max_length=10,
        choices=CollaborationRole.choices,
        default=CollaborationRole.MEMBER,
    )

    class Meta(BaseModel.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=["project", "user"],
                name="unique_project_collaborator",
            ),
        ]

    def __str__(self) -> str:
        return f"Collaboration(project={self.project_id}, user={self.user_id}, {self.role})"


class CollaborationRequest(BaseModel):
    """
    Request by a non-owner to join a project.

    State Flow:
        PENDING → APPROVED (CollaborationRequestService.approve)
        PENDING → REJECTED (CollaborationRequestService.reject, then deleted)
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="collaboration_requests",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="collaboration_requests",
    )
    message = models.TextField(blank=True, default="")
    status = FSMField(
        default=CollaborationRequestStatus.PENDING,
        choices=CollaborationRequestStatus.choices,
        db_index=True,
    )

    class Meta(BaseModel.Meta):
        indexes = [
            models.Index(
                fields=["project", "user", "status"],
                name="collab_req_lookup_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"CollaborationRequest({self.id}, {self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == CollaborationRequestStatus.PENDING

    @transition(
        field=status,
        source=CollaborationRequestStatus.PENDING,
        target=CollaborationRequestStatus.APPROVED,
    )
    def approve(self):
        """
        Transition: PENDING -> APPROVED

        The Collaboration row is inserted by the service in the same transaction.
        """

    @transition(
        field=status,
        source=CollaborationRequestStatus.PENDING,
        target=CollaborationRequestStatus.REJECTED,
    )
    def reject(self):
        """Transition: PENDING -> REJECTED"""


class FundingRequest(BaseModel):
    """
    Offer by a funder to fund a project.

    State Flow:
        PENDING → VERIFIED (FundingRequestService.verify)
        PENDING → REJECTED (FundingRequestService.reject)
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="funding_requests",
    )
    funder = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="funding_requests",
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    note = models.TextField(blank=True, default="")
    status = FSMField(
        default=FundingRequestStatus.PENDING,
        choices=FundingRequestStatus.choices,
        db_index=True,
    )
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    verified_at = models.DateTimeField(null=True, blank=True)

    class Meta(BaseModel.Meta):
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="funding_request_amount_positive",
            ),
        ]
        indexes = [
            models.Index(
                fields=["project", "funder", "status"],
                name="funding_req_lookup_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"FundingRequest({self.id}, {self.amount}, {self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == FundingRequestStatus.PENDING

    @transition(
        field=status,
        source=FundingRequestStatus.PENDING,
        target=FundingRequestStatus.VERIFIED,
    )
    def verify(self, verifier):
        """Transition: PENDING -> VERIFIED"""
        self.verified_by = verifier
        self.verified_at = timezone.now()

    @transition(
        field=status,
        source=FundingRequestStatus.PENDING,
        target=FundingRequestStatus.REJECTED,
    )
    def reject(self, verifier):
        """Transition: PENDING -> REJECTED"""
        self.verified_by = verifier
        self.verified_at = timezone.now()


class Fund(BaseModel):
    """
    Ledger entry for money committed to a project.

    One per verified FundingRequest (enforced by the one-to-one link).
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="funds",
    )
    funder = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="funds",
    )
    funding_request = models.OneToOneField(
        FundingRequest,
        on_delete=models.RESTRICT,
        related_name="fund",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    funded_at = models.DateTimeField(default=timezone.now)

    def __str__(self) -> str:
        return f"Fund(project={self.project_id}, {self.amount})"


class Comment(ModerationFlagsMixin, BaseModel):
    """Project comment; ``parent`` is set for replies."""

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="replies",
    )
    content = models.TextField()
    likes = models.PositiveIntegerField(default=0)

    def __str__(self) -> str:
        return f"Comment({self.id}, project={self.project_id})"


class CommentLike(BaseModel):
    """One like per (comment, user); ``Comment.likes`` is the cached count."""

    comment = models.ForeignKey(
        Comment,
        on_delete=models.CASCADE,
        related_name="like_records",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comment_likes",
    )

    class Meta(BaseModel.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=["comment", "user"],
                name="unique_comment_like",
            ),
        ]


class Vote(BaseModel):
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="votes",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="votes",
    )
    vote_type = models.CharField(max_length=10, choices=VoteType.choices)

    class Meta(BaseModel.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=["project", "user"],
                name="unique_project_vote",
            ),
        ]


class Resource(BaseModel):
    """A link shared with the project's members."""

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="resources",
    )
    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="resources",
    )
    title = models.CharField(max_length=200)
    url = models.URLField(max_length=500)
    description = models.TextField(blank=True, default="")

    def __str__(self) -> str:
        return self.title


class Tag(BaseModel):
    """A topic label; names are stored lowercase and are unique."""

    MAX_NAME_LENGTH = 50

    name = models.CharField(max_length=MAX_NAME_LENGTH, unique=True)

    class Meta(BaseModel.Meta):
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
