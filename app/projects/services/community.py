"""
Community services: comments, likes, votes and shared resources.

Counters (ProjectStat.total_comments, ProjectStat.total_votes, Comment.likes)
are maintained here with F() expression updates next to the row they count.

Usage:
    from projects.services import CommentService, VoteService, ResourceService

    comment = CommentService.post_comment(project, user, "Great idea!")
    VoteService.cast_vote(project, user, VoteType.UP)
    ResourceService.add_resource(project, user, "Design doc", "https://example.edu/doc")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import URLValidator
from django.db.models import F

from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from core.services import BaseService
from moderation.services import ModerationOutcome, ModerationService
from notifications.dispatcher import NotificationDispatcher, NotificationEvent
from projects.models import Comment, CommentLike, Project, ProjectStat, Resource, Vote
from projects.states import VoteType

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


def _require_text(value: str | None, field_name: str, max_length: int | None = None) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(
            f"{field_name.capitalize()} is required",
            details={field_name: ["This field may not be blank."]},
        )
    if max_length is not None and len(value) > max_length:
        raise ValidationError(
            f"{field_name.capitalize()} is too long",
            details={field_name: [f"Ensure this field has no more than {max_length} characters."]},
        )
    return value


class CommentService(BaseService):
    """
    Methods:
        post_comment: Create a comment or reply, auto-moderated
        like_comment / unlike_comment: One like per user per comment
        comments_for_project: Visible comments, oldest first
    """

    @classmethod
    def post_comment(cls, project: Project, user: User, content: str, parent_id=None) -> Comment:
        """
        Raises:
            ValidationError: blank content
            NotFoundError: parent comment not on this project
        """
        content = _require_text(content, "content")

        parent = None
        if parent_id is not None:
            parent = Comment.objects.filter(pk=parent_id, project=project).first()
            if parent is None:
                raise NotFoundError("Parent comment not found", error_code="COMMENT_NOT_FOUND")

        with cls.atomic():
            comment = Comment.objects.create(
                project=project,
                user=user,
                parent=parent,
                content=content,
            )
            ProjectStat.objects.filter(project=project).update(
                total_comments=F("total_comments") + 1
            )

        outcome = ModerationService.auto_moderate(comment, content, author=user)
        cls.get_logger().info(
            f"Comment {comment.id} posted on project {project.id} by user {user.id} "
            f"(moderation: {outcome})"
        )
        if outcome != ModerationOutcome.HIDDEN:
            NotificationDispatcher.dispatch(NotificationEvent.COMMENT_POSTED, comment, actor=user)
        return comment

    @classmethod
    def _get_visible(cls, comment_id, project_id=None) -> Comment:
        queryset = Comment.objects.select_related("project", "user").filter(is_hidden=False)
        if project_id is not None:
            queryset = queryset.filter(project_id=project_id)
        comment = queryset.filter(pk=comment_id).first()
        if comment is None:
            raise NotFoundError("Comment not found", error_code="COMMENT_NOT_FOUND")
        return comment

    @classmethod
    def like_comment(cls, comment_id, user: User, project_id=None) -> Comment:
        comment = cls._get_visible(comment_id, project_id)

        with cls.atomic():
            _, created = CommentLike.objects.get_or_create(comment=comment, user=user)
            if not created:
                raise ValidationError(
                    "You have already liked this comment",
                    error_code="ALREADY_LIKED",
                )
            Comment.objects.filter(pk=comment.pk).update(likes=F("likes") + 1)

        comment.refresh_from_db(fields=["likes"])
        NotificationDispatcher.dispatch(NotificationEvent.COMMENT_LIKED, comment, actor=user)
        return comment

    @classmethod
    def unlike_comment(cls, comment_id, user: User, project_id=None) -> Comment:
        comment = cls._get_visible(comment_id, project_id)

        with cls.atomic():
            deleted, _ = CommentLike.objects.filter(comment=comment, user=user).delete()
            if not deleted:
                raise NotFoundError("You have not liked this comment", error_code="LIKE_NOT_FOUND")
            Comment.objects.filter(pk=comment.pk, likes__gt=0).update(likes=F("likes") - 1)

        comment.refresh_from_db(fields=["likes"])
        return comment

    @classmethod
    def comments_for_project(cls, project: Project, viewer: User | None = None) -> QuerySet[Comment]:
        queryset = Comment.objects.filter(project=project).select_related("user")
        if viewer is None or not getattr(viewer, "is_admin", False):
            queryset = queryset.filter(is_hidden=False)
        return queryset.order_by("created_at", "id")


class VoteService(BaseService):
    """
    Methods:
        cast_vote: Create or change the user's vote
        remove_vote: Withdraw the user's vote
    """

    @classmethod
    def cast_vote(cls, project: Project, user: User, vote_type: str) -> Vote:
        if vote_type not in VoteType.values:
            raise ValidationError(
                f"Invalid vote type: {vote_type}",
                error_code="INVALID_VOTE_TYPE",
                details={"vote_type": [f"Must be one of: {', '.join(VoteType.values)}"]},
            )

        with cls.atomic():
            existing = Vote.objects.select_for_update().filter(project=project, user=user).first()
            if existing is not None and existing.vote_type == vote_type:
                return existing

            vote, created = Vote.objects.update_or_create(
                project=project,
                user=user,
                defaults={"vote_type": vote_type},
            )
            if created:
                ProjectStat.objects.filter(project=project).update(
                    total_votes=F("total_votes") + 1
                )

        cls.get_logger().info(
            f"User {user.id} {'cast' if created else 'changed'} {vote_type} vote on project {project.id}"
        )
        NotificationDispatcher.dispatch(NotificationEvent.PROJECT_VOTED, vote, actor=user)
        return vote

    @classmethod
    def remove_vote(cls, project: Project, user: User) -> None:
        with cls.atomic():
            deleted, _ = Vote.objects.filter(project=project, user=user).delete()
            if not deleted:
                raise NotFoundError("You have not voted on this project", error_code="VOTE_NOT_FOUND")
            ProjectStat.objects.filter(project=project, total_votes__gt=0).update(
                total_votes=F("total_votes") - 1
            )

    @classmethod
    def tally(cls, project: Project) -> dict[str, int]:
        votes = Vote.objects.filter(project=project)
        return {
            "upvotes": votes.filter(vote_type=VoteType.UP).count(),
            "downvotes": votes.filter(vote_type=VoteType.DOWN).count(),
        }


class ResourceService(BaseService):
    """Links shared by project members."""

    url_validator = URLValidator(schemes=["http", "https"])

    @classmethod
    def _require_member(cls, project: Project, user: User) -> None:
        if project.is_owned_by(user) or project.has_collaborator(user):
            return
        raise AuthorizationError(
            "Only project members can manage resources",
            error_code="NOT_PROJECT_MEMBER",
        )

    @classmethod
    def add_resource(
        cls,
        project: Project,
        user: User,
        title: str,
        url: str,
        description: str = "",
    ) -> Resource:
        """
        Raises:
            AuthorizationError: user is neither owner nor collaborator
            ValidationError: blank title or invalid URL
        """
        cls._require_member(project, user)
        title = _require_text(title, "title", max_length=200)
        url = (url or "").strip()
        try:
            cls.url_validator(url)
        except DjangoValidationError as exc:
            raise ValidationError(
                "Enter a valid URL",
                error_code="INVALID_URL",
                details={"url": ["Enter a valid URL."]},
            ) from exc

        resource = Resource.objects.create(
            project=project,
            added_by=user,
            title=title,
            url=url,
            description=description or "",
        )
        cls.get_logger().info(f"Resource {resource.id} added to project {project.id} by user {user.id}")
        NotificationDispatcher.dispatch(NotificationEvent.RESOURCE_ADDED, resource, actor=user)
        return resource

    @classmethod
    def resources_for_project(cls, project: Project, viewer: User) -> QuerySet[Resource]:
        if not getattr(viewer, "is_admin", False):
            cls._require_member(project, viewer)
        return Resource.objects.filter(project=project).select_related("added_by")

