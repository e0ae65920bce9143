"""
Project lifecycle: creation, updates, visibility, views and milestones.

Usage:
    from projects.services import ProjectService

    project = ProjectService.create_project(owner, title="Solar Car")
    ProjectService.announce_milestone(project, owner, "Prototype complete")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db.models import F, Q

from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from core.services import BaseService
from moderation.services import ModerationService
from notifications.dispatcher import NotificationDispatcher, NotificationEvent
from projects.models import Project, ProjectStat
from projects.services.tags import TagService
from projects.states import ProjectStatus, ProjectVisibility

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User
    from notifications.models import Notification


class ProjectService(BaseService):
    """
    Methods:
        create_project: Project + ProjectStat (+ tags), then auto-moderation
        update_project: Owner edits title, description, status, visibility, goal, tags
        delete_project: Owner or admin
        visible_to: Projects a user may see
        get_visible: One project, or NotFoundError
        record_view: Increment the view counter
        announce_milestone: Owner notifies collaborators
    """

    UPDATABLE_FIELDS = ("title", "description", "status", "visibility", "funding_goal")

    @classmethod
    def _moderation_text(cls, project: Project) -> str:
        return f"{project.title}\n{project.description}"

    @classmethod
    def create_project(
        cls,
        owner: User,
        title: str,
        description: str = "",
        status: str = ProjectStatus.IDEATION,
        visibility: str = ProjectVisibility.PUBLIC,
        funding_goal=None,
        tags=None,
    ) -> Project:
        title = (title or "").strip()
        if not title:
            raise ValidationError(
                "Title is required",
                details={"title": ["This field may not be blank."]},
            )

        with cls.atomic():
            project = Project.objects.create(
                owner=owner,
                title=title,
                description=description or "",
                status=status,
                visibility=visibility,
                funding_goal=funding_goal,
            )
            ProjectStat.objects.create(project=project)
            if tags:
                TagService.set_project_tags(project, tags)

        outcome = ModerationService.auto_moderate(
            project, cls._moderation_text(project), author=owner
        )
        cls.get_logger().info(
            f"Project {project.id} created by user {owner.id} (moderation: {outcome})"
        )
        return project

    @classmethod
    def update_project(cls, project: Project, actor: User, tags=None, **changes) -> Project:
        if not project.is_owned_by(actor):
            raise AuthorizationError(
                "Only the project owner can edit this project",
                error_code="NOT_PROJECT_OWNER",
            )
        unknown = set(changes) - set(cls.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                "Unknown fields",
                details={name: ["This field cannot be updated."] for name in sorted(unknown)},
            )

        with cls.atomic():
            for name, value in changes.items():
                setattr(project, name, value)
            project.save(update_fields=[*changes, "updated_at"])
            if tags is not None:
                TagService.set_project_tags(project, tags)

        if {"title", "description"} & set(changes):
            ModerationService.auto_moderate(project, cls._moderation_text(project), author=actor)
        return project

    @classmethod
    def delete_project(cls, project: Project, actor: User) -> None:
        if not (project.is_owned_by(actor) or actor.is_admin):
            raise AuthorizationError(
                "Only the project owner can delete this project",
                error_code="NOT_PROJECT_OWNER",
            )
        project_id = project.id
        project.delete()
        cls.get_logger().info(f"Project {project_id} deleted by user {actor.id}")

    @classmethod
    def visible_to(cls, viewer: User | None) -> QuerySet[Project]:
        """
        Admins see everything. Everyone else sees public/restricted projects
        that are not hidden, plus projects they own or collaborate on.
        """
        queryset = Project.objects.select_related("owner", "stats").prefetch_related("tags")
        if viewer is not None and getattr(viewer, "is_admin", False):
            return queryset

        listed = Q(is_hidden=False) & ~Q(visibility=ProjectVisibility.PRIVATE)
        if viewer is None or not viewer.is_authenticated:
            return queryset.filter(listed)
        member = Q(owner=viewer) | Q(collaborations__user=viewer)
        return queryset.filter(listed | member).distinct()

    @classmethod
    def get_visible(cls, project_id, viewer: User | None) -> Project:
        project = cls.visible_to(viewer).filter(pk=project_id).first()
        if project is None:
            raise NotFoundError("Project not found", error_code="PROJECT_NOT_FOUND")
        return project

    @classmethod
    def record_view(cls, project: Project) -> None:
        ProjectStat.objects.filter(project=project).update(total_views=F("total_views") + 1)
        stats = getattr(project, "stats", None)
        if stats is not None:
            stats.refresh_from_db(fields=["total_views"])

    @classmethod
    def announce_milestone(cls, project: Project, actor: User, milestone: str) -> list[Notification]:
        """
        Notify every collaborator that the project reached a milestone.

        Returns:
            The notifications created (one per collaborator other than actor)
        """
        if not project.is_owned_by(actor):
            raise AuthorizationError(
                "Only the project owner can announce milestones",
                error_code="NOT_PROJECT_OWNER",
            )
        milestone = (milestone or "").strip()
        if not milestone:
            raise ValidationError(
                "Milestone is required",
                details={"milestone": ["This field may not be blank."]},
            )

        cls.get_logger().info(f"Project {project.id} milestone announced: {milestone}")
        return NotificationDispatcher.dispatch(
            NotificationEvent.PROJECT_MILESTONE,
            project,
            actor=actor,
            milestone=milestone,
        )
