"""
Collaboration request state machine and membership management.

State Flow:
    PENDING → APPROVED   owner approves; a Collaboration(role=member) is
                         inserted in the same transaction
    PENDING → REJECTED   owner rejects; the request row is deleted

Invariants:
    - A user holds at most one pending request per project. The check runs
      while the project row is locked, so two concurrent requests from the
      same user serialize.
    - Collaborations are only created here. The (project, user) unique
      constraint is the last guard: a violation becomes StateError and the
      approval is rolled back.

Notifications are dispatched after the atomic block exits, so a failure to
notify never undoes a committed transition.

Usage:
    from projects.services import CollaborationRequestService

    request = CollaborationRequestService.create(project, user, message="Hi!")
    CollaborationRequestService.approve(request.id, actor=project.owner)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django_fsm import TransitionNotAllowed

from core.exceptions import AuthorizationError, NotFoundError, StateError, ValidationError
from core.services import BaseService
from notifications.dispatcher import NotificationDispatcher, NotificationEvent
from projects.models import Collaboration, CollaborationRequest, Project
from projects.states import CollaborationRequestStatus, CollaborationRole

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


class CollaborationRequestService(BaseService):
    """
    Create, approve and reject collaboration requests.

    Methods:
        create: Non-owner asks to join a project
        approve: Owner accepts; creates the Collaboration atomically
        reject: Owner declines; the request is deleted
        pending_for_project: Owner's queue of pending requests
    """

    @classmethod
    def create(cls, project: Project, user: User, message: str = "") -> CollaborationRequest:
        """
        Raises:
            ValidationError: owner requesting, already a collaborator, or a
                pending request already exists
        """
        if project.is_owned_by(user):
            raise ValidationError(
                "Project owners cannot request to collaborate on their own project",
                error_code="OWNER_CANNOT_REQUEST",
            )

        with cls.atomic():
            Project.objects.select_for_update().get(pk=project.pk)

            if Collaboration.objects.filter(project=project, user=user).exists():
                raise ValidationError(
                    "You are already a collaborator on this project",
                    error_code="ALREADY_COLLABORATOR",
                )
            if CollaborationRequest.objects.filter(
                project=project,
                user=user,
                status=CollaborationRequestStatus.PENDING,
            ).exists():
                raise ValidationError(
                    "You already have a pending request for this project",
                    error_code="DUPLICATE_PENDING_REQUEST",
                )

            request = CollaborationRequest.objects.create(
                project=project,
                user=user,
                message=message or "",
            )

        cls.get_logger().info(
            f"Collaboration request {request.id} created by user {user.id} "
            f"for project {project.id}"
        )
        NotificationDispatcher.dispatch(
            NotificationEvent.COLLABORATION_REQUESTED, request, actor=user
        )
        return request

    @classmethod
    def _get_for_owner(
        cls,
        request_id,
        actor: User,
        lock: bool = False,
        project_id=None,
    ) -> CollaborationRequest:
        queryset = CollaborationRequest.objects.select_related("project", "project__owner", "user")
        if lock:
            queryset = queryset.select_for_update(of=("self",))
        if project_id is not None:
            queryset = queryset.filter(project_id=project_id)

        request = queryset.filter(pk=request_id).first()
        if request is None:
            raise NotFoundError(
                "Collaboration request not found",
                error_code="COLLABORATION_REQUEST_NOT_FOUND",
            )
        if not request.project.is_owned_by(actor):
            raise AuthorizationError(
                "Only the project owner can review collaboration requests",
                error_code="NOT_PROJECT_OWNER",
            )
        if not request.is_pending:
            raise StateError(
                f"Collaboration request has already been {request.status}",
                error_code="ALREADY_PROCESSED",
            )
        return request

    @classmethod
    def approve(cls, request_id, actor: User, project_id=None) -> CollaborationRequest:
        """
        Approve a pending request and add the requester as a member.

        Raises:
            NotFoundError: No such request (or not on ``project_id``)
            AuthorizationError: actor is not the project owner
            StateError: Request is no longer pending or the user is already
                a collaborator
        """
        try:
            with cls.atomic():
                request = cls._get_for_owner(request_id, actor, lock=True, project_id=project_id)
                request.approve()
                request.save(update_fields=["status", "updated_at"])
                Collaboration.objects.create(
                    project=request.project,
                    user=request.user,
                    role=CollaborationRole.MEMBER,
                )
        except TransitionNotAllowed as exc:
            raise StateError(str(exc), error_code="ALREADY_PROCESSED") from exc
        except IntegrityError as exc:
            cls.get_logger().warning(
                f"Collaboration request {request_id} approval hit an existing collaboration"
            )
            raise StateError(
                "User is already a collaborator on this project",
                error_code="ALREADY_COLLABORATOR",
            ) from exc

        cls.get_logger().info(
            f"Collaboration request {request.id} approved by user {actor.id}; "
            f"user {request.user_id} joined project {request.project_id}"
        )
        NotificationDispatcher.dispatch(
            NotificationEvent.COLLABORATION_APPROVED, request, actor=actor
        )
        return request

    @classmethod
    def reject(cls, request_id, actor: User, project_id=None) -> None:
        """
        Reject a pending request. The request row is deleted so the user may
        request again later.

        Raises:
            NotFoundError / AuthorizationError / StateError: as for approve
        """
        try:
            with cls.atomic():
                request = cls._get_for_owner(request_id, actor, lock=True, project_id=project_id)
                request.reject()
                deleted_id = request.pk
                request.delete()
        except TransitionNotAllowed as exc:
            raise StateError(str(exc), error_code="ALREADY_PROCESSED") from exc

        cls.get_logger().info(
            f"Collaboration request {deleted_id} rejected and deleted by user {actor.id}"
        )
        NotificationDispatcher.dispatch(
            NotificationEvent.COLLABORATION_REJECTED,
            request,
            actor=actor,
            request_id=deleted_id,
        )

    @classmethod
    def pending_for_project(cls, project: Project, actor: User) -> QuerySet[CollaborationRequest]:
        if not project.is_owned_by(actor):
            raise AuthorizationError(
                "Only the project owner can view collaboration requests",
                error_code="NOT_PROJECT_OWNER",
            )
        return (
            CollaborationRequest.objects.filter(
                project=project,
                status=CollaborationRequestStatus.PENDING,
            )
            .select_related("user")
            .order_by("-created_at", "-id")
        )


class CollaborationService(BaseService):
    """
    Membership changes after approval.

    Methods:
        remove_collaborator: Owner removes a member, or a member leaves
        change_role: Owner switches a member between member and viewer
    """

    ASSIGNABLE_ROLES = (CollaborationRole.MEMBER, CollaborationRole.VIEWER)

    @classmethod
    def _get(cls, collaboration_id, project_id=None) -> Collaboration:
        queryset = Collaboration.objects.select_related("project")
        if project_id is not None:
            queryset = queryset.filter(project_id=project_id)
        collaboration = queryset.filter(pk=collaboration_id).first()
        if collaboration is None:
            raise NotFoundError("Collaboration not found", error_code="COLLABORATION_NOT_FOUND")
        return collaboration

    @classmethod
    def remove_collaborator(cls, collaboration_id, actor: User, project_id=None) -> None:
        """
        Delete a Collaboration together with every request the user made for
        that project, so the user may request to join again.

        Raises:
            NotFoundError: No such collaboration
            AuthorizationError: actor is neither the owner nor the collaborator
        """
        collaboration = cls._get(collaboration_id, project_id)
        if not (collaboration.project.is_owned_by(actor) or collaboration.user_id == actor.id):
            raise AuthorizationError(
                "Only the project owner can remove collaborators",
                error_code="NOT_PROJECT_OWNER",
            )

        with cls.atomic():
            requests_deleted, _ = CollaborationRequest.objects.filter(
                project_id=collaboration.project_id,
                user_id=collaboration.user_id,
            ).delete()
            collaboration.delete()

        cls.get_logger().info(
            f"User {collaboration.user_id} removed from project {collaboration.project_id} "
            f"by user {actor.id} ({requests_deleted} request(s) cleaned up)"
        )

    @classmethod
    def change_role(cls, collaboration_id, actor: User, role: str, project_id=None) -> Collaboration:
        collaboration = cls._get(collaboration_id, project_id)
        if not collaboration.project.is_owned_by(actor):
            raise AuthorizationError(
                "Only the project owner can change roles",
                error_code="NOT_PROJECT_OWNER",
            )
        if role not in cls.ASSIGNABLE_ROLES:
            raise ValidationError(
                f"Invalid role: {role}",
                error_code="INVALID_ROLE",
                details={"role": [f"Must be one of: {', '.join(cls.ASSIGNABLE_ROLES)}"]},
            )

        collaboration.role = role
        collaboration.save(update_fields=["role", "updated_at"])
        cls.get_logger().info(
            f"Collaboration {collaboration.id} role changed to {role} by user {actor.id}"
        )
        return collaboration
