"""
Notification dispatcher.

Maps a domain event to the notifications it produces. Each event has one
registered builder that resolves recipients, renders the message and builds
the metadata payload; NotificationStore persists the result.

Events and their recipients:
    collaboration_requested   project owner
    collaboration_approved    requester
    collaboration_rejected    requester (target is the project; the request row is gone)
    funding_requested         project owner
    funding_verified          funder
    funding_rejected          funder
    comment_posted            project owner, or parent comment author for replies
    comment_liked             comment author
    project_voted             project owner, up-votes by non-owners only
    message_received          message receiver
    resource_added            owner + collaborators, deduplicated, minus the adder
    report_filed              admins, plus the reported project's owner / reported user
    user_suspended            suspended user
    user_unsuspended          restored user
    content_hidden            owner of the hidden project or comment
    project_milestone         collaborators minus the announcer

Contract:
    dispatch() never raises. A failed notification must not undo the
    operation that triggered it, so every error is logged and an empty list
    is returned. Dispatch is not idempotent: call it once per event.

Usage:
    from notifications.dispatcher import NotificationDispatcher, NotificationEvent

    NotificationDispatcher.dispatch(
        NotificationEvent.COLLABORATION_APPROVED, request, actor=owner
    )
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from django.db import models
from django.utils.text import Truncator

from core.services import BaseService
from notifications.models import NotificationType
from notifications.services import NotificationDraft, NotificationStore
from notifications.targets import TargetKind, TargetRef

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from authentication.models import User
    from notifications.models import Notification

PREVIEW_LENGTH = 100


class NotificationEvent(models.TextChoices):
    COLLABORATION_REQUESTED = "collaboration_requested"
    COLLABORATION_APPROVED = "collaboration_approved"
    COLLABORATION_REJECTED = "collaboration_rejected"
    FUNDING_REQUESTED = "funding_requested"
    FUNDING_VERIFIED = "funding_verified"
    FUNDING_REJECTED = "funding_rejected"
    COMMENT_POSTED = "comment_posted"
    COMMENT_LIKED = "comment_liked"
    PROJECT_VOTED = "project_voted"
    MESSAGE_RECEIVED = "message_received"
    RESOURCE_ADDED = "resource_added"
    REPORT_FILED = "report_filed"
    USER_SUSPENDED = "user_suspended"
    USER_UNSUSPENDED = "user_unsuspended"
    CONTENT_HIDDEN = "content_hidden"
    PROJECT_MILESTONE = "project_milestone"


_BUILDERS: dict[str, Callable[..., list[NotificationDraft]]] = {}


def builder(event: str):
    """Register the draft builder for ``event``."""

    def decorator(func):
        _BUILDERS[event] = func
        return func

    return decorator


class NotificationDispatcher(BaseService):
    """Turns domain events into stored notifications."""

    @classmethod
    def dispatch(cls, event: str, subject, actor: User | None = None, **context) -> list[Notification]:
        """
        Build and store the notifications for one event.

        Args:
            event: NotificationEvent value
            subject: The entity the event is about (request, comment, message, ...)
            actor: User who caused the event, if any
            **context: Event-specific values (reason, milestone, request_id)

        Returns:
            Stored notifications; empty if nobody is notified or dispatch failed
        """
        build = _BUILDERS.get(event)
        if build is None:
            cls.get_logger().error(f"No notification builder registered for event {event!r}")
            return []

        try:
            with cls.atomic():
                drafts = build(subject, actor, **context)
                return NotificationStore.create_many(drafts)
        except Exception:
            cls.get_logger().exception(
                f"Failed to dispatch {event} notifications",
                extra={
                    "event": str(event),
                    "subject": repr(subject),
                    "actor_id": getattr(actor, "id", None),
                },
            )
            return []

    @classmethod
    def registered_events(cls) -> set[str]:
        return set(_BUILDERS)


# =============================================================================
# Helpers
# =============================================================================


def _name(user) -> str:
    return user.display_name if user is not None else "Someone"


def _money(amount) -> str:
    return f"{Decimal(amount):,.2f}"


def _preview(text: str) -> str:
    return Truncator(text or "").chars(PREVIEW_LENGTH)


def _project_meta(project) -> dict:
    return {"project_id": project.id, "project_title": project.title}


def _unique_recipients(users: Iterable, exclude=None) -> list:
    """Deduplicate by user id, preserving order, dropping ``exclude``."""
    seen = set()
    if exclude is not None:
        seen.add(exclude.id)
    recipients = []
    for user in users:
        if user is None or user.id in seen:
            continue
        seen.add(user.id)
        recipients.append(user)
    return recipients


def _content_owner(entity):
    return getattr(entity, "owner", None) or getattr(entity, "user", None)


# =============================================================================
# Collaboration requests
# =============================================================================


@builder(NotificationEvent.COLLABORATION_REQUESTED)
def _collaboration_requested(request, actor, **context):
    project = request.project
    requester = request.user
    return [
        NotificationDraft(
            recipient=project.owner,
            actor=requester,
            notification_type=NotificationType.COLLABORATION_REQUEST,
            message=f"{_name(requester)} requested to collaborate on {project.title}",
            target=TargetRef.for_instance(request),
            metadata={
                **_project_meta(project),
                "request_id": request.id,
                "requester_id": requester.id,
                "requester_name": _name(requester),
                "message": request.message,
            },
        )
    ]


@builder(NotificationEvent.COLLABORATION_APPROVED)
def _collaboration_approved(request, actor, **context):
    project = request.project
    return [
        NotificationDraft(
            recipient=request.user,
            actor=actor,
            notification_type=NotificationType.COLLABORATION_APPROVED,
            message=f"Your collaboration request for {project.title} was approved",
            target=TargetRef.for_instance(request),
            metadata={**_project_meta(project), "request_id": request.id},
        )
    ]


@builder(NotificationEvent.COLLABORATION_REJECTED)
def _collaboration_rejected(request, actor, request_id=None, **context):
    project = request.project
    return [
        NotificationDraft(
            recipient=request.user,
            actor=actor,
            notification_type=NotificationType.COLLABORATION_REJECTED,
            message=f"Your collaboration request for {project.title} was rejected",
            target=TargetRef.for_instance(project),
            metadata={**_project_meta(project), "request_id": request_id},
        )
    ]


# =============================================================================
# Funding requests
# =============================================================================


def _funding_meta(funding_request) -> dict:
    return {
        **_project_meta(funding_request.project),
        "funding_request_id": funding_request.id,
        "funder_id": funding_request.funder_id,
        "funder_name": _name(funding_request.funder),
        "amount": str(funding_request.amount),
    }


@builder(NotificationEvent.FUNDING_REQUESTED)
def _funding_requested(funding_request, actor, **context):
    project = funding_request.project
    funder = funding_request.funder
    return [
        NotificationDraft(
            recipient=project.owner,
            actor=funder,
            notification_type=NotificationType.FUNDING_REQUEST,
            message=(
                f"{_name(funder)} offered ${_money(funding_request.amount)} "
                f"funding for {project.title}"
            ),
            target=TargetRef.for_instance(funding_request),
            metadata={**_funding_meta(funding_request), "note": funding_request.note},
        )
    ]


@builder(NotificationEvent.FUNDING_VERIFIED)
def _funding_verified(funding_request, actor, **context):
    return [
        NotificationDraft(
            recipient=funding_request.funder,
            actor=actor,
            notification_type=NotificationType.FUNDING_VERIFIED,
            message=(
                f"Your funding offer of ${_money(funding_request.amount)} "
                f"for {funding_request.project.title} was accepted"
            ),
            target=TargetRef.for_instance(funding_request),
            metadata=_funding_meta(funding_request),
        )
    ]


@builder(NotificationEvent.FUNDING_REJECTED)
def _funding_rejected(funding_request, actor, **context):
    return [
        NotificationDraft(
            recipient=funding_request.funder,
            actor=actor,
            notification_type=NotificationType.FUNDING_REJECTED,
            message=(
                f"Your funding offer of ${_money(funding_request.amount)} "
                f"for {funding_request.project.title} was declined"
            ),
            target=TargetRef.for_instance(funding_request),
            metadata=_funding_meta(funding_request),
        )
    ]


# =============================================================================
# Community: comments, votes, resources, milestones
# =============================================================================


@builder(NotificationEvent.COMMENT_POSTED)
def _comment_posted(comment, actor, **context):
    project = comment.project
    author = comment.user
    metadata = {
        **_project_meta(project),
        "comment_id": comment.id,
        "commenter_id": author.id,
        "commenter_name": _name(author),
        "comment_preview": _preview(comment.content),
    }

    if comment.parent_id:
        parent_author = comment.parent.user
        if parent_author.id == author.id:
            return []
        return [
            NotificationDraft(
                recipient=parent_author,
                actor=author,
                notification_type=NotificationType.COMMENT_REPLY,
                message=f"{_name(author)} replied to your comment on {project.title}",
                target=TargetRef.for_instance(comment),
                metadata={**metadata, "parent_comment_id": comment.parent_id},
            )
        ]

    if project.owner_id == author.id:
        return []
    return [
        NotificationDraft(
            recipient=project.owner,
            actor=author,
            notification_type=NotificationType.PROJECT_COMMENT,
            message=f"{_name(author)} commented on {project.title}",
            target=TargetRef.for_instance(comment),
            metadata=metadata,
        )
    ]


@builder(NotificationEvent.COMMENT_LIKED)
def _comment_liked(comment, actor, **context):
    if actor is None or comment.user_id == actor.id:
        return []
    project = comment.project
    return [
        NotificationDraft(
            recipient=comment.user,
            actor=actor,
            notification_type=NotificationType.COMMENT_LIKED,
            message=f"{_name(actor)} liked your comment on {project.title}",
            target=TargetRef.for_instance(comment),
            metadata={
                **_project_meta(project),
                "comment_id": comment.id,
                "liker_id": actor.id,
                "liker_name": _name(actor),
                "comment_preview": _preview(comment.content),
            },
        )
    ]


@builder(NotificationEvent.PROJECT_VOTED)
def _project_voted(vote, actor, **context):
    from projects.states import VoteType

    project = vote.project
    if vote.vote_type != VoteType.UP or project.owner_id == vote.user_id:
        return []
    return [
        NotificationDraft(
            recipient=project.owner,
            actor=vote.user,
            notification_type=NotificationType.PROJECT_VOTE,
            message=f"{_name(vote.user)} upvoted {project.title}",
            target=TargetRef.for_instance(vote),
            metadata={
                **_project_meta(project),
                "voter_id": vote.user_id,
                "voter_name": _name(vote.user),
                "vote_type": vote.vote_type,
            },
        )
    ]


@builder(NotificationEvent.RESOURCE_ADDED)
def _resource_added(resource, actor, **context):
    project = resource.project
    adder = resource.added_by
    collaborators = [c.user for c in project.collaborations.select_related("user")]
    recipients = _unique_recipients([project.owner, *collaborators], exclude=adder)
    metadata = {
        **_project_meta(project),
        "resource_id": resource.id,
        "resource_title": resource.title,
        "resource_url": resource.url,
        "added_by_id": adder.id,
        "added_by_name": _name(adder),
    }
    return [
        NotificationDraft(
            recipient=recipient,
            actor=adder,
            notification_type=NotificationType.RESOURCE_ADDED,
            message=f"{_name(adder)} added a resource to {project.title}",
            target=TargetRef.for_instance(resource),
            metadata=metadata,
        )
        for recipient in recipients
    ]


@builder(NotificationEvent.PROJECT_MILESTONE)
def _project_milestone(project, actor, milestone="", **context):
    collaborators = [c.user for c in project.collaborations.select_related("user")]
    recipients = _unique_recipients(collaborators, exclude=actor)
    return [
        NotificationDraft(
            recipient=recipient,
            actor=actor,
            notification_type=NotificationType.PROJECT_MILESTONE,
            message=f"{project.title} reached a new milestone: {milestone}",
            target=TargetRef.for_instance(project),
            metadata={**_project_meta(project), "milestone": milestone},
        )
        for recipient in recipients
    ]


# =============================================================================
# Messaging
# =============================================================================


@builder(NotificationEvent.MESSAGE_RECEIVED)
def _message_received(message, actor, **context):
    sender = message.sender
    return [
        NotificationDraft(
            recipient=message.receiver,
            actor=sender,
            notification_type=NotificationType.NEW_MESSAGE,
            message=f"{_name(sender)} sent you a message",
            target=TargetRef.for_instance(message),
            metadata={
                "message_id": message.id,
                "sender_id": sender.id,
                "sender_name": _name(sender),
                "project_id": message.project_id,
                "message_preview": _preview(message.content),
            },
        )
    ]


# =============================================================================
# Moderation
# =============================================================================


@builder(NotificationEvent.REPORT_FILED)
def _report_filed(report, actor, **context):
    from authentication.models import User

    reporter = report.reporter
    target = report.target
    reason_label = report.get_reason_display()
    metadata = {
        "report_id": report.id,
        "target_kind": target.kind,
        "target_id": target.id,
        "reason": report.reason,
        "reporter_id": reporter.id,
        "reporter_name": _name(reporter),
    }

    admins = _unique_recipients(User.objects.admins(), exclude=reporter)
    drafts = [
        NotificationDraft(
            recipient=admin,
            actor=reporter,
            notification_type=NotificationType.CONTENT_REPORTED,
            message=f"New content report: {target.kind} - {reason_label}",
            target=TargetRef.for_instance(report),
            metadata=metadata,
        )
        for admin in admins
    ]

    reported = target.resolve()
    if target.kind == TargetKind.PROJECT and reported is not None:
        drafts.append(
            NotificationDraft(
                recipient=reported.owner,
                notification_type=NotificationType.PROJECT_REPORTED,
                message=f"Your project {reported.title} was reported",
                target=target,
                metadata={"project_id": reported.id, "reason": report.reason},
            )
        )
    elif target.kind == TargetKind.USER and reported is not None:
        drafts.append(
            NotificationDraft(
                recipient=reported,
                notification_type=NotificationType.USER_REPORTED,
                message="Your account was reported",
                target=target,
                metadata={"reason": report.reason},
            )
        )
    return drafts


@builder(NotificationEvent.USER_SUSPENDED)
def _user_suspended(user, actor, reason="", **context):
    return [
        NotificationDraft(
            recipient=user,
            actor=actor,
            notification_type=NotificationType.USER_SUSPENDED,
            message=f"Your account has been suspended: {reason}",
            target=TargetRef.for_instance(user),
            metadata={"reason": reason},
        )
    ]


@builder(NotificationEvent.USER_UNSUSPENDED)
def _user_unsuspended(user, actor, **context):
    return [
        NotificationDraft(
            recipient=user,
            actor=actor,
            notification_type=NotificationType.USER_UNSUSPENDED,
            message="Your account has been restored",
            target=TargetRef.for_instance(user),
        )
    ]


@builder(NotificationEvent.CONTENT_HIDDEN)
def _content_hidden(content, actor, reason="", **context):
    owner = _content_owner(content)
    if owner is None:
        return []
    target = TargetRef.for_instance(content)
    return [
        NotificationDraft(
            recipient=owner,
            actor=actor,
            notification_type=NotificationType.CONTENT_HIDDEN,
            message=f"Your {target.kind} has been hidden: {reason}",
            target=target,
            metadata={"target_kind": target.kind, "target_id": target.id, "reason": reason},
        )
    ]
