"""
Tagged references to the entity a notification or report is about.

A target is a (kind, id) pair. Each kind maps to exactly one model through
TARGET_MODELS, so resolving a target never depends on content types or
other dynamic lookups.

Usage:
    from notifications.targets import TargetKind, TargetRef

    ref = TargetRef.for_instance(project)        # TargetRef("project", 12)
    ref.resolve()                                 # Project instance or None
    TargetRef(TargetKind.COMMENT, 7).model        # projects.Comment
"""

from __future__ import annotations

from dataclasses import dataclass

from django.apps import apps
from django.db import models


class TargetKind(models.TextChoices):
    PROJECT = "project", "Project"
    COLLABORATION_REQUEST = "collaboration_request", "Collaboration request"
    FUNDING_REQUEST = "funding_request", "Funding request"
    COMMENT = "comment", "Comment"
    VOTE = "vote", "Vote"
    MESSAGE = "message", "Message"
    RESOURCE = "resource", "Resource"
    REPORT = "report", "Report"
    USER = "user", "User"


TARGET_MODELS: dict[str, str] = {
    TargetKind.PROJECT: "projects.Project",
    TargetKind.COLLABORATION_REQUEST: "projects.CollaborationRequest",
    TargetKind.FUNDING_REQUEST: "projects.FundingRequest",
    TargetKind.COMMENT: "projects.Comment",
    TargetKind.VOTE: "projects.Vote",
    TargetKind.MESSAGE: "messaging.Message",
    TargetKind.RESOURCE: "projects.Resource",
    TargetKind.REPORT: "moderation.Report",
    TargetKind.USER: "authentication.User",
}

_KIND_BY_LABEL = {label: kind for kind, label in TARGET_MODELS.items()}


def kind_for_model(model) -> str:
    """
    Return the TargetKind for a model class or instance.

    Raises:
        ValueError: model has no target kind
    """
    label = model._meta.label
    try:
        return _KIND_BY_LABEL[label]
    except KeyError:
        raise ValueError(f"{label} is not a notification/report target") from None


@dataclass(frozen=True)
class TargetRef:
    kind: str
    id: int

    def __post_init__(self):
        if self.kind not in TARGET_MODELS:
            raise ValueError(f"Unknown target kind: {self.kind}")

    @classmethod
    def for_instance(cls, instance) -> TargetRef:
        return cls(kind=kind_for_model(instance), id=instance.pk)

    @property
    def model(self):
        return apps.get_model(TARGET_MODELS[self.kind])

    def resolve(self):
        """Fetch the referenced row, or None if it no longer exists."""
        return self.model._default_manager.filter(pk=self.id).first()
