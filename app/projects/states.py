"""
State enums for project request models.

These are Django TextChoices used by django-fsm fields.

State Machines Overview:

CollaborationRequest States:
    pending → approved  (Collaboration created, row kept)
    pending → rejected  (row deleted by the service right after the transition)

FundingRequest States:
    pending → verified  (Fund created, project.current_funding incremented)
    pending → rejected  (verifier fields set, row kept)
"""

from django.db import models


class CollaborationRequestStatus(models.TextChoices):
    """
    States for the CollaborationRequest lifecycle.

    Terminal states: APPROVED, REJECTED
    """

    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class FundingRequestStatus(models.TextChoices):
    """
    States for the FundingRequest lifecycle.

    Terminal states: VERIFIED, REJECTED
    """

    PENDING = "pending", "Pending"
    VERIFIED = "verified", "Verified"
    REJECTED = "rejected", "Rejected"


class ProjectStatus(models.TextChoices):
    IDEATION = "ideation", "Ideation"
    ONGOING = "ongoing", "Ongoing"
    COMPLETED = "completed", "Completed"


class ProjectVisibility(models.TextChoices):
    PUBLIC = "public", "Public"
    PRIVATE = "private", "Private"
    RESTRICTED = "restricted", "Restricted"


class CollaborationRole(models.TextChoices):
    OWNER = "owner", "Owner"
    MEMBER = "member", "Member"
    VIEWER = "viewer", "Viewer"


class VoteType(models.TextChoices):
    UP = "up", "Up"
    DOWN = "down", "Down"
