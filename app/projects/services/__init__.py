"""
Project services.

Usage:
    from projects.services import (
        CollaborationRequestService,
        FundingRequestService,
        ProjectService,
    )
"""

from projects.services.collaboration import CollaborationRequestService, CollaborationService
from projects.services.community import CommentService, ResourceService, VoteService
from projects.services.funding import FundingRequestService, parse_amount
from projects.services.projects import ProjectService
from projects.services.tags import TagService

__all__ = [
    "CollaborationRequestService",
    "CollaborationService",
    "CommentService",
    "FundingRequestService",
    "ProjectService",
    "ResourceService",
    "TagService",
    "VoteService",
    "parse_amount",
]
