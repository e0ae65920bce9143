"""
Projects application.

Projects and everything attached to them: collaborators, collaboration and
funding requests (django-fsm state machines), the funding ledger, comments,
votes and shared resources.

Usage:
    from projects.services import CollaborationRequestService, FundingRequestService

    request = CollaborationRequestService.create(project, user, "let me help")
    CollaborationRequestService.approve(request.id, actor=project.owner)
"""
