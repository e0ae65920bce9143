"""
Funding request state machine.

State Flow:
    PENDING → VERIFIED   owner verifies; Fund ledger row inserted and the
                         project's current_funding incremented, all in one
                         transaction
    PENDING → REJECTED   owner declines; only status/verifier fields change

Invariants:
    - A funder holds at most one pending request per project
    - Fund rows are only created by verify()
    - current_funding is only changed with an F() expression update, so
      concurrent verifies on the same project never lose an increment

Usage:
    from projects.services import FundingRequestService

    funding_request = FundingRequestService.create(project, funder, "250.00")
    FundingRequestService.verify(funding_request.id, verifier=project.owner)
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.db.models import F
from django_fsm import TransitionNotAllowed

from core.exceptions import AuthorizationError, NotFoundError, StateError, ValidationError
from core.services import BaseService
from notifications.dispatcher import NotificationDispatcher, NotificationEvent
from projects.models import Fund, FundingRequest, Project
from projects.states import FundingRequestStatus

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")


def parse_amount(value) -> Decimal:
    """
    Parse a positive monetary amount with two decimal places.

    Raises:
        ValidationError: not a number, not finite, or not greater than zero
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        amount = None

    if amount is None or not amount.is_finite():
        raise ValidationError(
            "Amount must be a valid number",
            error_code="INVALID_AMOUNT",
            details={"amount": ["A valid number is required."]},
        )
    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValidationError(
            "Amount must be greater than zero",
            error_code="INVALID_AMOUNT",
            details={"amount": ["Ensure this value is greater than 0."]},
        )
    if amount > MAX_AMOUNT:
        raise ValidationError(
            "Amount is too large",
            error_code="INVALID_AMOUNT",
            details={"amount": [f"Ensure this value is at most {MAX_AMOUNT}."]},
        )
    return amount


class FundingRequestService(BaseService):
    """
    Methods:
        create: Funder offers an amount to a project
        verify: Owner accepts; records the Fund and updates current_funding
        reject: Owner declines
        for_project: All requests for a project, newest first
    """

    @classmethod
    def create(cls, project: Project, funder: User, amount, note: str = "") -> FundingRequest:
        """
        Raises:
            ValidationError: invalid amount, funder owns the project, or a
                pending request already exists
        """
        amount = parse_amount(amount)
        if project.is_owned_by(funder):
            raise ValidationError(
                "Project owners cannot fund their own project",
                error_code="OWNER_CANNOT_FUND",
            )

        with cls.atomic():
            Project.objects.select_for_update().get(pk=project.pk)
            if FundingRequest.objects.filter(
                project=project,
                funder=funder,
                status=FundingRequestStatus.PENDING,
            ).exists():
                raise ValidationError(
                    "You already have a pending funding request for this project",
                    error_code="DUPLICATE_PENDING_REQUEST",
                )
            funding_request = FundingRequest.objects.create(
                project=project,
                funder=funder,
                amount=amount,
                note=note or "",
            )

        cls.get_logger().info(
            f"Funding request {funding_request.id} for {amount} created by user {funder.id} "
            f"on project {project.id}"
        )
        NotificationDispatcher.dispatch(
            NotificationEvent.FUNDING_REQUESTED, funding_request, actor=funder
        )
        return funding_request

    @classmethod
    def _get_for_owner(cls, request_id, actor: User, project_id=None) -> FundingRequest:
        queryset = FundingRequest.objects.select_related("project", "funder").select_for_update(
            of=("self",)
        )
        if project_id is not None:
            queryset = queryset.filter(project_id=project_id)

        funding_request = queryset.filter(pk=request_id).first()
        if funding_request is None:
            raise NotFoundError(
                "Funding request not found",
                error_code="FUNDING_REQUEST_NOT_FOUND",
            )
        if not funding_request.project.is_owned_by(actor):
            raise AuthorizationError(
                "Only the project owner can review funding requests",
                error_code="NOT_PROJECT_OWNER",
            )
        if not funding_request.is_pending:
            raise StateError(
                f"Funding request has already been {funding_request.status}",
                error_code="ALREADY_PROCESSED",
            )
        return funding_request

    @classmethod
    def _increment_project_funding(cls, project_id, amount: Decimal) -> None:
        Project.objects.filter(pk=project_id).update(
            current_funding=F("current_funding") + amount
        )

    @classmethod
    def verify(cls, request_id, verifier: User, project_id=None) -> FundingRequest:
        """
        Verify a pending request.

        The transition, the Fund insert and the counter increment commit
        together or not at all.

        Raises:
            NotFoundError / AuthorizationError / StateError
        """
        try:
            with cls.atomic():
                funding_request = cls._get_for_owner(request_id, verifier, project_id)
                funding_request.verify(verifier)
                funding_request.save(
                    update_fields=["status", "verified_by", "verified_at", "updated_at"]
                )
                Fund.objects.create(
                    project_id=funding_request.project_id,
                    funder_id=funding_request.funder_id,
                    funding_request=funding_request,
                    amount=funding_request.amount,
                    funded_at=funding_request.verified_at,
                )
                cls._increment_project_funding(
                    funding_request.project_id, funding_request.amount
                )
        except TransitionNotAllowed as exc:
            raise StateError(str(exc), error_code="ALREADY_PROCESSED") from exc

        funding_request.project.refresh_from_db(fields=["current_funding"])
        cls.get_logger().info(
            f"Funding request {funding_request.id} verified by user {verifier.id}; "
            f"project {funding_request.project_id} funding is now "
            f"{funding_request.project.current_funding}"
        )
        NotificationDispatcher.dispatch(
            NotificationEvent.FUNDING_VERIFIED, funding_request, actor=verifier
        )
        return funding_request

    @classmethod
    def reject(cls, request_id, verifier: User, project_id=None) -> FundingRequest:
        try:
            with cls.atomic():
                funding_request = cls._get_for_owner(request_id, verifier, project_id)
                funding_request.reject(verifier)
                funding_request.save(
                    update_fields=["status", "verified_by", "verified_at", "updated_at"]
                )
        except TransitionNotAllowed as exc:
            raise StateError(str(exc), error_code="ALREADY_PROCESSED") from exc

        cls.get_logger().info(
            f"Funding request {funding_request.id} rejected by user {verifier.id}"
        )
        NotificationDispatcher.dispatch(
            NotificationEvent.FUNDING_REJECTED, funding_request, actor=verifier
        )
        return funding_request

    @classmethod
    def for_project(cls, project: Project) -> QuerySet[FundingRequest]:
        return (
            FundingRequest.objects.filter(project=project)
            .select_related("funder", "verified_by")
            .order_by("-created_at", "-id")
        )
