"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- A single place that decides which HTTP status a domain error maps to

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Bad input or invariant violation (422)
    ├── AuthenticationError - Missing or invalid credentials (401)
    ├── AuthorizationError - Actor may not perform the operation (403)
    ├── NotFoundError - Resource not found (404)
    └── StateError - Transition attempted from the wrong state (422)

Usage:
    from core.exceptions import ValidationError, StateError

    # Raise with message only
    raise ValidationError("Amount must be greater than zero")

    # Raise with error code for client handling
    raise StateError("Request already processed", error_code="ALREADY_PROCESSED")

    # Raise with field-level details
    raise ValidationError(
        "Validation failed",
        details={"amount": ["Must be greater than zero"]},
    )

Note:
    Views never catch these. core.exception_handler.api_exception_handler
    renders them using ``http_status`` and ``to_dict()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        http_status: Status code used when rendered by the API layer
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Request already processed",
                "error_code": "ALREADY_PROCESSED",
                "details": {"status": "approved"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Invalid field values (non-positive amounts, blank content)
    - Invariant violations at creation time (duplicate pending request)
    - Business rule violations (owner requesting to join their own project)

    Example:
        raise ValidationError(
            "You already have a pending request for this project",
            error_code="DUPLICATE_PENDING_REQUEST",
            details={"project_id": project.id},
        )
    """

    default_error_code: str = "VALIDATION_ERROR"
    http_status: int = 422


class AuthenticationError(BaseApplicationError):
    """
    Raised when credentials are missing, expired or invalid.

    Used by authentication.tokens.TokenVerifier for WebSocket connections,
    where DRF's AuthenticationFailed is not available.
    """

    default_error_code: str = "AUTHENTICATION_FAILED"
    http_status: int = 401


class AuthorizationError(BaseApplicationError):
    """
    Raised when the actor lacks permission for an operation.

    Use for:
    - Non-owner attempting to approve, verify or reject a request
    - Non-admin attempting a moderation action

    Example:
        if project.owner_id != actor.id:
            raise AuthorizationError(
                "Only the project owner can approve requests",
                error_code="NOT_PROJECT_OWNER",
            )
    """

    default_error_code: str = "PERMISSION_DENIED"
    http_status: int = 403


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        request = CollaborationRequest.objects.filter(id=request_id).first()
        if not request:
            raise NotFoundError(
                f"Collaboration request {request_id} not found",
                error_code="REQUEST_NOT_FOUND",
                details={"request_id": request_id},
            )
    """

    default_error_code: str = "NOT_FOUND"
    http_status: int = 404


class StateError(BaseApplicationError):
    """
    Raised when a transition is attempted from the wrong state.

    Use for:
    - Approving or rejecting a request that is no longer pending
    - Concurrent approvals where the other transaction won

    Example:
        raise StateError(
            "Request has already been processed",
            error_code="ALREADY_PROCESSED",
            details={"status": request.status},
        )
    """

    default_error_code: str = "INVALID_STATE"
    http_status: int = 422
