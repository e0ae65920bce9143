"""
DRF exception handler that renders application errors.

Configured via REST_FRAMEWORK["EXCEPTION_HANDLER"]. Service-layer exceptions
from core.exceptions are turned into responses using their ``http_status``
and ``to_dict()``; everything else falls through to DRF's default handler.

Response shape for domain errors:
    {
        "error": "Only the project owner can approve requests",
        "error_code": "NOT_PROJECT_OWNER"
    }

DRF serializer validation errors are reported as 422 so that invalid input
and invariant violations share a status code.
"""

from __future__ import annotations

import logging

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Render BaseApplicationError subclasses; delegate the rest to DRF."""
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        logger.info(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: "
            f"{exc.error_code} {exc.message}"
        )
        return Response(exc.to_dict(), status=exc.http_status)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, drf_exceptions.ValidationError):
        response.data = {
            "error": "Validation failed",
            "error_code": "VALIDATION_ERROR",
            "details": response.data,
        }
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(response.data, dict) and "detail" in response.data:
        detail = response.data["detail"]
        response.data = {
            "error": str(detail),
            "error_code": getattr(detail, "code", "error").upper(),
        }
    return response
