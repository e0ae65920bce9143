"""
Core Application - Infrastructure & Base Classes

Generic, reusable base classes shared by the domain apps. No domain logic
lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - ModerationFlagsMixin: is_hidden / is_reported flags with hide() / unhide()

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - ValidationError: Bad input or invariant violation (422)
    - AuthenticationError: Missing or invalid credentials (401)
    - AuthorizationError: Actor may not perform the operation (403)
    - NotFoundError: Resource not found (404)
    - StateError: Transition from the wrong state (422)

API (import from core.exception_handler):
    - api_exception_handler: DRF EXCEPTION_HANDLER rendering the above
"""
