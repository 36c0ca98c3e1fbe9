# services/promotion-service/src/apps/core/services/__init__.py
"""
Promotion Service Business Logic

This module exports all services and exceptions for the Promotion Service.
"""

from .template_service import TemplateService
from .progress_service import ProgressService
from .claim_service import ClaimService
from .activity_service import ActivityService
from . import progress_engine

# Custom Exceptions
class PromotionServiceError(Exception):
    """Base exception for promotion service errors."""
    pass


class NotFoundError(PromotionServiceError):
    """Template, progress, level, mission or claim not found."""
    pass


class ConflictError(PromotionServiceError):
    """Conflict error (e.g., duplicate pending claim)."""
    pass


class PromotionValidationError(PromotionServiceError):
    """Request is well-formed but not allowed in the current state."""
    pass


class DuplicateClaimError(ConflictError):
    """A pending claim already occupies the mission slot."""
    pass


class ProgressBlockedError(PromotionValidationError):
    """The user's progress in the club is blocked."""
    pass


class PermissionDeniedError(PromotionServiceError):
    """Actor may not act on the resource."""
    pass


__all__ = [
    # Services
    'TemplateService',
    'ProgressService',
    'ClaimService',
    'ActivityService',
    'progress_engine',

    # Exceptions
    'PromotionServiceError',
    'NotFoundError',
    'ConflictError',
    'PromotionValidationError',
    'DuplicateClaimError',
    'ProgressBlockedError',
    'PermissionDeniedError',
]
