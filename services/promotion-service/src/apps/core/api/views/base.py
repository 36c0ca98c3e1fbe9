# services/promotion-service/src/apps/core/api/views/base.py
"""
Base Views and Mixins

Common functionality for Promotion Service API views.
"""

import logging
from uuid import UUID

from shared.common.authentication import resolve_actor
from shared.common.exceptions import (
    BadRequestException,
    ConflictException,
    DuplicatePendingClaimException,
    ForbiddenException,
    NotFoundException,
    ProgressBlockedException,
    UnauthorizedException,
)
from shared.common.middleware import get_client_ip

from ...services import (
    ConflictError,
    DuplicateClaimError,
    NotFoundError,
    PermissionDeniedError,
    ProgressBlockedError,
    PromotionServiceError,
    PromotionValidationError,
)

logger = logging.getLogger(__name__)


def to_api_exception(exc: PromotionServiceError):
    """Map a service layer exception to the shared API exception."""
    message = str(exc) or None

    if isinstance(exc, NotFoundError):
        return NotFoundException(detail=message)
    if isinstance(exc, DuplicateClaimError):
        return DuplicatePendingClaimException(detail=message)
    if isinstance(exc, ConflictError):
        return ConflictException(detail=message)
    if isinstance(exc, PermissionDeniedError):
        return ForbiddenException(detail=message)
    if isinstance(exc, ProgressBlockedError):
        return ProgressBlockedException(detail=message)
    if isinstance(exc, PromotionValidationError):
        return BadRequestException(detail=message, error_code='INVALID_STATE')
    return BadRequestException(detail=message)


class ActorMixin:
    """
    Mixin for extracting the acting user from the request.

    The user id comes from `resolve_actor`: the authenticated token user,
    or the gateway's X-User-ID header.
    """

    def get_actor_id(self) -> UUID:
        """
        Raises:
            UnauthorizedException: If the request carries no usable identity
        """
        actor = resolve_actor(self.request)
        if not actor:
            raise UnauthorizedException()

        try:
            return UUID(str(actor))
        except ValueError:
            raise UnauthorizedException(detail='Invalid user id format.')

    def get_client_context(self) -> dict:
        return {
            'ip': get_client_ip(self.request) or '',
            'user_agent': self.request.META.get('HTTP_USER_AGENT', ''),
        }


class ServiceExceptionMixin:
    """Convert service exceptions before DRF's exception handling runs."""

    def handle_exception(self, exc):
        if isinstance(exc, PromotionServiceError):
            logger.info(
                f"{type(exc).__name__} in {type(self).__name__}: {exc}",
                extra={'path': self.request.path}
            )
            exc = to_api_exception(exc)
        return super().handle_exception(exc)
