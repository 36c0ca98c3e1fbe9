# shared/common/exceptions.py
"""
API Exception Classes and the DRF Exception Handler

Every service raises these from its views so clients always receive the
same error envelope:

    {"success": false, "error": {"code", "message", "details", "request_id"}}
"""

import logging
import traceback
from typing import Dict, Any, Optional
from rest_framework import status
from rest_framework.response import Response
from rest_framework.exceptions import APIException
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from django.conf import settings

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class BaseAPIException(APIException):
    """Base class for API errors carrying a stable machine-readable code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An unexpected error occurred.'
    default_code = 'error'
    error_code = 'INTERNAL_ERROR'

    def __init__(
        self,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        error_code: Optional[str] = None,
        extra_data: Optional[Dict] = None
    ):
        super().__init__(detail=detail, code=code)
        self.error_code = error_code or self.error_code
        self.extra_data = extra_data or {}


# =============================================================================
# CLIENT ERRORS (4xx)
# =============================================================================

class BadRequestException(BaseAPIException):
    """400 Bad Request"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bad request.'
    default_code = 'bad_request'
    error_code = 'BAD_REQUEST'


class ValidationException(BaseAPIException):
    """400 Validation Error with field-level details"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Validation error.'
    default_code = 'validation_error'
    error_code = 'VALIDATION_ERROR'

    def __init__(self, errors: Dict[str, Any], detail: str = None):
        super().__init__(detail=detail)
        self.extra_data = {'errors': errors}


class UnauthorizedException(BaseAPIException):
    """401 Unauthorized"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Authentication credentials were not provided or are invalid.'
    default_code = 'unauthorized'
    error_code = 'UNAUTHORIZED'


class ForbiddenException(BaseAPIException):
    """403 Forbidden"""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'
    error_code = 'FORBIDDEN'


class NotFoundException(BaseAPIException):
    """404 Not Found"""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'The requested resource was not found.'
    default_code = 'not_found'
    error_code = 'NOT_FOUND'


class ConflictException(BaseAPIException):
    """409 Conflict"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A conflict occurred with the current state of the resource.'
    default_code = 'conflict'
    error_code = 'CONFLICT'


class DuplicatePendingClaimException(ConflictException):
    """A pending claim already occupies the mission slot"""
    default_detail = 'A pending claim already exists for this mission.'
    error_code = 'DUPLICATE_PENDING_CLAIM'


class ProgressBlockedException(BaseAPIException):
    """The user's promotion progress for the club is blocked"""
    status_code = status.HTTP_423_LOCKED
    default_detail = 'Promotion progress for this club is blocked.'
    default_code = 'locked'
    error_code = 'PROGRESS_BLOCKED'


# =============================================================================
# EXCEPTION HANDLER
# =============================================================================

def _error_body(code: str, message: str, request_id: Optional[str], details=None) -> Dict:
    error = {
        'code': code,
        'message': message,
        'request_id': request_id,
    }
    if details:
        error['details'] = details
    return {'success': False, 'error': error}


def custom_exception_handler(exc, context) -> Optional[Response]:
    """
    DRF exception handler producing the shared error envelope.

    Wired through REST_FRAMEWORK['EXCEPTION_HANDLER'].
    """
    request = context.get('request')
    request_id = getattr(request, 'request_id', None) if request else None

    # Imported here: rest_framework.views loads the DRF settings, which import
    # this package (authentication classes), so a module-level import cycles.
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)

    if response is not None:
        return format_error_response(exc, response, request_id)

    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages}
        return Response(
            _error_body('VALIDATION_ERROR', 'Validation error', request_id, errors),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, Http404):
        return Response(
            _error_body('NOT_FOUND', str(exc) or 'Resource not found', request_id),
            status=status.HTTP_404_NOT_FOUND
        )

    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            'request_id': request_id,
            'exception_type': type(exc).__name__,
        }
    )

    if settings.DEBUG:
        body = _error_body('INTERNAL_ERROR', str(exc), request_id)
        body['error']['type'] = type(exc).__name__
        body['error']['traceback'] = traceback.format_exc().split('\n')
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(
        _error_body(
            'INTERNAL_ERROR',
            'An unexpected error occurred. Please try again later.',
            request_id
        ),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def format_error_response(exc, response: Response, request_id: str = None) -> Response:
    """Rewrite a DRF-produced response into the shared envelope."""
    error_code = getattr(exc, 'error_code', None) or _default_code(response.status_code)
    extra_data = getattr(exc, 'extra_data', {})

    details = None
    if extra_data.get('errors'):
        details = extra_data['errors']
    elif isinstance(response.data, dict) and 'detail' not in response.data:
        # Field-level validation errors from serializers
        details = response.data

    response.data = _error_body(error_code, get_error_message(exc, response), request_id, details)
    return response


def _default_code(status_code: int) -> str:
    return {
        status.HTTP_400_BAD_REQUEST: 'VALIDATION_ERROR',
        status.HTTP_401_UNAUTHORIZED: 'UNAUTHORIZED',
        status.HTTP_403_FORBIDDEN: 'FORBIDDEN',
        status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
        status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
    }.get(status_code, 'ERROR')


def get_error_message(exc, response: Response) -> str:
    """Extract a human-readable message from the exception or response."""
    if hasattr(exc, 'detail'):
        if isinstance(exc.detail, str):
            return exc.detail
        if isinstance(exc.detail, list) and exc.detail:
            return str(exc.detail[0])
        if isinstance(exc.detail, dict):
            return 'Validation error' if 'detail' not in exc.detail else str(exc.detail['detail'])

    if isinstance(response.data, dict):
        return response.data.get('detail', str(response.data))

    return str(response.data)
