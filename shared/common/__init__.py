# Shared Common Library
# Authentication, permissions, exceptions, middleware and pagination used by
# every service of the platform.

__version__ = "1.0.0"

from .exceptions import (
    BaseAPIException,
    BadRequestException,
    ValidationException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    DuplicatePendingClaimException,
    ProgressBlockedException,
    custom_exception_handler,
)

from .authentication import (
    JWTAuthentication,
    TokenUser,
    resolve_actor,
)

from .permissions import (
    HasActor,
    IsClubManager,
    can_manage_club,
)

__all__ = [
    '__version__',

    # Exceptions
    'BaseAPIException',
    'BadRequestException',
    'ValidationException',
    'UnauthorizedException',
    'ForbiddenException',
    'NotFoundException',
    'ConflictException',
    'DuplicatePendingClaimException',
    'ProgressBlockedException',
    'custom_exception_handler',

    # Authentication
    'JWTAuthentication',
    'TokenUser',
    'resolve_actor',

    # Permissions
    'HasActor',
    'IsClubManager',
    'can_manage_club',
]
