# shared/common/authentication.py
"""
JWT Authentication and Actor Resolution

The identity provider bridge (Firebase, legacy accounts) lives in the
gateway; services only see either a signed JWT or the gateway's
X-User-ID header. `resolve_actor` is the one place that turns a request
into a stable user id.
"""

import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple
from django.conf import settings
from rest_framework import authentication, exceptions
from rest_framework.request import Request

logger = logging.getLogger(__name__)

USER_ID_HEADER = 'X-User-ID'


class JWTAuthentication(authentication.BaseAuthentication):
    """
    Bearer token authentication.

    Tokens are signed with JWT_SECRET_KEY using JWT_ALGORITHM and must carry
    `sub`, `iat` and `exp` claims.
    """

    keyword = 'Bearer'

    def authenticate(self, request: Request) -> Optional[Tuple[Any, Dict]]:
        auth_header = authentication.get_authorization_header(request)

        if not auth_header:
            return None

        try:
            auth_parts = auth_header.decode('utf-8').split()
        except UnicodeDecodeError:
            raise exceptions.AuthenticationFailed('Invalid token header encoding')

        if not auth_parts or auth_parts[0].lower() != self.keyword.lower():
            return None

        if len(auth_parts) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header format')

        return self.authenticate_token(auth_parts[1])

    def authenticate_token(self, token: str) -> Tuple['TokenUser', Dict]:
        """Validate and decode a JWT."""
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
                options={'require': ['exp', 'iat', 'sub']},
            )
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed('Token has expired')
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            raise exceptions.AuthenticationFailed('Invalid token')

        return TokenUser(payload), payload

    def authenticate_header(self, request: Request) -> str:
        return self.keyword


class TokenUser:
    """
    User built from a JWT payload.

    `club_id` is set for staff accounts that belong to a single club.
    """

    def __init__(self, payload: Dict):
        self.payload = payload
        self.id = str(payload.get('sub'))
        self.email = payload.get('email')
        self.club_id = payload.get('club_id')
        self.roles = payload.get('roles', [])
        self.permissions = payload.get('permissions', [])
        self.is_active = True
        self.is_authenticated = True
        self.is_anonymous = False

    def __str__(self) -> str:
        return f"TokenUser({self.id})"

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def has_any_role(self, roles: list) -> bool:
        return bool(set(self.roles) & set(roles))


def resolve_actor(request) -> Optional[str]:
    """
    Return the acting user's id for a request, or None.

    An authenticated user on the request wins; otherwise the id forwarded by
    the gateway in the X-User-ID header is used.
    """
    user = getattr(request, 'user', None)
    if user is not None and getattr(user, 'is_authenticated', False):
        user_id = getattr(user, 'id', None)
        if user_id:
            return str(user_id)

    header_value = request.headers.get(USER_ID_HEADER)
    if header_value:
        return header_value.strip() or None

    return None


def generate_access_token(
    user_id: str,
    roles: list = None,
    club_id: str = None,
    email: str = None,
    lifetime: timedelta = None,
) -> str:
    """Issue a signed access token (used by tooling and tests)."""
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user_id),
        'email': email,
        'roles': roles or [],
        'club_id': str(club_id) if club_id else None,
        'iat': now,
        'exp': now + (lifetime or settings.JWT_ACCESS_TOKEN_LIFETIME),
        'type': 'access',
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
