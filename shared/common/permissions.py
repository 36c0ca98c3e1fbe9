# shared/common/permissions.py
"""
Permission Classes for Role-Based Access Control
"""

from typing import Optional
from rest_framework import permissions
from rest_framework.request import Request
import logging

from .authentication import resolve_actor

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'admin'
CLUB_ROLE = 'club'


class HasActor(permissions.BasePermission):
    """Allow requests that resolve to a user id (token or gateway header)"""

    message = 'Authentication credentials were not provided.'

    def has_permission(self, request: Request, view) -> bool:
        return resolve_actor(request) is not None


def can_manage_club(user, club_id: Optional[str]) -> bool:
    """
    Whether `user` may review claims and edit level templates of a club.

    Admins and club accounts manage every club; other users only the club
    bound to their token (or the club whose id is their own account id).
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return False

    roles = {str(r).lower() for r in (getattr(user, 'roles', None) or [])}
    if ADMIN_ROLE in roles or CLUB_ROLE in roles:
        return True

    if not club_id:
        return False

    user_club = getattr(user, 'club_id', None)
    if user_club and str(user_club) == str(club_id):
        return True

    user_id = getattr(user, 'id', None)
    return bool(user_id) and str(user_id) == str(club_id)


class IsClubManager(permissions.BasePermission):
    """
    Club staff permission.

    The club is read from the `club_id` URL kwarg for has_permission, and
    from the object's `club_id` attribute for has_object_permission.
    """

    message = 'You do not have permission to manage this club.'
    club_kwarg = 'club_id'

    def has_permission(self, request: Request, view) -> bool:
        if not request.user or not request.user.is_authenticated:
            return False

        club_id = view.kwargs.get(self.club_kwarg)
        if club_id is None:
            # Object-level check decides
            return True

        allowed = can_manage_club(request.user, club_id)
        if not allowed:
            logger.warning(
                f"Club management denied for user {getattr(request.user, 'id', None)} "
                f"on club {club_id}"
            )
        return allowed

    def has_object_permission(self, request: Request, view, obj) -> bool:
        return can_manage_club(request.user, getattr(obj, 'club_id', None))
