# services/promotion-service/src/apps/core/events/handlers.py
"""
Event Handlers

Functions for handling events from other services (events, photos, QR
codes, social graph). Each handler returns True when the event was handled.
"""

import logging
from typing import Any, Dict

from apps.core.constants import ActivityKind

logger = logging.getLogger(__name__)


def _record(activity: str, event_data: Dict[str, Any], club_required: bool = True) -> bool:
    from ..services import ActivityService, PromotionServiceError

    user_id = event_data.get('user_id')
    club_id = event_data.get('club_id')

    if not user_id or (club_required and not club_id):
        logger.warning(
            f"Ignoring {activity} event without user or club",
            extra={'event_data': event_data}
        )
        return False

    try:
        ActivityService.record_activity(
            user_id=user_id,
            activity=activity,
            club_id=club_id,
            event_id=event_data.get('event_id'),
            amount=event_data.get('amount', 1),
        )
        return True

    except (PromotionServiceError, TypeError, ValueError) as e:
        logger.error(
            f"Error handling {activity} event: {e}",
            extra={'event_data': event_data}
        )
        return False


def handle_attendance_recorded(event_data: Dict[str, Any]) -> bool:
    """
    Handle attendance recorded event from the Event Service.

    Args:
        event_data: {user_id, club_id, event_id}

    Returns:
        True if handled successfully
    """
    return _record(ActivityKind.ATTENDANCE, event_data)


def handle_photo_uploaded(event_data: Dict[str, Any]) -> bool:
    """Handle photo uploaded event from the Media Service."""
    return _record(ActivityKind.PHOTO_UPLOAD, event_data)


def handle_qr_scanned(event_data: Dict[str, Any]) -> bool:
    """Handle venue QR scanned event."""
    return _record(ActivityKind.QR_SCAN, event_data)


def handle_user_followed(event_data: Dict[str, Any]) -> bool:
    """
    Handle user followed event from the Social Service.

    Follows are not tied to a club; every progress row of the follower is
    updated.
    """
    return _record(ActivityKind.FOLLOW, event_data, club_required=False)


def handle_stamp_awarded(event_data: Dict[str, Any]) -> bool:
    """Handle stamp awarded event (stamps competition at an event)."""
    return _record(ActivityKind.STAMP, event_data)


EVENT_HANDLERS = {
    'event.attendance.recorded': handle_attendance_recorded,
    'media.photo.uploaded': handle_photo_uploaded,
    'venue.qr.scanned': handle_qr_scanned,
    'social.user.followed': handle_user_followed,
    'event.stamp.awarded': handle_stamp_awarded,
}


def dispatch_event(event_type: str, event_data: Dict[str, Any]) -> bool:
    """Route an inbound event to its handler; unknown events are ignored."""
    handler = EVENT_HANDLERS.get(event_type)
    if handler is None:
        logger.debug(f"No handler for event {event_type}")
        return False
    return handler(event_data)
