# services/promotion-service/src/apps/core/events/__init__.py
"""
Promotion Service Events

Outbound event publishers and inbound event handlers.
"""

from .publishers import (
    EventPublisher,
    get_publisher,
    publish_claim_submitted,
    publish_claim_approved,
    publish_claim_rejected,
    publish_claim_cancelled,
    publish_level_completed,
)

from .handlers import (
    handle_attendance_recorded,
    handle_photo_uploaded,
    handle_qr_scanned,
    handle_user_followed,
    handle_stamp_awarded,
    dispatch_event,
)

__all__ = [
    # Publishers
    'EventPublisher',
    'get_publisher',
    'publish_claim_submitted',
    'publish_claim_approved',
    'publish_claim_rejected',
    'publish_claim_cancelled',
    'publish_level_completed',

    # Handlers
    'handle_attendance_recorded',
    'handle_photo_uploaded',
    'handle_qr_scanned',
    'handle_user_followed',
    'handle_stamp_awarded',
    'dispatch_event',
]
