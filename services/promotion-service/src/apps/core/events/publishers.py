# services/promotion-service/src/apps/core/events/publishers.py
"""
Event Publishers

Functions for publishing promotion service events to the message broker.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger(__name__)

SERVICE_NAME = 'promotion-service'


class EventPublisher:
    """
    Event publisher for the promotion service.

    Events are written to the `promotion.events` logger as JSON; the log
    shipper forwards them to the broker.
    """

    def __init__(self, exchange: str = 'promotion_events'):
        self.exchange = exchange
        self.event_logger = logging.getLogger('promotion.events')

    def publish(self, event_type: str, data: Dict[str, Any], routing_key: str = None) -> bool:
        """
        Publish an event.

        Args:
            event_type: Type of event
            data: Event data
            routing_key: Optional routing key, defaults to the event type

        Returns:
            True if published successfully
        """
        event = {
            'event_type': event_type,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'service': SERVICE_NAME,
            'exchange': self.exchange,
            'routing_key': routing_key or event_type,
            'data': data,
        }

        try:
            payload = json.dumps(event, default=str)
            self.event_logger.info(payload, extra={'event_type': event_type})
            logger.debug(f"Published event: {event_type}")
            return True

        except (TypeError, ValueError) as e:
            logger.error(
                f"Failed to publish event {event_type}: {e}",
                extra={'event_type': event_type}
            )
            return False


# Global publisher instance
_publisher = EventPublisher()


def get_publisher() -> EventPublisher:
    """Get the global event publisher instance."""
    return _publisher


def _claim_data(claim) -> Dict[str, Any]:
    return {
        'claim_id': claim.id,
        'user_id': claim.user_id,
        'club_id': claim.club_id,
        'event_id': claim.event_id,
        'level_number': claim.level_number,
        'mission_key': claim.mission_key,
        'mission_type': claim.mission_type,
        'status': claim.status,
    }


# =============================================================================
# Claim Events
# =============================================================================

def publish_claim_submitted(claim) -> bool:
    return get_publisher().publish(
        event_type='promotion.claim.submitted',
        data=_claim_data(claim),
    )


def publish_claim_approved(claim) -> bool:
    data = _claim_data(claim)
    data.update({
        'reviewed_by': claim.reviewed_by,
        'reward_granted': claim.reward_granted,
    })
    return get_publisher().publish(
        event_type='promotion.claim.approved',
        data=data,
    )


def publish_claim_rejected(claim) -> bool:
    data = _claim_data(claim)
    data.update({
        'reviewed_by': claim.reviewed_by,
        'review_note': claim.review_note,
    })
    return get_publisher().publish(
        event_type='promotion.claim.rejected',
        data=data,
    )


def publish_claim_cancelled(claim) -> bool:
    return get_publisher().publish(
        event_type='promotion.claim.cancelled',
        data=_claim_data(claim),
    )


# =============================================================================
# Level Events
# =============================================================================

def publish_level_completed(progress, level: Dict[str, Any]) -> bool:
    """
    Publish level completed event.

    Clubs listen to this to hand out the level reward.
    """
    reward = level.get('reward') or {}
    return get_publisher().publish(
        event_type='promotion.level.completed',
        data={
            'progress_id': progress.id,
            'user_id': progress.user_id,
            'club_id': progress.club_id,
            'level_number': level.get('level_number'),
            'reward_type': reward.get('type'),
            'reward_title': reward.get('title'),
            'current_level': progress.current_level,
        },
    )
