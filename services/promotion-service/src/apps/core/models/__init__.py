# services/promotion-service/src/apps/core/models/__init__.py
"""
Promotion Service Models

- Level templates (global and per-club ladders)
- Per user, per club progress documents
- Approval claims
"""

from .template import PromotionLevelTemplate, validate_missions
from .progress import UserClubPromotionProgress, COUNTER_FIELDS, PLATFORM_COUNTER_FIELDS
from .claim import PromotionClaim

__all__ = [
    'PromotionLevelTemplate',
    'validate_missions',
    'UserClubPromotionProgress',
    'COUNTER_FIELDS',
    'PLATFORM_COUNTER_FIELDS',
    'PromotionClaim',
]
