# services/promotion-service/src/apps/core/tests/factories.py
"""
Test data helpers.
"""

import uuid

from apps.core.models import PromotionLevelTemplate


class MockUser:
    """Mock user object for testing."""

    def __init__(self, user_id: str = None, roles=None, club_id=None, is_authenticated: bool = True):
        self.id = user_id or str(uuid.uuid4())
        self.email = f"user-{self.id[:8]}@test.com"
        self.roles = roles or []
        self.club_id = str(club_id) if club_id else None
        self.is_authenticated = is_authenticated


def make_template(level_number, missions, reward_title, club_id=None, **kwargs):
    """Create an active level template, global unless `club_id` is given."""
    return PromotionLevelTemplate.objects.create(
        scope=PromotionLevelTemplate.Scope.CLUB if club_id else PromotionLevelTemplate.Scope.GLOBAL,
        club_id=club_id,
        level_number=level_number,
        title=kwargs.pop('title', f"Level {level_number}"),
        missions=missions,
        reward={'type': kwargs.pop('reward_type', 'custom'), 'title': reward_title},
        **kwargs
    )
