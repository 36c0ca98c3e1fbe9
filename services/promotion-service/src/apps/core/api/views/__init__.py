# services/promotion-service/src/apps/core/api/views/__init__.py
"""
Promotion Service API Views

ViewSets for REST API endpoints.
"""

from .progress_views import ProgressViewSet
from .claim_views import ClaimViewSet, ClaimFilter
from .club_views import ClubClaimListView, ClubLevelsView

__all__ = [
    'ProgressViewSet',
    'ClaimViewSet',
    'ClaimFilter',
    'ClubClaimListView',
    'ClubLevelsView',
]
