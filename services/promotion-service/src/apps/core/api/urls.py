# services/promotion-service/src/apps/core/api/urls.py
"""
Promotion Service API URL Configuration

All API endpoints for the Promotion Service, mounted under
/api/v1/promotions/.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    ProgressViewSet,
    ClaimViewSet,
    ClubClaimListView,
    ClubLevelsView,
)

# =============================================================================
# Router
# =============================================================================

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(r'claims', ClaimViewSet, basename='claim')

# =============================================================================
# User Progress Routes
# =============================================================================

progress_urlpatterns = [
    # /my/
    path(
        'my/',
        ProgressViewSet.as_view({'get': 'my'}),
        name='progress-my'
    ),
    # /{club_id}/levels/
    path(
        '<uuid:club_id>/levels/',
        ProgressViewSet.as_view({'get': 'levels'}),
        name='progress-levels'
    ),
    # /{club_id}/claims/
    path(
        '<uuid:club_id>/claims/',
        ProgressViewSet.as_view({'post': 'submit_claim'}),
        name='progress-submit-claim'
    ),
]

# =============================================================================
# Club Staff Routes
# =============================================================================

club_urlpatterns = [
    path(
        'clubs/<uuid:club_id>/claims/',
        ClubClaimListView.as_view(),
        name='club-claims'
    ),
    path(
        'clubs/<uuid:club_id>/levels/',
        ClubLevelsView.as_view(),
        name='club-levels'
    ),
]

# =============================================================================
# Combined URL Patterns
# =============================================================================

app_name = 'promotions'

urlpatterns = [
    *progress_urlpatterns,
    *club_urlpatterns,
    path('', include(router.urls)),
]
