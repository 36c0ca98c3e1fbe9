# services/promotion-service/src/apps/core/api/serializers/__init__.py
"""
Promotion Service API Serializers

Serializers for REST API data transformation.
"""

from .template_serializers import (
    MissionTemplateSerializer,
    RewardSerializer,
    LevelTemplateSerializer,
    LevelTemplateInputSerializer,
    ClubLadderSerializer,
)

from .progress_serializers import (
    ProgressSummarySerializer,
    ProgressDetailSerializer,
)

from .claim_serializers import (
    EvidenceSerializer,
    ClaimSubmitSerializer,
    ClaimReviewSerializer,
    ClaimSerializer,
)

__all__ = [
    # Templates
    'MissionTemplateSerializer',
    'RewardSerializer',
    'LevelTemplateSerializer',
    'LevelTemplateInputSerializer',
    'ClubLadderSerializer',

    # Progress
    'ProgressSummarySerializer',
    'ProgressDetailSerializer',

    # Claims
    'EvidenceSerializer',
    'ClaimSubmitSerializer',
    'ClaimReviewSerializer',
    'ClaimSerializer',
]
