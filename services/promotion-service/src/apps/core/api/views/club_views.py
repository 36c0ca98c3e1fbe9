# services/promotion-service/src/apps/core/api/views/club_views.py
"""
Club Views

Club staff endpoints: the review queue and the club's level ladder.
"""

import logging

from rest_framework import generics
from rest_framework.response import Response
from rest_framework.views import APIView

from shared.common.exceptions import ValidationException
from shared.common.permissions import IsClubManager

from ...models import PromotionClaim
from ...services import ClaimService, TemplateService
from ..serializers import ClaimSerializer, ClubLadderSerializer, LevelTemplateSerializer
from .base import ActorMixin, ServiceExceptionMixin

logger = logging.getLogger(__name__)


class ClubClaimListView(ActorMixin, ServiceExceptionMixin, generics.ListAPIView):
    """
    Claims of a club, newest first.

    `?status=` defaults to `pending`; pass `status=all` for every status.
    """

    serializer_class = ClaimSerializer
    permission_classes = [IsClubManager]
    filter_backends = []

    def get_queryset(self):
        status = self.request.query_params.get('status') or PromotionClaim.Status.PENDING
        if status not in PromotionClaim.Status.values and status != 'all':
            raise ValidationException({'status': f"Unknown status {status!r}"})

        return ClaimService().list_club_claims(
            club_id=self.kwargs['club_id'],
            status=None if status == 'all' else status,
        )


class ClubLevelsView(ActorMixin, ServiceExceptionMixin, APIView):
    """
    The club's own level ladder.

    GET lists the club-scoped templates; PUT replaces them.
    """

    permission_classes = [IsClubManager]

    def get(self, request, club_id=None):
        templates = TemplateService.list_club_templates(club_id)
        return Response({
            'club_id': str(club_id),
            'override_mode': TemplateService.get_override_mode(),
            'levels': LevelTemplateSerializer(templates, many=True).data,
        })

    def put(self, request, club_id=None):
        serializer = ClubLadderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        templates = TemplateService.upsert_club_templates(
            club_id, serializer.validated_data['levels']
        )

        logger.info(
            f"Club ladder replaced for club {club_id} by {self.get_actor_id()}: {len(templates)} levels"
        )
        return Response({
            'club_id': str(club_id),
            'override_mode': TemplateService.get_override_mode(),
            'levels': LevelTemplateSerializer(templates, many=True).data,
        })
