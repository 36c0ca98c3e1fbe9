# services/promotion-service/src/apps/core/api/views/progress_views.py
"""
Progress Views

The user's own promotion progress: summaries, club ladders and claim
submission.
"""

import logging

from rest_framework import status, viewsets
from rest_framework.response import Response

from ...services import ClaimService, ProgressService
from ..serializers import (
    ClaimSerializer,
    ClaimSubmitSerializer,
    ProgressDetailSerializer,
    ProgressSummarySerializer,
)
from .base import ActorMixin, ServiceExceptionMixin

logger = logging.getLogger(__name__)


class ProgressViewSet(ActorMixin, ServiceExceptionMixin, viewsets.ViewSet):
    """
    ViewSet for the acting user's promotion progress.

    Endpoints:
    - my: Summaries of every club the user progresses in
    - levels: Full ladder for one club (created on first access)
    - submit_claim: Submit evidence for a mission of a club
    """

    def my(self, request):
        """List the user's progress summaries, most recently updated first."""
        summaries = ProgressService.get_user_summaries(self.get_actor_id())
        return Response(ProgressSummarySerializer(summaries, many=True).data)

    def levels(self, request, club_id=None):
        """Get the user's full ladder for a club."""
        progress = ProgressService.get_club_progress(self.get_actor_id(), club_id)
        return Response(ProgressDetailSerializer(progress).data)

    def submit_claim(self, request, club_id=None):
        """Submit a claim for an approval-gated mission."""
        serializer = ClaimSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        claim = ClaimService().submit_claim(
            user_id=self.get_actor_id(),
            club_id=club_id,
            **serializer.validated_data,
            **self.get_client_context()
        )

        return Response(ClaimSerializer(claim).data, status=status.HTTP_201_CREATED)
