# services/promotion-service/src/apps/core/api/views/claim_views.py
"""
Claim Views

ViewSets for the claim workflow: the owner's listing and cancellation, and
club review.
"""

import logging

from django_filters import rest_framework as filters
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from shared.common.permissions import HasActor, IsClubManager

from ...models import PromotionClaim
from ...services import ClaimService
from ..serializers import ClaimReviewSerializer, ClaimSerializer
from .base import ActorMixin, ServiceExceptionMixin

logger = logging.getLogger(__name__)


class ClaimFilter(filters.FilterSet):
    """Filter for claims."""

    status = filters.ChoiceFilter(choices=PromotionClaim.Status.choices)
    level_number = filters.NumberFilter()
    mission_type = filters.CharFilter()
    event_id = filters.UUIDFilter()
    reward_granted = filters.BooleanFilter()

    created_after = filters.DateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_before = filters.DateTimeFilter(field_name='created_at', lookup_expr='lte')

    class Meta:
        model = PromotionClaim
        fields = ['status', 'level_number', 'mission_type', 'event_id', 'reward_granted']


class ClaimViewSet(ActorMixin, ServiceExceptionMixin, viewsets.GenericViewSet):
    """
    ViewSet for claims addressed by id.

    Custom actions:
    - mine: The acting user's claims
    - cancel: Withdraw an own pending claim
    - approve / reject: Review a pending claim (club staff)
    - grant_reward: Record the reward hand-out of an approved claim (club staff)
    """

    queryset = PromotionClaim.objects.all()
    serializer_class = ClaimSerializer
    filterset_class = ClaimFilter
    lookup_value_regex = '[0-9a-fA-F-]{32,36}'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.claim_service = ClaimService()

    def get_permissions(self):
        if self.action in ('approve', 'reject', 'grant_reward'):
            return [IsClubManager()]
        return [HasActor()]

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """List the acting user's claims, optionally for one club."""
        queryset = self.claim_service.list_user_claims(
            user_id=self.get_actor_id(),
            club_id=request.query_params.get('club_id') or None,
        )
        queryset = self.filter_queryset(queryset)

        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(ClaimSerializer(page, many=True).data)
        return Response(ClaimSerializer(queryset, many=True).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Cancel an own pending claim."""
        claim = self.claim_service.cancel_claim(pk, self.get_actor_id())
        return Response(ClaimSerializer(claim).data)

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        """Approve a pending claim."""
        claim = self.get_object()
        serializer = ClaimReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        claim = self.claim_service.approve_claim(
            claim.id,
            reviewer_id=self.get_actor_id(),
            review_note=serializer.validated_data['review_note'],
            reward_granted=serializer.validated_data['reward_granted'],
        )
        return Response(ClaimSerializer(claim).data)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        """Reject a pending claim."""
        claim = self.get_object()
        serializer = ClaimReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        claim = self.claim_service.reject_claim(
            claim.id,
            reviewer_id=self.get_actor_id(),
            review_note=serializer.validated_data['review_note'],
        )
        return Response(ClaimSerializer(claim).data)

    @action(detail=True, methods=['post'], url_path='grant-reward')
    def grant_reward(self, request, pk=None):
        """Mark the reward of an approved claim as handed out."""
        claim = self.get_object()
        claim = self.claim_service.mark_reward_granted(claim.id, reviewer_id=self.get_actor_id())
        return Response(ClaimSerializer(claim).data)
