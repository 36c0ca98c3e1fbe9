# services/promotion-service/src/apps/core/api/serializers/claim_serializers.py
"""
Claim Serializers

Serializers for claim submission and review endpoints.
"""

from rest_framework import serializers

from ...constants import EvidenceType, MissionType, MIN_LEVEL_NUMBER, MAX_LEVEL_NUMBER
from ...models import PromotionClaim


class EvidenceSerializer(serializers.Serializer):
    """One piece of evidence attached to a claim."""

    type = serializers.ChoiceField(choices=EvidenceType.choices, default=EvidenceType.PHOTO)
    url = serializers.URLField(required=False, allow_blank=True)
    qr_id = serializers.CharField(required=False, allow_blank=True, max_length=200)
    payload = serializers.JSONField(required=False)
    text = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    meta = serializers.DictField(required=False)

    def validate(self, attrs):
        evidence_type = attrs.get('type')
        if evidence_type == EvidenceType.PHOTO and not attrs.get('url'):
            raise serializers.ValidationError({'url': 'Photo evidence requires a url.'})
        if evidence_type == EvidenceType.QR_SCAN and not (attrs.get('qr_id') or attrs.get('payload')):
            raise serializers.ValidationError({'qr_id': 'QR evidence requires qr_id or payload.'})
        if evidence_type == EvidenceType.TEXT and not attrs.get('text'):
            raise serializers.ValidationError({'text': 'Text evidence requires text.'})
        return attrs


class EvidenceListField(serializers.ListField):
    """Accepts a list of evidence items or a single item."""

    child = EvidenceSerializer()

    def to_internal_value(self, data):
        if isinstance(data, dict):
            data = [data]
        return super().to_internal_value(data)


class ClaimSubmitSerializer(serializers.Serializer):
    """Serializer for submitting a claim."""

    level_number = serializers.IntegerField(min_value=MIN_LEVEL_NUMBER, max_value=MAX_LEVEL_NUMBER)
    mission_key = serializers.CharField(max_length=100)
    mission_type = serializers.ChoiceField(choices=MissionType.choices)
    evidence = EvidenceListField(required=False, default=list)
    user_note = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)
    event_id = serializers.UUIDField(required=False, allow_null=True, default=None)


class ClaimReviewSerializer(serializers.Serializer):
    """Serializer for approving or rejecting a claim."""

    review_note = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)
    reward_granted = serializers.BooleanField(required=False, default=False)


class ClaimSerializer(serializers.ModelSerializer):
    """Read serializer for claims."""

    class Meta:
        model = PromotionClaim
        fields = [
            'id', 'user_id', 'club_id', 'event_id',
            'level_number', 'mission_type', 'mission_key', 'status',
            'evidence', 'user_note',
            'reviewed_by', 'reviewed_at', 'review_note',
            'reward_granted', 'reward_granted_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields
