# services/promotion-service/src/apps/core/api/serializers/progress_serializers.py
"""
Progress Serializers
"""

from rest_framework import serializers

from ...models import UserClubPromotionProgress


class ProgressSummarySerializer(serializers.Serializer):
    """Summary card of one club's progress (the `my/` listing)."""

    id = serializers.UUIDField()
    club_id = serializers.UUIDField()
    level = serializers.IntegerField()
    progress = serializers.FloatField()
    pending_claims_count = serializers.IntegerField()
    current_reward_title = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)


class ProgressDetailSerializer(serializers.ModelSerializer):
    """Full progress document with levels and missions."""

    counters = serializers.DictField(read_only=True)
    description = serializers.CharField(source='summary_description', read_only=True)

    class Meta:
        model = UserClubPromotionProgress
        fields = [
            'id', 'user_id', 'club_id',
            'current_level', 'current_progress', 'current_reward_title',
            'status', 'levels', 'counters', 'pending_claims_count',
            'description', 'last_event_id', 'stamps_event_id', 'last_activity_at', 'revision',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields
