# services/promotion-service/src/apps/core/api/serializers/template_serializers.py
"""
Template Serializers

Serializers for the club level ladder endpoints.
"""

from rest_framework import serializers

from ...constants import MissionType, RewardType, MIN_LEVEL_NUMBER, MAX_LEVEL_NUMBER
from ...models import PromotionLevelTemplate


class MissionTemplateSerializer(serializers.Serializer):
    """One mission of a level template."""

    type = serializers.ChoiceField(choices=MissionType.choices)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    target = serializers.IntegerField(min_value=1, default=1)
    params = serializers.DictField(required=False, default=dict)
    requires_approval = serializers.BooleanField(default=False)
    order = serializers.IntegerField(min_value=0, required=False)
    active = serializers.BooleanField(default=True)


class RewardSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=RewardType.choices, default=RewardType.CUSTOM)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    value = serializers.JSONField(required=False, allow_null=True, default=None)
    meta = serializers.DictField(required=False, default=dict)


class LevelTemplateSerializer(serializers.ModelSerializer):
    """Read serializer for level templates."""

    class Meta:
        model = PromotionLevelTemplate
        fields = [
            'id', 'scope', 'club_id', 'level_number', 'title', 'description',
            'missions', 'reward', 'is_active', 'version',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class LevelTemplateInputSerializer(serializers.Serializer):
    """One level of a club ladder upload."""

    level_number = serializers.IntegerField(min_value=MIN_LEVEL_NUMBER, max_value=MAX_LEVEL_NUMBER)
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    missions = MissionTemplateSerializer(many=True, allow_empty=False)
    reward = RewardSerializer()

    def validate_missions(self, value):
        # Mission keys are derived from type and order, so they must not collide
        for index, mission in enumerate(value, start=1):
            mission.setdefault('order', index)
        slots = [(m['type'], m['order']) for m in value]
        if len(slots) != len(set(slots)):
            raise serializers.ValidationError('Missions must have distinct (type, order) pairs.')
        return value


class ClubLadderSerializer(serializers.Serializer):
    """Payload for replacing a club's override ladder."""

    levels = LevelTemplateInputSerializer(many=True, allow_empty=False)

    def validate_levels(self, value):
        numbers = [level['level_number'] for level in value]
        if len(numbers) != len(set(numbers)):
            raise serializers.ValidationError('Level numbers must be unique.')
        return value
