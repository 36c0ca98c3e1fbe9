# services/promotion-service/src/apps/core/models/template.py
"""
Promotion Level Template Model

A template defines one level of a club's promotion ladder: the missions a
user has to complete and the reward granted when the level is done.

Templates are either global (the platform's default ladder) or scoped to a
single club. Missions and the reward are stored as JSON so a level and its
missions are versioned together.
"""

import uuid
from typing import Any, Dict, List

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from ..constants import (
    MissionType,
    RewardType,
    MIN_LEVEL_NUMBER,
    MAX_LEVEL_NUMBER,
)


class PromotionLevelTemplateQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def global_scope(self):
        return self.filter(scope=PromotionLevelTemplate.Scope.GLOBAL)

    def for_club(self, club_id):
        return self.filter(scope=PromotionLevelTemplate.Scope.CLUB, club_id=club_id)


class PromotionLevelTemplate(models.Model):
    """
    One level of a promotion ladder.

    missions: [{type, title, description, target, params, requires_approval,
    order, active}, ...]
    reward: {type, title, description, value, meta}
    """

    class Scope(models.TextChoices):
        GLOBAL = 'global', 'Global'
        CLUB = 'club', 'Club'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    scope = models.CharField(
        max_length=10,
        choices=Scope.choices,
        default=Scope.GLOBAL,
        db_index=True
    )
    club_id = models.UUIDField(blank=True, null=True, db_index=True)

    level_number = models.PositiveIntegerField(
        validators=[
            MinValueValidator(MIN_LEVEL_NUMBER),
            MaxValueValidator(MAX_LEVEL_NUMBER),
        ],
        db_index=True
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')

    missions = models.JSONField(default=list)
    reward = models.JSONField(default=dict)

    is_active = models.BooleanField(default=True)
    version = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PromotionLevelTemplateQuerySet.as_manager()

    class Meta:
        db_table = 'promotion_level_templates'
        ordering = ['scope', 'club_id', 'level_number']
        indexes = [
            models.Index(fields=['scope', 'is_active']),
            models.Index(fields=['club_id', 'is_active']),
        ]
        constraints = [
            # NULL club ids never collide in SQL, so global levels get their own constraint
            models.UniqueConstraint(
                fields=['level_number'],
                condition=models.Q(scope='global'),
                name='unique_global_level_number'
            ),
            models.UniqueConstraint(
                fields=['club_id', 'level_number'],
                condition=models.Q(scope='club'),
                name='unique_club_level_number'
            ),
        ]

    def __str__(self):
        owner = 'global' if self.scope == self.Scope.GLOBAL else f"club {self.club_id}"
        return f"Level {self.level_number} ({owner}): {self.title}"

    def clean(self):
        errors = {}

        if self.scope == self.Scope.CLUB and not self.club_id:
            errors['club_id'] = 'Club-scoped templates require a club.'
        if self.scope == self.Scope.GLOBAL and self.club_id:
            errors['club_id'] = 'Global templates cannot reference a club.'

        mission_errors = validate_missions(self.missions)
        if mission_errors:
            errors['missions'] = mission_errors

        reward_type = (self.reward or {}).get('type', RewardType.CUSTOM)
        if reward_type not in RewardType.values:
            errors['reward'] = f"Unknown reward type: {reward_type}"
        elif not (self.reward or {}).get('title'):
            errors['reward'] = 'Reward title is required.'

        if errors:
            raise ValidationError(errors)

    @property
    def reward_title(self) -> str:
        return (self.reward or {}).get('title', '')

    def active_missions(self) -> List[Dict[str, Any]]:
        """Active missions ordered by their `order` field."""
        missions = [m for m in (self.missions or []) if m.get('active', True)]
        return sorted(missions, key=lambda m: m.get('order') or 0)


def validate_missions(missions) -> List[str]:
    """Return a list of problems with a template's mission list."""
    if not isinstance(missions, list):
        return ['Missions must be a list.']

    problems = []
    for index, mission in enumerate(missions):
        if not isinstance(mission, dict):
            problems.append(f"Mission {index}: must be an object.")
            continue
        if mission.get('type') not in MissionType.values:
            problems.append(f"Mission {index}: unknown type {mission.get('type')!r}.")
        if not mission.get('title'):
            problems.append(f"Mission {index}: title is required.")
        target = mission.get('target', 1)
        if not isinstance(target, int) or isinstance(target, bool) or target < 1:
            problems.append(f"Mission {index}: target must be an integer >= 1.")
    return problems
