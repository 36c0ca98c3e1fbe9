# services/promotion-service/src/apps/core/models/progress.py
"""
User Club Promotion Progress Model

One row per (user, club). The ladder itself is materialized from the club's
templates into the `levels` JSON document the first time the user interacts
with the club, and is mutated in place by the progress engine afterwards.

Activity counters live in their own integer columns so they can be bumped
with F() expressions without rewriting the document.
"""

import uuid
from typing import Any, Dict, Optional

from django.db import models

COUNTER_FIELDS = (
    'attendances_in_club',
    'photos_uploaded_in_club',
    'qr_scans_in_club',
    'attendances_platform',
    'followed_users',
    'stamps_in_current_event',
)

# Counters that track the user across all clubs
PLATFORM_COUNTER_FIELDS = ('attendances_platform', 'followed_users')


class UserClubPromotionProgress(models.Model):
    """
    Per user, per club promotion state.

    levels: [{level_number, title, description, status, missions: [...],
    reward, progress, completed_at}, ...] ordered by level_number.
    """

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        BLOCKED = 'blocked', 'Blocked'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user_id = models.UUIDField(db_index=True)
    club_id = models.UUIDField(db_index=True)

    # Snapshot of the level being worked on
    current_level = models.PositiveIntegerField(default=1)
    current_progress = models.FloatField(default=0)
    current_reward_title = models.CharField(max_length=200, blank=True, default='')

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.ACTIVE
    )

    levels = models.JSONField(default=list)

    # Counters
    attendances_in_club = models.PositiveIntegerField(default=0)
    photos_uploaded_in_club = models.PositiveIntegerField(default=0)
    qr_scans_in_club = models.PositiveIntegerField(default=0)
    attendances_platform = models.PositiveIntegerField(default=0)
    followed_users = models.PositiveIntegerField(default=0)
    stamps_in_current_event = models.PositiveIntegerField(default=0)

    pending_claims_count = models.PositiveIntegerField(default=0)

    last_event_id = models.UUIDField(blank=True, null=True)
    # Event the stamp counter belongs to
    stamps_event_id = models.UUIDField(blank=True, null=True)
    last_activity_at = models.DateTimeField(blank=True, null=True)

    # Incremented on every engine write
    revision = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_club_promotion_progress'
        ordering = ['-updated_at']
        indexes = [
            models.Index(fields=['user_id', 'updated_at']),
            models.Index(fields=['club_id', 'current_level']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['user_id', 'club_id'],
                name='unique_user_club_progress'
            )
        ]

    def __str__(self):
        return f"{self.user_id} @ {self.club_id} - level {self.current_level}"

    @property
    def counters(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in COUNTER_FIELDS}

    @property
    def is_blocked(self) -> bool:
        return self.status == self.Status.BLOCKED

    @property
    def current_level_data(self) -> Optional[Dict[str, Any]]:
        for level in self.levels or []:
            if int(level.get('level_number', 0)) == int(self.current_level):
                return level
        return None

    @property
    def summary_description(self) -> str:
        if self.pending_claims_count > 0:
            return f"You have {self.pending_claims_count} pending validation(s)"
        if self.current_reward_title:
            return f"Reward: {self.current_reward_title}"
        return ''
