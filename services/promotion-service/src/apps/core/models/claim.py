# services/promotion-service/src/apps/core/models/claim.py
"""
Promotion Claim Model

Evidence submitted by a user for a mission that needs club approval.
A claim is reviewed once (approved, rejected or cancelled by its owner);
after that only the reward-grant bookkeeping may change.
"""

import uuid

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone

from ..constants import MissionType, MIN_LEVEL_NUMBER, MAX_LEVEL_NUMBER


class PromotionClaim(models.Model):
    """
    A user's request to have a mission validated.

    evidence: [{type, url, qr_id, payload, text, meta}, ...]
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'
        CANCELLED = 'cancelled', 'Cancelled'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user_id = models.UUIDField(db_index=True)
    club_id = models.UUIDField(db_index=True)
    event_id = models.UUIDField(blank=True, null=True, db_index=True)

    # Mission slot
    level_number = models.PositiveIntegerField(
        validators=[
            MinValueValidator(MIN_LEVEL_NUMBER),
            MaxValueValidator(MAX_LEVEL_NUMBER),
        ],
        db_index=True
    )
    mission_type = models.CharField(max_length=50, choices=MissionType.choices)
    mission_key = models.CharField(max_length=100)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    evidence = models.JSONField(default=list)
    user_note = models.TextField(blank=True, default='')

    # Review
    reviewed_by = models.CharField(max_length=64, blank=True, null=True)
    reviewed_at = models.DateTimeField(blank=True, null=True)
    review_note = models.TextField(blank=True, default='')

    # Reward handed out by the club
    reward_granted = models.BooleanField(default=False)
    reward_granted_at = models.DateTimeField(blank=True, null=True)

    # Audit
    ip = models.CharField(max_length=64, blank=True, default='')
    user_agent = models.CharField(max_length=500, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'promotion_claims'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['club_id', 'status', 'created_at']),
            models.Index(fields=['user_id', 'club_id', 'status']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['user_id', 'club_id', 'level_number', 'mission_key'],
                condition=models.Q(status='pending'),
                name='unique_pending_claim_per_mission'
            )
        ]

    def __str__(self):
        return f"Claim {self.mission_key} by {self.user_id} ({self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING

    @property
    def is_resolved(self) -> bool:
        return not self.is_pending

    def resolve(self, status: str, reviewer_id=None, note: str = '') -> None:
        """Move a pending claim to a terminal status (caller saves)."""
        self.status = status
        self.reviewed_by = str(reviewer_id) if reviewer_id else None
        self.reviewed_at = timezone.now()
        self.review_note = note or ''

    def grant_reward(self) -> bool:
        """Record the reward hand-out; returns False if already granted."""
        if self.reward_granted:
            return False
        self.reward_granted = True
        self.reward_granted_at = timezone.now()
        return True
