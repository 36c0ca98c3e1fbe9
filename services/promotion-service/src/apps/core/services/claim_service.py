# services/promotion-service/src/apps/core/services/claim_service.py
"""
Claim Service

Submission and review of claims for missions that need club approval.

A claim moves pending -> approved | rejected | cancelled exactly once. The
matching mission in the user's progress document moves with it:

    submit:  in_progress | rejected -> pending
    cancel:  pending -> in_progress
    approve: pending -> approved -> completed (may complete the level)
    reject:  pending -> rejected
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.core.constants import LevelStatus, MissionStatus
from apps.core.events import publishers
from apps.core.models import PromotionClaim, UserClubPromotionProgress
from . import progress_engine as engine
from .progress_service import ProgressService

logger = logging.getLogger(__name__)


def normalize_evidence(evidence) -> List[Dict[str, Any]]:
    """Evidence is stored as a list; a single item is wrapped."""
    if not evidence:
        return []
    if isinstance(evidence, dict):
        return [evidence]
    return list(evidence)


class ClaimService:
    """
    Service class for promotion claims.

    Handles:
    - Claim submission by users
    - Cancellation by the claim owner
    - Approval, rejection and reward hand-out by club staff
    - Claim listings
    """

    # ==========================================================================
    # Submission
    # ==========================================================================

    def submit_claim(
        self,
        user_id: UUID,
        club_id: UUID,
        level_number: int,
        mission_key: str,
        mission_type: str,
        evidence=None,
        user_note: str = '',
        event_id: UUID = None,
        ip: str = '',
        user_agent: str = '',
    ) -> PromotionClaim:
        """
        Submit evidence for an approval-gated mission.

        Args:
            user_id: Claiming user
            club_id: Club UUID
            level_number: Level the mission belongs to
            mission_key: Mission key within the user's ladder
            mission_type: Mission type, must match the mission
            evidence: Evidence item or list of items
            user_note: Free text from the user
            event_id: Event the evidence was collected at
            ip: Client IP
            user_agent: Client user agent

        Returns:
            Created PromotionClaim

        Raises:
            NotFoundError: If the level or mission does not exist
            PromotionValidationError: If the mission cannot be claimed now
            DuplicateClaimError: If a pending claim already exists for the mission
        """
        from . import DuplicateClaimError, NotFoundError, ProgressBlockedError, PromotionValidationError

        with transaction.atomic():
            progress = ProgressService.lock_progress(user_id, club_id)

            if progress.is_blocked:
                raise ProgressBlockedError('Promotion progress for this club is blocked')

            level = engine.find_level(progress, level_number)
            if level is None:
                raise NotFoundError(f"Level {level_number} not found")

            mission = engine.find_mission(level, mission_key)
            if mission is None:
                raise NotFoundError(f"Mission {mission_key} not found in level {level_number}")

            if mission.get('type') != mission_type:
                raise PromotionValidationError(
                    f"Mission {mission_key} is of type {mission.get('type')}, not {mission_type}"
                )
            if not mission.get('requires_approval'):
                raise PromotionValidationError(f"Mission {mission_key} does not require approval")
            if level.get('status') == LevelStatus.LOCKED:
                raise PromotionValidationError(f"Level {level_number} is locked")
            if mission.get('status') in (MissionStatus.COMPLETED, MissionStatus.APPROVED):
                raise PromotionValidationError(f"Mission {mission_key} is already completed")

            if PromotionClaim.objects.filter(
                user_id=user_id,
                club_id=club_id,
                level_number=level_number,
                mission_key=mission_key,
                status=PromotionClaim.Status.PENDING,
            ).exists():
                raise DuplicateClaimError(f"A pending claim already exists for mission {mission_key}")

            try:
                with transaction.atomic():
                    claim = PromotionClaim.objects.create(
                        user_id=user_id,
                        club_id=club_id,
                        event_id=event_id,
                        level_number=level_number,
                        mission_type=mission_type,
                        mission_key=mission_key,
                        evidence=normalize_evidence(evidence),
                        user_note=user_note or '',
                        ip=ip or '',
                        user_agent=(user_agent or '')[:500],
                    )
            except IntegrityError:
                raise DuplicateClaimError(f"A pending claim already exists for mission {mission_key}")

            mission['status'] = MissionStatus.PENDING.value
            mission['claim_id'] = str(claim.id)
            mission['updated_at'] = timezone.now().isoformat()

            if event_id:
                progress.last_event_id = event_id
            progress.last_activity_at = timezone.now()
            ProgressService.save_progress(progress)

            ProgressService.update_pending_claims_count(user_id, club_id)

        logger.info(
            f"Claim submitted: {mission_key} (level {level_number}) by user {user_id} in club {club_id}",
            extra={'claim_id': str(claim.id), 'club_id': str(club_id)}
        )
        publishers.publish_claim_submitted(claim)

        return claim

    def cancel_claim(self, claim_id: UUID, user_id: UUID) -> PromotionClaim:
        """
        Withdraw a pending claim. Only the claim owner may cancel.

        Raises:
            NotFoundError, PermissionDeniedError, PromotionValidationError
        """
        from . import PermissionDeniedError, PromotionValidationError

        with transaction.atomic():
            claim = self._lock_claim(claim_id)

            if str(claim.user_id) != str(user_id):
                raise PermissionDeniedError('Only the claim owner can cancel it')
            if not claim.is_pending:
                raise PromotionValidationError(f"Claim is already {claim.status}")

            claim.status = PromotionClaim.Status.CANCELLED
            claim.reviewed_at = timezone.now()
            claim.save(update_fields=['status', 'reviewed_at', 'updated_at'])

            progress = self._lock_claim_progress(claim)
            if progress is not None:
                mission = engine.find_mission(
                    engine.find_level(progress, claim.level_number), claim.mission_key
                )
                if mission and mission.get('status') == MissionStatus.PENDING:
                    mission['status'] = MissionStatus.IN_PROGRESS.value
                    mission['claim_id'] = None
                    mission['updated_at'] = timezone.now().isoformat()
                ProgressService.save_progress(progress)

            ProgressService.update_pending_claims_count(claim.user_id, claim.club_id)

        logger.info(f"Claim cancelled: {claim.id} by user {user_id}")
        publishers.publish_claim_cancelled(claim)

        return claim

    # ==========================================================================
    # Review
    # ==========================================================================

    def approve_claim(
        self,
        claim_id: UUID,
        reviewer_id,
        review_note: str = '',
        reward_granted: bool = False,
    ) -> PromotionClaim:
        """
        Approve a pending claim and complete its mission.

        Completing the mission may complete its level, which unlocks the next
        one. A claim whose progress row is gone is still approved.

        Raises:
            NotFoundError, PromotionValidationError
        """
        from . import PromotionValidationError

        completed_level = None

        with transaction.atomic():
            claim = self._lock_claim(claim_id)
            if not claim.is_pending:
                raise PromotionValidationError(f"Claim is already {claim.status}")

            claim.resolve(PromotionClaim.Status.APPROVED, reviewer_id, review_note)
            if reward_granted:
                claim.grant_reward()
            claim.save()

            progress = self._lock_claim_progress(claim)
            if progress is None:
                logger.warning(
                    f"Approved claim {claim.id} has no progress row "
                    f"(user {claim.user_id}, club {claim.club_id})"
                )
            else:
                level = engine.find_level(progress, claim.level_number)
                mission = engine.find_mission(level, claim.mission_key)
                if mission is None:
                    logger.warning(f"Approved claim {claim.id} references missing mission {claim.mission_key}")
                else:
                    mission['status'] = MissionStatus.APPROVED.value
                    engine.complete_mission(mission)
                    if engine.apply_level_completion(progress, level):
                        completed_level = level
                ProgressService.save_progress(progress)

            ProgressService.update_pending_claims_count(claim.user_id, claim.club_id)

        logger.info(
            f"Claim approved: {claim.id} ({claim.mission_key}) by {reviewer_id}",
            extra={'claim_id': str(claim.id), 'club_id': str(claim.club_id)}
        )
        publishers.publish_claim_approved(claim)
        if completed_level is not None:
            publishers.publish_level_completed(progress, completed_level)

        return claim

    def reject_claim(self, claim_id: UUID, reviewer_id, review_note: str = '') -> PromotionClaim:
        """
        Reject a pending claim. The mission can be claimed again afterwards.

        Raises:
            NotFoundError, PromotionValidationError
        """
        from . import PromotionValidationError

        with transaction.atomic():
            claim = self._lock_claim(claim_id)
            if not claim.is_pending:
                raise PromotionValidationError(f"Claim is already {claim.status}")

            claim.resolve(PromotionClaim.Status.REJECTED, reviewer_id, review_note)
            claim.save()

            progress = self._lock_claim_progress(claim)
            if progress is not None:
                mission = engine.find_mission(
                    engine.find_level(progress, claim.level_number), claim.mission_key
                )
                if mission:
                    mission['status'] = MissionStatus.REJECTED.value
                    mission['claim_id'] = None
                    mission['updated_at'] = timezone.now().isoformat()
                ProgressService.save_progress(progress)

            ProgressService.update_pending_claims_count(claim.user_id, claim.club_id)

        logger.info(f"Claim rejected: {claim.id} ({claim.mission_key}) by {reviewer_id}")
        publishers.publish_claim_rejected(claim)

        return claim

    def mark_reward_granted(self, claim_id: UUID, reviewer_id=None) -> PromotionClaim:
        """Record that the club handed out the reward of an approved claim."""
        from . import PromotionValidationError

        with transaction.atomic():
            claim = self._lock_claim(claim_id)
            if claim.status != PromotionClaim.Status.APPROVED:
                raise PromotionValidationError('Only approved claims can have their reward granted')

            if claim.grant_reward():
                claim.save(update_fields=['reward_granted', 'reward_granted_at', 'updated_at'])
                logger.info(f"Reward granted for claim {claim.id} by {reviewer_id}")

        return claim

    # ==========================================================================
    # Queries
    # ==========================================================================

    def get_claim(self, claim_id: UUID) -> PromotionClaim:
        from . import NotFoundError

        try:
            return PromotionClaim.objects.get(id=claim_id)
        except PromotionClaim.DoesNotExist:
            raise NotFoundError(f"Claim {claim_id} not found")

    def list_club_claims(self, club_id: UUID, status: Optional[str] = 'pending', limit: int = None):
        """Claims of a club, newest first. `status=None` lists every status."""
        queryset = PromotionClaim.objects.filter(club_id=club_id)
        if status:
            queryset = queryset.filter(status=status)
        limit = limit or getattr(settings, 'PROMOTION_CLAIMS_LIST_LIMIT', 200)
        return queryset.order_by('-created_at')[:limit]

    def list_user_claims(self, user_id: UUID, club_id: UUID = None, status: str = None):
        queryset = PromotionClaim.objects.filter(user_id=user_id)
        if club_id:
            queryset = queryset.filter(club_id=club_id)
        if status:
            queryset = queryset.filter(status=status)
        return queryset.order_by('-created_at')

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _lock_claim(self, claim_id: UUID) -> PromotionClaim:
        from . import NotFoundError

        try:
            return PromotionClaim.objects.select_for_update().get(id=claim_id)
        except PromotionClaim.DoesNotExist:
            raise NotFoundError(f"Claim {claim_id} not found")

    def _lock_claim_progress(self, claim: PromotionClaim) -> Optional[UserClubPromotionProgress]:
        return UserClubPromotionProgress.objects.select_for_update().filter(
            user_id=claim.user_id, club_id=claim.club_id
        ).first()
