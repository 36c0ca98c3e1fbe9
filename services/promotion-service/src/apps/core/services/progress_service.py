# services/promotion-service/src/apps/core/services/progress_service.py
"""
Progress Service

Lazily materializes a user's promotion ladder for a club and keeps the
derived fields of the progress row in sync.
"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import Max

from apps.core.models import PLATFORM_COUNTER_FIELDS, PromotionClaim, UserClubPromotionProgress
from . import progress_engine as engine
from .template_service import TemplateService

logger = logging.getLogger(__name__)


class ProgressService:
    """
    Service class for per user, per club promotion progress.

    Every method that mutates a progress row takes the row lock first
    (`lock_progress`), so writes to one (user, club) pair are serialized.
    """

    # ==========================================================================
    # Materialization
    # ==========================================================================

    @staticmethod
    def ensure_progress(user_id: UUID, club_id: UUID) -> UserClubPromotionProgress:
        """
        Get the user's progress row for a club, creating it from the club's
        templates on first use.

        Raises:
            NotFoundError: If no templates apply to the club
        """
        progress = UserClubPromotionProgress.objects.filter(
            user_id=user_id, club_id=club_id
        ).first()
        if progress:
            return progress

        templates = TemplateService.get_templates_for_club(club_id)
        if not templates:
            from . import NotFoundError
            raise NotFoundError(f"No promotion templates configured for club {club_id}")

        fields = engine.build_from_templates(templates, start_level=1)

        # Platform counters carry over from the user's other clubs
        carried = UserClubPromotionProgress.objects.filter(user_id=user_id).aggregate(
            **{name: Max(name) for name in PLATFORM_COUNTER_FIELDS}
        )
        for name, value in carried.items():
            fields[name] = value or 0

        try:
            with transaction.atomic():
                progress = UserClubPromotionProgress.objects.create(
                    user_id=user_id,
                    club_id=club_id,
                    **fields
                )
        except IntegrityError:
            # Another request created the row first
            logger.info(f"Progress for user {user_id} in club {club_id} created concurrently")
            return UserClubPromotionProgress.objects.get(user_id=user_id, club_id=club_id)

        logger.info(
            f"Progress created for user {user_id} in club {club_id} "
            f"with {len(fields['levels'])} levels",
            extra={'user_id': str(user_id), 'club_id': str(club_id)}
        )
        return progress

    @staticmethod
    def lock_progress(user_id: UUID, club_id: UUID) -> UserClubPromotionProgress:
        """
        Ensure the row exists and re-read it under a row lock.

        Must be called inside transaction.atomic().
        """
        ProgressService.ensure_progress(user_id, club_id)
        return UserClubPromotionProgress.objects.select_for_update().get(
            user_id=user_id, club_id=club_id
        )

    @staticmethod
    def save_progress(progress: UserClubPromotionProgress, update_fields: List[str] = None) -> None:
        """Recompute the snapshot and persist the row."""
        engine.refresh_current_snapshot(progress)
        progress.revision += 1
        if update_fields is not None:
            update_fields = sorted(set(update_fields) | {
                'levels', 'current_level', 'current_progress',
                'current_reward_title', 'revision', 'updated_at',
            })
        progress.save(update_fields=update_fields)

    # ==========================================================================
    # Reads
    # ==========================================================================

    @staticmethod
    def get_club_progress(user_id: UUID, club_id: UUID) -> UserClubPromotionProgress:
        """
        Progress for a club with a freshly computed snapshot.

        The row is only written when the snapshot was stale.
        """
        with transaction.atomic():
            progress = ProgressService.lock_progress(user_id, club_id)
            before = ProgressService._snapshot_state(progress)

            engine.refresh_current_snapshot(progress)

            after = ProgressService._snapshot_state(progress)
            if before != after:
                logger.info(f"Stale snapshot repaired for user {user_id} in club {club_id}")
                progress.revision += 1
                progress.save()

        return progress

    @staticmethod
    def _snapshot_state(progress: UserClubPromotionProgress) -> tuple:
        level = progress.current_level_data or {}
        return (
            progress.current_level,
            progress.current_progress,
            progress.current_reward_title,
            level.get('progress'),
        )

    @staticmethod
    def list_user_progress(user_id: UUID) -> List[UserClubPromotionProgress]:
        return list(
            UserClubPromotionProgress.objects.filter(user_id=user_id).order_by('-updated_at')
        )

    @staticmethod
    def get_user_summaries(user_id: UUID) -> List[Dict[str, Any]]:
        """Per club summary cards of a user's promotions, latest first."""
        return [
            {
                'id': str(progress.id),
                'club_id': str(progress.club_id),
                'level': progress.current_level,
                'progress': progress.current_progress,
                'pending_claims_count': progress.pending_claims_count,
                'current_reward_title': progress.current_reward_title,
                'description': progress.summary_description,
            }
            for progress in ProgressService.list_user_progress(user_id)
        ]

    # ==========================================================================
    # Counters
    # ==========================================================================

    @staticmethod
    def update_pending_claims_count(user_id: UUID, club_id: UUID) -> int:
        """Recount the pending claims of a (user, club) pair and store it."""
        count = PromotionClaim.objects.filter(
            user_id=user_id,
            club_id=club_id,
            status=PromotionClaim.Status.PENDING,
        ).count()

        UserClubPromotionProgress.objects.filter(
            user_id=user_id, club_id=club_id
        ).update(pending_claims_count=count)

        return count

    @staticmethod
    def set_blocked(user_id: UUID, club_id: UUID, blocked: bool) -> UserClubPromotionProgress:
        """
        Block or unblock a user's progress in a club.

        Raises:
            NotFoundError: If the user has no progress in the club
        """
        from . import NotFoundError

        with transaction.atomic():
            progress = UserClubPromotionProgress.objects.select_for_update().filter(
                user_id=user_id, club_id=club_id
            ).first()
            if progress is None:
                raise NotFoundError(f"No progress for user {user_id} in club {club_id}")

            progress.status = (
                UserClubPromotionProgress.Status.BLOCKED if blocked
                else UserClubPromotionProgress.Status.ACTIVE
            )
            progress.save(update_fields=['status', 'updated_at'])

        logger.warning(
            f"Progress of user {user_id} in club {club_id} {'blocked' if blocked else 'unblocked'}",
            extra={'user_id': str(user_id), 'club_id': str(club_id)}
        )
        return progress
