# services/promotion-service/src/apps/core/services/activity_service.py
"""
Activity Service

Turns activity reported by other services (attendance, photo uploads, QR
scans, follows, stamps) into counter increments and automatic mission
progress.
"""

import logging
from typing import List
from uuid import UUID

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.core.constants import (
    ACTIVITY_RULES,
    PLATFORM_WIDE_PARAM,
    ActivityKind,
    MissionStatus,
)
from apps.core.events import publishers
from apps.core.models import UserClubPromotionProgress
from . import progress_engine as engine
from .progress_service import ProgressService

logger = logging.getLogger(__name__)


class ActivityService:
    """
    Service class for activity-driven progress.

    Missions advanced here are the ones without approval: attend_event,
    upload_event_photo, scan_qr and follow_users.
    """

    @classmethod
    def record_activity(
        cls,
        user_id: UUID,
        activity: str,
        club_id: UUID = None,
        event_id: UUID = None,
        amount: int = 1,
    ) -> List[UserClubPromotionProgress]:
        """
        Record one activity of a user.

        Args:
            user_id: Acting user
            activity: ActivityKind value
            club_id: Club the activity happened in (None for platform-only
                activity such as follows)
            event_id: Event the activity happened at
            amount: Increment

        Returns:
            The progress rows that were updated

        Raises:
            PromotionValidationError: For an unknown activity or a bad amount
        """
        from . import PromotionValidationError

        if activity not in ACTIVITY_RULES:
            raise PromotionValidationError(f"Unknown activity: {activity}")
        if int(amount) < 1:
            raise PromotionValidationError('Amount must be a positive integer')
        amount = int(amount)
        user_id = UUID(str(user_id))
        club_id = UUID(str(club_id)) if club_id else None
        event_id = UUID(str(event_id)) if event_id else None

        club_counter, platform_counter, mission_type = ACTIVITY_RULES[activity]

        if club_counter and not club_id:
            raise PromotionValidationError(f"Activity {activity} requires a club")

        updated = []
        with transaction.atomic():
            if club_id:
                ProgressService.ensure_progress(user_id, club_id)

            rows = UserClubPromotionProgress.objects.select_for_update().filter(user_id=user_id)
            if not platform_counter:
                rows = rows.filter(club_id=club_id)

            for progress in rows.order_by('club_id'):
                if progress.is_blocked:
                    logger.info(f"Skipping activity {activity} for blocked progress {progress.id}")
                    continue

                in_club = club_id is not None and progress.club_id == club_id
                cls._bump_counters(progress, activity, club_counter, platform_counter, in_club, event_id, amount)

                completed_levels = []
                if mission_type:
                    completed_levels = cls._advance_missions(
                        progress, mission_type, club_counter, platform_counter, in_club, amount
                    )

                if in_club:
                    if event_id:
                        progress.last_event_id = event_id
                    progress.last_activity_at = timezone.now()

                ProgressService.save_progress(progress)
                updated.append(progress)

                for level in completed_levels:
                    publishers.publish_level_completed(progress, level)

        logger.info(
            f"Activity {activity} x{amount} recorded for user {user_id}: {len(updated)} progress rows updated",
            extra={'user_id': str(user_id), 'club_id': str(club_id) if club_id else None}
        )
        return updated

    @staticmethod
    def _bump_counters(progress, activity, club_counter, platform_counter, in_club, event_id, amount) -> None:
        """Increment counters in the database and mirror the values on the instance."""
        increments = {}

        if platform_counter:
            increments[platform_counter] = F(platform_counter) + amount

        if club_counter and in_club:
            stamp_event = activity == ActivityKind.STAMP and event_id
            if stamp_event and progress.stamps_event_id != event_id:
                # Stamps restart with every event
                increments[club_counter] = amount
            else:
                increments[club_counter] = F(club_counter) + amount
            if stamp_event:
                increments['stamps_event_id'] = event_id

        if not increments:
            return

        UserClubPromotionProgress.objects.filter(pk=progress.pk).update(**increments)
        progress.refresh_from_db(fields=list(increments))

    @staticmethod
    def _advance_missions(progress, mission_type, club_counter, platform_counter, in_club, amount) -> list:
        """
        Move open, auto-validated missions of `mission_type` forward.

        Returns the levels that completed as a result.
        """
        now = timezone.now().isoformat()
        completed_levels = []

        # Levels unlocked by this activity do not receive it
        open_levels = [level for level in progress.levels or [] if engine.is_level_unlocked(level)]

        for level in open_levels:
            touched = False
            for mission in level.get('missions') or []:
                if mission.get('type') != mission_type:
                    continue
                if mission.get('status') != MissionStatus.IN_PROGRESS:
                    continue
                if mission.get('requires_approval'):
                    continue

                # Platform-only activity (follows) and platform_wide missions mirror the platform counter
                platform_wide = bool((mission.get('params') or {}).get(PLATFORM_WIDE_PARAM))
                if platform_counter and (platform_wide or not club_counter):
                    current = getattr(progress, platform_counter)
                elif in_club:
                    current = (mission.get('current') or 0) + amount
                else:
                    continue

                mission['current'] = max(mission.get('current') or 0, current)
                mission['updated_at'] = now
                touched = True

                if mission['current'] >= (mission.get('target') or 1):
                    engine.complete_mission(mission)

            if touched and engine.apply_level_completion(progress, level):
                completed_levels.append(level)

        return completed_levels

