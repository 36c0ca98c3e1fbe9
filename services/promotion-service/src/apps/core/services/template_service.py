# services/promotion-service/src/apps/core/services/template_service.py
"""
Template Service

Resolves the level ladder a club's users are promoted through, and manages
club overrides and the default global ladder.
"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.db import transaction

from apps.core.constants import OverrideMode
from apps.core.models import PromotionLevelTemplate

logger = logging.getLogger(__name__)

TEMPLATE_CONTENT_FIELDS = ('title', 'description', 'missions', 'reward')


class TemplateService:
    """
    Service class for promotion level templates.

    Handles:
    - Template resolution for a club (global ladder vs club overrides)
    - Club override management
    - Seeding of the default global ladder
    """

    # ==========================================================================
    # Resolution
    # ==========================================================================

    @staticmethod
    def get_override_mode() -> str:
        mode = getattr(settings, 'PROMOTION_TEMPLATE_OVERRIDE_MODE', OverrideMode.REPLACE_ALL)
        if mode not in OverrideMode.ALL:
            raise ImproperlyConfigured(
                f"PROMOTION_TEMPLATE_OVERRIDE_MODE must be one of {OverrideMode.ALL}, got {mode!r}"
            )
        return mode

    @classmethod
    def get_templates_for_club(cls, club_id: UUID) -> List[PromotionLevelTemplate]:
        """
        Get the active level templates that apply to a club, by level number.

        replace_all: if the club has any active template, only the club's
        templates are used; otherwise the global ladder.
        merge_by_level: the global ladder with each level number replaced by
        the club's template for that level, if there is one.
        """
        mode = cls.get_override_mode()

        club_templates = list(
            PromotionLevelTemplate.objects.active().for_club(club_id).order_by('level_number')
        )

        if mode == OverrideMode.REPLACE_ALL:
            if club_templates:
                return club_templates
            return list(
                PromotionLevelTemplate.objects.active().global_scope().order_by('level_number')
            )

        by_level = {
            t.level_number: t
            for t in PromotionLevelTemplate.objects.active().global_scope()
        }
        for template in club_templates:
            by_level[template.level_number] = template

        return [by_level[number] for number in sorted(by_level)]

    @staticmethod
    def list_club_templates(club_id: UUID, include_inactive: bool = False) -> List[PromotionLevelTemplate]:
        queryset = PromotionLevelTemplate.objects.for_club(club_id)
        if not include_inactive:
            queryset = queryset.active()
        return list(queryset.order_by('level_number'))

    # ==========================================================================
    # Club Overrides
    # ==========================================================================

    @staticmethod
    @transaction.atomic
    def upsert_club_templates(club_id: UUID, levels: List[Dict[str, Any]]) -> List[PromotionLevelTemplate]:
        """
        Replace a club's override ladder.

        Levels in `levels` are created or updated (version bumped when their
        content changes); active club levels missing from `levels` are
        deactivated. Existing progress rows are not rebuilt.

        Args:
            club_id: Club UUID
            levels: [{level_number, title, description, missions, reward}, ...]

        Returns:
            The club's active templates, by level number

        Raises:
            PromotionValidationError: If a level fails model validation
        """
        from . import PromotionValidationError

        numbers = [int(level['level_number']) for level in levels]
        if len(numbers) != len(set(numbers)):
            raise PromotionValidationError('Duplicate level numbers in payload')

        existing = {
            t.level_number: t
            for t in PromotionLevelTemplate.objects.select_for_update().for_club(club_id)
        }

        created, updated = 0, 0
        for data in levels:
            number = int(data['level_number'])
            values = {
                'title': data.get('title') or f"Level {number}",
                'description': data.get('description') or '',
                'missions': data.get('missions') or [],
                'reward': data.get('reward') or {},
            }

            template = existing.get(number)
            if template is None:
                template = PromotionLevelTemplate(
                    scope=PromotionLevelTemplate.Scope.CLUB,
                    club_id=club_id,
                    level_number=number,
                    **values
                )
                created += 1
            else:
                changed = any(getattr(template, f) != values[f] for f in TEMPLATE_CONTENT_FIELDS)
                if not changed and template.is_active:
                    continue
                for field, value in values.items():
                    setattr(template, field, value)
                if changed:
                    template.version += 1
                template.is_active = True
                updated += 1

            try:
                template.full_clean()
            except ValidationError as e:
                raise PromotionValidationError(f"Level {number}: {e.messages}")
            template.save()

        deactivated = PromotionLevelTemplate.objects.for_club(club_id).active().exclude(
            level_number__in=numbers
        ).update(is_active=False)

        logger.info(
            f"Club templates upserted for club {club_id}: "
            f"{created} created, {updated} updated, {deactivated} deactivated",
            extra={'club_id': str(club_id)}
        )

        return TemplateService.list_club_templates(club_id)

    # ==========================================================================
    # Default Ladder
    # ==========================================================================

    @staticmethod
    def seed_default_templates(force: bool = False, dry_run: bool = False) -> Dict[str, List[int]]:
        """
        Upsert the default global ladder.

        An existing level is overwritten only when the seeded version is
        newer, or when `force` is set.

        Returns:
            {'created': [...], 'updated': [...], 'skipped': [...]} level numbers
        """
        from apps.core.seeds import DEFAULT_LEVEL_TEMPLATES

        report = {'created': [], 'updated': [], 'skipped': []}

        with transaction.atomic():
            existing = {
                t.level_number: t
                for t in PromotionLevelTemplate.objects.select_for_update().global_scope()
            }

            for data in DEFAULT_LEVEL_TEMPLATES:
                number = data['level_number']
                version = data.get('version', 1)
                template = existing.get(number)

                if template is None:
                    report['created'].append(number)
                    if not dry_run:
                        PromotionLevelTemplate.objects.create(
                            scope=PromotionLevelTemplate.Scope.GLOBAL,
                            level_number=number,
                            title=data['title'],
                            description=data.get('description', ''),
                            missions=data['missions'],
                            reward=data['reward'],
                            version=version,
                            is_active=True,
                        )
                    continue

                if not force and version <= template.version:
                    report['skipped'].append(number)
                    continue

                report['updated'].append(number)
                if not dry_run:
                    template.title = data['title']
                    template.description = data.get('description', '')
                    template.missions = data['missions']
                    template.reward = data['reward']
                    template.version = version
                    template.is_active = True
                    template.save()

        logger.info(
            f"Default templates seeded (dry_run={dry_run}, force={force}): "
            f"{len(report['created'])} created, {len(report['updated'])} updated, "
            f"{len(report['skipped'])} skipped"
        )
        return report
