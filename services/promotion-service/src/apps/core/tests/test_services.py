# services/promotion-service/src/apps/core/tests/test_services.py
"""
Service Layer Tests

Unit tests for template resolution, progress materialization and the claim
workflow.
"""

import uuid
from unittest.mock import patch

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.db.models.query import QuerySet

from apps.core.models import PromotionClaim, PromotionLevelTemplate, UserClubPromotionProgress
from apps.core.services import (
    ClaimService,
    ProgressService,
    TemplateService,
    progress_engine as engine,
    DuplicateClaimError,
    NotFoundError,
    PermissionDeniedError,
    ProgressBlockedError,
    PromotionValidationError,
)

from .factories import make_template


def submit(service, user_id, club_id, level_number, mission_type, order, **kwargs):
    return service.submit_claim(
        user_id=user_id,
        club_id=club_id,
        level_number=level_number,
        mission_key=engine.mission_key(level_number, mission_type, order),
        mission_type=mission_type,
        evidence=kwargs.pop('evidence', {'type': 'photo', 'url': 'https://cdn.example.com/p.jpg'}),
        **kwargs
    )


# =============================================================================
# Template Service Tests
# =============================================================================

@pytest.mark.django_db
class TestTemplateResolution:
    """Tests for TemplateService.get_templates_for_club."""

    def test_global_ladder_when_club_has_none(self, approval_ladder, club_id):
        templates = TemplateService.get_templates_for_club(club_id)

        assert [t.level_number for t in templates] == [1, 2]
        assert all(t.scope == 'global' for t in templates)

    def test_club_templates_replace_global_ladder(self, approval_ladder, club_id):
        club_level = make_template(3, [{'type': 'scan_qr', 'title': 'QR'}], 'Club prize', club_id=club_id)

        templates = TemplateService.get_templates_for_club(club_id)

        assert templates == [club_level]

    def test_inactive_club_templates_are_ignored(self, approval_ladder, club_id):
        make_template(1, [{'type': 'scan_qr', 'title': 'QR'}], 'Off', club_id=club_id, is_active=False)

        templates = TemplateService.get_templates_for_club(club_id)

        assert [t.scope for t in templates] == ['global', 'global']

    def test_other_clubs_templates_do_not_apply(self, approval_ladder, club_id):
        make_template(1, [{'type': 'scan_qr', 'title': 'QR'}], 'Other', club_id=uuid.uuid4())

        assert len(TemplateService.get_templates_for_club(club_id)) == 2

    def test_merge_by_level(self, approval_ladder, club_id, settings):
        settings.PROMOTION_TEMPLATE_OVERRIDE_MODE = 'merge_by_level'
        club_level_2 = make_template(2, [{'type': 'scan_qr', 'title': 'QR'}], 'Club 2', club_id=club_id)
        club_level_5 = make_template(5, [{'type': 'scan_qr', 'title': 'QR'}], 'Club 5', club_id=club_id)

        templates = TemplateService.get_templates_for_club(club_id)

        assert templates == [approval_ladder[0], club_level_2, club_level_5]

    def test_unknown_override_mode(self, club_id, settings):
        settings.PROMOTION_TEMPLATE_OVERRIDE_MODE = 'sometimes'

        with pytest.raises(ImproperlyConfigured):
            TemplateService.get_templates_for_club(club_id)


@pytest.mark.django_db
class TestClubTemplateUpsert:
    """Tests for TemplateService.upsert_club_templates."""

    def level(self, number, title='QR hunt', target=1):
        return {
            'level_number': number,
            'title': title,
            'missions': [{'type': 'scan_qr', 'title': 'Scan', 'target': target, 'order': 1}],
            'reward': {'type': 'drink', 'title': '1 drink'},
        }

    def test_creates_levels(self, club_id):
        templates = TemplateService.upsert_club_templates(club_id, [self.level(1), self.level(2)])

        assert [t.level_number for t in templates] == [1, 2]
        assert all(t.scope == 'club' and t.club_id == club_id for t in templates)
        assert all(t.version == 1 for t in templates)

    def test_changed_level_gets_new_version(self, club_id):
        TemplateService.upsert_club_templates(club_id, [self.level(1), self.level(2)])

        templates = TemplateService.upsert_club_templates(club_id, [self.level(1), self.level(2, target=3)])

        versions = {t.level_number: t.version for t in templates}
        assert versions == {1: 1, 2: 2}

    def test_missing_levels_are_deactivated(self, club_id):
        TemplateService.upsert_club_templates(club_id, [self.level(1), self.level(2)])

        templates = TemplateService.upsert_club_templates(club_id, [self.level(1)])

        assert [t.level_number for t in templates] == [1]
        level_2 = PromotionLevelTemplate.objects.get(club_id=club_id, level_number=2)
        assert level_2.is_active is False

    def test_invalid_level_rolls_back(self, club_id):
        bad = self.level(2)
        bad['reward'] = {'type': 'yacht', 'title': 'Yacht'}

        with pytest.raises(PromotionValidationError):
            TemplateService.upsert_club_templates(club_id, [self.level(1), bad])

        assert not PromotionLevelTemplate.objects.for_club(club_id).exists()

    def test_duplicate_level_numbers(self, club_id):
        with pytest.raises(PromotionValidationError):
            TemplateService.upsert_club_templates(club_id, [self.level(1), self.level(1)])


@pytest.mark.django_db
class TestSeedDefaultTemplates:
    """Tests for TemplateService.seed_default_templates."""

    def test_creates_default_ladder(self):
        report = TemplateService.seed_default_templates()

        assert report['created'] == list(range(1, 11))
        templates = PromotionLevelTemplate.objects.global_scope()
        assert templates.count() == 10
        assert templates.get(level_number=10).reward['type'] == 'trip'

    def test_second_run_skips(self):
        TemplateService.seed_default_templates()

        report = TemplateService.seed_default_templates()

        assert report['skipped'] == list(range(1, 11))
        assert report['created'] == report['updated'] == []

    def test_force_overwrites(self):
        TemplateService.seed_default_templates()
        PromotionLevelTemplate.objects.filter(level_number=1).update(title='Edited')

        report = TemplateService.seed_default_templates(force=True)

        assert report['updated'] == list(range(1, 11))
        assert PromotionLevelTemplate.objects.get(level_number=1).title == 'Level 1 - First step'

    def test_newer_seed_version_overwrites(self):
        TemplateService.seed_default_templates()
        PromotionLevelTemplate.objects.filter(level_number=4).update(version=0, title='Old')

        report = TemplateService.seed_default_templates()

        assert report['updated'] == [4]
        assert PromotionLevelTemplate.objects.get(level_number=4).title != 'Old'

    def test_dry_run_writes_nothing(self):
        report = TemplateService.seed_default_templates(dry_run=True)

        assert len(report['created']) == 10
        assert not PromotionLevelTemplate.objects.exists()


# =============================================================================
# Progress Service Tests
# =============================================================================

@pytest.mark.django_db
class TestEnsureProgress:
    """Tests for ProgressService.ensure_progress."""

    def test_creates_progress_from_templates(self, approval_ladder, user_id, club_id):
        progress = ProgressService.ensure_progress(user_id, club_id)

        assert progress.current_level == 1
        assert progress.current_progress == 0
        assert progress.current_reward_title == '1 shot'
        assert [lvl['status'] for lvl in progress.levels] == ['in_progress', 'locked']
        assert progress.pending_claims_count == 0

    def test_is_idempotent(self, approval_ladder, user_id, club_id):
        first = ProgressService.ensure_progress(user_id, club_id)
        second = ProgressService.ensure_progress(user_id, club_id)

        assert first.id == second.id
        assert UserClubPromotionProgress.objects.count() == 1

    def test_concurrent_creation_returns_existing_row(self, approval_ladder, user_id, club_id):
        existing = ProgressService.ensure_progress(user_id, club_id)

        # Simulate losing the race: the lookup misses, the insert collides
        with patch.object(QuerySet, 'first', return_value=None):
            progress = ProgressService.ensure_progress(user_id, club_id)

        assert progress.id == existing.id

    def test_no_templates(self, user_id, club_id):
        with pytest.raises(NotFoundError):
            ProgressService.ensure_progress(user_id, club_id)

    def test_platform_counters_carry_over(self, approval_ladder, user_id, club_id):
        ProgressService.ensure_progress(user_id, club_id)
        UserClubPromotionProgress.objects.filter(user_id=user_id).update(
            attendances_platform=7, followed_users=3, attendances_in_club=7
        )

        other = ProgressService.ensure_progress(user_id, uuid.uuid4())

        assert other.attendances_platform == 7
        assert other.followed_users == 3
        assert other.attendances_in_club == 0


@pytest.mark.django_db
class TestProgressReads:
    """Tests for snapshots and summaries."""

    def test_stale_snapshot_is_repaired_on_read(self, approval_ladder, user_id, club_id):
        progress = ProgressService.ensure_progress(user_id, club_id)
        UserClubPromotionProgress.objects.filter(id=progress.id).update(
            current_progress=0.9, current_reward_title='Stale'
        )

        progress = ProgressService.get_club_progress(user_id, club_id)

        assert progress.current_progress == 0.0
        assert progress.current_reward_title == '1 shot'
        assert UserClubPromotionProgress.objects.get(id=progress.id).current_reward_title == '1 shot'

    def test_stale_level_progress_is_repaired_on_read(self, approval_ladder, user_id, club_id):
        progress = ProgressService.ensure_progress(user_id, club_id)
        levels = progress.levels
        levels[0]['progress'] = 0.75
        UserClubPromotionProgress.objects.filter(id=progress.id).update(levels=levels)

        ProgressService.get_club_progress(user_id, club_id)

        stored = UserClubPromotionProgress.objects.get(id=progress.id)
        assert stored.levels[0]['progress'] == 0.0
        assert stored.revision == progress.revision + 1

    def test_user_summaries(self, approval_ladder, user_id, club_id):
        ProgressService.ensure_progress(user_id, club_id)
        submit(ClaimService(), user_id, club_id, 1, 'theme_photo', 1)

        summaries = ProgressService.get_user_summaries(user_id)

        assert len(summaries) == 1
        summary = summaries[0]
        assert summary['club_id'] == str(club_id)
        assert summary['level'] == 1
        assert summary['pending_claims_count'] == 1
        assert summary['description'] == 'You have 1 pending validation(s)'

    def test_pending_claims_recount(self, approval_ladder, user_id, club_id):
        ProgressService.ensure_progress(user_id, club_id)
        PromotionClaim.objects.create(
            user_id=user_id, club_id=club_id, level_number=1,
            mission_type='theme_photo', mission_key='L1_theme_photo_1',
        )

        assert ProgressService.update_pending_claims_count(user_id, club_id) == 1
        assert UserClubPromotionProgress.objects.get(user_id=user_id).pending_claims_count == 1


# =============================================================================
# Claim Service Tests
# =============================================================================

@pytest.mark.django_db
class TestSubmitClaim:
    """Tests for ClaimService.submit_claim."""

    @pytest.fixture
    def service(self):
        return ClaimService()

    def test_submit_marks_mission_pending(self, service, approval_ladder, user_id, club_id):
        claim = submit(service, user_id, club_id, 1, 'theme_photo', 1, ip='10.0.0.1')

        assert claim.status == 'pending'
        assert claim.evidence == [{'type': 'photo', 'url': 'https://cdn.example.com/p.jpg'}]
        assert claim.ip == '10.0.0.1'

        progress = UserClubPromotionProgress.objects.get(user_id=user_id, club_id=club_id)
        mission = engine.find_mission(engine.find_level(progress, 1), 'L1_theme_photo_1')
        assert mission['status'] == 'pending'
        assert mission['claim_id'] == str(claim.id)
        assert progress.pending_claims_count == 1
        assert progress.revision >= 1

    def test_duplicate_pending_claim_conflicts(self, service, approval_ladder, user_id, club_id):
        submit(service, user_id, club_id, 1, 'theme_photo', 1)

        with pytest.raises(DuplicateClaimError):
            submit(service, user_id, club_id, 1, 'theme_photo', 1)

        assert PromotionClaim.objects.count() == 1

    def test_unique_index_conflict_is_a_conflict(self, service, approval_ladder, user_id, club_id):
        submit(service, user_id, club_id, 1, 'theme_photo', 1)

        # Skip the pre-check so the insert hits the partial unique index
        with patch.object(QuerySet, 'exists', return_value=False):
            with pytest.raises(DuplicateClaimError):
                submit(service, user_id, club_id, 1, 'theme_photo', 1)

    def test_unknown_mission(self, service, approval_ladder, user_id, club_id):
        with pytest.raises(NotFoundError):
            submit(service, user_id, club_id, 1, 'theme_photo', 7)

    def test_unknown_level(self, service, approval_ladder, user_id, club_id):
        with pytest.raises(NotFoundError):
            submit(service, user_id, club_id, 9, 'theme_photo', 1)

    def test_type_mismatch(self, service, approval_ladder, user_id, club_id):
        with pytest.raises(PromotionValidationError):
            service.submit_claim(
                user_id=user_id, club_id=club_id, level_number=1,
                mission_key='L1_theme_photo_1', mission_type='photocall_photo',
            )

    def test_mission_without_approval(self, service, approval_ladder, user_id, club_id):
        ProgressService.ensure_progress(user_id, club_id)
        progress = UserClubPromotionProgress.objects.get(user_id=user_id)
        engine.unlock_next_level(progress, 1)
        progress.save()

        with pytest.raises(PromotionValidationError):
            submit(service, user_id, club_id, 2, 'attend_event', 1)

    def test_locked_level(self, service, approval_ladder, user_id, club_id):
        with pytest.raises(PromotionValidationError):
            submit(service, user_id, club_id, 2, 'show_prizes_photo', 2)

    def test_blocked_progress(self, service, approval_ladder, user_id, club_id):
        ProgressService.ensure_progress(user_id, club_id)
        ProgressService.set_blocked(user_id, club_id, True)

        with pytest.raises(ProgressBlockedError):
            submit(service, user_id, club_id, 1, 'theme_photo', 1)


@pytest.mark.django_db
class TestClaimReview:
    """Tests for cancel, approve, reject and reward hand-out."""

    @pytest.fixture
    def service(self):
        return ClaimService()

    @pytest.fixture
    def claim(self, service, approval_ladder, user_id, club_id):
        return submit(service, user_id, club_id, 1, 'theme_photo', 1)

    def mission(self, user_id, club_id, key='L1_theme_photo_1', level_number=1):
        progress = UserClubPromotionProgress.objects.get(user_id=user_id, club_id=club_id)
        return progress, engine.find_mission(engine.find_level(progress, level_number), key)

    def test_cancel_restores_mission(self, service, claim, user_id, club_id):
        cancelled = service.cancel_claim(claim.id, user_id)

        assert cancelled.status == 'cancelled'
        assert cancelled.reviewed_at is not None
        progress, mission = self.mission(user_id, club_id)
        assert mission['status'] == 'in_progress'
        assert mission['claim_id'] is None
        assert progress.pending_claims_count == 0

    def test_only_owner_can_cancel(self, service, claim):
        with pytest.raises(PermissionDeniedError):
            service.cancel_claim(claim.id, uuid.uuid4())

    def test_cannot_cancel_twice(self, service, claim, user_id):
        service.cancel_claim(claim.id, user_id)

        with pytest.raises(PromotionValidationError):
            service.cancel_claim(claim.id, user_id)

    def test_approve_completes_mission(self, service, claim, user_id, club_id):
        approved = service.approve_claim(claim.id, reviewer_id='staff-1', review_note='Nice costume')

        assert approved.status == 'approved'
        assert approved.reviewed_by == 'staff-1'
        assert approved.review_note == 'Nice costume'
        assert approved.reward_granted is False

        progress, mission = self.mission(user_id, club_id)
        assert mission['status'] == 'completed'
        assert mission['current'] == mission['target']
        assert mission['completed_at']
        assert progress.current_progress == 0.5
        assert progress.pending_claims_count == 0

    def test_approve_with_reward(self, service, claim):
        approved = service.approve_claim(claim.id, reviewer_id='staff-1', reward_granted=True)

        assert approved.reward_granted is True
        assert approved.reward_granted_at is not None

    def test_resolved_claim_cannot_be_reviewed_again(self, service, claim):
        service.approve_claim(claim.id, reviewer_id='staff-1')

        with pytest.raises(PromotionValidationError):
            service.reject_claim(claim.id, reviewer_id='staff-1')

    def test_approve_without_progress_row(self, service, user_id, club_id):
        claim = PromotionClaim.objects.create(
            user_id=user_id, club_id=club_id, level_number=1,
            mission_type='theme_photo', mission_key='L1_theme_photo_1',
        )

        approved = service.approve_claim(claim.id, reviewer_id='staff-1')

        assert approved.status == 'approved'

    def test_reject_allows_resubmission(self, service, claim, user_id, club_id):
        rejected = service.reject_claim(claim.id, reviewer_id='staff-1', review_note='Blurry')

        assert rejected.status == 'rejected'
        progress, mission = self.mission(user_id, club_id)
        assert mission['status'] == 'rejected'
        assert mission['claim_id'] is None

        again = submit(service, user_id, club_id, 1, 'theme_photo', 1)
        assert again.status == 'pending'
        _, mission = self.mission(user_id, club_id)
        assert mission['status'] == 'pending'

    def test_mark_reward_granted(self, service, claim):
        with pytest.raises(PromotionValidationError):
            service.mark_reward_granted(claim.id)

        service.approve_claim(claim.id, reviewer_id='staff-1')
        first = service.mark_reward_granted(claim.id, reviewer_id='staff-1')
        second = service.mark_reward_granted(claim.id, reviewer_id='staff-1')

        assert first.reward_granted is True
        assert second.reward_granted_at == first.reward_granted_at

    def test_unknown_claim(self, service):
        with pytest.raises(NotFoundError):
            service.approve_claim(uuid.uuid4(), reviewer_id='staff-1')

    def test_list_club_claims(self, service, claim, club_id):
        service.approve_claim(claim.id, reviewer_id='staff-1')
        pending = submit(service, claim.user_id, club_id, 1, 'photocall_photo', 2)

        assert list(service.list_club_claims(club_id)) == [pending]
        assert len(service.list_club_claims(club_id, status=None)) == 2
        assert len(service.list_club_claims(club_id, status=None, limit=1)) == 1

    def test_list_user_claims(self, service, claim, user_id, club_id):
        assert list(service.list_user_claims(user_id)) == [claim]
        assert list(service.list_user_claims(user_id, club_id=uuid.uuid4())) == []


# =============================================================================
# End-to-End
# =============================================================================

@pytest.mark.django_db
class TestLevelCompletionScenario:
    """Approving every mission of level 1 unlocks level 2."""

    def test_approvals_drive_level_progress(self, approval_ladder, user_id, club_id):
        service = ClaimService()

        progress = ProgressService.ensure_progress(user_id, club_id)
        assert engine.compute_level_progress(engine.find_level(progress, 1)) == 0.0

        first = submit(service, user_id, club_id, 1, 'theme_photo', 1)
        service.approve_claim(first.id, reviewer_id='staff-1')

        progress.refresh_from_db()
        assert engine.compute_level_progress(engine.find_level(progress, 1)) == 0.5
        assert progress.current_level == 1
        assert progress.current_progress == 0.5

        second = submit(service, user_id, club_id, 1, 'photocall_photo', 2)
        service.approve_claim(second.id, reviewer_id='staff-1')

        progress.refresh_from_db()
        level_1 = engine.find_level(progress, 1)
        level_2 = engine.find_level(progress, 2)
        assert engine.compute_level_progress(level_1) == 1.0
        assert level_1['status'] == 'completed'
        assert level_2['status'] == 'in_progress'
        assert all(m['status'] == 'in_progress' for m in level_2['missions'])
        assert progress.current_level == 2
        assert progress.current_progress == engine.compute_level_progress(level_2) == 0.0
        assert progress.current_reward_title == 'Free entry'
        assert progress.pending_claims_count == 0
