# services/promotion-service/src/apps/core/tests/test_commands.py
"""
Management Command Tests
"""

from io import StringIO

import pytest
from django.core.management import call_command

from apps.core.models import PromotionLevelTemplate


def run(*args):
    out = StringIO()
    call_command('seed_promotion_templates', *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestSeedPromotionTemplates:
    """Tests for the seed_promotion_templates command."""

    def test_seeds_ten_levels(self):
        output = run()

        assert PromotionLevelTemplate.objects.global_scope().active().count() == 10
        assert 'CREATE level 1' in output
        assert 'Done. created=10, updated=0, skipped=0, dry_run=False, force=False' in output

    def test_rerun_skips(self):
        run()

        output = run()

        assert 'SKIP level 10' in output
        assert 'created=0, updated=0, skipped=10' in output

    def test_force(self):
        run()

        output = run('--force')

        assert 'UPDATE level 3' in output
        assert 'updated=10' in output
        assert PromotionLevelTemplate.objects.count() == 10

    def test_dry_run(self):
        output = run('--dry-run')

        assert 'DRY-RUN CREATE level 1' in output
        assert 'dry_run=True' in output
        assert not PromotionLevelTemplate.objects.exists()
