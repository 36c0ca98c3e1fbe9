# services/promotion-service/src/apps/core/management/commands/seed_promotion_templates.py
"""
Seed the default global promotion ladder.

    python manage.py seed_promotion_templates [--dry-run] [--force]
"""

from django.core.management.base import BaseCommand

from apps.core.services import TemplateService


class Command(BaseCommand):
    help = 'Create or update the default global promotion level templates'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report what would change without writing anything',
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Overwrite existing levels even when their version is not older',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        force = options['force']

        report = TemplateService.seed_default_templates(force=force, dry_run=dry_run)

        prefix = 'DRY-RUN ' if dry_run else ''
        for number in report['created']:
            self.stdout.write(self.style.SUCCESS(f'{prefix}CREATE level {number}'))
        for number in report['updated']:
            self.stdout.write(self.style.SUCCESS(f'{prefix}UPDATE level {number}'))
        for number in report['skipped']:
            self.stdout.write(f'SKIP level {number} (existing version is not older)')

        self.stdout.write(
            f"Done. created={len(report['created'])}, updated={len(report['updated'])}, "
            f"skipped={len(report['skipped'])}, dry_run={dry_run}, force={force}"
        )
