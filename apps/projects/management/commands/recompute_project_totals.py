"""
Management command to rebuild project running totals from invoices.

Repairs projects whose invoiced amount, invoice count or partition totals no
longer match their invoices (after admin edits, restores or raw SQL).

Usage:
    python manage.py recompute_project_totals
    python manage.py recompute_project_totals --user someone@example.com --dry-run
"""

from django.core.management.base import BaseCommand, CommandError
from apps.accounts.models import User
from apps.projects.services import recompute_project_aggregates


class Command(BaseCommand):
    help = 'Recompute project invoiced totals and invoice counts from the invoice set'

    def add_arguments(self, parser):
        parser.add_argument(
            '--user',
            help='Only check projects owned by this email',
        )
        parser.add_argument(
            '--project',
            help='Only check this project ID',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be corrected without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        user = None
        if options['user']:
            try:
                user = User.objects.get(email__iexact=options['user'])
            except User.DoesNotExist:
                raise CommandError(f"User {options['user']} not found")

        corrections = recompute_project_aggregates(
            user=user,
            project_id=options['project'],
            dry_run=dry_run
        )

        if not corrections:
            self.stdout.write(self.style.SUCCESS('All project totals match their invoices.'))
            return

        self.stdout.write(f'\nFound {len(corrections)} project(s) with drifted totals:\n')
        for correction in corrections:
            project = correction['project']
            self.stdout.write(f'  - {project.name} ({project.id})')
            for field, (stored, expected) in correction['changes'].items():
                self.stdout.write(f'      {field}: {stored} -> {expected}')

        if dry_run:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        self.stdout.write(self.style.SUCCESS(f'\nCorrected {len(corrections)} project(s).'))
