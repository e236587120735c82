"""
Management command to recompute vendor totals from third-party invoices.

Creates vendors that have invoices but no record and fixes totals that drifted.
A second run on unchanged data writes nothing.

Usage:
    python manage.py reconcile_vendors
    python manage.py reconcile_vendors --user someone@example.com --dry-run
"""

from django.core.management.base import BaseCommand, CommandError
from apps.accounts.models import User
from apps.vendors.services import reconcile_vendor_totals


class Command(BaseCommand):
    help = 'Reconcile vendor total_invoiced with third-party invoices'

    def add_arguments(self, parser):
        parser.add_argument(
            '--user',
            help='Only reconcile vendors owned by this email',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be written without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        users = User.objects.filter(is_active=True).order_by('email')
        if options['user']:
            users = users.filter(email__iexact=options['user'])
            if not users.exists():
                raise CommandError(f"User {options['user']} not found")

        total_writes = 0
        for user in users:
            report = reconcile_vendor_totals(user=user, dry_run=dry_run)
            if not report.writes:
                continue
            total_writes += report.writes
            self.stdout.write(f'\n{user.email}:')
            for name in report.created:
                self.stdout.write(f'  + {name} (created)')
            for name in report.updated:
                self.stdout.write(f'  ~ {name} (total updated)')

        if total_writes == 0:
            self.stdout.write(self.style.SUCCESS('All vendor totals are up to date.'))
            return

        if dry_run:
            self.stdout.write(self.style.WARNING(f'\n--dry-run mode: {total_writes} write(s) skipped.'))
            return

        self.stdout.write(self.style.SUCCESS(f'\nReconciled {total_writes} vendor record(s).'))
