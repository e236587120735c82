"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --email me@example.com --clear

This creates (for one user, only when they have no projects yet):
- 3 projects (Website Redesign, Mobile App Development, Marketing Campaign)
- 1 pending invoice per project at 30% of its budget
- 1 third-party invoice, which also creates its vendor
"""

from datetime import date, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User
from apps.accounts.services import register_user
from apps.invoices.models import Invoice
from apps.invoices.services import create_invoice, create_third_party_invoice
from apps.projects.models import Project
from apps.projects.services import create_project
from apps.vendors.models import Vendor


SAMPLE_PROJECTS = [
    {
        'name': 'Website Redesign',
        'client': 'Acme Corporation',
        'budget': Decimal('12000.00'),
        'start_date': date(2025, 2, 15),
        'end_date': date(2025, 6, 30),
    },
    {
        'name': 'Mobile App Development',
        'client': 'Global Industries',
        'budget': Decimal('35000.00'),
        'start_date': date(2025, 1, 10),
        'end_date': date(2025, 8, 15),
    },
    {
        'name': 'Marketing Campaign',
        'client': 'Tech Innovators',
        'budget': Decimal('8500.00'),
        'start_date': date(2024, 11, 5),
        'end_date': date(2025, 3, 1),
    },
]


class Command(BaseCommand):
    help = 'Create sample projects and invoices for a user'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            default='demo@example.com',
            help='Owner of the sample data (created if missing)',
        )
        parser.add_argument(
            '--password',
            default='DemoPass123!',
            help='Password for a newly created owner',
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help="Delete the owner's projects, invoices and vendors first",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        user = User.objects.filter(email__iexact=options['email']).first()
        if user is None:
            user = register_user(
                email=options['email'],
                password=options['password'],
                display_name='Demo User'
            )
            self.stdout.write(f"Created user {user.email}")

        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data(user)

        if Project.objects.filter(user=user).exists():
            self.stdout.write(self.style.WARNING(
                f'{user.email} already has projects; nothing created. Use --clear to start over.'
            ))
            return

        self.stdout.write('Creating sample data...')
        projects = self.create_projects(user)
        self.create_invoices(user, projects)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write(f"  Account: {user.email}")
        for project in Project.objects.filter(user=user).order_by('name'):
            self.stdout.write(
                f"  {project.name}: budget {project.budget}, invoiced {project.invoiced} "
                f"({project.invoice_count} invoice(s))"
            )

    def clear_data(self, user):
        """Remove the user's ledger data, invoices first."""
        Invoice.objects.filter(user=user).delete()
        Project.objects.filter(user=user).delete()
        Vendor.objects.filter(user=user).delete()

    def create_projects(self, user):
        projects = []
        for data in SAMPLE_PROJECTS:
            projects.append(create_project(user=user, **data))
        self.stdout.write(f'  Created {len(projects)} projects')
        return projects

    def create_invoices(self, user, projects):
        today = date.today()
        for i, project in enumerate(projects, start=1):
            create_invoice(
                user=user,
                project_id=project.id,
                invoice_number=f'INV-{i:03d}',
                amount=(project.budget * Decimal('0.3')).quantize(Decimal('1')),
                date=today,
                description='Initial payment',
            )

        create_third_party_invoice(
            user=user,
            project_id=projects[0].id,
            company='Pixel Partners',
            invoice_number='PP-1042',
            amount=Decimal('1500.00'),
            date=today - timedelta(days=7),
            description='Illustration work',
        )
        self.stdout.write(f'  Created {len(projects) + 1} invoices')
