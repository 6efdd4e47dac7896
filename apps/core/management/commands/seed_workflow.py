"""
Seed the statuses and lead sources the workflow engine depends on.

Usage:
    python manage.py seed_workflow
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import LeadSource, Status
from apps.core.seeds import seed_reference_data


class Command(BaseCommand):
    help = 'Create or refresh workflow statuses and default lead sources'

    def handle(self, *args, **options):
        with transaction.atomic():
            statuses_created, sources_created = seed_reference_data(Status, LeadSource)

        self.stdout.write(self.style.SUCCESS(
            f'Workflow data seeded: {statuses_created} new statuses, '
            f'{sources_created} new lead sources'
        ))
