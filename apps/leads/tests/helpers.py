"""
Shared builders for the lead workflow tests.

Statuses and the default lead sources are seeded by the core data
migration, so tests only create centres, languages and agents.
"""

from datetime import timedelta

from django.utils import timezone

from apps.accounts.models import User
from apps.core.models import Centre, Language, LeadSource


class TickingClock:
    """Clock that moves forward one minute per call"""

    def __init__(self, start=None, step=timedelta(minutes=1)):
        self.now = start or timezone.now()
        self.step = step

    def __call__(self):
        self.now = self.now + self.step
        return self.now


class WorkflowFixturesMixin:

    def build_reference_data(self):
        self.kochi = Centre.objects.create(name='Kochi Experience Centre', city='Kochi')
        self.chennai = Centre.objects.create(name='Chennai Experience Centre', city='Chennai')
        self.malayalam = Language.objects.create(name='Malayalam', code='ml')
        self.tamil = Language.objects.create(name='Tamil', code='ta')
        self.website = LeadSource.objects.get(slug='website')

    def make_agent(self, email, role, centre=None, languages=(), qualification='', last_assigned_at=None, **extra):
        first_name, _, last_name = email.split('@')[0].partition('.')
        return User.objects.create_user(
            email=email,
            password='testpass123',
            first_name=first_name.title(),
            last_name=(last_name or 'Agent').title(),
            role=role,
            centre=centre,
            languages=list(languages),
            qualification=qualification,
            last_assigned_at=last_assigned_at,
            **extra
        )

    def lead_payload(self, **overrides):
        payload = {
            'name': 'Meera Nair',
            'phone': '+919876543210',
            'email': 'meera@example.com',
            'source': self.website.pk,
        }
        payload.update(overrides)
        return payload
