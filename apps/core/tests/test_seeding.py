"""
Reference Data Tests
====================

Statuses and lead sources seeded by the data migration and the
seed_workflow command.

Run tests:
    python manage.py test apps.core.tests.test_seeding --settings=config.settings_test
"""

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from apps.core.models import Centre, Language, LeadSource, Status


class SeededReferenceDataTest(TestCase):

    def test_lead_statuses_are_seeded(self):
        slugs = set(Status.objects.filter(type=Status.TYPE_LEAD).values_list('slug', flat=True))
        self.assertEqual(slugs, set(Status.LEAD_SLUGS))

    def test_substatuses_are_seeded_separately(self):
        slugs = set(Status.objects.filter(type=Status.TYPE_LEAD_SUB).values_list('slug', flat=True))
        self.assertEqual(slugs, set(Status.SUBSTATUS_SLUGS))

    def test_default_sources_are_seeded(self):
        self.assertTrue(LeadSource.objects.filter(slug='website', is_api_source=False).exists())
        self.assertTrue(LeadSource.objects.filter(slug='facebook', is_api_source=True).exists())

    def test_terminal_statuses(self):
        won = Status.objects.get(type=Status.TYPE_LEAD, slug=Status.WON)
        qualified = Status.objects.get(type=Status.TYPE_LEAD, slug=Status.QUALIFIED)

        self.assertTrue(won.is_terminal())
        self.assertFalse(qualified.is_terminal())


class SeedWorkflowCommandTest(TestCase):

    def run_command(self):
        out = StringIO()
        call_command('seed_workflow', stdout=out)
        return out.getvalue()

    def test_command_is_idempotent(self):
        before = Status.objects.count()

        output = self.run_command()

        self.assertIn('0 new statuses', output)
        self.assertEqual(Status.objects.count(), before)

    def test_command_restores_missing_rows(self):
        LeadSource.objects.filter(slug='referral').delete()

        output = self.run_command()

        self.assertIn('1 new lead sources', output)
        self.assertTrue(LeadSource.objects.filter(slug='referral').exists())


class ReferenceModelTest(TestCase):

    def test_slugs_are_generated(self):
        centre = Centre.objects.create(name='Kochi Experience Centre')
        language = Language.objects.create(name='Malayalam')

        self.assertEqual(centre.slug, 'kochi-experience-centre')
        self.assertEqual(language.code, 'malayalam')

    def test_active_agents_count(self):
        from apps.accounts.models import User

        centre = Centre.objects.create(name='Kochi')
        User.objects.create_user(email='a@homes.in', password='x', centre=centre)
        User.objects.create_user(email='b@homes.in', password='x', centre=centre, is_active=False)

        self.assertEqual(centre.get_active_agents_count(), 1)
