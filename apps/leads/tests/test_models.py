"""
Lead Models Tests
=================

Tests for Lead, CallLog and LeadActivity.

Test Coverage:
1. Lead Model
   - Sequential lead codes
   - Status helpers (status_slug, is_terminal, needs_sales_owner)
   - Ownership and scheduling helpers

2. CallLog Model
   - Sequential call codes
   - String representation

3. LeadActivity Model
   - Append-only entries
   - Timeline ordering

Run tests:
    python manage.py test apps.leads.tests.test_models --settings=config.settings_test
"""

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from apps.accounts.models import User
from apps.core.models import Status
from apps.leads.models import CallLog, Lead, LeadActivity
from .helpers import WorkflowFixturesMixin


class LeadModelTest(WorkflowFixturesMixin, TestCase):
    """
    Test Lead model functionality

    Tests:
    - Model creation
    - Status helpers
    - Utility methods
    """

    def setUp(self):
        """Setup test data before each test"""
        self.build_reference_data()

        self.presales = self.make_agent('anu.joseph@homes.in', User.ROLE_PRESALES_AGENT, self.kochi)
        self.sales = self.make_agent('deepa.pillai@homes.in', User.ROLE_SALES_AGENT, self.kochi)

        self.lead = Lead.objects.create(
            name='Meera Nair',
            phone='+919876543210',
            source=self.website,
            lead_status=Status.objects.get(type=Status.TYPE_LEAD, slug=Status.LEAD),
            presales_owner=self.presales,
        )

    def test_lead_creation(self):
        """
        Test: Lead is created with workflow defaults

        Expected: status lead, not qualified, manual channel, no substatus
        """
        self.assertEqual(self.lead.status_slug, Status.LEAD)
        self.assertFalse(self.lead.is_qualified)
        self.assertEqual(self.lead.intake_channel, Lead.CHANNEL_MANUAL)
        self.assertEqual(self.lead.substatus, '')
        self.assertIsNone(self.lead.deleted_at)

    def test_lead_code_is_sequential(self):
        """
        Test: Lead code derives from the primary key

        Expected: LEAD followed by the zero-padded id, stable across saves
        """
        self.assertEqual(self.lead.lead_code, f'LEAD{self.lead.pk:06d}')

        self.lead.name = 'Meera K Nair'
        self.lead.save()
        self.lead.refresh_from_db()
        self.assertEqual(self.lead.lead_code, f'LEAD{self.lead.pk:06d}')

    def test_lead_str_representation(self):
        self.assertEqual(str(self.lead), f'{self.lead.lead_code} Meera Nair (+919876543210)')

    def test_owner_prefers_sales(self):
        """
        Test: owner is the sales agent once there is one

        Expected: presales owner first, then sales owner
        """
        self.assertEqual(self.lead.owner, self.presales)

        self.lead.sales_owner = self.sales
        self.assertEqual(self.lead.owner, self.sales)

    def test_is_terminal(self):
        for slug, expected in ((Status.LEAD, False), (Status.QUALIFIED, False), (Status.WON, True), (Status.LOST, True)):
            with self.subTest(slug=slug):
                self.lead.lead_status = Status.objects.get(type=Status.TYPE_LEAD, slug=slug)
                self.assertEqual(self.lead.is_terminal(), expected)

    def test_needs_sales_owner(self):
        """
        Test: Qualified lead without a sales agent is flagged

        Expected: True only when qualified and unowned by sales
        """
        self.assertFalse(self.lead.needs_sales_owner())

        self.lead.is_qualified = True
        self.assertTrue(self.lead.needs_sales_owner())

        self.lead.sales_owner = self.sales
        self.assertFalse(self.lead.needs_sales_owner())

    def test_time_until_next_call(self):
        self.assertIsNone(self.lead.time_until_next_call())

        self.lead.next_call_at = timezone.now() - timedelta(minutes=5)
        self.assertEqual(self.lead.time_until_next_call(), 'Overdue')

        self.lead.next_call_at = timezone.now() + timedelta(days=2, minutes=1)
        self.assertEqual(self.lead.time_until_next_call(), 'In 2 days')

    def test_tags(self):
        self.lead.tags.add('onam-campaign')

        self.assertEqual(list(self.lead.tags.names()), ['onam-campaign'])


class CallLogModelTest(WorkflowFixturesMixin, TestCase):
    """Test CallLog model"""

    def setUp(self):
        self.build_reference_data()
        self.agent = self.make_agent('anu.joseph@homes.in', User.ROLE_PRESALES_AGENT, self.kochi)
        self.lead = Lead.objects.create(
            name='Meera Nair',
            phone='+919876543210',
            source=self.website,
            lead_status=Status.objects.get(type=Status.TYPE_LEAD, slug=Status.LEAD),
        )

    def test_call_code_and_str(self):
        call = CallLog.objects.create(
            agent=self.agent,
            lead=self.lead,
            connection=CallLog.CONNECTED,
            outcome=CallLog.OUTCOME_FOLLOW_UP,
        )

        self.assertEqual(call.call_code, f'CALL{call.pk:06d}')
        self.assertEqual(str(call), f'{call.call_code} Meera Nair: Follow Up')
        self.assertTrue(call.is_connected())

    def test_not_connected_str(self):
        call = CallLog.objects.create(agent=self.agent, lead=self.lead, connection=CallLog.NOT_CONNECTED)

        self.assertTrue(str(call).endswith('Not Connected'))
        self.assertFalse(call.is_connected())


class LeadActivityModelTest(WorkflowFixturesMixin, TestCase):
    """Test LeadActivity model"""

    def setUp(self):
        self.build_reference_data()
        self.agent = self.make_agent('anu.joseph@homes.in', User.ROLE_PRESALES_AGENT, self.kochi)
        self.lead = Lead.objects.create(
            name='Meera Nair',
            phone='+919876543210',
            source=self.website,
            lead_status=Status.objects.get(type=Status.TYPE_LEAD, slug=Status.LEAD),
        )

    def test_activity_is_append_only(self):
        """
        Test: Saved activity cannot be edited

        Expected: ValueError on a second save
        """
        activity = LeadActivity.objects.create(lead=self.lead, actor=self.agent, note='Lead created')

        activity.note = 'Edited'
        with self.assertRaises(ValueError):
            activity.save()

        activity.refresh_from_db()
        self.assertEqual(activity.note, 'Lead created')

    def test_activity_ordering(self):
        """
        Test: Activities are ordered newest first

        Expected: Most recent activity appears first
        """
        now = timezone.now()
        older = LeadActivity.objects.create(lead=self.lead, note='First', created_at=now - timedelta(hours=1))
        newer = LeadActivity.objects.create(lead=self.lead, note='Second', created_at=now)

        self.assertEqual(list(self.lead.get_activities()), [newer, older])

    def test_activity_str(self):
        activity = LeadActivity.objects.create(lead=self.lead, actor=self.agent, note='Lead created')

        self.assertEqual(str(activity), f'{self.agent.get_full_name()}: Lead created')
