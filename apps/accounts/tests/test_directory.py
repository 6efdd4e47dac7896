"""
Directory Service Tests
=======================

Agent lookup by team, centre, language and qualification, the rotation
order, and the cursor write.

Run tests:
    python manage.py test apps.accounts.tests.test_directory --settings=config.settings_test
"""

from datetime import timedelta

from django.db import transaction
from django.test import TestCase
from django.utils import timezone

from apps.accounts.directory import AgentFilters, Directory
from apps.accounts.models import User
from apps.core.models import Status
from apps.leads.tests.helpers import WorkflowFixturesMixin


class AgentFiltersTest(TestCase):

    def test_build_accepts_instances_and_pks(self):
        from apps.core.models import Centre

        centre = Centre.objects.create(name='Kochi')
        filters = AgentFilters.build(centre=centre, language=7, value_tier='')

        self.assertEqual(filters.centre_id, centre.pk)
        self.assertEqual(filters.language_id, 7)
        self.assertIsNone(filters.value_tier)
        self.assertEqual(filters.as_dict(), {'centre_id': centre.pk, 'language_id': 7})

    def test_empty_filters_description(self):
        self.assertEqual(str(AgentFilters()), 'no filters')


class FindAgentsTest(WorkflowFixturesMixin, TestCase):

    def setUp(self):
        self.build_reference_data()
        self.directory = Directory()
        now = timezone.now()

        self.presales = self.make_agent('anu.joseph@homes.in', User.ROLE_PRESALES_AGENT, self.kochi, [self.malayalam])
        self.presales_manager = self.make_agent('ravi.menon@homes.in', User.ROLE_PRESALES_MANAGER, self.kochi, [self.malayalam])
        self.sales_high = self.make_agent(
            'deepa.pillai@homes.in', User.ROLE_SALES_AGENT, self.kochi, [self.malayalam],
            qualification=User.QUALIFICATION_HIGH_VALUE, last_assigned_at=now - timedelta(hours=1),
        )
        self.sales_low = self.make_agent(
            'arun.kumar@homes.in', User.ROLE_SALES_AGENT, self.kochi, [self.malayalam, self.tamil],
            qualification=User.QUALIFICATION_LOW_VALUE, last_assigned_at=now - timedelta(hours=2),
        )
        self.sales_chennai = self.make_agent(
            'priya.raman@homes.in', User.ROLE_SALES_MANAGER, self.chennai, [self.tamil],
            qualification=User.QUALIFICATION_HIGH_VALUE,
        )
        self.inactive = self.make_agent(
            'old.agent@homes.in', User.ROLE_SALES_AGENT, self.kochi, [self.malayalam],
            qualification=User.QUALIFICATION_HIGH_VALUE, is_active=False,
        )
        self.admin = self.make_agent('admin.user@homes.in', User.ROLE_ADMIN, self.kochi, [self.malayalam])

    def test_team_membership_comes_from_role(self):
        presales = self.directory.find_agents(User.TEAM_PRESALES, AgentFilters())

        self.assertEqual(set(presales), {self.presales, self.presales_manager})
        self.assertEqual(self.presales_manager.team, User.TEAM_PRESALES)
        self.assertIsNone(self.admin.team)

    def test_inactive_agents_are_never_candidates(self):
        sales = self.directory.find_agents(User.TEAM_SALES, AgentFilters())

        self.assertNotIn(self.inactive, sales)

    def test_centre_and_language_filters(self):
        filters = AgentFilters.build(centre=self.kochi, language=self.tamil)

        self.assertEqual(self.directory.find_agents(User.TEAM_SALES, filters), [self.sales_low])

    def test_high_value_tier_needs_high_value_agents(self):
        filters = AgentFilters.build(centre=self.kochi, value_tier='high')

        self.assertEqual(self.directory.find_agents(User.TEAM_SALES, filters), [self.sales_high])

    def test_medium_value_tier_goes_to_low_value_agents(self):
        filters = AgentFilters.build(centre=self.kochi, value_tier='medium')

        self.assertEqual(self.directory.find_agents(User.TEAM_SALES, filters), [self.sales_low])

    def test_value_tier_is_ignored_for_presales(self):
        filters = AgentFilters.build(value_tier='high')

        self.assertEqual(len(self.directory.find_agents(User.TEAM_PRESALES, filters)), 2)

    def test_rotation_order_never_assigned_first_then_oldest(self):
        sales = self.directory.find_agents(User.TEAM_SALES, AgentFilters())

        self.assertEqual(sales, [self.sales_chennai, self.sales_low, self.sales_high])

    def test_ties_are_broken_by_primary_key(self):
        presales = self.directory.find_agents(User.TEAM_PRESALES, AgentFilters())

        self.assertEqual(presales, [self.presales, self.presales_manager])

    def test_unknown_team(self):
        with self.assertRaises(ValueError):
            self.directory.find_agents('marketing', AgentFilters())

    def test_locking_mode_returns_same_candidates(self):
        with transaction.atomic():
            locked = Directory(lock_rows=True).find_agents(User.TEAM_SALES, AgentFilters())

        self.assertEqual(locked, self.directory.find_agents(User.TEAM_SALES, AgentFilters()))


class TouchAssignmentTest(WorkflowFixturesMixin, TestCase):

    def setUp(self):
        self.build_reference_data()
        self.agent = self.make_agent('anu.joseph@homes.in', User.ROLE_PRESALES_AGENT, self.kochi)
        self.other = self.make_agent('ravi.menon@homes.in', User.ROLE_PRESALES_AGENT, self.kochi)

    def test_moves_cursor_and_counts_assignment(self):
        now = timezone.now()

        self.assertTrue(Directory().touch_assignment(self.agent.pk, now))

        self.agent.refresh_from_db()
        self.other.refresh_from_db()
        self.assertEqual(self.agent.last_assigned_at, now)
        self.assertEqual(self.agent.total_leads_assigned, 1)
        self.assertIsNone(self.other.last_assigned_at)

    def test_unknown_agent(self):
        self.assertFalse(Directory().touch_assignment(999999, timezone.now()))


class FindStatusTest(TestCase):

    def test_resolves_seeded_lead_status(self):
        status = Directory().find_status(Status.QUALIFIED)

        self.assertEqual(status.type, Status.TYPE_LEAD)

    def test_substatus_slug_is_not_a_lead_status(self):
        with self.assertRaises(Status.DoesNotExist):
            Directory().find_status(Status.HOT)

    def test_inactive_status_is_not_found(self):
        Status.objects.filter(type=Status.TYPE_LEAD, slug=Status.LOST).update(is_active=False)

        with self.assertRaises(Status.DoesNotExist):
            Directory().find_status(Status.LOST)
