"""
Lead Forms Tests
================

Tests for the payload forms behind the workflow operations.

Test Coverage:
1. LeadIntakeForm - Intake validation and phone normalization
2. CallOutcomeForm - Outcome rules and defaults
3. QualificationForm - Default decision
4. LanguageEvaluationForm - Comfort flag is mandatory
5. LeadUpdateForm - Partial edits

Run tests:
    python manage.py test apps.leads.tests.test_forms --settings=config.settings_test
"""

from django.test import TestCase

from apps.accounts.models import User
from apps.leads.forms import (
    CallOutcomeForm,
    LanguageEvaluationForm,
    LeadIntakeForm,
    LeadUpdateForm,
    QualificationForm,
)
from apps.leads.models import CallLog
from .helpers import WorkflowFixturesMixin


class LeadIntakeFormTest(WorkflowFixturesMixin, TestCase):
    """Test LeadIntakeForm validation"""

    def setUp(self):
        """Setup test data"""
        self.build_reference_data()

    def test_valid_form(self):
        """
        Test: Form with valid data is valid

        Expected: form.is_valid() returns True, team defaults to pre-sales
        """
        form = LeadIntakeForm(data=self.lead_payload(centre=self.kochi.pk, language=self.malayalam.pk))

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['team'], User.TEAM_PRESALES)

    def test_missing_required_fields(self):
        """
        Test: Form without required fields is invalid

        Expected: form.is_valid() returns False, errors present
        """
        form = LeadIntakeForm(data={})

        self.assertFalse(form.is_valid())
        self.assertIn('name', form.errors)
        self.assertIn('phone', form.errors)
        self.assertIn('source', form.errors)

    def test_phone_is_normalized(self):
        """
        Test: Spaces and dashes are stripped from phone numbers

        Expected: Digits only, leading + kept
        """
        form = LeadIntakeForm(data=self.lead_payload(phone='+91 98765-43210'))

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['phone'], '+919876543210')

    def test_invalid_phone(self):
        for phone in ('12345', 'call-me', '+91 98765 43210 12345 6'):
            with self.subTest(phone=phone):
                form = LeadIntakeForm(data=self.lead_payload(phone=phone))
                self.assertFalse(form.is_valid())
                self.assertIn('phone', form.errors)

    def test_email_is_lowercased(self):
        form = LeadIntakeForm(data=self.lead_payload(email='Meera@Example.COM'))

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['email'], 'meera@example.com')

    def test_inactive_centre_is_rejected(self):
        self.chennai.is_active = False
        self.chennai.save()

        form = LeadIntakeForm(data=self.lead_payload(centre=self.chennai.pk))

        self.assertFalse(form.is_valid())
        self.assertIn('centre', form.errors)


class CallOutcomeFormTest(WorkflowFixturesMixin, TestCase):
    """Test CallOutcomeForm rules"""

    def setUp(self):
        self.build_reference_data()

    def test_connected_call_needs_outcome(self):
        form = CallOutcomeForm(data={'connection': CallLog.CONNECTED})

        self.assertFalse(form.is_valid())
        self.assertIn('outcome', form.errors)

    def test_not_connected_call_has_no_outcome(self):
        form = CallOutcomeForm(data={'connection': CallLog.NOT_CONNECTED, 'outcome': CallLog.OUTCOME_WON})

        self.assertFalse(form.is_valid())
        self.assertIn('outcome', form.errors)

    def test_defaults(self):
        """
        Test: Call time and duration default when omitted

        Expected: called_at set, duration 0
        """
        form = CallOutcomeForm(data={'connection': CallLog.NOT_CONNECTED})

        self.assertTrue(form.is_valid(), form.errors)
        self.assertIsNotNone(form.cleaned_data['called_at'])
        self.assertEqual(form.cleaned_data['duration_seconds'], 0)

    def test_qualified_needs_all_qualification_fields(self):
        """
        Test: Qualified outcome without centre and language

        Expected: Invalid, missing fields reported in sorted order
        """
        form = CallOutcomeForm(data={
            'connection': CallLog.CONNECTED,
            'outcome': CallLog.OUTCOME_QUALIFIED,
            'value_tier': 'high',
        })

        self.assertFalse(form.is_valid())
        self.assertEqual(form.missing_qualification_fields(), ['centre', 'language'])

    def test_qualified_with_all_fields(self):
        form = CallOutcomeForm(data={
            'connection': CallLog.CONNECTED,
            'outcome': CallLog.OUTCOME_QUALIFIED,
            'value_tier': 'high',
            'centre': self.kochi.pk,
            'language': self.malayalam.pk,
        })

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.missing_qualification_fields(), [])

    def test_inactive_centre_is_invalid_not_missing(self):
        """
        Test: Qualified outcome naming an inactive centre

        Expected: Invalid choice on centre, nothing reported missing
        """
        self.chennai.is_active = False
        self.chennai.save()

        form = CallOutcomeForm(data={
            'connection': CallLog.CONNECTED,
            'outcome': CallLog.OUTCOME_QUALIFIED,
            'value_tier': 'high',
            'centre': self.chennai.pk,
            'language': self.malayalam.pk,
        })

        self.assertFalse(form.is_valid())
        self.assertIn('centre', form.errors)
        self.assertEqual(form.missing_qualification_fields(), [])

    def test_meeting_needs_a_time(self):
        form = CallOutcomeForm(data={'connection': CallLog.CONNECTED, 'outcome': CallLog.OUTCOME_MEETING})

        self.assertFalse(form.is_valid())
        self.assertIn('meeting_at', form.errors)

    def test_unknown_outcome(self):
        form = CallOutcomeForm(data={'connection': CallLog.CONNECTED, 'outcome': 'voicemail'})

        self.assertFalse(form.is_valid())
        self.assertIn('outcome', form.errors)


class DecisionFormsTest(WorkflowFixturesMixin, TestCase):
    """Test QualificationForm and LanguageEvaluationForm"""

    def setUp(self):
        self.build_reference_data()

    def test_missing_decision_means_qualified(self):
        form = QualificationForm(data={})

        self.assertTrue(form.is_valid(), form.errors)
        self.assertTrue(form.cleaned_data['is_qualified'])

    def test_explicit_not_qualified(self):
        form = QualificationForm(data={'is_qualified': 'false'})

        self.assertTrue(form.is_valid(), form.errors)
        self.assertFalse(form.cleaned_data['is_qualified'])

    def test_comfort_flag_is_required(self):
        form = LanguageEvaluationForm(data={'language': self.tamil.pk})

        self.assertFalse(form.is_valid())
        self.assertIn('is_comfortable', form.errors)

    def test_not_comfortable_is_a_valid_answer(self):
        form = LanguageEvaluationForm(data={'is_comfortable': 'false', 'language': self.tamil.pk})

        self.assertTrue(form.is_valid(), form.errors)
        self.assertFalse(form.cleaned_data['is_comfortable'])


class LeadUpdateFormTest(WorkflowFixturesMixin, TestCase):
    """Test LeadUpdateForm partial edits"""

    def setUp(self):
        self.build_reference_data()

    def test_only_sent_keys_are_submitted(self):
        form = LeadUpdateForm(data={'notes': 'Prefers evening calls'})

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.submitted(), {'notes': 'Prefers evening calls'})

    def test_blank_name_is_rejected(self):
        form = LeadUpdateForm(data={'name': '   '})

        self.assertFalse(form.is_valid())
        self.assertIn('name', form.errors)

    def test_phone_is_validated_when_sent(self):
        form = LeadUpdateForm(data={'phone': '123'})

        self.assertFalse(form.is_valid())
        self.assertIn('phone', form.errors)
