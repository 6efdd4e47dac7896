from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone
from .models import Lead, CallLog, VALUE_TIER_CHOICES
from apps.core.models import Centre, Language, LeadSource
from apps.accounts.models import User


QUALIFICATION_FIELDS = ('value_tier', 'centre', 'language')


def normalize_phone(phone):
    phone = (phone or '').strip().replace(' ', '').replace('-', '')

    digits = phone[1:] if phone.startswith('+') else phone
    if not digits.isdigit():
        raise ValidationError('Phone number must contain only digits (optionally starting with +)')

    if len(digits) < 9 or len(digits) > 15:
        raise ValidationError('Phone number must be between 9 and 15 digits')

    return phone


def form_errors(form):
    """Plain {field: [messages]} dict for error payloads"""
    return {field: [str(message) for message in messages] for field, messages in form.errors.items()}


class LeadIntakeForm(forms.ModelForm):
    """New lead, from the CRM screens, a bulk import row or the webhook"""

    team = forms.ChoiceField(choices=User.TEAM_CHOICES, required=False, help_text='Team that receives the lead (pre-sales unless stated)')

    class Meta:
        model = Lead
        fields = ['name', 'phone', 'email', 'source', 'language', 'centre', 'value_tier', 'notes', 'tags']

        error_messages = {
            'name': {'required': 'Name is required', 'max_length': 'Name is too long (max 200 characters)'},
            'phone': {'required': 'Phone number is required'},
            'source': {'required': 'Lead source is required'},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['source'].queryset = LeadSource.objects.filter(is_active=True)
        self.fields['language'].queryset = Language.objects.filter(is_active=True)
        self.fields['centre'].queryset = Centre.objects.filter(is_active=True)

    def clean_phone(self):
        return normalize_phone(self.cleaned_data.get('phone'))

    def clean_email(self):
        email = self.cleaned_data.get('email')
        if email:
            return email.strip().lower()
        return None

    def clean_team(self):
        return self.cleaned_data.get('team') or User.TEAM_PRESALES


class CallOutcomeForm(forms.Form):

    connection = forms.ChoiceField(choices=CallLog.CONNECTION_CHOICES)
    outcome = forms.ChoiceField(choices=CallLog.OUTCOME_CHOICES, required=False)
    called_at = forms.DateTimeField(required=False)
    duration_seconds = forms.IntegerField(required=False, min_value=0)

    next_call_at = forms.DateTimeField(required=False)
    site_visit_at = forms.DateTimeField(required=False)
    meeting_at = forms.DateTimeField(required=False)
    cif_at = forms.DateTimeField(required=False)
    is_completed = forms.NullBooleanField(required=False, help_text='Site visit or meeting already took place')

    value_tier = forms.ChoiceField(choices=VALUE_TIER_CHOICES, required=False)
    centre = forms.ModelChoiceField(queryset=Centre.objects.filter(is_active=True), required=False)
    language = forms.ModelChoiceField(queryset=Language.objects.filter(is_active=True), required=False)

    remarks = forms.CharField(required=False, widget=forms.Textarea)

    def missing_qualification_fields(self):
        if self.data.get('outcome') != CallLog.OUTCOME_QUALIFIED:
            return []
        # a sent but invalid value is a validation error, not a missing field
        return [name for name in QUALIFICATION_FIELDS if self.data.get(name) in (None, '')]

    def clean(self):
        cleaned_data = super().clean()
        connection = cleaned_data.get('connection')
        outcome = cleaned_data.get('outcome')

        if connection == CallLog.CONNECTED and not outcome:
            self.add_error('outcome', 'Outcome is required for a connected call')

        if connection == CallLog.NOT_CONNECTED and outcome:
            self.add_error('outcome', 'A call that did not connect has no outcome')

        if outcome == CallLog.OUTCOME_QUALIFIED:
            for name in QUALIFICATION_FIELDS:
                if not cleaned_data.get(name):
                    self.add_error(name, 'Required for qualification')

        if outcome == CallLog.OUTCOME_SITE_VISIT and not cleaned_data.get('site_visit_at'):
            self.add_error('site_visit_at', 'Site visit time is required')

        if outcome == CallLog.OUTCOME_MEETING and not cleaned_data.get('meeting_at'):
            self.add_error('meeting_at', 'Meeting time is required')

        if not cleaned_data.get('called_at'):
            cleaned_data['called_at'] = timezone.now()

        if cleaned_data.get('duration_seconds') is None:
            cleaned_data['duration_seconds'] = 0

        return cleaned_data


class QualificationForm(forms.Form):
    """Manual qualification decision; a missing is_qualified means "qualified"."""

    is_qualified = forms.NullBooleanField(required=False)
    value_tier = forms.ChoiceField(choices=VALUE_TIER_CHOICES, required=False)
    centre = forms.ModelChoiceField(queryset=Centre.objects.filter(is_active=True), required=False)
    language = forms.ModelChoiceField(queryset=Language.objects.filter(is_active=True), required=False)
    remarks = forms.CharField(required=False)

    def clean_is_qualified(self):
        value = self.cleaned_data.get('is_qualified')
        return True if value is None else value


class LanguageEvaluationForm(forms.Form):

    is_comfortable = forms.NullBooleanField()
    language = forms.ModelChoiceField(queryset=Language.objects.filter(is_active=True))
    centre = forms.ModelChoiceField(queryset=Centre.objects.filter(is_active=True), required=False)
    value_tier = forms.ChoiceField(choices=VALUE_TIER_CHOICES, required=False)
    remarks = forms.CharField(required=False)

    def clean_is_comfortable(self):
        value = self.cleaned_data.get('is_comfortable')
        if value is None:
            raise ValidationError('State whether the lead is comfortable with the language')
        return value


class LeadUpdateForm(forms.Form):
    """
    Partial edit of a lead.

    Only keys present in the submitted data are applied; see
    ``submitted``.
    """

    name = forms.CharField(max_length=200, required=False)
    phone = forms.CharField(max_length=20, required=False)
    email = forms.EmailField(required=False)
    notes = forms.CharField(required=False)
    next_call_at = forms.DateTimeField(required=False)

    value_tier = forms.ChoiceField(choices=VALUE_TIER_CHOICES, required=False)
    centre = forms.ModelChoiceField(queryset=Centre.objects.filter(is_active=True), required=False)
    language = forms.ModelChoiceField(queryset=Language.objects.filter(is_active=True), required=False)

    def clean_name(self):
        name = (self.cleaned_data.get('name') or '').strip()
        if 'name' in self.data and not name:
            raise ValidationError('Name cannot be blank')
        return name

    def clean_phone(self):
        if 'phone' not in self.data:
            return ''
        return normalize_phone(self.cleaned_data.get('phone'))

    def clean_email(self):
        email = self.cleaned_data.get('email')
        if email:
            return email.strip().lower()
        return None

    def submitted(self):
        """Cleaned values for the keys the caller actually sent"""
        return {name: value for name, value in self.cleaned_data.items() if name in self.data}
