import uuid

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from apps.accounts.models import User
from apps.core.models import Centre, Language, LeadSource, Status
from taggit.managers import TaggableManager


# Lead value tiers, shared by Lead, CallLog and LeadActivity
VALUE_HIGH = 'high'
VALUE_MEDIUM = 'medium'
VALUE_LOW = 'low'
VALUE_TIER_CHOICES = [
    (VALUE_HIGH, _('High Value')),
    (VALUE_MEDIUM, _('Medium Value')),
    (VALUE_LOW, _('Low Value')),
]

SUBSTATUS_CHOICES = [
    (Status.HOT, _('Hot')),
    (Status.WARM, _('Warm')),
    (Status.CIF, _('CIF')),
]


class Lead(models.Model):

    # Intake channel (how the lead entered the pipeline)
    CHANNEL_MANUAL = 'manual'
    CHANNEL_BULK_IMPORT = 'bulk_import'
    CHANNEL_API = 'api'
    CHANNEL_CHOICES = [
        (CHANNEL_MANUAL, _('Manual Entry')),
        (CHANNEL_BULK_IMPORT, _('Bulk Import')),
        (CHANNEL_API, _('API Integration')),
    ]

    # Basic Information
    lead_code = models.CharField(max_length=20, unique=True, null=True, blank=True, editable=False, help_text='Sequential reference, e.g. LEAD000042')
    name = models.CharField(max_length=200, help_text="Lead's full name")
    phone = models.CharField(max_length=20, db_index=True, help_text='Phone number in international format')
    email = models.EmailField(blank=True, null=True, help_text='Email address (optional)')

    # Classification
    source = models.ForeignKey(LeadSource, on_delete=models.PROTECT, related_name='leads', help_text='Where did this lead come from?')
    intake_channel = models.CharField(max_length=20, choices=CHANNEL_CHOICES, default=CHANNEL_MANUAL, help_text='How the lead entered the pipeline')
    lead_status = models.ForeignKey(Status, on_delete=models.PROTECT, related_name='leads', limit_choices_to={'type': Status.TYPE_LEAD}, help_text='Current pipeline status')
    substatus = models.CharField(max_length=10, choices=SUBSTATUS_CHOICES, blank=True, help_text='Urgency once qualified')
    is_qualified = models.BooleanField(default=False, db_index=True)

    # Qualification data
    language = models.ForeignKey(Language, on_delete=models.SET_NULL, null=True, blank=True, related_name='leads')
    centre = models.ForeignKey(Centre, on_delete=models.SET_NULL, null=True, blank=True, related_name='leads')
    value_tier = models.CharField(max_length=10, choices=VALUE_TIER_CHOICES, blank=True, help_text='Estimated deal value')

    # Ownership
    presales_owner = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='presales_leads', db_index=True, help_text='Pre-sales agent working the lead until qualification')
    sales_owner = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales_leads', db_index=True, help_text='Sales agent owning the lead after qualification')

    # Scheduling & milestones
    next_call_at = models.DateTimeField(null=True, blank=True, db_index=True, help_text='When is the next call, site visit or meeting?')
    cif_at = models.DateTimeField(null=True, blank=True, help_text='When the customer information form was collected')
    qualified_at = models.DateTimeField(null=True, blank=True)
    won_at = models.DateTimeField(null=True, blank=True)
    lost_at = models.DateTimeField(null=True, blank=True)

    # Additional Information
    notes = models.TextField(blank=True, help_text='General notes about this lead')
    tags = TaggableManager(blank=True, help_text='Campaign / ad set labels')

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True, help_text='Tombstone; leads are never hard-deleted')

    class Meta:
        verbose_name = 'Lead'
        verbose_name_plural = 'Leads'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['lead_status', 'substatus'], name='lead_status_substatus_idx'),
            models.Index(fields=['presales_owner', 'lead_status'], name='lead_presales_status_idx'),
            models.Index(fields=['sales_owner', 'lead_status'], name='lead_sales_status_idx'),
        ]

    def __str__(self):
        """String representation: LEAD000001 Name (Phone)"""
        return f"{self.lead_code or 'LEAD?'} {self.name} ({self.phone})"

    def save(self, *args, **kwargs):
        creating = self._state.adding
        super().save(*args, **kwargs)

        if creating and not self.lead_code:
            self.lead_code = f"LEAD{self.pk:06d}"
            super().save(update_fields=['lead_code'])

    @property
    def status_slug(self):
        return self.lead_status.slug

    @property
    def owner(self):
        """Whoever currently works the lead"""
        return self.sales_owner or self.presales_owner

    def is_terminal(self):
        return self.status_slug in Status.TERMINAL_SLUGS

    def is_deleted(self):
        return self.deleted_at is not None

    def needs_sales_owner(self):
        """Qualified, but no sales agent was eligible at qualification time"""
        return self.is_qualified and self.sales_owner_id is None

    def get_activities(self):
        """Get all activities for this lead (ordered newest first)"""
        return self.activities.all().select_related('actor', 'lead_status', 'sales_owner', 'presales_owner').order_by('-created_at', '-pk')

    def time_until_next_call(self):
        """Returns time until the next scheduled call"""
        if not self.next_call_at:
            return None

        delta = self.next_call_at - timezone.now()

        if delta.total_seconds() < 0:
            return "Overdue"

        if delta.days > 0:
            return f"In {delta.days} day{'s' if delta.days > 1 else ''}"
        elif delta.seconds >= 3600:
            hours = delta.seconds // 3600
            return f"In {hours} hour{'s' if hours > 1 else ''}"
        else:
            minutes = delta.seconds // 60
            return f"In {minutes} minute{'s' if minutes > 1 else ''}"


class CallLog(models.Model):

    CONNECTED = 'connected'
    NOT_CONNECTED = 'not_connected'
    CONNECTION_CHOICES = [
        (CONNECTED, _('Connected')),
        (NOT_CONNECTED, _('Not Connected')),
    ]

    OUTCOME_QUALIFIED = 'qualified'
    OUTCOME_FOLLOW_UP = 'follow_up'
    OUTCOME_NOT_INTERESTED = 'not_interested'
    OUTCOME_SITE_VISIT = 'site_visit'
    OUTCOME_MEETING = 'meeting_scheduled'
    OUTCOME_CIF = 'cif'
    OUTCOME_WON = 'won'
    OUTCOME_CHOICES = [
        (OUTCOME_QUALIFIED, _('Qualified')),
        (OUTCOME_FOLLOW_UP, _('Follow Up')),
        (OUTCOME_NOT_INTERESTED, _('Not Interested')),
        (OUTCOME_SITE_VISIT, _('Site Visit Scheduled')),
        (OUTCOME_MEETING, _('Meeting Scheduled')),
        (OUTCOME_CIF, _('CIF Collected')),
        (OUTCOME_WON, _('Won')),
    ]

    call_code = models.CharField(max_length=20, unique=True, null=True, blank=True, editable=False)
    agent = models.ForeignKey(User, on_delete=models.PROTECT, related_name='call_logs', help_text='Agent who made or took the call')
    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name='call_logs')
    called_at = models.DateTimeField(default=timezone.now, db_index=True)
    duration_seconds = models.PositiveIntegerField(default=0)
    connection = models.CharField(max_length=20, choices=CONNECTION_CHOICES)
    outcome = models.CharField(max_length=20, choices=OUTCOME_CHOICES, blank=True, help_text='Required when the call connected')

    # Scheduling payload
    next_call_at = models.DateTimeField(null=True, blank=True)
    site_visit_at = models.DateTimeField(null=True, blank=True)
    meeting_at = models.DateTimeField(null=True, blank=True)
    cif_at = models.DateTimeField(null=True, blank=True)

    # Qualification payload
    value_tier = models.CharField(max_length=10, choices=VALUE_TIER_CHOICES, blank=True)
    centre = models.ForeignKey(Centre, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    language = models.ForeignKey(Language, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')

    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Call Log'
        verbose_name_plural = 'Call Logs'
        ordering = ['-called_at']
        indexes = [
            models.Index(fields=['lead', '-called_at'], name='calllog_lead_called_idx'),
            models.Index(fields=['agent', '-called_at'], name='calllog_agent_called_idx'),
        ]

    def __str__(self):
        outcome = self.get_outcome_display() if self.outcome else self.get_connection_display()
        return f"{self.call_code or 'CALL?'} {self.lead.name}: {outcome}"

    def save(self, *args, **kwargs):
        creating = self._state.adding
        super().save(*args, **kwargs)

        if creating and not self.call_code:
            self.call_code = f"CALL{self.pk:06d}"
            super().save(update_fields=['call_code'])

    def is_connected(self):
        return self.connection == self.CONNECTED


class LeadActivity(models.Model):
    """
    Append-only audit entry.

    Holds a point-in-time copy of the lead's identity plus whichever fields
    the triggering operation changed; it never follows later edits of the
    lead.
    """

    # Copied onto an entry when listed as changed
    SNAPSHOT_FIELDS = (
        'lead_status',
        'substatus',
        'presales_owner',
        'sales_owner',
        'language',
        'centre',
        'value_tier',
        'next_call_at',
        'site_visit',
        'site_visit_at',
        'meeting',
        'meeting_at',
        'cif_at',
        'is_completed',
    )

    entry_key = models.UUIDField(default=uuid.uuid4, unique=True, editable=False, help_text='Idempotency key; a retried write never duplicates an entry')
    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name='activities')
    actor = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='lead_activities', help_text='Who performed this action (empty for system)')
    note = models.TextField(help_text='Human-readable description of what happened')
    changed_fields = models.JSONField(default=list, blank=True, help_text='Names of the lead fields this entry snapshots')

    # Identity snapshot
    name = models.CharField(max_length=200, blank=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True)
    source = models.ForeignKey(LeadSource, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')

    # Changed-field snapshot
    lead_status = models.ForeignKey(Status, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    substatus = models.CharField(max_length=10, choices=SUBSTATUS_CHOICES, blank=True)
    presales_owner = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    sales_owner = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    language = models.ForeignKey(Language, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    centre = models.ForeignKey(Centre, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    value_tier = models.CharField(max_length=10, choices=VALUE_TIER_CHOICES, blank=True)
    next_call_at = models.DateTimeField(null=True, blank=True)
    site_visit = models.BooleanField(null=True, blank=True)
    site_visit_at = models.DateTimeField(null=True, blank=True)
    meeting = models.BooleanField(null=True, blank=True)
    meeting_at = models.DateTimeField(null=True, blank=True)
    cif_at = models.DateTimeField(null=True, blank=True)
    is_completed = models.BooleanField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True, help_text='When did this activity occur')

    class Meta:
        verbose_name = 'Lead Activity'
        verbose_name_plural = 'Lead Activities'
        ordering = ['-created_at', '-pk']
        indexes = [
            models.Index(fields=['lead', '-created_at'], name='activity_lead_created_idx'),
            models.Index(fields=['actor', '-created_at'], name='activity_actor_created_idx'),
        ]

    def __str__(self):
        actor_name = self.actor.get_full_name() if self.actor else 'System'
        return f"{actor_name}: {self.note}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError('Lead activity entries are append-only and cannot be changed')
        super().save(*args, **kwargs)
