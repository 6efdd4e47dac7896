"""
Lead Workflow Facade.

Entry point for everything that changes a lead's owner or status. Each
mutating operation:

1. validates the payload (nothing is written when validation fails),
2. locks the lead row for the length of one transaction,
3. asks the state machine what the trigger does,
4. asks the assignment engine for an owner when one is needed,
5. saves the lead with a single UPDATE,
6. appends exactly one activity entry.

Usage:
    service = LeadWorkflowService()
    lead = service.record_call_outcome(lead.pk, {'connection': 'connected', 'outcome': 'follow_up'}, actor=request.user)
"""

import logging
from dataclasses import dataclass, field
from typing import List

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.directory import Directory
from apps.accounts.models import User
from apps.core.models import Status
from .assignment import AssignmentEngine
from .exceptions import (
    IncompleteQualificationData,
    LeadNotFound,
    NoEligibleAgent,
    StatusNotFound,
    WorkflowValidationError,
)
from .forms import (
    QUALIFICATION_FIELDS,
    CallOutcomeForm,
    LanguageEvaluationForm,
    LeadIntakeForm,
    LeadUpdateForm,
    QualificationForm,
    form_errors,
)
from .models import CallLog, Lead, LeadActivity
from .recorder import ActivityRecorder
from .transitions import WorkflowStateMachine

logger = logging.getLogger(__name__)


# Milestone timestamp stamped when a lead enters a status
MILESTONE_FIELDS = {
    Status.QUALIFIED: 'qualified_at',
    Status.WON: 'won_at',
    Status.LOST: 'lost_at',
}


@dataclass
class WorkflowStatus:
    """Read-only view of a lead and its latest activity, newest first"""
    lead: Lead
    activities: List[LeadActivity] = field(default_factory=list)


class LeadWorkflowService:

    def __init__(self, directory=None, engine=None, machine=None, recorder=None, clock=timezone.now):
        self.directory = directory or Directory(lock_rows=settings.LEAD_ASSIGNMENT_LOCK_AGENTS)
        self.engine = engine or AssignmentEngine(self.directory, clock=clock)
        self.machine = machine or WorkflowStateMachine()
        self.recorder = recorder or ActivityRecorder()
        self.clock = clock

    # LOOKUPS
    def _status(self, slug):
        try:
            return self.directory.find_status(slug)
        except Status.DoesNotExist:
            raise StatusNotFound(slug, Status.TYPE_LEAD)

    def _get_lead(self, lead_id, lock=True, include_archived=False):
        leads = Lead.objects.select_related('lead_status', 'source')
        if not include_archived:
            leads = leads.filter(deleted_at__isnull=True)
        if lock:
            leads = leads.select_for_update(of=('self',))
        try:
            return leads.get(pk=lead_id)
        except (Lead.DoesNotExist, ValueError):
            raise LeadNotFound(lead_id)

    def _validate(self, form_class, payload, **context):
        form = form_class(data=payload or {})
        if not form.is_valid():
            raise WorkflowValidationError(errors=form_errors(form), **context)
        return form

    # MUTATION HELPERS
    def _apply_transition(self, lead, transition, changed):
        """Copy a transition onto ``lead``; returns the fields it touched"""
        now = self.clock()

        if transition.status:
            lead.lead_status = self._status(transition.status)
            changed.append('lead_status')

            milestone = MILESTONE_FIELDS.get(transition.status)
            if milestone:
                setattr(lead, milestone, now)
                changed.append(milestone)

        if transition.substatus:
            lead.substatus = transition.substatus
            changed.append('substatus')

        if transition.next_call_at:
            lead.next_call_at = transition.next_call_at
            changed.append('next_call_at')

        if transition.cif_at:
            lead.cif_at = transition.cif_at
            changed.append('cif_at')

        if transition.qualifies:
            self._hand_over_to_sales(lead, changed)

        return changed

    def _hand_over_to_sales(self, lead, changed):
        """
        Qualified: release the pre-sales owner and pick a sales owner.

        When no sales agent is eligible the lead stays qualified without an
        owner; the pre-sales owner is released either way.
        """
        lead.is_qualified = True
        lead.presales_owner = None
        changed.extend(['is_qualified', 'presales_owner'])

        if lead.sales_owner_id:
            logger.info(f"Lead {lead.pk} keeps sales owner {lead.sales_owner_id} from intake")
            return

        try:
            lead.sales_owner = self.engine.select_agent(
                User.TEAM_SALES,
                centre=lead.centre_id,
                language=lead.language_id,
                value_tier=lead.value_tier,
            )
        except NoEligibleAgent as exc:
            logger.warning(f"Lead {lead.pk} qualified without a sales owner: {exc}")
            lead.sales_owner = None
        changed.append('sales_owner')

    def _save(self, lead, changed):
        lead.save(update_fields=list(dict.fromkeys(changed)) + ['updated_at'])

    @staticmethod
    def _qualification_note(lead):
        if lead.sales_owner_id:
            return f"Lead qualified and assigned to sales agent {lead.sales_owner.get_full_name()}"
        return 'Lead qualified; no eligible sales agent, left unassigned'

    # OPERATIONS
    @transaction.atomic
    def create_and_assign(self, payload, channel=Lead.CHANNEL_MANUAL, actor=None):
        """
        Create a lead with status ``lead`` and give it an owner.

        API leads always go to pre-sales with no filters. Manual and bulk
        leads go to the team named in the payload (pre-sales by default),
        filtered by centre and language, and by value tier for sales.

        Raises:
            WorkflowValidationError: invalid payload or unknown channel
            NoEligibleAgent: nobody can take the lead; nothing is created
        """
        if channel not in dict(Lead.CHANNEL_CHOICES):
            raise WorkflowValidationError(errors={'channel': [f"Unknown intake channel '{channel}'"]})

        payload = dict(payload or {})
        if isinstance(payload.get('tags'), (list, tuple)):
            payload['tags'] = ', '.join(payload['tags'])

        form = self._validate(LeadIntakeForm, payload, channel=channel)
        data = form.cleaned_data
        status = self._status(Status.LEAD)

        if channel == Lead.CHANNEL_API:
            team = User.TEAM_PRESALES
            agent = self.engine.select_agent(team)
        else:
            team = data['team']
            agent = self.engine.select_agent(
                team,
                centre=data.get('centre'),
                language=data.get('language'),
                value_tier=data.get('value_tier') if team == User.TEAM_SALES else None,
            )

        lead = form.save(commit=False)
        lead.lead_status = status
        lead.intake_channel = channel
        if team == User.TEAM_SALES:
            lead.sales_owner = agent
            owner_field = 'sales_owner'
        else:
            lead.presales_owner = agent
            owner_field = 'presales_owner'
        lead.save()
        form.save_m2m()

        logger.info(f"Lead {lead.lead_code} created via {channel}, {team} owner {agent.pk}")

        changed = ['lead_status', owner_field]
        changed.extend(name for name in QUALIFICATION_FIELDS if data.get(name))
        self.recorder.record(
            lead, actor,
            f"Lead created via {lead.get_intake_channel_display()} and assigned to {agent.get_full_name()}",
            changed,
        )
        return lead

    @transaction.atomic
    def evaluate_language_comfort(self, lead_id, payload, actor=None):
        """
        Record whether the lead is comfortable in the language offered.

        Not comfortable: the lead moves to the next pre-sales agent who speaks
        ``language`` (and works at ``centre`` when known). Comfortable: the
        language, centre and value tier are stored on the lead.
        """
        form = self._validate(LanguageEvaluationForm, payload, lead_id=lead_id)
        data = form.cleaned_data
        lead = self._get_lead(lead_id)

        changed = []
        lead.language = data['language']
        changed.append('language')
        if data.get('centre'):
            lead.centre = data['centre']
            changed.append('centre')

        if data['is_comfortable']:
            if data.get('value_tier'):
                lead.value_tier = data['value_tier']
                changed.append('value_tier')
            note = f"Lead comfortable in {lead.language.name}"

        elif lead.status_slug == Status.LEAD:
            agent = self.engine.select_agent(User.TEAM_PRESALES, centre=lead.centre_id, language=lead.language_id)
            lead.presales_owner = agent
            changed.append('presales_owner')
            # an unqualified lead has exactly one owner
            if lead.sales_owner_id:
                lead.sales_owner = None
                changed.append('sales_owner')
            note = f"Lead not comfortable in the current language; reassigned to {agent.get_full_name()} ({lead.language.name})"

        else:
            logger.info(f"Lead {lead.pk} is '{lead.status_slug}', language change does not reassign pre-sales")
            note = f"Lead prefers {lead.language.name}; no reassignment once '{lead.status_slug}'"

        if data.get('remarks'):
            note = f"{note}. {data['remarks']}"

        self._save(lead, changed)
        self.recorder.record(lead, actor, note, changed)
        return lead

    @transaction.atomic
    def qualify(self, lead_id, payload, actor=None):
        """
        Manual qualification decision.

        ``is_qualified=False`` marks the lead lost. Otherwise the submitted
        value tier, centre and language are merged over what the lead already
        has; all three must be known afterwards.

        Raises:
            IncompleteQualificationData: a qualification field is still unknown
        """
        form = self._validate(QualificationForm, payload, lead_id=lead_id)
        data = form.cleaned_data
        lead = self._get_lead(lead_id)

        if not data['is_qualified']:
            transition = self.machine.disqualification(lead.status_slug)
            changed = self._apply_transition(lead, transition, [])
            note = 'Lead marked not qualified' if not transition.skipped else f"Disqualification skipped: {transition.reason}"
        else:
            merged = {name: data.get(name) or getattr(lead, name) for name in QUALIFICATION_FIELDS}
            missing = [name for name, value in merged.items() if not value]
            if missing:
                raise IncompleteQualificationData(missing, lead_id=lead_id)

            transition = self.machine.qualification(lead.status_slug)
            if transition.skipped:
                changed = []
                note = f"Qualification skipped: {transition.reason}"
            else:
                changed = []
                for name, value in merged.items():
                    setattr(lead, name, value)
                    changed.append(name)
                self._apply_transition(lead, transition, changed)
                note = self._qualification_note(lead)

        if data.get('remarks'):
            note = f"{note}. {data['remarks']}"

        self._save(lead, changed)
        self.recorder.record(lead, actor, note, changed)
        return lead

    @transaction.atomic
    def record_call_outcome(self, lead_id, payload, actor):
        """
        Log a call and apply its outcome.

        The call log is always written, even when the outcome does not apply
        to the lead's current status (the status then stays as it is).
        """
        if actor is None:
            raise WorkflowValidationError(errors={'agent': ['A call must be logged by an agent']}, lead_id=lead_id)

        form = CallOutcomeForm(data=payload or {})
        if not form.is_valid():
            missing = form.missing_qualification_fields()
            if missing:
                raise IncompleteQualificationData(missing, lead_id=lead_id)
            raise WorkflowValidationError(errors=form_errors(form), lead_id=lead_id)
        data = form.cleaned_data

        lead = self._get_lead(lead_id)

        call = CallLog.objects.create(
            agent=actor,
            lead=lead,
            called_at=data['called_at'],
            duration_seconds=data['duration_seconds'],
            connection=data['connection'],
            outcome=data.get('outcome') or '',
            next_call_at=data.get('next_call_at'),
            site_visit_at=data.get('site_visit_at'),
            meeting_at=data.get('meeting_at'),
            cif_at=data.get('cif_at'),
            value_tier=data.get('value_tier') or '',
            centre=data.get('centre'),
            language=data.get('language'),
            remarks=data.get('remarks') or '',
        )

        transition = self.machine.call_outcome(
            lead.status_slug,
            data['connection'],
            data.get('outcome'),
            next_call_at=data.get('next_call_at'),
            site_visit_at=data.get('site_visit_at'),
            meeting_at=data.get('meeting_at'),
            cif_at=data.get('cif_at'),
            now=self.clock(),
        )

        changed = []
        if transition.qualifies:
            for name in QUALIFICATION_FIELDS:
                setattr(lead, name, data[name])
                changed.append(name)
        self._apply_transition(lead, transition, changed)

        extra = {}
        if call.outcome == CallLog.OUTCOME_SITE_VISIT and not transition.skipped:
            extra.update(site_visit=True, site_visit_at=call.site_visit_at)
        if call.outcome == CallLog.OUTCOME_MEETING and not transition.skipped:
            extra.update(meeting=True, meeting_at=call.meeting_at)
        if data.get('is_completed') is not None:
            extra['is_completed'] = data['is_completed']

        label = call.get_outcome_display() if call.outcome else call.get_connection_display()
        if transition.skipped:
            note = f"{call.call_code} {label}: status unchanged ({transition.reason})"
        elif transition.qualifies:
            note = f"{call.call_code} {label}: {self._qualification_note(lead)}"
        else:
            note = f"{call.call_code} {label}"
        if call.remarks:
            note = f"{note}. {call.remarks}"

        self._save(lead, changed)
        self.recorder.record(lead, actor, note, changed, **extra)
        return lead

    @transaction.atomic
    def update_lead(self, lead_id, payload, actor=None):
        """
        Direct edit of contact and scheduling fields.

        On a lead still in ``lead`` status, value tier, centre and language
        sent together qualify it exactly like a qualified call; sending only
        some of them is rejected.
        """
        form = self._validate(LeadUpdateForm, payload, lead_id=lead_id)
        submitted = form.submitted()
        lead = self._get_lead(lead_id)

        qualification = {name: submitted[name] for name in QUALIFICATION_FIELDS if submitted.get(name)}
        qualifying = lead.status_slug == Status.LEAD and qualification

        if qualifying and len(qualification) < len(QUALIFICATION_FIELDS):
            missing = [name for name in QUALIFICATION_FIELDS if name not in qualification]
            raise IncompleteQualificationData(missing, lead_id=lead_id)

        changed = []
        for name, value in submitted.items():
            # a blank qualification value never clears what the lead has
            if name in QUALIFICATION_FIELDS and not value:
                continue
            setattr(lead, name, value)
            changed.append(name)

        note = 'Lead details updated'
        if qualifying:
            transition = self.machine.qualification(lead.status_slug)
            self._apply_transition(lead, transition, changed)
            note = self._qualification_note(lead)

        self._save(lead, changed)
        self.recorder.record(lead, actor, note, changed)
        return lead

    @transaction.atomic
    def archive_lead(self, lead_id, actor=None):
        """Soft delete: no further workflow operations, but get_workflow_status still reads the lead and its history"""
        lead = self._get_lead(lead_id)
        lead.deleted_at = self.clock()
        self._save(lead, ['deleted_at'])

        logger.info(f"Lead {lead.lead_code} archived")
        self.recorder.record(lead, actor, 'Lead archived')
        return lead

    def get_workflow_status(self, lead_id):
        lead = self._get_lead(lead_id, lock=False, include_archived=True)
        activities = list(lead.get_activities()[:settings.LEAD_RECENT_ACTIVITY_LIMIT])
        return WorkflowStatus(lead=lead, activities=activities)
