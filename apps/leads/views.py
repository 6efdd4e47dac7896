import json
import logging
from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.utils.crypto import constant_time_compare
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from apps.core.models import LeadSource
from .exceptions import NoEligibleAgent, NotFoundError, WorkflowError, WorkflowValidationError
from .models import Lead
from .services import LeadWorkflowService

logger = logging.getLogger(__name__)


def _iso(value):
    return value.isoformat() if value else None


def lead_to_dict(lead):
    return {
        'id': lead.pk,
        'lead_code': lead.lead_code,
        'name': lead.name,
        'phone': lead.phone,
        'email': lead.email,
        'source': lead.source.name,
        'intake_channel': lead.intake_channel,
        'status': lead.status_slug,
        'substatus': lead.substatus or None,
        'is_qualified': lead.is_qualified,
        'value_tier': lead.value_tier or None,
        'centre_id': lead.centre_id,
        'language_id': lead.language_id,
        'presales_owner_id': lead.presales_owner_id,
        'sales_owner_id': lead.sales_owner_id,
        'next_call_at': _iso(lead.next_call_at),
        'cif_at': _iso(lead.cif_at),
        'qualified_at': _iso(lead.qualified_at),
        'won_at': _iso(lead.won_at),
        'lost_at': _iso(lead.lost_at),
        'archived_at': _iso(lead.deleted_at),
        'tags': sorted(lead.tags.names()),
        'created_at': _iso(lead.created_at),
        'updated_at': _iso(lead.updated_at),
    }


def activity_to_dict(activity):
    return {
        'id': activity.pk,
        'entry_key': str(activity.entry_key),
        'note': activity.note,
        'actor_id': activity.actor_id,
        'changed_fields': activity.changed_fields,
        'status': activity.lead_status.slug if activity.lead_status_id else None,
        'substatus': activity.substatus or None,
        'presales_owner_id': activity.presales_owner_id,
        'sales_owner_id': activity.sales_owner_id,
        'next_call_at': _iso(activity.next_call_at),
        'created_at': _iso(activity.created_at),
    }


def _error_response(exc):
    if isinstance(exc, WorkflowValidationError):
        status = 400
    elif isinstance(exc, NotFoundError):
        status = 404
    elif isinstance(exc, NoEligibleAgent):
        status = 409
    else:
        status = 500

    return JsonResponse({'status': 'error', **exc.as_dict()}, status=status)


def _parse_json(request):
    try:
        payload = json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def _invalid_json():
    return JsonResponse({
        'status': 'error',
        'message': 'Invalid JSON payload'
    }, status=400)


@csrf_exempt
@require_http_methods(["POST"])
def lead_intake_webhook(request):
    """
    Create a lead from an ad platform or website form.

    Expects JSON: {"name": ..., "phone": ..., "email": ..., "source": "Facebook", "tags": [...]}
    Unknown sources are created on the fly and flagged as API sources.
    """
    secret = settings.LEAD_INTAKE_SECRET
    if secret and not constant_time_compare(request.headers.get('X-Intake-Secret', ''), secret):
        logger.error("Lead intake rejected: bad or missing secret")
        return JsonResponse({
            'status': 'error',
            'message': 'Invalid intake secret'
        }, status=401)

    payload = _parse_json(request)
    if payload is None:
        logger.error("Lead intake rejected: invalid JSON")
        return _invalid_json()

    source_name = (payload.pop('source', '') or '').strip()
    if not source_name:
        return JsonResponse({
            'status': 'error',
            'message': 'Source is required',
            'errors': {'source': ['Source is required']}
        }, status=400)

    source, created = LeadSource.objects.get_or_create(
        name=source_name,
        defaults={'is_api_source': True}
    )
    if created:
        logger.info(f"New lead source created from intake: {source.name}")

    payload['source'] = source.pk

    try:
        lead = LeadWorkflowService().create_and_assign(payload, channel=Lead.CHANNEL_API)
    except WorkflowError as exc:
        logger.warning(f"Lead intake failed: {exc}")
        return _error_response(exc)

    return JsonResponse({'status': 'success', 'lead': lead_to_dict(lead)}, status=201)


@login_required
@require_http_methods(["POST"])
def lead_create_view(request):
    """Manual entry from the CRM; ``team`` may route the lead straight to sales"""
    payload = _parse_json(request)
    if payload is None:
        return _invalid_json()

    try:
        lead = LeadWorkflowService().create_and_assign(payload, channel=Lead.CHANNEL_MANUAL, actor=request.user)
    except WorkflowError as exc:
        return _error_response(exc)

    return JsonResponse({'status': 'success', 'lead': lead_to_dict(lead)}, status=201)


def _lead_operation(operation):
    """Wrap a facade operation taking (lead_id, payload, actor) as a JSON POST view"""

    @login_required
    @require_http_methods(["POST"])
    def view(request, pk):
        payload = _parse_json(request)
        if payload is None:
            return _invalid_json()

        service = LeadWorkflowService()
        try:
            lead = getattr(service, operation)(pk, payload, actor=request.user)
        except WorkflowError as exc:
            return _error_response(exc)

        return JsonResponse({'status': 'success', 'lead': lead_to_dict(lead)})

    view.__name__ = f'{operation}_view'
    return view


lead_call_outcome_view = _lead_operation('record_call_outcome')
lead_qualify_view = _lead_operation('qualify')
lead_language_evaluation_view = _lead_operation('evaluate_language_comfort')
lead_update_view = _lead_operation('update_lead')


@login_required
@require_http_methods(["POST"])
def lead_archive_view(request, pk):
    try:
        LeadWorkflowService().archive_lead(pk, actor=request.user)
    except WorkflowError as exc:
        return _error_response(exc)

    return JsonResponse({'status': 'success', 'archived': pk})


@login_required
@require_http_methods(["GET"])
def lead_workflow_view(request, pk):
    try:
        workflow = LeadWorkflowService().get_workflow_status(pk)
    except WorkflowError as exc:
        return _error_response(exc)

    return JsonResponse({
        'status': 'success',
        'lead': lead_to_dict(workflow.lead),
        'activities': [activity_to_dict(activity) for activity in workflow.activities],
    })
