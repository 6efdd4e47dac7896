"""
Activity Recorder: the audit trail of every workflow mutation.

An entry is a point-in-time copy of the lead's identity plus the fields
the operation changed. Recording never fails the operation that triggered
it: a storage error is logged and the same payload (same ``entry_key``) is
handed to a Celery task once the surrounding transaction commits.
"""

import logging
import uuid
from datetime import datetime

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .exceptions import RecorderFailure
from .models import LeadActivity

logger = logging.getLogger(__name__)


# Snapshot fields stored as foreign keys (written as <name>_id)
RELATION_FIELDS = ('lead_status', 'presales_owner', 'sales_owner', 'language', 'centre')

DATETIME_FIELDS = ('next_call_at', 'site_visit_at', 'meeting_at', 'cif_at', 'created_at')


def _serialize(value):
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def build_payload(lead, actor, note, changed_fields=(), values=None, entry_key=None):
    """
    Freeze the lead into a JSON-safe dict.

    ``values`` holds snapshot values that do not live on the lead itself
    (site_visit_at, meeting_at, is_completed, ...); anything named there
    counts as changed.
    """
    values = dict(values or {})
    changed = list(dict.fromkeys(list(changed_fields) + list(values)))

    unknown = [name for name in values if name not in LeadActivity.SNAPSHOT_FIELDS]
    if unknown:
        logger.warning(f"Ignoring snapshot values {unknown} for lead {lead.pk}: not activity fields")

    payload = {
        'entry_key': str(entry_key or uuid.uuid4()),
        'lead_id': lead.pk,
        'actor_id': getattr(actor, 'pk', None),
        'note': note,
        'changed_fields': changed,
        'name': lead.name,
        'email': lead.email,
        'phone': lead.phone,
        'source_id': lead.source_id,
        'created_at': timezone.now().isoformat(),
    }

    # Identity is always copied; other fields only when they changed
    for name in changed:
        if name not in LeadActivity.SNAPSHOT_FIELDS:
            continue
        if name in values:
            value = values[name]
            if name in RELATION_FIELDS:
                payload[f'{name}_id'] = getattr(value, 'pk', value)
            else:
                payload[name] = _serialize(value)
        elif name in RELATION_FIELDS:
            payload[f'{name}_id'] = getattr(lead, f'{name}_id')
        else:
            payload[name] = _serialize(getattr(lead, name, None))

    return payload


def write_activity(payload):
    """
    Insert the entry described by ``payload`` unless it already exists.

    Returns:
        tuple: (LeadActivity, created)
    """
    fields = dict(payload)
    entry_key = uuid.UUID(fields.pop('entry_key'))

    for name in DATETIME_FIELDS:
        if isinstance(fields.get(name), str):
            fields[name] = parse_datetime(fields[name])

    if fields.get('substatus') is None:
        fields.pop('substatus', None)
    if fields.get('value_tier') is None:
        fields.pop('value_tier', None)

    return LeadActivity.objects.get_or_create(entry_key=entry_key, defaults=fields)


class ActivityRecorder:

    def __init__(self, retry_delay=None):
        self.retry_delay = settings.LEAD_ACTIVITY_RETRY_DELAY if retry_delay is None else retry_delay

    def record(self, lead, actor, note, changed_fields=(), **values):
        """
        Append one activity entry for ``lead``.

        Returns:
            LeadActivity or None: None when the write failed and was queued
            for retry
        """
        payload = build_payload(lead, actor, note, changed_fields, values)

        try:
            return self._append(payload)
        except RecorderFailure as exc:
            logger.error(f"Activity for lead {lead.pk} not recorded, retrying in background: {exc} {exc.context}")
            self._schedule_retry(payload)
            return None

    def _append(self, payload):
        try:
            with transaction.atomic():
                activity, _ = self._write(payload)
        except DatabaseError as exc:
            raise RecorderFailure(str(exc), lead_id=payload['lead_id'], entry_key=payload['entry_key']) from exc

        logger.debug(f"Activity {activity.entry_key} recorded for lead {payload['lead_id']}: {payload['note']}")
        return activity

    def _write(self, payload):
        return write_activity(payload)

    def _schedule_retry(self, payload):
        from .tasks import append_lead_activity

        # The lead row the entry points at only exists once the caller commits
        transaction.on_commit(
            lambda: append_lead_activity.apply_async(args=[payload], countdown=self.retry_delay)
        )
