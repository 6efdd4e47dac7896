from celery import shared_task
from django.db import DatabaseError
import logging

from .recorder import write_activity

logger = logging.getLogger(__name__)


@shared_task(bind=True, autoretry_for=(DatabaseError,), retry_backoff=True, max_retries=5)
def append_lead_activity(self, payload):
    """
    Background retry of an activity write that failed inline.

    Keyed by ``entry_key``: running it again after a success is a no-op.
    """
    activity, created = write_activity(payload)

    if created:
        logger.info(f"Activity {activity.entry_key} appended for lead {activity.lead_id} on retry {self.request.retries}")
    else:
        logger.info(f"Activity {activity.entry_key} already recorded, nothing to do")

    return str(activity.entry_key)
