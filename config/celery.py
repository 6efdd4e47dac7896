# Celery runs the lead workflow's background jobs:
# - Retrying activity writes that failed inline (apps/leads/tasks.py)
#
# Start worker: celery -A config worker -l info
# ==============================================================================

import os
from celery import Celery

# Set the default Django settings module for Celery
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

# 'leadflow' is the app name (appears in logs and monitoring)
app = Celery('leadflow')

# All settings prefixed with 'CELERY_' will be used
# Example: CELERY_BROKER_URL, CELERY_RESULT_BACKEND
app.config_from_object('django.conf:settings', namespace='CELERY')

# Looks for tasks.py file in each installed app
app.autodiscover_tasks()


# CELERY TASK ANNOTATIONS

app.conf.task_annotations = {
    # Activity retries are small inserts
    'apps.leads.tasks.append_lead_activity': {
        'time_limit': 60,
        'soft_time_limit': 45,
    },
}
