# leadcycle/celery.py

import os
from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "leadcycle.settings.local")

app = Celery("leadcycle")

# CELERY_* Django settings: broker, beat schedule, eager mode in tests
app.config_from_object("django.conf:settings", namespace="CELERY")

# Webhook deliveries retry with backoff; run workers with -Q celery,notifications
app.conf.task_routes = {
    "apps.lifecycle.tasks.deliver_notification_task": {"queue": "notifications"},
}

# Follow-up regeneration, overdue pass and escalation sweep live in apps.lifecycle.tasks
app.autodiscover_tasks()
