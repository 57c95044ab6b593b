import os
from .base import *

DEBUG = True

SECRET_KEY = "dev-secret-key-not-for-production"

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "web"]

# Same database name for the docker-compose postgres service and a local one
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DATABASE_NAME", "leadcycle"),
        "USER": os.environ.get("DATABASE_USER", "leadcycle"),
        "PASSWORD": os.environ.get("DATABASE_PASSWORD", "leadcycle"),
        "HOST": os.environ.get("DATABASE_HOST", "localhost"),
        "PORT": os.environ.get("DATABASE_PORT", "5432"),
    }
}

# LEADCYCLE_EAGER=true runs follow-up regeneration and sweeps inline, no worker needed
CELERY_TASK_ALWAYS_EAGER = os.environ.get("LEADCYCLE_EAGER", "false").lower() == "true"
CELERY_TASK_EAGER_PROPAGATES = CELERY_TASK_ALWAYS_EAGER

# Notifications go to the log in development
LEADCYCLE = {
    **LEADCYCLE,
    "NOTIFIER": "apps.lifecycle.collaborators.LoggingNotifier",
    "NOTIFY_ASYNC": False,
}

LOGGING["loggers"]["apps"]["level"] = "DEBUG"
