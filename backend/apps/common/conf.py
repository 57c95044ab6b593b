# apps/common/conf.py

from django.conf import settings

DEFAULTS = {
    "STALE_AFTER_DAYS": 7,
    "ESCALATION_WINDOW_DAYS": 7,
    "FOLLOW_UP_HOUR": 9,
    "MIN_PHONE_DIGITS": 10,
    "PLACEHOLDER_EMAIL_DOMAINS": ["placeholder.com", "placeholder"],
    "MANAGER_ROLES": ["owner", "director", "manager"],
    "NOTIFIER": "apps.lifecycle.collaborators.LoggingNotifier",
    "MANAGER_RESOLVER": "apps.lifecycle.collaborators.GroupManagerResolver",
    "NOTIFICATION_WEBHOOK_URL": "",
    "NOTIFY_ASYNC": False,
}


def lifecycle_settings() -> dict:
    """
    Engine settings: the LEADCYCLE dict from Django settings over DEFAULTS.

    Read on every call so override_settings works in tests.
    """
    merged = dict(DEFAULTS)
    merged.update(getattr(settings, "LEADCYCLE", {}) or {})
    return merged


def lifecycle_setting(name: str):
    return lifecycle_settings()[name]
