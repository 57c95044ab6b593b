# apps/lifecycle/tasks.py

import logging

from celery import shared_task
from django.utils import timezone

from apps.common.exceptions import LeadNotFound

from .collaborators import get_notifier
from .escalation import run_escalation_sweep
from .follow_ups import mark_overdue_tasks, on_status_change

logger = logging.getLogger(__name__)


@shared_task
def sweep_stale_leads_task() -> dict:
    """Escalate stale leads to a manager. Returns the itemized sweep result."""
    return run_escalation_sweep().to_dict()


@shared_task
def mark_overdue_tasks_task() -> dict:
    return {"tasks_marked_overdue": mark_overdue_tasks()}


@shared_task(
    bind=True,
    max_retries=5,
    default_retry_delay=60,
    retry_backoff=True,
)
def regenerate_follow_ups_task(self, lead_id: int, status: str) -> dict:
    """
    Regenerate follow-up tasks for a lead.

    Queued when inline regeneration after a status change fails. Safe to
    retry: the engine skips tasks that are already open.
    """
    try:
        created = on_status_change(lead_id, status)
    except LeadNotFound:
        logger.warning(f"Lead {lead_id} gone before follow-ups were regenerated")
        return {"lead_id": lead_id, "tasks_created": 0, "error": "Lead not found"}
    except Exception as e:
        logger.warning(f"Follow-up regeneration for lead {lead_id} failed: {e}")
        raise self.retry(exc=e)

    return {"lead_id": lead_id, "tasks_created": created}


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=30,
    retry_backoff=True,
)
def deliver_notification_task(self, recipient_id: int, kind: str, payload: dict) -> dict:
    """Send one notification through the configured notifier."""
    try:
        get_notifier().send(recipient_id, kind, payload)
    except Exception as e:
        logger.warning(f"Delivery of {kind} notification to user {recipient_id} failed: {e}")
        raise self.retry(exc=e)

    return {"recipient_id": recipient_id, "kind": kind, "delivered": True}


@shared_task
def follow_up_automation() -> dict:
    """
    Hourly follow-up automation.

    Marks overdue tasks, then escalates stale leads. Runs via Celery Beat.

    Returns:
        dict with counts from both passes
    """
    now = timezone.now()
    errors = []

    overdue = 0
    try:
        overdue = mark_overdue_tasks(now)
    except Exception as e:
        logger.exception("Overdue task pass failed")
        errors.append(f"Overdue task pass failed: {e}")

    sweep = run_escalation_sweep(now)
    errors.extend(f"Lead {item.item_id}: {item.detail}" for item in sweep.errors)

    summary = {
        "timestamp": now.isoformat(),
        "tasks_marked_overdue": overdue,
        "escalations_created": sweep.succeeded_count,
        "leads_skipped": sweep.skipped_count,
        "errors": errors,
    }

    logger.info(f"Follow-up automation complete: {summary}")
    return summary
