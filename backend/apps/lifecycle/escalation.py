# apps/lifecycle/escalation.py

"""
Stale-lead escalation sweep.

A lead is stale when it is not won/dead and has had no activity for
STALE_AFTER_DAYS (or never had any). Each stale lead gets at most one
escalation per ESCALATION_WINDOW_DAYS, routed to a manager.

Overlapping sweeps can very rarely escalate the same lead twice; the
window check is read-before-write only and that outcome is tolerated.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.activities.models import Activity
from apps.activities.selectors import has_escalation_since
from apps.common.conf import lifecycle_setting
from apps.common.enums import ActivityStatus, ActivityType, Priority
from apps.common.results import BatchResult
from apps.leads.models import Lead
from apps.leads.selectors import get_stale_leads

from .collaborators import ManagerResolver, get_manager_resolver, notify

logger = logging.getLogger(__name__)

ESCALATION_SUBJECT = "Stale Lead Alert"


def escalation_description(lead: Lead) -> str:
    days = lifecycle_setting("STALE_AFTER_DAYS")
    return (
        f"Lead {lead.first_name} {lead.last_name} has had no activity for "
        f"{days}+ days. Please review and take action."
    )


def escalate_lead(
    lead: Lead,
    now: datetime,
    resolver: ManagerResolver,
) -> tuple[Optional[Activity], str]:
    """
    Escalate one stale lead. Returns (activity, "") on success or
    (None, reason) when the lead is skipped.
    """
    window_start = now - timedelta(days=lifecycle_setting("ESCALATION_WINDOW_DAYS"))
    if has_escalation_since(lead.id, window_start):
        return None, "Already escalated within window"

    manager_id = resolver.resolve(lead)
    if manager_id is None:
        logger.warning(f"No manager available to escalate lead {lead.id}")
        return None, "No manager available"

    with transaction.atomic():
        activity = Activity.objects.create(
            lead=lead,
            user_id=manager_id,
            type=ActivityType.ESCALATION,
            status=ActivityStatus.PENDING,
            priority=Priority.HIGH,
            subject=ESCALATION_SUBJECT,
            description=escalation_description(lead),
        )
        transaction.on_commit(lambda: notify(
            manager_id,
            "stale_lead",
            {
                "lead_id": lead.id,
                "lead_name": lead.display_name,
                "lead_score": lead.lead_score,
                "last_activity_at": (
                    lead.last_activity_at.isoformat() if lead.last_activity_at else None
                ),
                "activity_id": activity.id,
            },
        ))

    return activity, ""


def run_escalation_sweep(now: Optional[datetime] = None) -> BatchResult:
    """
    Sweep all stale leads, highest score first. A failure on one lead is
    logged and recorded; the sweep moves on to the next.
    """
    now = now or timezone.now()
    cutoff = now - timedelta(days=lifecycle_setting("STALE_AFTER_DAYS"))
    resolver = get_manager_resolver()
    result = BatchResult()

    for lead in get_stale_leads(cutoff):
        try:
            activity, reason = escalate_lead(lead, now, resolver)
        except Exception as e:
            logger.exception(f"Failed to escalate lead {lead.id}")
            result.failed(lead.id, str(e))
            continue

        if activity is None:
            result.skipped(lead.id, reason)
        else:
            logger.info(f"Escalated stale lead {lead.id} ({lead.display_name})")
            result.success(lead.id)

    logger.info(
        f"Stale lead sweep complete: {result.succeeded_count} escalated, "
        f"{result.skipped_count} skipped, {result.failed_count} failed"
    )
    return result


def sweep_stale_leads(now: Optional[datetime] = None) -> int:
    """Run a sweep and return the number of escalations created."""
    return run_escalation_sweep(now).succeeded_count
