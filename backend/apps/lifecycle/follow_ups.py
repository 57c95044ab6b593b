# apps/lifecycle/follow_ups.py

"""
Follow-up task generation.

On a status transition every scheduled or overdue task on the lead is cancelled
and the new status's rules are (re)issued. Tasks a rep already completed are
never touched, and a rule whose subject is still open on the lead is skipped,
so running the engine twice for the same transition creates nothing new.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.activities.models import Activity
from apps.activities.selectors import get_open_subjects, get_overdue_tasks
from apps.activities.services import cancel_scheduled
from apps.common.conf import lifecycle_setting
from apps.common.enums import ActivityStatus, LeadStatus
from apps.common.exceptions import LeadNotFound, LeadValidationError
from apps.leads.models import Lead

from .collaborators import notify
from .rules import FollowUpRule, rules_for_status

logger = logging.getLogger(__name__)


def follow_up_due_date(now: datetime, days_after: int) -> datetime:
    """now + days_after, pinned to FOLLOW_UP_HOUR local time."""
    due = timezone.localtime(now) + timedelta(days=days_after)
    return due.replace(
        hour=lifecycle_setting("FOLLOW_UP_HOUR"),
        minute=0,
        second=0,
        microsecond=0,
    )


def build_task(lead: Lead, rule: FollowUpRule, now: datetime) -> Activity:
    return Activity(
        lead=lead,
        user=lead.assigned_to,
        type=rule.task_type,
        status=ActivityStatus.SCHEDULED,
        priority=rule.priority,
        subject=rule.subject,
        description=rule.description,
        due_date=follow_up_due_date(now, rule.days_after),
    )


@transaction.atomic
def on_status_change(lead_id: int, new_status: str, now: Optional[datetime] = None) -> int:
    """
    Regenerate follow-up tasks for a lead that just moved to new_status.

    Returns the number of tasks created. Safe to call repeatedly for the same
    transition.
    """
    if new_status not in LeadStatus.values:
        raise LeadValidationError(f"Unknown lead status: {new_status}")

    now = now or timezone.now()

    lead = Lead.objects.select_for_update().filter(pk=lead_id).first()
    if lead is None:
        raise LeadNotFound(lead_id)

    rules = rules_for_status(new_status)
    reissued = {rule.subject for rule in rules}

    # Open tasks the new rules reissue are kept, not cancelled and recreated
    cancelled = cancel_scheduled(lead.id, keep_subjects=reissued)

    open_subjects = get_open_subjects(lead.id)
    tasks = [build_task(lead, rule, now) for rule in rules if rule.subject not in open_subjects]
    Activity.objects.bulk_create(tasks)

    logger.info(
        f"Lead {lead.id} -> {new_status}: cancelled {cancelled}, "
        f"created {len(tasks)}, skipped {len(rules) - len(tasks)}"
    )
    return len(tasks)


def mark_overdue_tasks(now: Optional[datetime] = None) -> int:
    """
    Flag scheduled tasks whose due date has passed as overdue and notify
    their assignee (falling back to the lead's owner). Returns the count.
    """
    now = now or timezone.now()
    tasks = list(get_overdue_tasks(now))
    if not tasks:
        return 0

    updated = (
        Activity.objects
        .filter(id__in=[task.id for task in tasks], status=ActivityStatus.SCHEDULED)
        .update(status=ActivityStatus.OVERDUE, updated_at=now)
    )

    for task in tasks:
        notify(
            task.user_id or task.lead.assigned_to_id,
            "task_overdue",
            {
                "activity_id": task.id,
                "lead_id": task.lead_id,
                "subject": task.subject,
                "due_date": task.due_date.isoformat(),
            },
        )

    logger.info(f"Marked {updated} tasks overdue")
    return updated
