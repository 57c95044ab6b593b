# apps/activities/services.py

from datetime import datetime

from django.utils import timezone

from apps.common.enums import ActivityStatus, ActivityType, Priority

from .models import Activity, Deal, Quote


def log_activity(
    lead,
    subject: str,
    description: str = "",
    type: str = ActivityType.NOTE,
    user=None,
    status: str = ActivityStatus.COMPLETED,
    priority: str = Priority.MEDIUM,
    due_date: datetime | None = None,
) -> Activity:
    """Record an activity on a lead. Completed activities get a completed_at."""
    return Activity.objects.create(
        lead=lead,
        user=user,
        type=type,
        subject=subject,
        description=description,
        status=status,
        priority=priority,
        due_date=due_date,
        completed_at=timezone.now() if status == ActivityStatus.COMPLETED else None,
    )


def reassign_children(from_lead_id: int, to_lead_id: int) -> dict:
    """
    Re-point every activity, deal and quote of one lead to another.
    Bulk updates by foreign key; callers own the transaction.
    """
    return {
        "activities": Activity.objects.filter(lead_id=from_lead_id).update(lead_id=to_lead_id),
        "deals": Deal.objects.filter(lead_id=from_lead_id).update(lead_id=to_lead_id),
        "quotes": Quote.objects.filter(lead_id=from_lead_id).update(lead_id=to_lead_id),
    }


CANCELLABLE_STATUSES = (ActivityStatus.SCHEDULED, ActivityStatus.OVERDUE)


def cancel_scheduled(lead_id: int, keep_subjects=()) -> int:
    """
    Cancel scheduled and overdue tasks on a lead, except those whose subject
    is in keep_subjects. Completed, pending and already-cancelled rows are
    untouched.
    """
    return (
        Activity.objects
        .filter(lead_id=lead_id, status__in=CANCELLABLE_STATUSES)
        .exclude(subject__in=list(keep_subjects))
        .update(status=ActivityStatus.CANCELLED, updated_at=timezone.now())
    )


def complete_activity(activity: Activity) -> Activity:
    """Mark an open activity completed; counts as activity on its lead."""
    activity.mark_completed()
    lead = activity.lead
    lead.last_activity_at = activity.completed_at
    lead.save(update_fields=["last_activity_at", "updated_at"])
    return activity
