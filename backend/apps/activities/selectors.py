# apps/activities/selectors.py

from datetime import datetime

from django.db.models import QuerySet

from apps.common.enums import ActivityStatus, ActivityType

from .models import Activity

OPEN_STATUSES = (
    ActivityStatus.PENDING,
    ActivityStatus.SCHEDULED,
    ActivityStatus.OVERDUE,
)


def get_activities_for_lead(lead_id: int) -> QuerySet[Activity]:
    return Activity.objects.filter(lead_id=lead_id).order_by("-created_at")


def get_open_subjects(lead_id: int) -> set[str]:
    """Subjects of tasks on the lead that are still open."""
    return set(
        Activity.objects
        .filter(lead_id=lead_id, status__in=OPEN_STATUSES)
        .values_list("subject", flat=True)
    )


def has_escalation_since(lead_id: int, since: datetime) -> bool:
    return Activity.objects.filter(
        lead_id=lead_id,
        type=ActivityType.ESCALATION,
        created_at__gte=since,
    ).exists()


def get_overdue_tasks(now: datetime) -> QuerySet[Activity]:
    return (
        Activity.objects
        .filter(status=ActivityStatus.SCHEDULED, due_date__lt=now)
        .select_related("lead", "user")
        .order_by("due_date")
    )


def search_activities(
    lead_id: int | None = None,
    status: str | None = None,
    type: str | None = None,
) -> QuerySet[Activity]:
    qs = Activity.objects.select_related("lead", "user")

    if lead_id:
        qs = qs.filter(lead_id=lead_id)

    if status:
        qs = qs.filter(status=status)

    if type:
        qs = qs.filter(type=type)

    return qs.order_by("-created_at")
