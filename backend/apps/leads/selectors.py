from datetime import datetime, timedelta
from typing import Iterable, Optional
from django.db import models
from django.db.models import QuerySet, Q, Count, Min
from apps.common.enums import LeadStatus
from apps.leads.models import Lead


def get_lead_by_id(lead_id: int) -> Optional[Lead]:
    """Get a single lead by ID."""
    try:
        return Lead.objects.get(id=lead_id)
    except Lead.DoesNotExist:
        return None


def get_leads_by_status(status: str) -> QuerySet[Lead]:
    return Lead.objects.filter(status=status)


def find_lead_by_key(
    field: str,
    value: str,
    exclude_id: Optional[int] = None,
) -> Optional[Lead]:
    """Oldest lead whose match key equals value."""
    if not value:
        return None
    qs = Lead.objects.filter(**{field: value})
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.order_by("created_at", "id").first()


def get_duplicate_keys(field: str, exclude_ids: Iterable[int] = ()) -> list[str]:
    """
    Values of a match key shared by more than one lead, ignoring empty keys
    and the excluded leads. Ordered by the oldest lead carrying each value.
    """
    rows = (
        Lead.objects
        .exclude(**{field: ""})
        .exclude(id__in=list(exclude_ids))
        .values(field)
        .annotate(count=Count("id"), first_seen=Min("created_at"))
        .filter(count__gt=1)
        .order_by("first_seen", field)
    )
    return [row[field] for row in rows]


def get_leads_sharing_key(
    field: str,
    value: str,
    exclude_ids: Iterable[int] = (),
) -> QuerySet[Lead]:
    """Leads carrying the given key value, oldest first."""
    return (
        Lead.objects
        .filter(**{field: value})
        .exclude(id__in=list(exclude_ids))
        .order_by("created_at", "id")
    )


def get_stale_leads(cutoff: datetime) -> QuerySet[Lead]:
    """
    Non-terminal leads with no activity since cutoff (or none at all).
    """
    return (
        Lead.objects
        .exclude(status__in=LeadStatus.terminal())
        .filter(Q(last_activity_at__isnull=True) | Q(last_activity_at__lt=cutoff))
        .select_related("assigned_to")
        .order_by("-lead_score", "created_at")
    )


def get_urgent_leads(now: datetime, minutes: int = 10) -> QuerySet[Lead]:
    """
    Never-contacted leads at least `minutes` old.
    Filters on the raw timestamps, never on a stored classification.
    """
    return (
        Lead.objects
        .filter(last_contacted_at__isnull=True, created_at__lte=now - timedelta(minutes=minutes))
        .exclude(status__in=LeadStatus.terminal())
        .order_by("created_at")
    )


def search_leads(
    query: Optional[str] = None,
    status: Optional[str] = None,
    tags: Optional[list[str]] = None,
    assigned_to_id: Optional[int] = None,
    created_after: Optional[datetime] = None,
    created_before: Optional[datetime] = None,
) -> QuerySet[Lead]:
    """
    Search leads with multiple filters.

    Args:
        query: Search in names, email, phone
        status: Filter by lifecycle status
        tags: Keep leads carrying any of these tags
        assigned_to_id: Filter by owning rep
        created_after: Filter by creation date
        created_before: Filter by creation date
    """
    qs = Lead.objects.all()

    if query:
        qs = qs.filter(
            Q(first_name__icontains=query) |
            Q(last_name__icontains=query) |
            Q(email__icontains=query) |
            Q(phone__icontains=query)
        )

    if status:
        qs = qs.filter(status=status)

    if assigned_to_id:
        qs = qs.filter(assigned_to_id=assigned_to_id)

    if created_after:
        qs = qs.filter(created_at__gte=created_after)

    if created_before:
        qs = qs.filter(created_at__lte=created_before)

    if tags:
        # Match the quoted element in the stored JSON array; works on SQLite and PostgreSQL
        tag_filter = Q()
        for tag in tags:
            tag_filter |= Q(tags__icontains=f'"{tag}"')
        qs = qs.filter(tag_filter)

    return qs


def get_lead_stats() -> dict:
    """Get summary statistics about leads."""
    total = Lead.objects.count()
    never_contacted = Lead.objects.filter(last_contacted_at__isnull=True).count()
    by_status = (
        Lead.objects
        .values("status")
        .annotate(count=models.Count("id"))
        .order_by("-count")
    )

    return {
        "total": total,
        "never_contacted": never_contacted,
        "by_status": list(by_status),
    }
