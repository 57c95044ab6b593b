# apps/leads/services.py

import logging
from datetime import datetime
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from apps.activities.models import Activity
from apps.activities.services import log_activity
from apps.common.enums import ActivityType, LeadStatus
from apps.common.exceptions import (
    DuplicateDetected,
    LeadNotFound,
    LeadValidationError,
)
from apps.common.results import BatchResult
from apps.lifecycle.collaborators import notify
from apps.lifecycle.follow_ups import on_status_change
from apps.lifecycle.response_timer import first_contact_summary

from .duplicates import check_for_duplicate_on_create
from .merge import merge_tags
from .models import Lead

logger = logging.getLogger(__name__)

REGENERATE_RETRY_DELAY = 60


def validate_status(status: str) -> None:
    if status not in LeadStatus.values:
        raise LeadValidationError(
            f"Invalid status. Must be one of: {', '.join(LeadStatus.values)}"
        )


def regenerate_follow_ups(lead_id: int, status: str, now: Optional[datetime] = None) -> Optional[int]:
    """
    Run the follow-up engine for a lead whose status write is already durable.

    A failure here never touches the status; it is logged and a retry is
    queued once the surrounding transaction (if any) commits. Returns the
    number of tasks created, or None when regeneration was deferred.
    """
    from apps.lifecycle.tasks import regenerate_follow_ups_task

    try:
        return on_status_change(lead_id, status, now=now)
    except Exception:
        logger.exception(f"Follow-up regeneration failed for lead {lead_id}, queueing retry")
        transaction.on_commit(lambda: regenerate_follow_ups_task.apply_async(
            args=[lead_id, status],
            countdown=REGENERATE_RETRY_DELAY,
        ))
        return None


def create_lead(
    first_name: str = "",
    last_name: str = "",
    email: Optional[str] = None,
    phone: Optional[str] = None,
    status: str = LeadStatus.NEW,
    force: bool = False,
    now: Optional[datetime] = None,
    **fields,
) -> Lead:
    """
    Create a lead after checking for duplicates.

    Exact email/phone matches raise DuplicateDetected unless force=True.
    Name-only matches are logged and the lead is created. Follow-up tasks
    for the initial status are generated once the lead is saved.
    """
    validate_status(status)
    now = now or timezone.now()

    check = check_for_duplicate_on_create(
        email=email,
        phone=phone,
        first_name=first_name,
        last_name=last_name,
    )
    if check is not None:
        if check.is_blocking and not force:
            logger.info(f"Blocked lead creation: {check.message}")
            raise DuplicateDetected(check)
        logger.warning(f"{check.message} (existing lead {check.existing_lead_id})")

    lead = Lead.objects.create(
        first_name=first_name,
        last_name=last_name,
        email=email or None,
        phone=phone or None,
        status=status,
        last_activity_at=now,
        **fields,
    )
    logger.info(f"Created lead {lead.id} ({lead.display_name})")

    regenerate_follow_ups(lead.id, status, now=now)
    return lead


def bulk_create_leads(leads_data: list[dict], force: bool = False) -> BatchResult:
    """
    Create many leads, best-effort. Item ids are row positions.

    Hard duplicates are reported as skipped, invalid rows as failed; neither
    stops the rows after them.
    """
    result = BatchResult()

    for index, data in enumerate(leads_data):
        try:
            lead = create_lead(force=force, **data)
        except DuplicateDetected as e:
            result.skipped(index, str(e))
            continue
        except LeadValidationError as e:
            result.failed(index, str(e))
            continue
        except Exception as e:
            logger.exception(f"Failed to create lead from row {index}")
            result.failed(index, str(e))
            continue
        result.success(index, f"Created lead {lead.id}")

    logger.info(
        f"Bulk create: {result.succeeded_count} created, "
        f"{result.skipped_count} duplicates skipped, {result.failed_count} failed"
    )
    return result


def add_lead_tags(lead: Lead, new_tags: Iterable[str]) -> Lead:
    """Add new tags to an existing lead without duplicates."""
    lead.tags = merge_tags(lead.tags, new_tags)
    lead.save(update_fields=["tags", "updated_at"])
    return lead


def change_lead_status(
    lead: Lead,
    new_status: str,
    changed_by=None,
    now: Optional[datetime] = None,
) -> Lead:
    """
    Move a lead to a new status and regenerate its follow-up tasks.

    The status write and its audit note commit first; follow-up regeneration
    runs afterwards and cannot undo them.
    """
    validate_status(new_status)
    now = now or timezone.now()

    with transaction.atomic():
        locked = Lead.objects.select_for_update().filter(pk=lead.pk).first()
        if locked is None:
            raise LeadNotFound(lead.pk)

        old_status = locked.status
        locked.status = new_status
        locked.last_activity_at = now
        locked.save(update_fields=["status", "last_activity_at", "updated_at"])

        by = f" by {changed_by}" if changed_by else ""
        log_activity(
            locked,
            subject="Status Changed",
            description=f'Status changed from "{old_status}" to "{new_status}"{by}',
            type=ActivityType.NOTE,
            user=changed_by,
        )

    logger.info(f"Lead {locked.id} status {old_status} -> {new_status}")

    regenerate_follow_ups(locked.id, new_status, now=now)

    if locked.assigned_to_id and locked.assigned_to_id != getattr(changed_by, "id", None):
        notify(
            locked.assigned_to_id,
            "status_changed",
            {
                "lead_id": locked.id,
                "lead_name": locked.display_name,
                "old_status": old_status,
                "new_status": new_status,
            },
        )

    return locked


def bulk_change_status(
    lead_ids: Iterable[int],
    new_status: str,
    changed_by=None,
    now: Optional[datetime] = None,
) -> BatchResult:
    """Change status on many leads; per-lead failures are itemized."""
    validate_status(new_status)
    now = now or timezone.now()
    result = BatchResult()

    for lead_id in dict.fromkeys(lead_ids):
        lead = Lead.objects.filter(pk=lead_id).first()
        if lead is None:
            result.failed(lead_id, str(LeadNotFound(lead_id)))
            continue
        try:
            change_lead_status(lead, new_status, changed_by=changed_by, now=now)
        except Exception as e:
            logger.exception(f"Failed to change status of lead {lead_id}")
            result.failed(lead_id, str(e))
            continue
        result.success(lead_id)

    logger.info(
        f"Bulk status -> {new_status}: {result.succeeded_count} updated, "
        f"{result.failed_count} failed"
    )
    return result


@transaction.atomic
def record_contact(
    lead: Lead,
    activity_type: str = ActivityType.CALL,
    user=None,
    at: Optional[datetime] = None,
    subject: str = "",
    description: str = "",
) -> Activity:
    """
    Record a call/email/meeting/message with a lead.

    The first contact also stops the response timer: last_contacted_at is
    set once and a timing note is added to the lead's timeline.
    """
    if activity_type not in ActivityType.contact_types():
        raise LeadValidationError(f"{activity_type} is not a contact activity")

    at = at or timezone.now()

    locked = Lead.objects.select_for_update().filter(pk=lead.pk).first()
    if locked is None:
        raise LeadNotFound(lead.pk)

    activity = log_activity(
        locked,
        subject=subject or f"{ActivityType(activity_type).label} with {locked.display_name}",
        description=description,
        type=activity_type,
        user=user,
    )

    update_fields = ["last_activity_at", "updated_at"]
    locked.last_activity_at = at

    if locked.last_contacted_at is None:
        locked.last_contacted_at = at
        update_fields.append("last_contacted_at")
        summary = first_contact_summary(locked.created_at, at)
        log_activity(
            locked,
            subject=summary["subject"],
            description=summary["description"],
            type=ActivityType.NOTE,
            user=user,
        )
        logger.info(f"First contact with lead {locked.id}: {summary['subject']}")

    locked.save(update_fields=update_fields)

    lead.last_activity_at = locked.last_activity_at
    lead.last_contacted_at = locked.last_contacted_at
    return activity
