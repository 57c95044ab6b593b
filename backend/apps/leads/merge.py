# apps/leads/merge.py

"""
Merge duplicate leads into a master lead.

Each duplicate is merged in its own transaction: children re-pointed, text,
tags, score and recency folded into the master, an audit note appended and
the duplicate deleted. A failure on one duplicate leaves the others merged.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from django.db import transaction

from apps.activities.services import log_activity, reassign_children
from apps.common.enums import ActivityType
from apps.common.exceptions import LeadNotFound, LeadValidationError
from apps.common.results import BatchResult

from .models import Lead

logger = logging.getLogger(__name__)

MERGED_MARKER = "[MERGED]"
MERGEABLE_TEXT_FIELDS = ("notes", "manager_notes", "rep_notes")


def merge_text(master_value: str, duplicate_value: str) -> str:
    """
    Append a duplicate's text to the master's, marked and separated by a
    blank line. The master's own text is never marked.
    """
    if not (duplicate_value or "").strip():
        return master_value or ""
    if not (master_value or "").strip():
        return duplicate_value
    return f"{master_value}\n\n{MERGED_MARKER} {duplicate_value}"


def merge_tags(master_tags: Iterable[str], duplicate_tags: Iterable[str]) -> list[str]:
    merged = list(dict.fromkeys(master_tags or []))
    for tag in duplicate_tags or []:
        if tag not in merged:
            merged.append(tag)
    return merged


def latest(a: Optional[datetime], b: Optional[datetime]) -> Optional[datetime]:
    """Most recent of two timestamps; None sorts lowest."""
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def merge_duplicates(
    master_id: int,
    duplicate_ids: Iterable[int],
    merged_by=None,
) -> BatchResult:
    """
    Merge every duplicate into the master, one transaction per duplicate.

    Raises LeadValidationError / LeadNotFound before touching anything when
    the request itself is invalid. Per-duplicate failures are reported in the
    returned BatchResult; a duplicate that no longer exists is "skipped"
    so re-running a merge is harmless.
    """
    duplicate_ids = list(dict.fromkeys(duplicate_ids))

    if not duplicate_ids:
        raise LeadValidationError("No duplicate ids provided")
    if master_id in duplicate_ids:
        raise LeadValidationError("A lead cannot be merged into itself")
    if not Lead.objects.filter(pk=master_id).exists():
        raise LeadNotFound(master_id)

    logger.info(f"Merging {len(duplicate_ids)} duplicates into lead {master_id}")
    result = BatchResult()

    for duplicate_id in duplicate_ids:
        try:
            merged = merge_one(master_id, duplicate_id, merged_by=merged_by)
        except Exception as e:
            logger.exception(f"Failed to merge lead {duplicate_id} into {master_id}")
            result.failed(duplicate_id, str(e))
            continue

        if merged:
            result.success(duplicate_id)
        else:
            result.skipped(duplicate_id, "Duplicate no longer exists")

    logger.info(
        f"Merge into {master_id} complete: {result.succeeded_count} merged, "
        f"{result.skipped_count} skipped, {result.failed_count} failed"
    )
    return result


@transaction.atomic
def merge_one(master_id: int, duplicate_id: int, merged_by=None) -> bool:
    """
    Merge a single duplicate atomically.
    Returns False when the duplicate is already gone.
    """
    master = Lead.objects.select_for_update().filter(pk=master_id).first()
    if master is None:
        raise LeadNotFound(master_id)

    duplicate = Lead.objects.select_for_update().filter(pk=duplicate_id).first()
    if duplicate is None:
        logger.info(f"Lead {duplicate_id} already merged or deleted, skipping")
        return False

    moved = reassign_children(duplicate.id, master.id)

    for field_name in MERGEABLE_TEXT_FIELDS:
        setattr(
            master,
            field_name,
            merge_text(getattr(master, field_name), getattr(duplicate, field_name)),
        )
    master.tags = merge_tags(master.tags, duplicate.tags)
    master.lead_score = max(master.lead_score, duplicate.lead_score)
    master.last_activity_at = latest(master.last_activity_at, duplicate.last_activity_at)
    master.save(update_fields=[
        *MERGEABLE_TEXT_FIELDS,
        "tags",
        "lead_score",
        "last_activity_at",
        "updated_at",
    ])

    log_activity(
        master,
        subject="Lead Merged",
        description=(
            f"Merged duplicate lead: {duplicate.display_name} "
            f"({duplicate.identity_label})"
        ),
        type=ActivityType.NOTE,
        user=merged_by or master.assigned_to,
    )

    duplicate.delete()

    logger.info(f"Merged lead {duplicate_id} into {master_id} (moved {moved})")
    return True
