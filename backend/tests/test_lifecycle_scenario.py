from datetime import timedelta

import pytest

from apps.activities.models import Activity
from apps.activities.services import log_activity
from apps.common.enums import ActivityType, LeadStatus, MatchConfidence, MatchType, ResponseBucket
from apps.leads.duplicates import find_duplicates
from apps.leads.merge import merge_duplicates
from apps.leads.models import Lead
from apps.lifecycle.escalation import sweep_stale_leads
from apps.lifecycle.response_timer import classify

from .conftest import NOW


@pytest.mark.django_db
def test_duplicate_to_escalation_lifecycle(make_lead, manager):
    a = make_lead(
        first_name="Alex",
        last_name="Smith",
        email="a@x.com",
        tags=["web"],
        status=LeadStatus.CONTACTED,
        last_activity_at=NOW,
        created_at=NOW,
    )
    b = make_lead(
        first_name="Alexander",
        last_name="Smyth",
        email="a@x.com",
        tags=["phone-in"],
        created_at=NOW + timedelta(hours=1),
    )
    b_activity_ids = {
        log_activity(b, subject="Left voicemail", type=ActivityType.CALL).id,
        log_activity(b, subject="Sent brochure", type=ActivityType.EMAIL).id,
    }
    a_before = a.activities.count()

    groups = find_duplicates()
    assert len(groups) == 1
    assert groups[0].match_type == MatchType.EXACT_EMAIL
    assert groups[0].confidence == MatchConfidence.HIGH
    assert groups[0].lead_ids == [a.id, b.id]

    result = merge_duplicates(a.id, [b.id])
    assert result.ok

    a.refresh_from_db()
    assert b_activity_ids <= set(a.activities.values_list("id", flat=True))
    # Plus the merge audit note
    assert a.activities.count() == a_before + len(b_activity_ids) + 1
    assert set(a.tags) == {"web", "phone-in"}
    assert not Lead.objects.filter(pk=b.id).exists()

    assert classify(a.created_at, None, NOW + timedelta(minutes=2)).bucket == ResponseBucket.GREAT
    late = classify(a.created_at, None, NOW + timedelta(minutes=12))
    assert late.bucket == ResponseBucket.LATE
    assert late.is_urgent

    a.refresh_from_db()
    assert sweep_stale_leads(now=a.last_activity_at + timedelta(days=7, minutes=1)) == 1
    assert Activity.objects.filter(lead=a, type=ActivityType.ESCALATION).count() == 1
