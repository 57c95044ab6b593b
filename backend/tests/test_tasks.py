from datetime import timedelta

import pytest
from django.utils import timezone

from apps.activities.models import Activity
from apps.common.enums import ActivityStatus, ActivityType, LeadStatus
from apps.lifecycle import tasks
from apps.lifecycle.collaborators import Notifier, notify
from apps.lifecycle.tasks import (
    deliver_notification_task,
    follow_up_automation,
    mark_overdue_tasks_task,
    regenerate_follow_ups_task,
    sweep_stale_leads_task,
)


@pytest.mark.django_db
class TestLifecycleTasks:
    def test_follow_up_automation(self, make_lead, manager):
        lead = make_lead(first_name="Stale", status=LeadStatus.APPLIED, last_activity_at=None)
        Activity.objects.create(
            lead=lead,
            subject="Check Application Status",
            status=ActivityStatus.SCHEDULED,
            due_date=timezone.now() - timedelta(days=1),
        )

        summary = follow_up_automation.delay().get()

        assert summary["tasks_marked_overdue"] == 1
        assert summary["escalations_created"] == 1
        assert summary["errors"] == []

    def test_sweep_task_returns_itemized_result(self, make_lead, manager):
        make_lead(first_name="Stale", last_activity_at=None)

        result = sweep_stale_leads_task()

        assert result["succeeded"] == 1
        assert result["items"][0]["outcome"] == "success"

    def test_mark_overdue_task(self):
        assert mark_overdue_tasks_task() == {"tasks_marked_overdue": 0}

    def test_regenerate_follow_ups(self, make_lead):
        lead = make_lead(first_name="A")

        result = regenerate_follow_ups_task.delay(lead.id, LeadStatus.NEW).get()

        assert result == {"lead_id": lead.id, "tasks_created": 2}
        assert Activity.objects.filter(lead=lead, type=ActivityType.CALL).count() == 2

    def test_regenerate_for_deleted_lead(self):
        result = regenerate_follow_ups_task.delay(31337, LeadStatus.NEW).get()
        assert result["tasks_created"] == 0
        assert result["error"] == "Lead not found"


class RecordingNotifier(Notifier):
    sent = []

    def send(self, recipient_id, kind, payload):
        self.sent.append((recipient_id, kind, payload))


@pytest.fixture
def recording_notifier(settings):
    RecordingNotifier.sent = []
    settings.LEADCYCLE = {
        "NOTIFIER": "tests.test_tasks.RecordingNotifier",
        "NOTIFY_ASYNC": True,
    }
    return RecordingNotifier


class TestNotificationDelivery:
    def test_async_notify_only_queues(self, recording_notifier, monkeypatch):
        queued = []

        class FakeTask:
            def delay(self, *args):
                queued.append(args)

        monkeypatch.setattr(tasks, "deliver_notification_task", FakeTask())

        assert notify(7, "stale_lead", {"lead_id": 1}) is True

        assert queued == [(7, "stale_lead", {"lead_id": 1})]
        assert recording_notifier.sent == []

    def test_async_notify_delivers_through_task(self, recording_notifier):
        assert notify(7, "task_overdue", {"activity_id": 3}) is True

        assert recording_notifier.sent == [(7, "task_overdue", {"activity_id": 3})]

    def test_deliver_task_returns_summary(self, recording_notifier):
        result = deliver_notification_task.delay(7, "status_changed", {"lead_id": 1}).get()

        assert result == {"recipient_id": 7, "kind": "status_changed", "delivered": True}
        assert recording_notifier.sent == [(7, "status_changed", {"lead_id": 1})]
