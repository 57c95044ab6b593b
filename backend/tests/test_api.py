from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.activities.models import Activity
from apps.common.enums import ActivityStatus, LeadStatus
from apps.leads.models import Lead


@pytest.mark.django_db
class TestLeadApi:
    def test_requires_authentication(self):
        response = APIClient().get("/api/v1/leads/")
        assert response.status_code in (401, 403)

    def test_create_lead(self, api_client):
        response = api_client.post(
            "/api/v1/leads/",
            {"first_name": "Jo", "last_name": "March", "email": "jo@x.com"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["status"] == LeadStatus.NEW
        lead = Lead.objects.get(pk=response.data["id"])
        assert lead.activities.filter(status=ActivityStatus.SCHEDULED).count() == 2

    def test_create_hard_duplicate_conflicts(self, api_client, make_lead):
        existing = make_lead(first_name="Jo", email="jo@x.com")

        response = api_client.post(
            "/api/v1/leads/",
            {"first_name": "Jo", "email": "jo@x.com"},
            format="json",
        )

        assert response.status_code == 409
        assert response.data["duplicate"]["severity"] == "block"
        assert response.data["duplicate"]["existing_lead_id"] == existing.id

    def test_create_forced_duplicate(self, api_client, make_lead):
        make_lead(first_name="Jo", email="jo@x.com")
        response = api_client.post(
            "/api/v1/leads/",
            {"first_name": "Jo", "email": "jo@x.com", "force": True},
            format="json",
        )
        assert response.status_code == 201

    def test_create_needs_identity(self, api_client):
        response = api_client.post("/api/v1/leads/", {"notes": "hi"}, format="json")
        assert response.status_code == 400

    def test_list_filters_by_status(self, api_client, make_lead):
        make_lead(first_name="A", status=LeadStatus.NEW)
        make_lead(first_name="B", status=LeadStatus.WON)

        response = api_client.get("/api/v1/leads/", {"status": "won"})

        assert response.status_code == 200
        assert [row["first_name"] for row in response.data["results"]] == ["B"]

    def test_list_filters_by_tag(self, api_client, make_lead):
        make_lead(first_name="A", tags=["vip"])
        make_lead(first_name="B", tags=["cold"])

        response = api_client.get("/api/v1/leads/", {"tag": "vip"})

        assert [row["first_name"] for row in response.data["results"]] == ["A"]

    def test_list_filters_by_tag_and_status(self, api_client, make_lead):
        make_lead(first_name="A", tags=["vip", "trailer"], status=LeadStatus.NEW)
        make_lead(first_name="B", tags=["vip"], status=LeadStatus.WON)
        make_lead(first_name="C", tags=["vipx"], status=LeadStatus.NEW)
        make_lead(first_name="D", tags=[], status=LeadStatus.NEW)

        response = api_client.get("/api/v1/leads/", {"tag": "vip", "status": "new"})

        assert response.status_code == 200
        assert [row["first_name"] for row in response.data["results"]] == ["A"]

    def test_duplicates(self, api_client, make_lead):
        make_lead(first_name="A", email="same@x.com")
        make_lead(first_name="B", email="same@x.com")

        response = api_client.get("/api/v1/leads/duplicates/")

        assert response.status_code == 200
        assert response.data["count"] == 1
        assert response.data["groups"][0]["match_type"] == "exact-email"

    def test_merge(self, api_client, make_lead):
        master = make_lead(first_name="A", email="same@x.com", tags=["a"])
        duplicate = make_lead(first_name="B", email="same@x.com", tags=["b"])

        response = api_client.post(
            "/api/v1/leads/merge/",
            {"master_id": master.id, "duplicate_ids": [duplicate.id]},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["success"] is True
        assert response.data["succeeded"] == 1
        master.refresh_from_db()
        assert master.tags == ["a", "b"]

    def test_merge_into_itself_is_bad_request(self, api_client, make_lead):
        lead = make_lead(first_name="A")
        response = api_client.post(
            "/api/v1/leads/merge/",
            {"master_id": lead.id, "duplicate_ids": [lead.id]},
            format="json",
        )
        assert response.status_code == 400

    def test_merge_unknown_master_not_found(self, api_client, make_lead):
        lead = make_lead(first_name="A")
        response = api_client.post(
            "/api/v1/leads/merge/",
            {"master_id": 99999, "duplicate_ids": [lead.id]},
            format="json",
        )
        assert response.status_code == 404

    def test_check_duplicate(self, api_client, make_lead):
        make_lead(first_name="Sam", last_name="Hill", email="sam@x.com")

        warn = api_client.post(
            "/api/v1/leads/check-duplicate/",
            {"first_name": "Sam", "last_name": "Hill"},
            format="json",
        )
        clear = api_client.post(
            "/api/v1/leads/check-duplicate/",
            {"email": "nobody@x.com"},
            format="json",
        )

        assert warn.data["duplicate"]["severity"] == "warn"
        assert clear.data["duplicate"] is None

    def test_change_status(self, api_client, make_lead):
        lead = make_lead(first_name="A")

        response = api_client.post(
            f"/api/v1/leads/{lead.id}/status/",
            {"status": "qualified"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == "qualified"
        assert Activity.objects.filter(lead=lead, status=ActivityStatus.SCHEDULED).count() == 3

    def test_change_status_rejects_unknown(self, api_client, make_lead):
        lead = make_lead(first_name="A")
        response = api_client.post(
            f"/api/v1/leads/{lead.id}/status/",
            {"status": "archived"},
            format="json",
        )
        assert response.status_code == 400

    def test_bulk_status(self, api_client, make_lead):
        a = make_lead(first_name="A")
        b = make_lead(first_name="B")

        response = api_client.post(
            "/api/v1/leads/bulk-status/",
            {"lead_ids": [a.id, b.id], "status": "dead"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["succeeded"] == 2

    def test_response_timer_and_contact(self, api_client, make_lead):
        lead = make_lead(first_name="A", created_at=timezone.now() - timedelta(minutes=12))

        timer = api_client.get(f"/api/v1/leads/{lead.id}/response-timer/")
        assert timer.data["status"] == "late"
        assert timer.data["is_urgent"] is True

        contact = api_client.post(f"/api/v1/leads/{lead.id}/contact/", {"type": "call"}, format="json")
        assert contact.status_code == 200
        assert contact.data["response_timer"]["status"] == "contacted"
        assert contact.data["response_timer"]["is_urgent"] is False

    def test_urgent(self, api_client, make_lead):
        waiting = make_lead(first_name="Waiting", created_at=timezone.now() - timedelta(minutes=15))
        make_lead(first_name="Fresh")

        response = api_client.get("/api/v1/leads/urgent/")

        assert [row["id"] for row in response.data] == [waiting.id]

    def test_stats(self, api_client, make_lead):
        make_lead(first_name="A")
        response = api_client.get("/api/v1/leads/stats/")
        assert response.data["total"] == 1
        assert response.data["never_contacted"] == 1


@pytest.mark.django_db
class TestActivityApi:
    def test_list_by_lead_and_complete(self, api_client, make_lead):
        lead = make_lead(first_name="A")
        other = make_lead(first_name="B")
        task = Activity.objects.create(lead=lead, subject="Call", status=ActivityStatus.SCHEDULED)
        Activity.objects.create(lead=other, subject="Other")

        listing = api_client.get("/api/v1/activities/", {"lead": lead.id})
        assert [row["id"] for row in listing.data["results"]] == [task.id]

        response = api_client.post(f"/api/v1/activities/{task.id}/complete/")
        assert response.status_code == 200
        assert response.data["status"] == "completed"

        again = api_client.post(f"/api/v1/activities/{task.id}/complete/")
        assert again.status_code == 400


@pytest.mark.django_db
class TestLifecycleApi:
    def test_follow_up_rules(self, api_client):
        response = api_client.get("/api/v1/lifecycle/follow-up-rules/")
        assert response.status_code == 200
        assert len(response.data) == 12
        assert response.data[0]["subject"] == "Initial Contact Required"

    def test_sweep_requires_staff(self, api_client):
        response = api_client.post("/api/v1/lifecycle/sweep/")
        assert response.status_code == 403

    def test_sweep(self, django_user_model, manager, make_lead):
        admin = django_user_model.objects.create_user(username="admin", is_staff=True)
        client = APIClient()
        client.force_authenticate(user=admin)
        make_lead(first_name="Stale", last_activity_at=None)

        response = client.post("/api/v1/lifecycle/sweep/")

        assert response.status_code == 200
        assert response.data["escalations_created"] == 1
