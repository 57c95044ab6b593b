from datetime import datetime, timezone as dt_timezone

import pytest
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from apps.leads.models import Lead

NOW = datetime(2026, 3, 2, 15, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def rep(django_user_model):
    return django_user_model.objects.create_user(username="rep", password="pw")


@pytest.fixture
def manager(django_user_model):
    user = django_user_model.objects.create_user(username="boss", password="pw")
    group, _ = Group.objects.get_or_create(name="manager")
    user.groups.add(group)
    return user


@pytest.fixture
def make_lead():
    """Create a lead directly; created_at can be backdated."""
    def _make(created_at=None, **fields):
        lead = Lead.objects.create(**fields)
        if created_at is not None:
            Lead.objects.filter(pk=lead.pk).update(created_at=created_at)
            lead.refresh_from_db()
        return lead
    return _make


@pytest.fixture
def api_client(rep):
    client = APIClient()
    client.force_authenticate(user=rep)
    return client
