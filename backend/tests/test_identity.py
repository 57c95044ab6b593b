import pytest
from django.test import override_settings

from apps.leads.identity import (
    is_placeholder_email,
    name_key,
    normalize_email,
    normalize_phone,
)
from apps.leads.models import Lead


class TestNormalizeEmail:
    def test_lowercases_and_strips(self):
        assert normalize_email("  John.Doe@Example.COM ") == "john.doe@example.com"

    def test_missing_email_is_empty(self):
        assert normalize_email(None) == ""
        assert normalize_email("") == ""

    def test_not_an_address_is_empty(self):
        assert normalize_email("john at example.com") == ""

    def test_placeholder_domains_are_excluded(self):
        assert normalize_email("5551234567@placeholder.com") == ""
        assert normalize_email("5551234567@PLACEHOLDER.COM") == ""
        assert normalize_email("x@import.placeholder.com") == ""

    def test_lookalike_domain_is_not_placeholder(self):
        assert not is_placeholder_email("a@notplaceholder.com")
        assert normalize_email("a@notplaceholder.com") == "a@notplaceholder.com"


class TestNormalizePhone:
    def test_keeps_digits_only(self):
        assert normalize_phone("(555) 123-4567") == "5551234567"
        assert normalize_phone("+1 555.123.4567") == "15551234567"

    def test_short_numbers_do_not_match(self):
        assert normalize_phone("555-1234") == ""
        assert normalize_phone(None) == ""

    @override_settings(LEADCYCLE={"MIN_PHONE_DIGITS": 7})
    def test_minimum_digits_is_configurable(self):
        assert normalize_phone("555-1234") == "5551234"


class TestNameKey:
    def test_case_and_whitespace_insensitive(self):
        assert name_key("John ", " Doe") == "johndoe"
        assert name_key("JOHN", "DOE") == name_key("john", "doe")
        assert name_key("Mary Ann", "Smith") == "maryannsmith"

    def test_blank_name(self):
        assert name_key("", None) == ""


@pytest.mark.django_db
class TestLeadMatchKeys:
    def test_keys_derived_on_create(self):
        lead = Lead.objects.create(
            first_name="Jane",
            last_name="Roe",
            email="Jane@Example.com",
            phone="(555) 987-6543",
        )
        assert lead.email_key == "jane@example.com"
        assert lead.phone_key == "5559876543"
        assert lead.name_key == "janeroe"

    def test_keys_follow_partial_saves(self):
        lead = Lead.objects.create(first_name="Jane", last_name="Roe", email="a@example.com")
        lead.email = "B@Example.com"
        lead.save(update_fields=["email"])
        lead.refresh_from_db()
        assert lead.email_key == "b@example.com"

    def test_placeholder_email_has_no_key(self):
        lead = Lead.objects.create(first_name="P", email="5551112222@placeholder.com")
        assert lead.email_key == ""

    def test_identity_label(self):
        assert Lead(email="a@b.com", phone="555").identity_label == "a@b.com"
        assert Lead(phone="5551234567").identity_label == "5551234567"
        assert Lead().identity_label == "no contact info"
