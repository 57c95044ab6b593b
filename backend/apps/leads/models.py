# apps/leads/models.py

from django.conf import settings
from django.db import models

from apps.common.enums import LeadStatus
from apps.common.models import TimestampedModel

from .identity import name_key, normalize_email, normalize_phone


class Lead(TimestampedModel):
    """A prospective customer and the unit of identity resolution."""

    # Core identity
    first_name = models.CharField(max_length=120, blank=True, default="")
    last_name = models.CharField(max_length=120, blank=True, default="")
    email = models.EmailField(max_length=254, null=True, blank=True)
    phone = models.CharField(max_length=40, null=True, blank=True)

    # Match keys derived from the identity fields on save(); empty means
    # "does not take part in matching on this key"
    email_key = models.CharField(max_length=254, blank=True, default="", editable=False)
    phone_key = models.CharField(max_length=20, blank=True, default="", editable=False)
    name_key = models.CharField(max_length=240, blank=True, default="", editable=False)

    # Lifecycle
    status = models.CharField(
        max_length=20,
        choices=LeadStatus.choices,
        default=LeadStatus.NEW,
        db_index=True,
    )
    last_activity_at = models.DateTimeField(null=True, blank=True)
    last_contacted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Set once, when the first contact activity is recorded",
    )
    lead_score = models.PositiveIntegerField(default=0)

    # Mergeable free text and tags
    notes = models.TextField(blank=True, default="")
    manager_notes = models.TextField(blank=True, default="")
    rep_notes = models.TextField(blank=True, default="")
    tags = models.JSONField(default=list, blank=True)

    # Ownership, consumed as given
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="assigned_leads",
    )
    assigned_to_name = models.CharField(max_length=255, blank=True, default="")
    sales_rep_name = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        indexes = [
            models.Index(fields=["email_key"], name="leads_lead_email_k_6c2f1e_idx"),
            models.Index(fields=["phone_key"], name="leads_lead_phone_k_9a41d3_idx"),
            models.Index(fields=["name_key"], name="leads_lead_name_ke_2b7c80_idx"),
            models.Index(fields=["status", "last_activity_at"], name="leads_lead_status_4e0d5a_idx"),
            models.Index(fields=["last_contacted_at", "created_at"], name="leads_lead_last_co_81b3f2_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.display_name} ({self.identity_label})"

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or f"Lead {self.pk}"

    @property
    def identity_label(self) -> str:
        return self.email or self.phone or "no contact info"

    @property
    def is_terminal(self) -> bool:
        return self.status in LeadStatus.terminal()

    def refresh_match_keys(self) -> None:
        self.email_key = normalize_email(self.email)
        self.phone_key = normalize_phone(self.phone)
        self.name_key = name_key(self.first_name, self.last_name)

    def save(self, *args, **kwargs):
        self.refresh_match_keys()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            identity = {"email", "phone", "first_name", "last_name"}
            if identity & set(update_fields):
                kwargs["update_fields"] = {
                    *update_fields, "email_key", "phone_key", "name_key",
                }
        super().save(*args, **kwargs)
