# apps/activities/models.py

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.common.enums import ActivityStatus, ActivityType, Priority
from apps.common.models import TimestampedModel


class Activity(TimestampedModel):
    """
    Anything that happened, or should happen, on a lead: calls, emails,
    notes, generated follow-up tasks and stale-lead escalations.
    Owned by exactly one lead; merges re-point it to the surviving lead.
    """
    lead = models.ForeignKey(
        "leads.Lead",
        on_delete=models.CASCADE,
        related_name="activities",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="activities",
        help_text="Assignee (rep for follow-ups, manager for escalations)",
    )
    type = models.CharField(
        max_length=20,
        choices=ActivityType.choices,
        default=ActivityType.NOTE,
        db_index=True,
    )
    status = models.CharField(
        max_length=20,
        choices=ActivityStatus.choices,
        default=ActivityStatus.PENDING,
        db_index=True,
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
    )
    subject = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    due_date = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name_plural = "Activities"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["lead", "status"], name="activities__lead_id_5d1c2e_idx"),
            models.Index(fields=["lead", "type", "created_at"], name="activities__lead_id_a8f0b4_idx"),
            models.Index(fields=["status", "due_date"], name="activities__status_3c9e71_idx"),
        ]

    def __str__(self):
        return f"[{self.type}] {self.subject} ({self.status})"

    @property
    def is_open(self) -> bool:
        return self.status in (
            ActivityStatus.PENDING,
            ActivityStatus.SCHEDULED,
            ActivityStatus.OVERDUE,
        )

    def mark_completed(self):
        self.status = ActivityStatus.COMPLETED
        self.completed_at = timezone.now()
        self.save(update_fields=["status", "completed_at", "updated_at"])


class Deal(TimestampedModel):
    lead = models.ForeignKey(
        "leads.Lead",
        on_delete=models.CASCADE,
        related_name="deals",
    )
    title = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    stage = models.CharField(max_length=50, blank=True, default="open")

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} ({self.stage})"


class Quote(TimestampedModel):
    lead = models.ForeignKey(
        "leads.Lead",
        on_delete=models.CASCADE,
        related_name="quotes",
    )
    number = models.CharField(max_length=64, blank=True, default="")
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    status = models.CharField(max_length=20, blank=True, default="draft")

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Quote {self.number or self.pk} ({self.status})"
