# apps/common/enums.py

from django.db import models


class LeadStatus(models.TextChoices):
    """Lifecycle statuses a lead moves through."""
    NEW = "new", "New"
    CONTACTED = "contacted", "Contacted"
    QUALIFIED = "qualified", "Qualified"
    APPLIED = "applied", "Applied"
    APPROVED = "approved", "Approved"
    WON = "won", "Won"
    DEAD = "dead", "Dead"

    @classmethod
    def terminal(cls) -> tuple[str, ...]:
        """Statuses after which nothing is auto-generated."""
        return (cls.WON, cls.DEAD)


class ActivityType(models.TextChoices):
    CALL = "call", "Call"
    EMAIL = "email", "Email"
    NOTE = "note", "Note"
    TASK = "task", "Task"
    MEETING = "meeting", "Meeting"
    MESSAGE = "message", "Message"
    ESCALATION = "escalation", "Escalation"

    @classmethod
    def contact_types(cls) -> tuple[str, ...]:
        """Types that count as reaching the customer."""
        return (cls.CALL, cls.EMAIL, cls.MEETING, cls.MESSAGE)


class ActivityStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    SCHEDULED = "scheduled", "Scheduled"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    OVERDUE = "overdue", "Overdue"


class Priority(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    URGENT = "urgent", "Urgent"


class MatchType(models.TextChoices):
    """How a duplicate group was matched, strongest first."""
    EXACT_EMAIL = "exact-email", "Exact email"
    EXACT_PHONE = "exact-phone", "Exact phone"
    SIMILAR_NAME = "similar-name", "Similar name"


class MatchConfidence(models.TextChoices):
    HIGH = "high", "High"
    MEDIUM = "medium", "Medium"
    LOW = "low", "Low"


class ResponseBucket(models.TextChoices):
    """Response timer states. CONTACTED closes the clock."""
    GREAT = "great", "Great Timing"
    DECENT = "decent", "Decent Timing"
    LATE = "late", "Late"
    NEVER_CONTACTED = "never_contacted", "Never Contacted"
    CONTACTED = "contacted", "Contacted"
