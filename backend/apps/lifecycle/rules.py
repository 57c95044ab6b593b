# apps/lifecycle/rules.py

"""
Follow-up rule table.

Status -> tasks to schedule when a lead enters that status. All rules for a
status are created up front, each due `days_after` days from the transition.
Adding a rule is a data change here, nothing else.
"""

from dataclasses import dataclass

from apps.common.enums import ActivityType, LeadStatus, Priority


@dataclass(frozen=True)
class FollowUpRule:
    status: str
    days_after: int
    task_type: str
    subject: str
    description: str
    priority: str

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "days_after": self.days_after,
            "task_type": self.task_type,
            "subject": self.subject,
            "description": self.description,
            "priority": self.priority,
        }


FOLLOW_UP_RULES: tuple[FollowUpRule, ...] = (
    # New leads need an immediate first touch
    FollowUpRule(
        status=LeadStatus.NEW,
        days_after=0,
        task_type=ActivityType.CALL,
        subject="Initial Contact Required",
        description="Make first contact with new lead. Introduce yourself and qualify their needs.",
        priority=Priority.URGENT,
    ),
    FollowUpRule(
        status=LeadStatus.NEW,
        days_after=1,
        task_type=ActivityType.CALL,
        subject="Follow-Up: First Contact Attempt",
        description="Second attempt to reach new lead if no response from first contact.",
        priority=Priority.HIGH,
    ),
    # Contacted
    FollowUpRule(
        status=LeadStatus.CONTACTED,
        days_after=1,
        task_type=ActivityType.EMAIL,
        subject="Send Product Information",
        description="Send email with trailer options matching their requirements.",
        priority=Priority.HIGH,
    ),
    FollowUpRule(
        status=LeadStatus.CONTACTED,
        days_after=3,
        task_type=ActivityType.CALL,
        subject="Check-In Call",
        description="Follow up to see if they reviewed the information and answer questions.",
        priority=Priority.MEDIUM,
    ),
    # Qualified: push toward an application
    FollowUpRule(
        status=LeadStatus.QUALIFIED,
        days_after=1,
        task_type=ActivityType.TASK,
        subject="Send Credit Application",
        description="Send credit application link and financing information.",
        priority=Priority.HIGH,
    ),
    FollowUpRule(
        status=LeadStatus.QUALIFIED,
        days_after=3,
        task_type=ActivityType.CALL,
        subject="Application Status Check",
        description="Call to see if they need help with credit application.",
        priority=Priority.MEDIUM,
    ),
    FollowUpRule(
        status=LeadStatus.QUALIFIED,
        days_after=7,
        task_type=ActivityType.CALL,
        subject="Final Follow-Up",
        description="Last attempt to move qualified lead forward before marking cold.",
        priority=Priority.LOW,
    ),
    # Applied
    FollowUpRule(
        status=LeadStatus.APPLIED,
        days_after=1,
        task_type=ActivityType.TASK,
        subject="Check Application Status",
        description="Check with finance department on application status.",
        priority=Priority.HIGH,
    ),
    FollowUpRule(
        status=LeadStatus.APPLIED,
        days_after=3,
        task_type=ActivityType.CALL,
        subject="Update Customer on Application",
        description="Call customer with update on their credit application.",
        priority=Priority.MEDIUM,
    ),
    # Approved: close
    FollowUpRule(
        status=LeadStatus.APPROVED,
        days_after=0,
        task_type=ActivityType.CALL,
        subject="Congratulations Call — Move to Close",
        description="Call immediately to congratulate and schedule delivery/pickup.",
        priority=Priority.URGENT,
    ),
    FollowUpRule(
        status=LeadStatus.APPROVED,
        days_after=1,
        task_type=ActivityType.TASK,
        subject="Finalize Paperwork",
        description="Prepare and send final purchase documents.",
        priority=Priority.HIGH,
    ),
    FollowUpRule(
        status=LeadStatus.APPROVED,
        days_after=3,
        task_type=ActivityType.CALL,
        subject="Close Deal",
        description="Final call to complete transaction and arrange delivery.",
        priority=Priority.URGENT,
    ),
)


def rules_for_status(status: str) -> tuple[FollowUpRule, ...]:
    """Rules for a status in table order; empty for won, dead and unknowns."""
    return tuple(rule for rule in FOLLOW_UP_RULES if rule.status == status)
