# apps/common/exceptions.py


class LeadCycleError(Exception):
    """Base class for lead lifecycle engine errors."""


class LeadValidationError(LeadCycleError):
    """Rejected input; raised before anything is written."""


class LeadNotFound(LeadCycleError):
    def __init__(self, lead_id):
        self.lead_id = lead_id
        super().__init__(f"Lead {lead_id} not found")


class DuplicateDetected(LeadCycleError):
    """A hard (email or phone) duplicate blocked lead creation."""

    def __init__(self, check):
        self.check = check
        super().__init__(check.message)
