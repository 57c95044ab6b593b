# apps/leads/duplicates.py

"""
Duplicate lead detection.

Passes run in fixed precedence: exact email, then exact phone, then similar
name. Every pass only groups leads that no earlier pass captured, so a lead
(and therefore any pair of leads) shows up in at most one group.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from apps.common.enums import MatchConfidence, MatchType

from .identity import name_key, normalize_email, normalize_phone
from .models import Lead
from .selectors import find_lead_by_key, get_duplicate_keys, get_leads_sharing_key

logger = logging.getLogger(__name__)

# (match key column, match type, confidence) in precedence order
MATCH_PASSES = (
    ("email_key", MatchType.EXACT_EMAIL, MatchConfidence.HIGH),
    ("phone_key", MatchType.EXACT_PHONE, MatchConfidence.HIGH),
    ("name_key", MatchType.SIMILAR_NAME, MatchConfidence.MEDIUM),
)


@dataclass
class LeadSummary:
    id: int
    first_name: str
    last_name: str
    email: Optional[str]
    phone: Optional[str]
    created_at: datetime
    lead_score: int
    status: str

    @classmethod
    def from_lead(cls, lead: Lead) -> "LeadSummary":
        return cls(
            id=lead.id,
            first_name=lead.first_name,
            last_name=lead.last_name,
            email=lead.email,
            phone=lead.phone,
            created_at=lead.created_at,
            lead_score=lead.lead_score,
            status=lead.status,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "created_at": self.created_at.isoformat(),
            "lead_score": self.lead_score,
            "status": self.status,
        }


@dataclass
class DuplicateGroup:
    """Leads believed to be the same person, oldest first."""
    match_type: str
    confidence: str
    key: str
    leads: list[LeadSummary] = field(default_factory=list)

    @property
    def lead_ids(self) -> list[int]:
        return [lead.id for lead in self.leads]

    @property
    def suggested_master_id(self) -> int:
        return self.leads[0].id

    def to_dict(self) -> dict:
        return {
            "match_type": self.match_type,
            "confidence": self.confidence,
            "suggested_master_id": self.suggested_master_id,
            "leads": [lead.to_dict() for lead in self.leads],
        }


class DuplicateSeverity:
    BLOCK = "block"
    WARN = "warn"


@dataclass
class DuplicateCheck:
    """Result of the pre-insertion check. Not an error: callers decide."""
    severity: str
    match_type: str
    message: str
    existing_lead_id: int

    @property
    def is_blocking(self) -> bool:
        return self.severity == DuplicateSeverity.BLOCK

    def to_dict(self) -> dict:
        return {
            "severity": self.severity,
            "match_type": self.match_type,
            "message": self.message,
            "existing_lead_id": self.existing_lead_id,
        }


def find_duplicates() -> list[DuplicateGroup]:
    """Scan all leads and return duplicate groups in precedence order."""
    groups: list[DuplicateGroup] = []
    captured: set[int] = set()

    for key_field, match_type, confidence in MATCH_PASSES:
        for value in get_duplicate_keys(key_field, exclude_ids=captured):
            leads = list(get_leads_sharing_key(key_field, value, exclude_ids=captured))
            if len(leads) < 2:
                continue
            groups.append(DuplicateGroup(
                match_type=match_type,
                confidence=confidence,
                key=value,
                leads=[LeadSummary.from_lead(lead) for lead in leads],
            ))
            captured.update(lead.id for lead in leads)

    logger.info(
        f"Duplicate scan found {len(groups)} groups covering {len(captured)} leads"
    )
    return groups


def check_for_duplicate_on_create(
    email: Optional[str] = None,
    phone: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    exclude_id: Optional[int] = None,
) -> Optional[DuplicateCheck]:
    """
    Check a candidate against existing leads before it is inserted.

    Exact email or phone matches block; a name-only match only warns since
    two different people can share a name. Returns None when nothing matches.
    """
    existing = find_lead_by_key("email_key", normalize_email(email), exclude_id)
    if existing:
        return DuplicateCheck(
            severity=DuplicateSeverity.BLOCK,
            match_type=MatchType.EXACT_EMAIL,
            message=f"Duplicate found: A lead with email {email} already exists.",
            existing_lead_id=existing.id,
        )

    existing = find_lead_by_key("phone_key", normalize_phone(phone), exclude_id)
    if existing:
        return DuplicateCheck(
            severity=DuplicateSeverity.BLOCK,
            match_type=MatchType.EXACT_PHONE,
            message=f"Duplicate found: A lead with phone {phone} already exists.",
            existing_lead_id=existing.id,
        )

    if first_name and last_name:
        existing = find_lead_by_key("name_key", name_key(first_name, last_name), exclude_id)
        if existing:
            return DuplicateCheck(
                severity=DuplicateSeverity.WARN,
                match_type=MatchType.SIMILAR_NAME,
                message=(
                    f"Possible duplicate: A lead named {first_name} {last_name} "
                    f"already exists. Please verify before creating."
                ),
                existing_lead_id=existing.id,
            )

    return None
