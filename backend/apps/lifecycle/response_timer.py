# apps/lifecycle/response_timer.py

"""
Response timer: how long a lead has waited for its first contact.

Pure functions of (created_at, last_contacted_at, now). Nothing is cached or
stored; callers recompute on every read so the bucket can never go stale.

    0-5 min     great            "Great Timing"
    5-10 min    decent           "Decent Timing"
    10-30 min   late             "Late"             urgent
    30+ min     never_contacted  "Never Contacted"  urgent
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from django.utils import timezone

from apps.common.enums import ResponseBucket

GREAT_THRESHOLD = 5
DECENT_THRESHOLD = 10
LATE_THRESHOLD = 30

# Attention spike while crossing into "late"
PULSE_MINUTE = DECENT_THRESHOLD
PULSE_SECONDS = 30

CSS_CLASSES = {
    ResponseBucket.GREAT: "text-green-500",
    ResponseBucket.CONTACTED: "text-green-500",
    ResponseBucket.DECENT: "text-yellow-600",
    ResponseBucket.LATE: "text-red-500",
    ResponseBucket.NEVER_CONTACTED: "text-amber-500",
}

HEX_COLORS = {
    ResponseBucket.GREAT: "#22C55E",
    ResponseBucket.CONTACTED: "#22C55E",
    ResponseBucket.DECENT: "#CA8A04",
    ResponseBucket.LATE: "#EF4444",
    ResponseBucket.NEVER_CONTACTED: "#F59E0B",
}

BADGE_CLASSES = {
    ResponseBucket.GREAT: "bg-green-500/20 text-green-500 border-green-500/30",
    ResponseBucket.CONTACTED: "bg-green-500/20 text-green-500 border-green-500/30",
    ResponseBucket.DECENT: "bg-yellow-600/20 text-yellow-600 border-yellow-600/30",
    ResponseBucket.LATE: "bg-red-500/20 text-red-500 border-red-500/30",
    ResponseBucket.NEVER_CONTACTED: "bg-amber-500/20 text-amber-500 border-amber-500/30",
}

WAITING_MESSAGES = {
    ResponseBucket.GREAT: "Lead is fresh - contact now for best results!",
    ResponseBucket.DECENT: "Lead is still warm - reach out soon!",
    ResponseBucket.LATE: "CONTACT LEAD IMMEDIATELY",
    ResponseBucket.NEVER_CONTACTED: "Lead has been waiting too long - requires immediate attention",
}

CONTACTED_MESSAGES = {
    ResponseBucket.GREAT: "Excellent response time!",
    ResponseBucket.DECENT: "Good response time",
    ResponseBucket.LATE: "Response was delayed",
    ResponseBucket.NEVER_CONTACTED: "Response was significantly delayed",
}

FIRST_CONTACT_SUBJECTS = {
    ResponseBucket.GREAT: "First Contact - Great Timing",
    ResponseBucket.DECENT: "First Contact - Decent Timing",
    ResponseBucket.LATE: "First Contact - Late Response",
    ResponseBucket.NEVER_CONTACTED: "First Contact - Significantly Delayed",
}


@dataclass(frozen=True)
class ResponseState:
    status: str
    bucket: str
    label: str
    message: str
    color: str
    hex_color: str
    badge_class: str
    minutes_elapsed: int
    seconds_elapsed: int
    formatted_time: str
    is_urgent: bool
    is_pulsating: bool

    def to_dict(self) -> dict:
        return asdict(self)


def split_elapsed(start: datetime, end: datetime) -> tuple[int, int]:
    """Whole minutes and remaining seconds between two instants, never negative."""
    total = max(0, int((end - start).total_seconds()))
    return total // 60, total % 60


def bucket_for_minutes(minutes: int) -> str:
    if minutes < GREAT_THRESHOLD:
        return ResponseBucket.GREAT
    if minutes < DECENT_THRESHOLD:
        return ResponseBucket.DECENT
    if minutes < LATE_THRESHOLD:
        return ResponseBucket.LATE
    return ResponseBucket.NEVER_CONTACTED


def format_elapsed(minutes: int, seconds: int) -> str:
    """Format as M:SS under an hour and as "Nh Mm" from there on."""
    if minutes >= 60:
        return f"{minutes // 60}h {minutes % 60}m"
    return f"{minutes}:{seconds:02d}"


def classify(
    created_at: datetime,
    last_contacted_at: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> ResponseState:
    """
    Classify a lead's response timer.

    Once contacted, the clock is stopped: the state is "contacted", never
    urgent, and reports the bucket that applied at the moment of contact.
    """
    if last_contacted_at is not None:
        minutes, seconds = split_elapsed(created_at, last_contacted_at)
        bucket = bucket_for_minutes(minutes)
        formatted = format_elapsed(minutes, seconds)
        return ResponseState(
            status=ResponseBucket.CONTACTED,
            bucket=bucket,
            label=f"Contacted in {formatted}",
            message=CONTACTED_MESSAGES[bucket],
            color=CSS_CLASSES[bucket],
            hex_color=HEX_COLORS[bucket],
            badge_class=BADGE_CLASSES[ResponseBucket.CONTACTED],
            minutes_elapsed=minutes,
            seconds_elapsed=seconds,
            formatted_time=formatted,
            is_urgent=False,
            is_pulsating=False,
        )

    now = now or timezone.now()
    minutes, seconds = split_elapsed(created_at, now)
    bucket = bucket_for_minutes(minutes)

    return ResponseState(
        status=bucket,
        bucket=bucket,
        label=ResponseBucket(bucket).label,
        message=WAITING_MESSAGES[bucket],
        color=CSS_CLASSES[bucket],
        hex_color=HEX_COLORS[bucket],
        badge_class=BADGE_CLASSES[bucket],
        minutes_elapsed=minutes,
        seconds_elapsed=seconds,
        formatted_time=format_elapsed(minutes, seconds),
        is_urgent=minutes >= DECENT_THRESHOLD,
        is_pulsating=minutes == PULSE_MINUTE and seconds < PULSE_SECONDS,
    )


def classify_response_timer(
    created_at: datetime,
    last_contacted_at: Optional[datetime],
) -> ResponseState:
    """Live classification against the current time."""
    return classify(created_at, last_contacted_at, timezone.now())


def needs_urgent_attention(
    created_at: datetime,
    last_contacted_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> bool:
    """Never contacted and waiting 10 minutes or more."""
    if last_contacted_at is not None:
        return False
    minutes, _ = split_elapsed(created_at, now or timezone.now())
    return minutes >= DECENT_THRESHOLD


def response_time_minutes(created_at: datetime, contacted_at: datetime) -> int:
    return split_elapsed(created_at, contacted_at)[0]


def first_contact_summary(created_at: datetime, contacted_at: datetime) -> dict:
    """Subject/description for the timeline entry logged on first contact."""
    state = classify(created_at, contacted_at)
    return {
        "subject": FIRST_CONTACT_SUBJECTS[state.bucket],
        "description": (
            f"Lead was contacted {state.formatted_time} after creation. {state.message}"
        ),
        "color": state.hex_color,
    }
