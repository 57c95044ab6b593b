"""
Deterministic identity keys used by duplicate detection.

Each function returns an empty string when the value must not take part in
matching: missing or placeholder emails, phones too short to be real, and
blank names.
"""

import re

from apps.common.conf import lifecycle_setting

_WHITESPACE = re.compile(r"\s+")


def is_placeholder_email(email: str) -> bool:
    """True for synthetic addresses such as ``5551234567@placeholder.com``."""
    if "@" not in email:
        return False
    domain = email.rsplit("@", 1)[1].lower()
    for placeholder in lifecycle_setting("PLACEHOLDER_EMAIL_DOMAINS"):
        placeholder = placeholder.lower()
        if (
            domain == placeholder
            or domain.endswith("." + placeholder)
            or domain.split(".")[0] == placeholder
        ):
            return True
    return False


def normalize_email(email: str | None) -> str:
    if not email:
        return ""
    value = email.strip().lower()
    if "@" not in value or is_placeholder_email(value):
        return ""
    return value


def phone_digits(phone: str | None) -> str:
    return "".join(filter(str.isdigit, phone or ""))


def normalize_phone(phone: str | None) -> str:
    digits = phone_digits(phone)
    if len(digits) < lifecycle_setting("MIN_PHONE_DIGITS"):
        return ""
    return digits


def name_key(first_name: str | None, last_name: str | None) -> str:
    full = f"{first_name or ''} {last_name or ''}".lower()
    return _WHITESPACE.sub("", full)
