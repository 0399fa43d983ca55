"""Submission Validation — pure checks on a decoded signup payload.

Invariants:
    - Email is checked before name; the first failing rule wins
    - email and name are returned exactly as submitted (no trim, no case folding)
    - interest/message carry no format or length rules
    - Email must match in full: a trailing newline is not an email

Design Decisions:
    - Hand-written checks over a pydantic body model: the response contract needs
      one fixed message per rule, not pydantic's error list
    - Blank values (null, false, 0, "") are "not supplied", matching what the landing
      page sends for untouched form fields; a non-string name is a malformed request
    - Non-string optional values stored in their JSON spelling (true, 3, ["a"])
"""

import json
import re
from typing import Any

from waitlist_api.core.domain_types import EntrantSubmission
from waitlist_api.core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

INVALID_REQUEST = "Invalid request"
INVALID_EMAIL = "Invalid email address"
NAME_REQUIRED = "Name is required"


def is_valid_email(value: Any) -> bool:
    """local@domain.tld shape: no whitespace, one @, a dot after the @."""
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def is_present_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_blank(value: Any) -> bool:
    """null, false, 0 and "" count as not supplied; lists and objects do not."""
    if isinstance(value, (list, dict)):
        return False
    return not value


def _optional_text(value: Any) -> str | None:
    if is_blank(value):
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def validate_submission(payload: Any) -> EntrantSubmission:
    """Validate a decoded JSON body. Raises ValidationError on the first bad field."""
    if not isinstance(payload, dict):
        raise ValidationError(INVALID_REQUEST, field="body")

    email = payload.get("email")
    if not is_valid_email(email):
        raise ValidationError(INVALID_EMAIL, field="email")

    name = payload.get("name")
    if is_blank(name):
        raise ValidationError(NAME_REQUIRED, field="name")
    if not isinstance(name, str):
        raise ValidationError(INVALID_REQUEST, field="name")
    if not is_present_name(name):
        raise ValidationError(NAME_REQUIRED, field="name")

    return EntrantSubmission(
        email=email,
        name=name,
        interest=_optional_text(payload.get("interest")),
        message=_optional_text(payload.get("message")),
    )
