from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

InvalidReason = Literal["missing_email", "empty_email", "too_short", "too_long", "invalid_format"]

REASON_MESSAGES: dict[str, str] = {
    "missing_email": "Email address is required",
    "empty_email": "Please enter your email address",
    "too_short": "Email address is too short",
    "too_long": "Email address is too long",
    "invalid_format": "Email address must look like name@example.com",
}


class EmailValidationResult(BaseModel):
    valid: bool
    email: str | None = None
    reason: InvalidReason | None = None

    @property
    def message(self) -> str | None:
        if self.reason is None:
            return None
        return REASON_MESSAGES[self.reason]


def _invalid(reason: InvalidReason) -> EmailValidationResult:
    return EmailValidationResult(valid=False, reason=reason)


def validate_email(
    candidate: str | None,
    *,
    min_length: int = 5,
    max_length: int = 254,
) -> EmailValidationResult:
    """Check a submitted address against the waitlist format and length policy.

    Surrounding whitespace is ignored. On success the trimmed address is
    returned in ``email``; on failure ``reason`` names the first rule broken.
    """
    if candidate is None:
        return _invalid("missing_email")
    email = candidate.strip()
    if not email:
        return _invalid("empty_email")
    if len(email) < min_length:
        return _invalid("too_short")
    if len(email) > max_length:
        return _invalid("too_long")
    if EMAIL_PATTERN.fullmatch(email) is None:
        return _invalid("invalid_format")
    return EmailValidationResult(valid=True, email=email)
