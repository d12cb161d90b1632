from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Protocol

from pydantic import BaseModel, Field

from vedabeam.ops.events import isoformat_z

logger = logging.getLogger(__name__)


class SignupAttempt(BaseModel):
    """A single waitlist signup, alive only for the request that made it."""

    email: str
    client_identity: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    user_agent: str | None = None
    referrer: str | None = None
    name: str | None = None
    request_id: str | None = None

    def log_payload(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "name": self.name,
            "client_identity": self.client_identity,
            "user_agent": self.user_agent,
            "referrer": self.referrer,
            "timestamp": isoformat_z(self.timestamp),
        }


class SignupStore(Protocol):
    """Durable storage for signups. No implementation ships yet; signups are only logged."""

    def record(self, attempt: SignupAttempt) -> bool: ...


class SignupLogger:
    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def record(self, attempt: SignupAttempt) -> bool:
        """Emit the signup as a structured log record. Never raises."""
        try:
            self._log.info(
                "New waitlist signup from %s",
                attempt.client_identity,
                extra={
                    "event_type": "waitlist.signup",
                    "correlation_id": attempt.request_id,
                    "ops_payload": attempt.log_payload(),
                },
            )
        except Exception:
            logger.warning(
                "Failed to record waitlist signup",
                exc_info=True,
                extra={"event_type": "waitlist.signup.log_failed"},
            )
            return False
        return True
