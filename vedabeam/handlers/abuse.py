from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class RateLimitResult(BaseModel):
    allowed: bool
    limit: int
    remaining: int
    reset_after_seconds: float
    reason: str | None = None

    @property
    def retry_after_seconds(self) -> int:
        return max(1, math.ceil(self.reset_after_seconds))


@dataclass(slots=True)
class RateLimitWindow:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """Per-identity request quota over a fixed window.

    A window opens on an identity's first request and closes ``window_seconds``
    later. Every evaluated request counts, including denied ones; since the
    reset time is fixed when the window opens this never delays recovery.
    """

    def __init__(
        self,
        *,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, RateLimitWindow] = {}
        self._lock = Lock()
        self._next_sweep_at = clock() + window_seconds

    def hit(self, identity: str) -> RateLimitResult:
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep_at:
                self._sweep(now)

            window = self._windows.get(identity)
            if window is None or now >= window.reset_at:
                window = RateLimitWindow(count=0, reset_at=now + self.window_seconds)
                self._windows[identity] = window
            window.count += 1

            reset_after = window.reset_at - now
            if window.count > self.max_requests:
                logger.warning(
                    "Rate limit exceeded for %s (%d/%d)",
                    identity,
                    window.count,
                    self.max_requests,
                    extra={
                        "event_type": "waitlist.rate_limited",
                        "ops_payload": {"client_identity": identity, "count": window.count},
                    },
                )
                return RateLimitResult(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    reset_after_seconds=reset_after,
                    reason="rate_limit_exceeded",
                )
            return RateLimitResult(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - window.count,
                reset_after_seconds=reset_after,
            )

    def reset(self, identity: str | None = None) -> None:
        with self._lock:
            if identity is None:
                self._windows.clear()
            else:
                self._windows.pop(identity, None)

    def tracked_identities(self) -> int:
        with self._lock:
            return len(self._windows)

    def _sweep(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in expired:
            del self._windows[key]
        self._next_sweep_at = now + self.window_seconds
        if expired:
            logger.debug("Evicted %d expired rate-limit windows", len(expired))
