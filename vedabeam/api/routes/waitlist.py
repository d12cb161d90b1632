from __future__ import annotations

import json
import logging
from typing import Annotated
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, ConfigDict, ValidationError

from vedabeam.api.deps import get_app_settings, get_rate_limiter, get_signup_logger
from vedabeam.api.errors import INVALID_EMAIL_MESSAGE, SignupRejected, validation_error_details
from vedabeam.config import Settings
from vedabeam.handlers.abuse import FixedWindowRateLimiter, RateLimitResult
from vedabeam.handlers.signup import SignupAttempt, SignupLogger
from vedabeam.handlers.validation import validate_email

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMITED_MESSAGE = "Too many signup attempts from this IP, please try again later."
WELCOME_MESSAGE = "Thank you for joining the VedaBeam waitlist! We'll be in touch soon."


class WaitlistRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    name: str | None = None


class WaitlistResponse(BaseModel):
    success: bool
    message: str


def _get_client_ip(request: Request) -> str:
    # uvicorn resolves X-Forwarded-For into request.client for FORWARDED_ALLOW_IPS only
    if request.client:
        return request.client.host
    return ""


async def _read_payload(request: Request, headers: dict[str, str]) -> WaitlistRequest:
    raw = await request.body()
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/x-www-form-urlencoded"):
            data = dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))
        else:
            data = json.loads(raw) if raw.strip() else {}
    except ValueError:
        raise SignupRejected(
            400,
            INVALID_EMAIL_MESSAGE,
            errors=[{"field": "body", "reason": "invalid_body", "message": "Request body could not be parsed"}],
            headers=headers,
        ) from None
    try:
        return WaitlistRequest.model_validate(data)
    except ValidationError as exc:
        raise SignupRejected(
            400, INVALID_EMAIL_MESSAGE, errors=validation_error_details(exc), headers=headers
        ) from None


def _rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    headers = {
        "RateLimit-Limit": str(result.limit),
        "RateLimit-Remaining": str(result.remaining),
        "RateLimit-Reset": str(result.retry_after_seconds),
    }
    if not result.allowed:
        headers["Retry-After"] = str(result.retry_after_seconds)
    return headers


@router.post("/waitlist", response_model=WaitlistResponse)
async def join_waitlist(
    request: Request,
    response: Response,
    settings: Annotated[Settings, Depends(get_app_settings)],
    limiter: Annotated[FixedWindowRateLimiter, Depends(get_rate_limiter)],
    signup_logger: Annotated[SignupLogger, Depends(get_signup_logger)],
) -> WaitlistResponse:
    client_identity = _get_client_ip(request) or "unknown"

    limit = limiter.hit(client_identity)
    headers = _rate_limit_headers(limit)
    if not limit.allowed:
        raise SignupRejected(429, RATE_LIMITED_MESSAGE, headers=headers)

    payload = await _read_payload(request, headers)

    result = validate_email(
        payload.email,
        min_length=settings.email_min_length,
        max_length=settings.email_max_length,
    )
    if not result.valid:
        logger.info(
            "Rejected waitlist signup: %s",
            result.reason,
            extra={"event_type": "waitlist.rejected", "ops_payload": {"reason": result.reason}},
        )
        raise SignupRejected(
            400,
            INVALID_EMAIL_MESSAGE,
            errors=[{"field": "email", "reason": result.reason, "message": result.message}],
            headers=headers,
        )

    attempt = SignupAttempt(
        email=result.email or "",
        name=payload.name,
        client_identity=client_identity,
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
        request_id=getattr(request.state, "correlation_id", None),
    )
    signup_logger.record(attempt)

    response.headers.update(headers)
    return WaitlistResponse(success=True, message=WELCOME_MESSAGE)
