from __future__ import annotations

from fastapi import Request

from vedabeam.config import Settings
from vedabeam.handlers.abuse import FixedWindowRateLimiter
from vedabeam.handlers.signup import SignupLogger


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.rate_limiter


def get_signup_logger(request: Request) -> SignupLogger:
    return request.app.state.signup_logger
