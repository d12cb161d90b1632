from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vedabeam.api.errors import register_exception_handlers
from vedabeam.api.middleware.request_context import RequestContextMiddleware
from vedabeam.api.routes import api_router
from vedabeam.config import Settings, get_settings
from vedabeam.handlers.abuse import FixedWindowRateLimiter
from vedabeam.handlers.signup import SignupLogger
from vedabeam.ops.events import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    logger.info(
        "VedaBeam landing page running on port %d (environment=%s)",
        settings.port,
        settings.environment,
        extra={"event_type": "app.started"},
    )
    yield
    logger.info(
        "VedaBeam landing page stopped (%d rate-limit windows tracked)",
        app.state.rate_limiter.tracked_identities(),
        extra={"event_type": "app.stopped"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an app instance with its own settings and rate-limit table."""
    settings = settings or get_settings()
    ops_events = configure_logging(settings.log_level, buffer_size=settings.ops_event_buffer_size)

    app = FastAPI(
        title=settings.api_name,
        version=settings.service_version,
        lifespan=lifespan,
        docs_url=None if settings.is_production() else "/docs",
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.waitlist_rate_limit_max_requests,
        window_seconds=settings.waitlist_rate_limit_window_seconds,
    )
    app.state.signup_logger = SignupLogger()
    app.state.ops_events = ops_events

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origin_list(),
        allow_credentials=settings.is_production(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )
    # Must wrap CORS so preflight responses get a request id.
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
