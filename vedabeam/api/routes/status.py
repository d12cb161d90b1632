from __future__ import annotations

import resource
import sys
import time
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from vedabeam.api.deps import get_app_settings
from vedabeam.config import Settings
from vedabeam.ops.events import isoformat_z

router = APIRouter()

API_ENDPOINTS: dict[str, str] = {
    "waitlist": "POST /api/waitlist",
    "status": "GET /api/status",
    "health": "GET /health",
}


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
    uptime: float
    environment: str
    memory: dict[str, Any]
    port: int


class ApiStatusResponse(BaseModel):
    api: str
    version: str
    status: str
    endpoints: dict[str, str]


def memory_usage() -> dict[str, Any]:
    """Peak resident set size of this process since start.

    Uses the Unix-only ``resource`` module; ``ru_maxrss`` is a high-water mark,
    not current usage.
    """
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is bytes on macOS and kilobytes elsewhere
    peak_rss = usage.ru_maxrss if sys.platform == "darwin" else usage.ru_maxrss * 1024
    return {"peak_rss_bytes": peak_rss}


@router.get("/health", response_model=HealthResponse)
async def health(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    uptime = max(0.0, time.monotonic() - request.app.state.started_at)
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        version=settings.service_version,
        timestamp=isoformat_z(datetime.now(UTC)),
        uptime=round(uptime, 3),
        environment=settings.environment,
        memory=memory_usage(),
        port=settings.port,
    )


@router.get("/api/status", response_model=ApiStatusResponse)
async def api_status(settings: Annotated[Settings, Depends(get_app_settings)]) -> ApiStatusResponse:
    endpoints = dict(API_ENDPOINTS)
    if settings.ops_console_available():
        endpoints["ops_events"] = "GET /api/ops/events"
    return ApiStatusResponse(
        api=settings.api_name,
        version=settings.service_version,
        status="operational",
        endpoints=endpoints,
    )
