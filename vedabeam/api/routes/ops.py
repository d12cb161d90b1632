from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from vedabeam.api.deps import get_app_settings
from vedabeam.config import Settings
from vedabeam.ops.events import EventLevel, OpsEventBuffer

router = APIRouter()


class OpsEventResponse(BaseModel):
    timestamp: str
    level: EventLevel
    component: str
    event_type: str
    message: str
    correlation_id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)


def _require_ops_console(settings: Annotated[Settings, Depends(get_app_settings)]) -> None:
    if not settings.ops_console_available():
        raise HTTPException(status_code=404, detail="ops_console_disabled")


def get_ops_events(request: Request) -> OpsEventBuffer:
    return request.app.state.ops_events


@router.get("/events", response_model=list[OpsEventResponse])
async def events(
    _: Annotated[None, Depends(_require_ops_console)],
    buffer: Annotated[OpsEventBuffer, Depends(get_ops_events)],
    limit: int = Query(100, ge=1, le=500),
    level: EventLevel | None = Query(default=None),
    event_type: str | None = Query(default=None, alias="type"),
    correlation_id: str | None = Query(default=None),
) -> list[OpsEventResponse]:
    items = buffer.recent(limit=limit, level=level, event_type=event_type)
    if correlation_id:
        items = [item for item in items if item["correlation_id"] == correlation_id]
    return [OpsEventResponse(**item) for item in items]
