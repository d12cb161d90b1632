from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from vedabeam.api.deps import get_app_settings
from vedabeam.config import Settings

router = APIRouter()


@router.api_route(
    "/api/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False,
)
async def unknown_api_route(path: str) -> None:
    raise HTTPException(status_code=404, detail="API endpoint not found")


@router.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def landing_page(
    path: str,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> FileResponse:
    """Serve the landing page for every non-API path (SPA fallback)."""
    if settings.is_production():
        cache_control = f"public, max-age={settings.landing_page_max_age_seconds}"
    else:
        cache_control = "no-cache"
    return FileResponse(
        settings.landing_page_path,
        media_type="text/html",
        headers={"Cache-Control": cache_control},
    )
