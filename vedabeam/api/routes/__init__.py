from fastapi import APIRouter

from vedabeam.api.routes.ops import router as ops_router
from vedabeam.api.routes.pages import router as pages_router
from vedabeam.api.routes.status import router as status_router
from vedabeam.api.routes.waitlist import router as waitlist_router

api_router = APIRouter()
api_router.include_router(status_router, tags=["status"])
api_router.include_router(waitlist_router, prefix="/api", tags=["waitlist"])
api_router.include_router(ops_router, prefix="/api/ops", tags=["ops"])
# Catch-all routes; must stay last.
api_router.include_router(pages_router, tags=["pages"])
