from __future__ import annotations

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from vedabeam.config import Settings

INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again later."


class SignupRejected(Exception):
    """Raised by the waitlist pipeline for expected, user-facing rejections."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors
        self.headers = headers


def internal_error_response(exc: Exception, settings: Settings) -> JSONResponse:
    if settings.is_production():
        return JSONResponse(status_code=500, content={"success": False, "message": GENERIC_ERROR_MESSAGE})
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": str(exc) or exc.__class__.__name__,
            "stack": "".join(traceback.format_exception(exc)),
        },
    )


def validation_error_details(exc: ValidationError) -> list[dict[str, Any]]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        errors.append(
            {
                "field": ".".join(location) or "body",
                "reason": error.get("type", "invalid"),
                "message": error.get("msg", "Invalid value"),
            }
        )
    return errors


async def signup_rejected_handler(request: Request, exc: SignupRejected) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404:
        detail = "API endpoint not found" if request.url.path.startswith("/api/") else "Not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail, "path": request.url.path},
        headers=exc.headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SignupRejected, signup_rejected_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
