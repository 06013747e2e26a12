"""
Exception handlers producing the API's error response format.

Every error response has the shape:
{
    "message": "Human readable message"
}

500 responses add an "error" field with the exception text outside
production so the dashboard can show it during development.
"""
from typing import Any, Dict
from loguru import logger
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from grouptherapy.storage.base import RecordNotFoundError


def error_body(message: str, **extra: Any) -> Dict[str, Any]:
    """Build the standard error payload."""
    body = {"message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def format_validation_errors(exc: RequestValidationError) -> str:
    """Turn pydantic errors into one readable line, e.g. "title: Field required"."""
    parts = []
    for err in exc.errors():
        # Drop the leading "body"/"query" segment
        location = [str(p) for p in err.get("loc", ())[1:]]
        field = ".".join(location)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(format_validation_errors(exc)),
    )


async def not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error_body(str(exc)))


def register_exception_handlers(app: FastAPI, production: bool) -> None:
    """Install all handlers on the app."""

    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        # Log the full error for debugging, return a generic message to the client
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error", error=None if production else str(exc)),
        )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RecordNotFoundError, not_found_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
