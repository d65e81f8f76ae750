"""Exception handlers rendering request failures as ``{statusCode, error, message}``."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..errors import ApiError, Unauthorized


def format_validation_error(error: dict) -> str:
    """Render one pydantic/FastAPI error entry as a single readable message."""
    if error.get("type") == "json_invalid":
        return "Invalid JSON body"
    cause = (error.get("ctx") or {}).get("error")
    if isinstance(cause, ApiError):
        return ", ".join(cause.messages)
    message = str(cause) if isinstance(cause, ValueError) else str(error.get("msg"))
    location = ".".join(
        str(part) for part in error.get("loc", ()) if part != "body" and not isinstance(part, int)
    )
    if location:
        return f"{location}: {message}"
    return message


def register_error_handlers(app: FastAPI) -> None:
    """Install the envelope renderers for modeled request failures."""

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "statusCode": status.HTTP_400_BAD_REQUEST,
                "error": "BadRequest",
                "message": [format_validation_error(error) for error in exc.errors()],
            },
        )
