"""Request-level errors rendered with the ``{statusCode, error, message}`` envelope."""

from __future__ import annotations

from fastapi import status


class ApiError(Exception):
    """Base class for failures raised before a handler body runs."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "BadRequest"

    def __init__(self, *messages: str) -> None:
        super().__init__(*messages)
        self.messages = list(messages)

    def to_body(self) -> dict[str, object]:
        return {"statusCode": self.status_code, "error": self.error, "message": self.messages}


class InvalidIdentifier(ApiError, ValueError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "BadRequest"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
