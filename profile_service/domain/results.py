"""Handler outcomes translated into HTTP responses at the API boundary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .user import UserProfile


@dataclass(slots=True)
class Success:
    """A handled request together with its response envelope fields."""

    status_code: int
    message: str
    data: UserProfile | None = None
    include_data: bool = False


@dataclass(slots=True)
class Failure:
    """A modeled failure rendered as ``{statusCode, error, message}``."""

    status_code: int
    error: str
    message: list[str]

    @classmethod
    def not_found(cls, message: str) -> "Failure":
        return cls(status_code=404, error="NotFound", message=[message])

    def to_body(self) -> dict[str, Any]:
        return {"statusCode": self.status_code, "error": self.error, "message": list(self.message)}


Result = Union[Success, Failure]
