"""Path identifier validation applied before any lookup."""

from __future__ import annotations

import uuid

from ..errors import InvalidIdentifier


def validate_identifier(raw: str) -> str:
    """Return the canonical lower-case form of a UUID identifier.

    Raises ``InvalidIdentifier`` for anything that is not a hyphenated UUID.
    """
    candidate = (raw or "").strip()
    if len(candidate) != 36:
        raise InvalidIdentifier("Invalid identifier")
    try:
        parsed = uuid.UUID(candidate)
    except ValueError as exc:
        raise InvalidIdentifier("Invalid identifier") from exc
    canonical = str(parsed)
    if canonical != candidate.lower():
        raise InvalidIdentifier("Invalid identifier")
    return canonical


def valid_path_id(id: str) -> str:
    """FastAPI dependency resolving the ``{id}`` path segment."""
    return validate_identifier(id)
