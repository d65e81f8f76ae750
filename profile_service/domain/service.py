"""User data access service shared by the profile endpoints."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from .user import UserProfile

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    def find_one_by_field(self, filter: Mapping[str, Any]) -> UserProfile | None: ...

    def update(self, filter: Mapping[str, Any], patch: Mapping[str, Any]) -> UserProfile | None: ...


class UsersService:
    """User lookups and partial updates backed by a ``UserStore``."""

    def __init__(self, repository: UserStore) -> None:
        """Store the repository used for every lookup and mutation."""
        self._repository = repository

    def find_one_by_field(self, filter: Mapping[str, Any]) -> UserProfile | None:
        """Return the user matching ``filter`` exactly, soft-deleted records included."""
        return self._repository.find_one_by_field(filter)

    def find_active_by_id(self, user_id: str) -> UserProfile | None:
        """Return the user unless it is missing or soft-deleted."""
        return self._repository.find_one_by_field({"user_id": user_id, "is_deleted": False})

    def update(self, filter: Mapping[str, Any], patch: Mapping[str, Any]) -> UserProfile | None:
        """Apply a partial update and return the stored record afterwards."""
        updated = self._repository.update(filter, patch)
        if updated is not None and patch:
            logger.info("user updated filter=%s fields=%s", dict(filter), sorted(patch))
        return updated
