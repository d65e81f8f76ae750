"""Profile endpoint handlers.

Each handler performs at most one lookup followed by one write through the
injected ``UsersService`` and returns a ``Success`` or ``Failure`` result.
No locking is taken between the lookup and the write.
"""

from __future__ import annotations

import logging

from fastapi import status

from ..domain.contracts import UpdateAccountStatusInput, UpdateProfileInput
from ..domain.results import Failure, Result, Success
from ..domain.service import UsersService

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"


class ProfileController:
    """Read, soft-delete and update operations over user profiles."""

    def __init__(self, users: UsersService) -> None:
        self._users = users

    def get_profile(self, user_id: str) -> Result:
        # Soft-deleted records are still returned here; only delete is delete-aware.
        user = self._users.find_one_by_field({"user_id": user_id})
        if user is None:
            logger.debug("profile lookup missed user_id=%s", user_id)
            return Failure.not_found(USER_NOT_FOUND)
        return Success(status.HTTP_200_OK, "User details", data=user, include_data=True)

    def delete_profile(self, user_id: str) -> Result:
        user = self._users.find_active_by_id(user_id)
        if user is None:
            logger.debug("delete target missing or already deleted user_id=%s", user_id)
            return Failure.not_found(USER_NOT_FOUND)
        self._users.update({"user_id": user_id}, {"is_deleted": True})
        return Success(status.HTTP_200_OK, "User deleted successfully")

    def update_status(self, payload: UpdateAccountStatusInput) -> Result:
        user = self._users.find_one_by_field({"user_id": payload.user_id})
        if user is None:
            logger.debug("status target missing user_id=%s", payload.user_id)
            return Failure.not_found(USER_NOT_FOUND)
        self._users.update({"user_id": payload.user_id}, {"is_disabled": payload.status})
        return Success(status.HTTP_200_OK, "User status updated successfully")

    def update_profile(self, user_id: str, payload: UpdateProfileInput) -> Result:
        user = self._users.find_one_by_field({"user_id": user_id})
        if user is None:
            logger.debug("update target missing user_id=%s", user_id)
            return Failure.not_found(USER_NOT_FOUND)
        updated = self._users.update({"user_id": user_id}, payload.to_patch())
        return Success(status.HTTP_200_OK, "User updated successfully", data=updated, include_data=True)
