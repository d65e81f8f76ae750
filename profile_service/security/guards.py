"""Authentication and permission guards run ahead of every profile route."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..errors import Forbidden, Unauthorized
from .tokens import decode_access_token

logger = logging.getLogger(__name__)

ADMIN_PERMISSION = "user:admin"

bearer_scheme = HTTPBearer(auto_error=False)


class UserPerms:
    """Permission names declared by the profile routes."""

    READ = "user:read"
    DELETE = "user:delete"
    UPDATE_STATUS = "user:update-status"
    UPDATE = "user:update"


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller resolved from a bearer token."""

    subject: str
    permissions: frozenset[str] = field(default_factory=frozenset)

    def has_permissions(self, required: tuple[str, ...]) -> bool:
        if ADMIN_PERMISSION in self.permissions:
            return True
        return all(permission in self.permissions for permission in required)


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Resolve the caller from the ``Authorization: Bearer`` header or raise 401."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Token not supplied")
    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        logger.warning("rejected bearer token: %s", exc)
        raise Unauthorized("Invalid token") from exc
    permissions = claims.get("permissions") or []
    if not isinstance(permissions, list):
        raise Unauthorized("Invalid token")
    return Principal(subject=str(claims["sub"]), permissions=frozenset(map(str, permissions)))


def require_permissions(*required: str) -> Callable[..., Principal]:
    """Build a dependency that authenticates the caller and checks ``required``.

    With no permissions given the route only requires authentication.
    """

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_permissions(required):
            logger.warning(
                "permission denied subject=%s required=%s", principal.subject, list(required)
            )
            raise Forbidden("Insufficient permissions")
        return principal

    return dependency
