"""Utilities for issuing and validating bearer JWTs."""

from __future__ import annotations

import time
from typing import Any

import jwt

from ..config import get_settings


def issue_access_token(*, subject: str, permissions: list[str] | None = None) -> tuple[str, int]:
    """Create a signed JWT for an authenticated caller.

    Parameters
    ----------
    subject:
        Caller identifier to embed in the token `sub` claim.
    permissions:
        Permission names checked by the route guards; defaults to none.

    Returns
    -------
    tuple[str, int]
        A tuple containing the encoded JWT string and its TTL (in seconds).
    """

    settings = get_settings()
    now = int(time.time())
    expires_in = settings.jwt_ttl_seconds
    payload: dict[str, Any] = {
        "iss": settings.jwt_issuer,
        "sub": subject,
        "permissions": list(permissions or []),
        "iat": now,
        "exp": now + expires_in,
    }

    token = jwt.encode(payload, settings.jwt_secret, algorithm="HS256")
    return token, expires_in


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT returning its payload.

    Parameters
    ----------
    token:
        Encoded JWT signed with the configured secret.

    Returns
    -------
    dict[str, Any]
        The decoded payload if signature, expiry and issuer checks succeed.

    Raises
    ------
    jwt.PyJWTError
        Propagated when the token is invalid, expired, or signed by another issuer.
    """

    settings = get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=["HS256"],
        issuer=settings.jwt_issuer,
        options={"require": ["exp", "sub"]},
    )
