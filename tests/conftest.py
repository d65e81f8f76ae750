from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping

import pytest
from fastapi.testclient import TestClient

from profile_service.domain.service import UsersService
from profile_service.domain.user import UserProfile
from profile_service.main import create_app
from profile_service.security.tokens import issue_access_token


class FakeRepository:
    """In-memory repository mimicking Postgres-backed behaviors."""

    def __init__(self) -> None:
        self.users: dict[str, UserProfile] = {}
        self.calls: list[tuple[str, dict]] = []

    def add(self, **overrides: Any) -> UserProfile:
        user = UserProfile(
            user_id=overrides.pop("user_id", str(uuid.uuid4())),
            email=overrides.pop("email", f"{uuid.uuid4().hex[:8]}@example.com"),
            created_at=overrides.pop("created_at", datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
            **overrides,
        )
        self.users[user.user_id] = user
        return user

    def _matches(self, user: UserProfile, filter: Mapping[str, Any]) -> bool:
        return all(getattr(user, key) == value for key, value in filter.items())

    def find_one_by_field(self, filter: Mapping[str, Any]):
        self.calls.append(("find_one_by_field", dict(filter)))
        for user in self.users.values():
            if self._matches(user, filter):
                return user
        return None

    def update(self, filter: Mapping[str, Any], patch: Mapping[str, Any]):
        self.calls.append(("update", dict(patch)))
        for user_id, user in self.users.items():
            if not self._matches(user, filter):
                continue
            changes = {key: value for key, value in patch.items() if key not in ("user_id", "_id")}
            settings_patch = changes.pop("settings", None)
            updated = replace(user, **changes)
            if settings_patch:
                updated.settings = replace(user.settings, **settings_patch)
            self.users[user_id] = updated
            return updated
        return None


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def service(repository: FakeRepository) -> UsersService:
    return UsersService(repository)


@pytest.fixture
def api_client(service: UsersService):
    """Provide a FastAPI test client with isolated state."""
    app = create_app(use_lifespan=False)
    app.state.users_service = service
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers():
    """Return bearer headers for a caller holding the given permissions."""

    def build(*permissions: str, subject: str = "admin-1") -> dict[str, str]:
        token, _ = issue_access_token(subject=subject, permissions=list(permissions))
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
def admin_headers(auth_headers) -> dict[str, str]:
    return auth_headers("user:admin")
