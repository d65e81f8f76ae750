from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class UserSettings:
    """Per-account display preferences."""

    language: str | None = None
    theme: str | None = None
    currency: str | None = None
    is_english_time_format: bool | None = None


@dataclass(slots=True)
class UserProfile:
    """Aggregate root for a user's profile and account flags."""

    user_id: str
    email: str
    created_at: datetime
    first_name: str | None = None
    last_name: str | None = None
    email_confirmed: bool = False
    profile_picture: str | None = None
    country: str | None = None
    location: str | None = None
    permissions: list[str] = field(default_factory=list)
    is_disabled: bool = False
    is_deleted: bool = False
    settings: UserSettings = field(default_factory=UserSettings)
