"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class UpdateAccountStatusInput:
    """Validated inputs required to enable or disable an account."""

    user_id: str
    status: bool


@dataclass(slots=True)
class UpdateProfileInput:
    """Partial profile update; only keys present in ``changes`` are written."""

    changes: dict[str, Any] = field(default_factory=dict)
    settings: dict[str, Any] | None = None

    def to_patch(self) -> dict[str, Any]:
        """Return the repository patch for this update."""
        patch = dict(self.changes)
        patch.pop("user_id", None)
        if self.settings:
            patch["settings"] = dict(self.settings)
        return patch
