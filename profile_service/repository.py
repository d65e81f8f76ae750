"""Database repository for user profile data."""

from __future__ import annotations

from typing import Any, Mapping

from psycopg.rows import tuple_row
from psycopg.types.json import Json
from psycopg_pool import ConnectionPool

from .domain.user import UserProfile, UserSettings

_SELECT_COLUMNS = """
    user_id, email, created_at, first_name, last_name, email_confirmed,
    profile_picture, country, location, permissions, is_disabled, is_deleted, settings
"""

# Domain field name -> column. Only these may appear in a lookup filter.
_FILTER_COLUMNS: dict[str, str] = {
    "user_id": "user_id",
    "email": "email",
    "is_deleted": "is_deleted",
    "is_disabled": "is_disabled",
}

_PATCH_COLUMNS: dict[str, str] = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "email_confirmed": "email_confirmed",
    "profile_picture": "profile_picture",
    "country": "country",
    "location": "location",
    "permissions": "permissions",
    "is_disabled": "is_disabled",
    "is_deleted": "is_deleted",
}

_IMMUTABLE_KEYS = frozenset({"user_id", "_id"})


def build_where(filter: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Translate an exact-match filter into a SQL ``WHERE`` body and parameters."""
    if not filter:
        raise ValueError("filter must not be empty")
    clauses: list[str] = []
    params: list[Any] = []
    for key, value in filter.items():
        column = _FILTER_COLUMNS.get(key)
        if column is None:
            raise ValueError(f"unsupported filter field: {key}")
        clauses.append(f"{column} = %s")
        params.append(value)
    return " AND ".join(clauses), params


def build_set(patch: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Translate a patch into a SQL ``SET`` body; identifier keys are dropped."""
    assignments: list[str] = []
    params: list[Any] = []
    for key, value in patch.items():
        if key in _IMMUTABLE_KEYS:
            continue
        if key == "settings":
            assignments.append("settings = settings || %s")
            params.append(Json(dict(value or {})))
            continue
        column = _PATCH_COLUMNS.get(key)
        if column is None:
            raise ValueError(f"unsupported patch field: {key}")
        assignments.append(f"{column} = %s")
        params.append(value)
    return ", ".join(assignments), params


class UserRepository:
    """Postgres-backed user profile persistence."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def ensure_schema(self) -> None:
        """Create the ``users`` table when it does not exist yet."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS users (
                        user_id TEXT PRIMARY KEY,
                        email TEXT NOT NULL UNIQUE,
                        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                        first_name TEXT,
                        last_name TEXT,
                        email_confirmed BOOLEAN NOT NULL DEFAULT FALSE,
                        profile_picture TEXT,
                        country TEXT,
                        location TEXT,
                        permissions TEXT[] NOT NULL DEFAULT '{}',
                        is_disabled BOOLEAN NOT NULL DEFAULT FALSE,
                        is_deleted BOOLEAN NOT NULL DEFAULT FALSE,
                        settings JSONB NOT NULL DEFAULT '{}'::jsonb
                    )
                    """
                )
                conn.commit()

    def find_one_by_field(self, filter: Mapping[str, Any]) -> UserProfile | None:
        """Return the first user matching every field of ``filter`` or ``None``."""
        where_sql, params = build_where(filter)
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"SELECT {_SELECT_COLUMNS} FROM users WHERE {where_sql} LIMIT 1",
                    params,
                )
                row = cur.fetchone()
                if not row:
                    return None
        return self._map_record(row)

    def update(self, filter: Mapping[str, Any], patch: Mapping[str, Any]) -> UserProfile | None:
        """Apply ``patch`` to the user matching ``filter`` and return the updated record."""
        set_sql, set_params = build_set(patch)
        if not set_sql:
            return self.find_one_by_field(filter)
        where_sql, where_params = build_where(filter)
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"""
                    WITH target AS (
                        SELECT user_id FROM users WHERE {where_sql} LIMIT 1
                    )
                    UPDATE users SET {set_sql}
                    FROM target
                    WHERE users.user_id = target.user_id
                    RETURNING {", ".join(f"users.{column.strip()}" for column in _SELECT_COLUMNS.split(","))}
                    """,
                    [*where_params, *set_params],
                )
                row = cur.fetchone()
                conn.commit()
        if not row:
            return None
        return self._map_record(row)

    def _map_record(self, row: tuple) -> UserProfile:
        """Convert a raw database tuple into the domain ``UserProfile`` dataclass."""
        settings = row[12] or {}
        return UserProfile(
            user_id=row[0],
            email=row[1],
            created_at=row[2],
            first_name=row[3],
            last_name=row[4],
            email_confirmed=row[5],
            profile_picture=row[6],
            country=row[7],
            location=row[8],
            permissions=list(row[9] or []),
            is_disabled=row[10],
            is_deleted=row[11],
            settings=UserSettings(
                language=settings.get("language"),
                theme=settings.get("theme"),
                currency=settings.get("currency"),
                is_english_time_format=settings.get("is_english_time_format"),
            ),
        )
