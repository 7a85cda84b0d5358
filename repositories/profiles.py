import sqlite3
from typing import Dict, Iterable, List, Optional, Protocol

from database import get_db
from exceptions import ConflictError, InvalidInputError
from utils.time_utils import now_iso

ROLES = ("user", "member", "head")

SOCIAL_LINK_FIELDS = (
    "involio_profile_url",
    "twitter_url",
    "instagram_url",
    "linkedin_url",
    "youtube_url",
    "discord_tag",
    "tiktok_url",
    "website_url",
)

PROFILE_COLUMNS = (
    "id", "username", "email", "bio", "avatar_url", "role", "is_admin",
) + SOCIAL_LINK_FIELDS + ("created_at", "updated_at")

UPDATABLE_FIELDS = {"bio", "avatar_url", "email", "role", "is_admin"} | set(SOCIAL_LINK_FIELDS)

SEARCH_LIMIT = 20


class ProfileRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[dict]: ...
    def get_by_username(self, username: str) -> Optional[dict]: ...
    def get_summaries(self, user_ids: Iterable[int]) -> Dict[int, dict]: ...
    def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[dict]: ...
    def list_all(self) -> List[dict]: ...
    def update(self, user_id: int, fields: dict) -> Optional[dict]: ...


def _row_to_profile(row) -> dict:
    profile = dict(zip(PROFILE_COLUMNS, row))
    profile["is_admin"] = bool(profile["is_admin"])
    return profile


class SqliteProfileRepository:
    """Profiles table access. Username lookups are case-insensitive (COLLATE NOCASE)."""

    def get_by_id(self, user_id: int) -> Optional[dict]:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {', '.join(PROFILE_COLUMNS)} FROM profiles WHERE id = ?", (user_id,))
            row = cursor.fetchone()
            return _row_to_profile(row) if row else None

    def get_by_username(self, username: str) -> Optional[dict]:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {', '.join(PROFILE_COLUMNS)} FROM profiles WHERE username = ?", (username,))
            row = cursor.fetchone()
            return _row_to_profile(row) if row else None

    def get_summaries(self, user_ids: Iterable[int]) -> Dict[int, dict]:
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT id, username, avatar_url FROM profiles WHERE id IN ({placeholders})", ids)
            rows = cursor.fetchall()
        return {r[0]: {"id": r[0], "username": r[1], "avatar_url": r[2]} for r in rows}

    def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[dict]:
        # LIKE is case-insensitive for ASCII in SQLite; escape wildcards in user input
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, username, bio, avatar_url FROM profiles WHERE username LIKE ? ESCAPE '\\' ORDER BY username LIMIT ?",
                (f"%{escaped}%", limit)
            )
            rows = cursor.fetchall()
        return [{"id": r[0], "username": r[1], "bio": r[2] or "", "avatar_url": r[3]} for r in rows]

    def list_all(self) -> List[dict]:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT id, username, email, role, avatar_url, is_admin FROM profiles ORDER BY username ASC")
            rows = cursor.fetchall()
        return [
            {
                "id": r[0],
                "username": r[1],
                "email": r[2] or "",
                "role": r[3],
                "avatar_url": r[4],
                "is_admin": bool(r[5]),
            }
            for r in rows
        ]

    def update(self, user_id: int, fields: dict) -> Optional[dict]:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Cannot update profile field(s): {', '.join(sorted(unknown))}")
        if "role" in fields and fields["role"] not in ROLES:
            raise InvalidInputError(f"Role must be one of: {', '.join(ROLES)}")

        update_fields = []
        params = []
        for name, value in fields.items():
            update_fields.append(f"{name} = ?")
            params.append(int(bool(value)) if name == "is_admin" else value)
        if update_fields:
            update_fields.append("updated_at = ?")
            params.append(now_iso())
            params.append(user_id)
            with get_db() as conn:
                cursor = conn.cursor()
                try:
                    cursor.execute(f"UPDATE profiles SET {', '.join(update_fields)} WHERE id = ?", params)
                except sqlite3.IntegrityError as e:
                    raise ConflictError("Profile update conflicts with an existing profile") from e
                conn.commit()
        return self.get_by_id(user_id)
