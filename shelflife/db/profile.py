"""User profile storage."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ..models import LeadTimeConfig, UserProfile
from .schema import ensure_schema


class ProfileDB:
    """Manages the single-row user_profile table."""

    def __init__(self, db_path: str | Path = "~/.config/shelflife/inventory.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get_profile(self) -> UserProfile | None:
        conn = self._get_conn()
        row = conn.execute("SELECT * FROM user_profile LIMIT 1").fetchone()
        if row is None:
            return None
        return UserProfile(
            id=row["id"],
            user_name=row["user_name"],
            lead_times=LeadTimeConfig(
                food=row["food_lead_time"],
                medicine=row["medicine_lead_time"],
                cosmetics=row["cosmetics_lead_time"],
            ),
            created_at=row["created_at"],
        )

    def save_profile(self, profile: UserProfile) -> None:
        """Replace the stored profile."""
        conn = self._get_conn()
        conn.execute("DELETE FROM user_profile")
        conn.execute(
            """INSERT INTO user_profile
               (id, user_name, food_lead_time, medicine_lead_time,
                cosmetics_lead_time, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                profile.id,
                profile.user_name,
                profile.lead_times.food,
                profile.lead_times.medicine,
                profile.lead_times.cosmetics,
                profile.created_at,
            ),
        )
        conn.commit()

    def update_lead_times(self, lead_times: LeadTimeConfig) -> None:
        conn = self._get_conn()
        conn.execute(
            """UPDATE user_profile
               SET food_lead_time = ?,
                   medicine_lead_time = ?,
                   cosmetics_lead_time = ?""",
            (lead_times.food, lead_times.medicine, lead_times.cosmetics),
        )
        conn.commit()
