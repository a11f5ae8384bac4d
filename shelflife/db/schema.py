"""Database schema definitions and migration helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path

_SCHEMA_VERSION = 1

# Item status is derived at read time and deliberately has no column.
_DDL = """
CREATE TABLE IF NOT EXISTS inventory_items (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    category TEXT NOT NULL CHECK (category IN ('Food', 'Medicine', 'Cosmetics')),
    expiration_date TEXT NOT NULL,
    barcode TEXT,
    image_uri TEXT,
    reminder_id TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE INDEX IF NOT EXISTS idx_items_expiration ON inventory_items(expiration_date);
CREATE INDEX IF NOT EXISTS idx_items_category ON inventory_items(category);

CREATE TABLE IF NOT EXISTS user_profile (
    id TEXT PRIMARY KEY,
    user_name TEXT NOT NULL DEFAULT '',
    food_lead_time INTEGER NOT NULL DEFAULT 3 CHECK (food_lead_time >= 0),
    medicine_lead_time INTEGER NOT NULL DEFAULT 7 CHECK (medicine_lead_time >= 0),
    cosmetics_lead_time INTEGER NOT NULL DEFAULT 7 CHECK (cosmetics_lead_time >= 0),
    created_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);
"""


def ensure_schema(db_path: str | Path) -> sqlite3.Connection:
    """Open (or create) the database and ensure the schema is up to date.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        An open sqlite3.Connection with the schema applied.
    """
    db_path = Path(db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")

    try:
        row = conn.execute("SELECT version FROM schema_version").fetchone()
        current_version = row["version"] if row else 0
    except sqlite3.OperationalError:
        current_version = 0

    if current_version < _SCHEMA_VERSION:
        conn.executescript(_DDL)
        conn.execute("DELETE FROM schema_version")
        conn.execute(
            "INSERT INTO schema_version (version) VALUES (?)",
            (_SCHEMA_VERSION,),
        )
        conn.commit()

    return conn
