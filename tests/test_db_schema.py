"""Tests for database schema creation and migration."""

import sqlite3

import pytest

from shelflife.db.schema import _SCHEMA_VERSION, ensure_schema


def test_ensure_schema_creates_tables(tmp_path):
    """Schema creates the item, profile and version tables."""
    db_path = tmp_path / "test.db"
    conn = ensure_schema(db_path)

    tables = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    ).fetchall()
    table_names = {row["name"] for row in tables}

    assert "inventory_items" in table_names
    assert "user_profile" in table_names
    assert "schema_version" in table_names

    conn.close()


def test_ensure_schema_creates_parent_dirs(tmp_path):
    """Schema creates parent directories if they don't exist."""
    db_path = tmp_path / "sub" / "dir" / "test.db"
    conn = ensure_schema(db_path)
    assert db_path.exists()
    conn.close()


def test_ensure_schema_idempotent(tmp_path):
    """Calling ensure_schema twice keeps the version."""
    db_path = tmp_path / "test.db"
    conn1 = ensure_schema(db_path)
    conn1.close()

    conn2 = ensure_schema(db_path)
    row = conn2.execute("SELECT version FROM schema_version").fetchone()
    assert row["version"] == _SCHEMA_VERSION
    conn2.close()


def test_ensure_schema_wal_mode(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    mode = conn.execute("PRAGMA journal_mode").fetchone()
    assert mode[0] == "wal"
    conn.close()


def test_inventory_items_columns(tmp_path):
    """inventory_items has no status column."""
    conn = ensure_schema(tmp_path / "test.db")

    info = conn.execute("PRAGMA table_info(inventory_items)").fetchall()
    col_names = {row["name"] for row in info}

    expected = {
        "id", "name", "category", "expiration_date", "barcode",
        "image_uri", "reminder_id", "created_at", "updated_at",
    }
    assert expected.issubset(col_names)
    assert "status" not in col_names

    conn.close()


def test_category_constraint(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO inventory_items (id, name, category, expiration_date) "
            "VALUES ('x', 'Phone', 'Electronics', '2025-01-01')"
        )
    conn.close()


def test_negative_lead_time_constraint(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO user_profile (id, food_lead_time) VALUES ('p', -1)"
        )
    conn.close()
