"""Inventory item CRUD operations."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ..models import Category, InventoryItem
from .schema import ensure_schema

_EDITABLE = ("name", "category", "expiration_date", "barcode", "image_uri")


class ItemNotFoundError(KeyError):
    """Raised when an item id does not exist in the store."""


def _row_to_item(row: sqlite3.Row) -> InventoryItem:
    return InventoryItem(
        id=row["id"],
        name=row["name"],
        category=Category(row["category"]),
        expiration_date=row["expiration_date"],
        barcode=row["barcode"],
        image_uri=row["image_uri"],
        reminder_id=row["reminder_id"],
        created_at=row["created_at"],
    )


class InventoryDB:
    """Manages the inventory_items table."""

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

    def add_item(self, item: InventoryItem) -> str:
        """Insert an item. Its ``status`` is not stored.

        Returns:
            The item id.
        """
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO inventory_items
               (id, name, category, expiration_date, barcode, image_uri,
                reminder_id, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                item.id,
                item.name,
                Category.parse(item.category).value,
                item.expiration_date,
                item.barcode,
                item.image_uri,
                item.reminder_id,
                item.created_at,
            ),
        )
        conn.commit()
        return item.id

    def get_item(self, item_id: str) -> InventoryItem:
        """Return one item.

        Raises:
            ItemNotFoundError: If no item has this id.
        """
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
        ).fetchone()
        if row is None:
            raise ItemNotFoundError(item_id)
        return _row_to_item(row)

    def list_items(self) -> list[InventoryItem]:
        """Return all items, soonest expiration first."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM inventory_items ORDER BY expiration_date, created_at"
        ).fetchall()
        return [_row_to_item(r) for r in rows]

    def update_item(self, item_id: str, **fields) -> None:
        """Update editable fields of an item.

        Raises:
            ValueError: If a field is not editable.
            ItemNotFoundError: If no item has this id.
        """
        unknown = set(fields) - set(_EDITABLE)
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")
        if not fields:
            return
        if "category" in fields:
            fields["category"] = Category.parse(fields["category"]).value

        assignments = ", ".join(f"{name} = ?" for name in fields)
        conn = self._get_conn()
        cur = conn.execute(
            f"""UPDATE inventory_items
                SET {assignments},
                    updated_at = datetime('now', 'localtime')
                WHERE id = ?""",
            (*fields.values(), item_id),
        )
        conn.commit()
        if cur.rowcount == 0:
            raise ItemNotFoundError(item_id)

    def set_reminder_id(self, item_id: str, reminder_id: str | None) -> None:
        """Store (or clear) an item's reminder handle, leaving other fields alone."""
        conn = self._get_conn()
        conn.execute(
            "UPDATE inventory_items SET reminder_id = ? WHERE id = ?",
            (reminder_id, item_id),
        )
        conn.commit()

    def delete_item(self, item_id: str) -> None:
        """Delete an inventory item by ID."""
        conn = self._get_conn()
        conn.execute("DELETE FROM inventory_items WHERE id = ?", (item_id,))
        conn.commit()
