"""SQLite storage for inventory items and the user profile."""

from .inventory import InventoryDB, ItemNotFoundError
from .profile import ProfileDB
from .schema import ensure_schema

__all__ = [
    "InventoryDB",
    "ItemNotFoundError",
    "ProfileDB",
    "ensure_schema",
]
