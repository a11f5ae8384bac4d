"""Data models for tracked household items and reminder settings."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Category(str, Enum):
    FOOD = "Food"
    MEDICINE = "Medicine"
    COSMETICS = "Cosmetics"

    @classmethod
    def parse(cls, value: str | Category) -> Category:
        """Resolve a category from its value or name, case-insensitively."""
        if isinstance(value, Category):
            return value
        text = str(value).strip()
        for member in cls:
            if text.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(
            f"Unknown category: {value!r} "
            f"(choose from {', '.join(m.value for m in cls)})"
        )


class Status(str, Enum):
    FRESH = "Fresh"
    EXPIRING_SOON = "Expiring Soon"
    EXPIRED = "Expired"


DEFAULT_LEAD_TIMES: dict[Category, int] = {
    Category.FOOD: 3,
    Category.MEDICINE: 7,
    Category.COSMETICS: 7,
}


@dataclass(frozen=True)
class LeadTimeConfig:
    """Days before expiration at which an item counts as expiring soon."""

    food: int = DEFAULT_LEAD_TIMES[Category.FOOD]
    medicine: int = DEFAULT_LEAD_TIMES[Category.MEDICINE]
    cosmetics: int = DEFAULT_LEAD_TIMES[Category.COSMETICS]

    def __post_init__(self) -> None:
        for name in ("food", "medicine", "cosmetics"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} lead time must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} lead time must be >= 0, got {value}")

    def __getitem__(self, category: Category) -> int:
        return getattr(self, Category.parse(category).name.lower())

    def as_dict(self) -> dict[str, int]:
        return {c.value: self[c] for c in Category}

    @classmethod
    def from_mapping(cls, mapping: dict) -> LeadTimeConfig:
        """Build from a ``{category: days}`` mapping; every category is required."""
        values = {Category.parse(k): v for k, v in mapping.items()}
        missing = [c.value for c in Category if c not in values]
        if missing:
            raise ValueError(f"Lead times missing for: {', '.join(missing)}")
        return cls(
            food=values[Category.FOOD],
            medicine=values[Category.MEDICINE],
            cosmetics=values[Category.COSMETICS],
        )


def _new_id() -> str:
    return uuid.uuid4().hex


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


@dataclass
class InventoryItem:
    """A tracked item.

    ``status`` is a cache of the derived status. It is recomputed on every
    read path and never stored.
    """

    name: str
    category: Category
    expiration_date: str  # YYYY-MM-DD
    id: str = field(default_factory=_new_id)
    barcode: str | None = None
    image_uri: str | None = None
    reminder_id: str | None = None
    created_at: str = field(default_factory=_now_iso)
    status: Status = Status.FRESH


@dataclass
class UserProfile:
    user_name: str = ""
    lead_times: LeadTimeConfig = field(default_factory=LeadTimeConfig)
    id: str = field(default_factory=_new_id)
    created_at: str = field(default_factory=_now_iso)


@dataclass
class ReminderPayload:
    """Content handed to the notification platform for one reminder."""

    item_id: str
    item_name: str
    title: str
    body: str
