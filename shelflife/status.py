"""Expiration status derivation.

All comparisons are day-granular: both "today" and the expiration date are
normalized to the start of their calendar day before they are compared.
Unparseable dates never raise; they read as ``Fresh`` (and as
``INVALID_DAYS`` for day counts).
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable

from .clock import SystemClock, days_between, parse_date, start_of_day
from .models import (
    DEFAULT_LEAD_TIMES,
    Category,
    InventoryItem,
    LeadTimeConfig,
    Status,
)

INVALID_DAYS = 999

_clock = SystemClock()


def _resolve_today(today: datetime | date | None) -> datetime:
    if today is None:
        return _clock.today()
    return start_of_day(today)


def get_lead_time(
    category: Category | str, lead_times: LeadTimeConfig | None = None
) -> int:
    """Lead time in days for a category, using the defaults without a config."""
    category = Category.parse(category)
    if lead_times is None:
        return DEFAULT_LEAD_TIMES[category]
    return lead_times[category]


def days_until_expiration(
    expiration_date: str | date,
    *,
    today: datetime | date | None = None,
) -> int:
    """Signed days from today to the expiration date, or ``INVALID_DAYS``."""
    expires = parse_date(expiration_date)
    if expires is None:
        return INVALID_DAYS
    return days_between(expires, _resolve_today(today))


def compute_status(
    expiration_date: str | date,
    category: Category | str,
    lead_times: LeadTimeConfig | None = None,
    *,
    today: datetime | date | None = None,
) -> Status:
    expires = parse_date(expiration_date)
    if expires is None:
        return Status.FRESH

    days = days_between(expires, _resolve_today(today))
    if days < 0:
        return Status.EXPIRED
    if days <= get_lead_time(category, lead_times):
        return Status.EXPIRING_SOON
    return Status.FRESH


def compute_all_statuses(
    items: Iterable[InventoryItem],
    lead_times: LeadTimeConfig | None = None,
    *,
    today: datetime | date | None = None,
) -> list[InventoryItem]:
    """Return copies of ``items`` with ``status`` recomputed, in input order."""
    reference = _resolve_today(today)
    return [
        replace(
            item,
            status=compute_status(
                item.expiration_date, item.category, lead_times, today=reference
            ),
        )
        for item in items
    ]


def should_notify(
    item: InventoryItem,
    lead_times: LeadTimeConfig | None = None,
    *,
    today: datetime | date | None = None,
) -> bool:
    """True if the item is expiring soon or already expired."""
    status = compute_status(
        item.expiration_date, item.category, lead_times, today=today
    )
    return status in (Status.EXPIRING_SOON, Status.EXPIRED)
