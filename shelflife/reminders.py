"""Per-item expiry reminder scheduling.

Each item has at most one live reminder. Every (re)schedule cancels the
item's previous reminder before asking the platform for a new one; the two
calls are not atomic, so a failure in between leaves the item with no
reminder rather than two.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Iterable

from .clock import SystemClock, parse_date, seconds_between
from .messages import MessageCatalog
from .models import Category, InventoryItem, LeadTimeConfig, ReminderPayload
from .notify import NotificationPlatform
from .status import get_lead_time

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Keeps one platform reminder per item in step with its expiration."""

    def __init__(
        self,
        platform: NotificationPlatform,
        messages: MessageCatalog | None = None,
        clock: SystemClock | None = None,
    ) -> None:
        self._platform = platform
        self._messages = messages or MessageCatalog()
        self._clock = clock or SystemClock()
        # item id -> (reminder id, fire time) issued by this scheduler
        self._live: dict[str, tuple[str, datetime]] = {}
        # reminder id -> item id
        self._owners: dict[str, str] = {}

    def live_reminder(self, item_id: str) -> str | None:
        """Reminder this scheduler issued for the item, if it has not fired yet."""
        entry = self._live.get(item_id)
        if entry is None:
            return None
        reminder_id, fire_at = entry
        if fire_at <= self._clock.now():
            self._forget(reminder_id)
            return None
        return reminder_id

    def prune(self) -> int:
        """Forget reminders whose fire time has passed. Returns how many."""
        now = self._clock.now()
        fired = [rid for rid, fire_at in self._live.values() if fire_at <= now]
        for reminder_id in fired:
            self._forget(reminder_id)
        return len(fired)

    def _forget(self, reminder_id: str) -> None:
        item_id = self._owners.pop(reminder_id, None)
        if item_id is not None:
            self._live.pop(item_id, None)

    def get_lead_time(
        self, category: Category | str, lead_times: LeadTimeConfig | None
    ) -> int:
        return get_lead_time(category, lead_times)

    def notification_date(
        self, item: InventoryItem, lead_times: LeadTimeConfig | None
    ) -> datetime | None:
        """Start of the day the reminder should fire, or None for a bad date."""
        expires = parse_date(item.expiration_date)
        if expires is None:
            return None
        return expires - timedelta(days=self.get_lead_time(item.category, lead_times))

    async def cancel_item_reminder(self, reminder_id: str | None) -> None:
        if not reminder_id:
            return
        self._forget(reminder_id)
        try:
            await self._platform.cancel(reminder_id)
        except Exception:
            logger.exception("Failed to cancel reminder %s", reminder_id)

    async def _retire(self, item: InventoryItem) -> None:
        entry = self._live.get(item.id)
        tracked = entry[0] if entry else None
        for reminder_id in dict.fromkeys((item.reminder_id, tracked)):
            await self.cancel_item_reminder(reminder_id)

    async def schedule_item_reminder(
        self, item: InventoryItem, lead_times: LeadTimeConfig | None
    ) -> str | None:
        """Replace the item's reminder and return the new reminder id.

        Returns None when no reminder is warranted: the item is already
        expired, its warning day has passed, its date is unparseable, or the
        platform failed.
        """
        await self._retire(item)

        notify_at = self.notification_date(item, lead_times)
        if notify_at is None:
            logger.info("Item %s has an unreadable expiration date %r, not scheduling",
                        item.id, item.expiration_date)
            return None

        now = self._clock.now()
        expires = parse_date(item.expiration_date)
        if expires < self._clock.today():
            logger.info("Item %s already expired, not scheduling", item.id)
            return None

        seconds = seconds_between(notify_at, now)
        if seconds <= 0:
            # Warning day already passed; no immediate reminder
            logger.info("Item %s is inside its warning window, not scheduling", item.id)
            return None

        lead = self.get_lead_time(item.category, lead_times)
        payload = ReminderPayload(
            item_id=item.id,
            item_name=item.name,
            title=self._messages.format("expiry_title"),
            body=self._messages.format("expiry_body", name=item.name, days=lead),
        )
        try:
            reminder_id = await self._platform.schedule(payload, seconds)
        except Exception:
            logger.exception("Failed to schedule reminder for item %s", item.id)
            return None

        self._live[item.id] = (reminder_id, now + timedelta(seconds=seconds))
        self._owners[reminder_id] = item.id
        logger.info("Scheduled reminder %s for item %s in %d s", reminder_id, item.id, seconds)
        return reminder_id

    async def reschedule_all(
        self,
        items: Iterable[InventoryItem],
        lead_times: LeadTimeConfig | None,
        *,
        concurrent: bool = True,
    ) -> dict[str, str | None]:
        """Cancel and reschedule every item's reminder.

        Returns a mapping of item id to its new reminder id (or None).
        """
        items = list(items)
        self.prune()
        if concurrent:
            results = await asyncio.gather(
                *(self.schedule_item_reminder(item, lead_times) for item in items)
            )
        else:
            results = [
                await self.schedule_item_reminder(item, lead_times) for item in items
            ]
        return {item.id: reminder_id for item, reminder_id in zip(items, results)}
