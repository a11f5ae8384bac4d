"""Inventory operations that keep stored items and reminders consistent."""

from __future__ import annotations

import logging
from dataclasses import replace

from .clock import SystemClock, parse_date
from .db import InventoryDB, ProfileDB
from .models import Category, InventoryItem, LeadTimeConfig, UserProfile
from .reminders import ReminderScheduler
from .status import (
    compute_all_statuses,
    days_until_expiration,
    get_lead_time,
    should_notify,
)

logger = logging.getLogger(__name__)


def _normalize_date(value) -> str:
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid expiration date: {value!r} (expected YYYY-MM-DD)")
    return parsed.date().isoformat()


def _normalize_name(value) -> str:
    name = (value or "").strip()
    if not name:
        raise ValueError("Item name must not be empty")
    return name


class InventoryService:
    """Create, edit and delete items, rescheduling reminders as they change.

    Reminder scheduling is best effort: a platform failure leaves the item
    without a reminder but never blocks the item change itself.

    With ``reminders=None`` the service only writes the store. A long-running
    service with a scheduler picks those changes up in ``sync_reminders``.
    """

    def __init__(
        self,
        inventory: InventoryDB,
        profiles: ProfileDB,
        reminders: ReminderScheduler | None,
        default_lead_times: LeadTimeConfig | None = None,
        clock: SystemClock | None = None,
        concurrent_reschedule: bool = True,
    ) -> None:
        self._inventory = inventory
        self._profiles = profiles
        self._reminders = reminders
        self._default_lead_times = default_lead_times or LeadTimeConfig()
        self._clock = clock or SystemClock()
        self._concurrent = concurrent_reschedule
        # item id -> what its reminder was last scheduled from
        self._synced: dict[str, tuple] = {}

    def close(self) -> None:
        self._inventory.close()
        self._profiles.close()

    def profile(self) -> UserProfile:
        """Return the user profile, creating it with default lead times if absent."""
        profile = self._profiles.get_profile()
        if profile is None:
            profile = UserProfile(lead_times=self._default_lead_times)
            self._profiles.save_profile(profile)
            logger.info("Created profile with lead times %s", profile.lead_times.as_dict())
        return profile

    @property
    def lead_times(self) -> LeadTimeConfig:
        return self.profile().lead_times

    def _with_status(self, items: list[InventoryItem]) -> list[InventoryItem]:
        return compute_all_statuses(items, self.lead_times, today=self._clock.today())

    def get_item(self, item_id: str) -> InventoryItem:
        return self._with_status([self._inventory.get_item(item_id)])[0]

    def list_items(self) -> list[InventoryItem]:
        return self._with_status(self._inventory.list_items())

    def expiring_items(self) -> list[InventoryItem]:
        """Items expiring soon or expired, fewest days remaining first."""
        today = self._clock.today()
        lead_times = self.lead_times
        items = [
            item for item in self.list_items()
            if should_notify(item, lead_times, today=today)
        ]
        return sorted(
            items, key=lambda i: days_until_expiration(i.expiration_date, today=today)
        )

    async def add_item(
        self,
        name: str,
        category: Category | str,
        expiration_date: str,
        *,
        barcode: str | None = None,
        image_uri: str | None = None,
    ) -> InventoryItem:
        item = InventoryItem(
            name=_normalize_name(name),
            category=Category.parse(category),
            expiration_date=_normalize_date(expiration_date),
            barcode=barcode or None,
            image_uri=image_uri or None,
        )
        self._inventory.add_item(item)
        logger.info("Added item %s (%s)", item.id, item.name)

        if self._reminders is not None:
            lead_times = self.lead_times
            reminder_id = await self._reminders.schedule_item_reminder(item, lead_times)
            if reminder_id:
                self._inventory.set_reminder_id(item.id, reminder_id)
            self._mark_synced(replace(item, reminder_id=reminder_id), lead_times)
        return self.get_item(item.id)

    async def edit_item(self, item_id: str, **changes) -> InventoryItem:
        """Apply field changes and reschedule the item's reminder.

        Raises:
            ItemNotFoundError: If the item does not exist.
            ValueError: If a change is invalid.
        """
        current = self._inventory.get_item(item_id)

        if "name" in changes:
            changes["name"] = _normalize_name(changes["name"])
        if "category" in changes:
            changes["category"] = Category.parse(changes["category"])
        if "expiration_date" in changes:
            changes["expiration_date"] = _normalize_date(changes["expiration_date"])

        self._inventory.update_item(item_id, **changes)
        updated = replace(current, **changes)
        logger.info("Edited item %s: %s", item_id, ", ".join(sorted(changes)) or "no changes")

        if self._reminders is not None:
            lead_times = self.lead_times
            reminder_id = await self._reminders.schedule_item_reminder(updated, lead_times)
            self._inventory.set_reminder_id(item_id, reminder_id)
            self._mark_synced(replace(updated, reminder_id=reminder_id), lead_times)
        return self.get_item(item_id)

    async def delete_item(self, item_id: str) -> None:
        item = self._inventory.get_item(item_id)
        if self._reminders is not None:
            await self._reminders.cancel_item_reminder(item.reminder_id)
            self._synced.pop(item_id, None)
        self._inventory.delete_item(item_id)
        logger.info("Deleted item %s", item_id)

    async def update_lead_times(self, lead_times: LeadTimeConfig) -> dict[str, str | None]:
        """Save new lead times and reschedule every item's reminder.

        Returns:
            Mapping of item id to its new reminder id (None if unscheduled).
            Without a scheduler, the stored reminder ids are returned as is.
        """
        profile = self.profile()
        if profile.lead_times != lead_times:
            self._profiles.update_lead_times(lead_times)
            logger.info("Lead times changed to %s", lead_times.as_dict())
            if self._reminders is not None:
                return await self.resync_reminders()
        return {item.id: item.reminder_id for item in self._inventory.list_items()}

    async def resync_reminders(self) -> dict[str, str | None]:
        """Reschedule every stored item with the current lead times."""
        items = self._inventory.list_items()
        return await self._reschedule(items, stored=items)

    async def sync_reminders(self) -> dict[str, str | None]:
        """Reschedule only the items that changed since they were last scheduled.

        An item is stale when its expiration date, category, lead time or
        stored reminder id differ from what this service last scheduled, which
        covers items written by another process. Reminders of items that are
        no longer stored are cancelled.
        """
        lead_times = self.lead_times
        items = self._inventory.list_items()
        stale = [
            item for item in items
            if self._synced.get(item.id) != self._sync_key(item, lead_times)
        ]
        return await self._reschedule(stale, stored=items)

    async def _reschedule(
        self,
        items: list[InventoryItem],
        stored: list[InventoryItem],
    ) -> dict[str, str | None]:
        if self._reminders is None:
            raise RuntimeError("No reminder scheduler configured")

        present = {item.id for item in stored}
        for item_id in [i for i in self._synced if i not in present]:
            del self._synced[item_id]
            await self._reminders.cancel_item_reminder(
                self._reminders.live_reminder(item_id)
            )
            logger.info("Item %s is gone, cancelled its reminder", item_id)

        lead_times = self.lead_times
        results = await self._reminders.reschedule_all(
            items, lead_times, concurrent=self._concurrent
        )
        for item in items:
            reminder_id = results[item.id]
            self._inventory.set_reminder_id(item.id, reminder_id)
            self._mark_synced(replace(item, reminder_id=reminder_id), lead_times)
        if results:
            logger.info(
                "Rescheduled %d items, %d reminders pending",
                len(results),
                sum(1 for r in results.values() if r),
            )
        return results

    def _sync_key(self, item: InventoryItem, lead_times: LeadTimeConfig) -> tuple:
        return (
            item.expiration_date,
            item.category,
            get_lead_time(item.category, lead_times),
            item.reminder_id,
        )

    def _mark_synced(self, item: InventoryItem, lead_times: LeadTimeConfig) -> None:
        self._synced[item.id] = self._sync_key(item, lead_times)
