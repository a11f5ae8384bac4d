"""Shared fixtures: a frozen clock and an in-memory notification platform."""

from datetime import datetime

import pytest

from shelflife.clock import FixedClock
from shelflife.db import InventoryDB, ProfileDB
from shelflife.messages import MessageCatalog
from shelflife.notify import NotificationPlatform
from shelflife.reminders import ReminderScheduler
from shelflife.service import InventoryService


class FakePlatform(NotificationPlatform):
    """Records reminders instead of firing them."""

    def __init__(self) -> None:
        self.live: dict[str, tuple] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_schedule = False
        self.fail_cancel = False
        self.initialized = 0
        self._counter = 0

    async def initialize(self) -> None:
        self.initialized += 1

    async def schedule(self, payload, fire_after_seconds):
        self.calls.append(("schedule", payload.item_id))
        if self.fail_schedule:
            raise RuntimeError("notification permission denied")
        if fire_after_seconds <= 0:
            raise ValueError("fire_after_seconds must be positive")
        self._counter += 1
        reminder_id = f"reminder-{self._counter}"
        self.live[reminder_id] = (payload, fire_after_seconds)
        return reminder_id

    async def cancel(self, reminder_id):
        self.calls.append(("cancel", reminder_id))
        if self.fail_cancel:
            raise RuntimeError("platform unavailable")
        self.live.pop(reminder_id, None)

    def live_for(self, item_id: str) -> list[str]:
        return [rid for rid, (p, _) in self.live.items() if p.item_id == item_id]


@pytest.fixture
def clock():
    """Monday 2024-06-10, 09:00 local time."""
    return FixedClock(datetime(2024, 6, 10, 9, 0, 0))


@pytest.fixture
def platform():
    return FakePlatform()


@pytest.fixture
def scheduler(platform, clock):
    return ReminderScheduler(platform, messages=MessageCatalog("en"), clock=clock)


@pytest.fixture
def service(tmp_path, scheduler, clock):
    svc = InventoryService(
        inventory=InventoryDB(tmp_path / "test.db"),
        profiles=ProfileDB(tmp_path / "test.db"),
        reminders=scheduler,
        clock=clock,
    )
    yield svc
    svc.close()
