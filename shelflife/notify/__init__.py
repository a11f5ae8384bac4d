"""Notification platform base class and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..models import ReminderPayload

if TYPE_CHECKING:
    from ..config import ShelfLifeConfig


class NotificationPlatform(ABC):
    """Abstract one-shot local reminder scheduler."""

    async def initialize(self) -> None:
        """One-time channel setup. Safe to call more than once."""

    @abstractmethod
    async def schedule(self, payload: ReminderPayload, fire_after_seconds: int) -> str:
        """Fire ``payload`` once after ``fire_after_seconds`` (> 0).

        Returns the platform-issued reminder id.
        """
        ...

    @abstractmethod
    async def cancel(self, reminder_id: str) -> None:
        """Cancel a pending reminder. Unknown ids are ignored."""
        ...

    async def shutdown(self) -> None:
        """Release platform resources."""


def create_platform(config: ShelfLifeConfig) -> NotificationPlatform:
    """Create a notification platform based on configuration."""
    backend_name = config.notifications.backend

    match backend_name:
        case "apscheduler":
            from .delivery import create_channel
            from .scheduler import APSchedulerPlatform

            return APSchedulerPlatform(
                channel=create_channel(config.notifications.channel),
            )
        case _:
            raise ValueError(
                f"Unknown notification backend: {backend_name!r} "
                f"(available: apscheduler)"
            )


__all__ = ["NotificationPlatform", "ReminderPayload", "create_platform"]
