"""Household item expiration tracking with local expiry reminders."""

from .clock import FixedClock, SystemClock
from .config import ShelfLifeConfig, load_config
from .messages import MessageCatalog
from .models import (
    DEFAULT_LEAD_TIMES,
    Category,
    InventoryItem,
    LeadTimeConfig,
    ReminderPayload,
    Status,
    UserProfile,
)
from .notify import NotificationPlatform, create_platform
from .reminders import ReminderScheduler
from .service import InventoryService
from .status import (
    INVALID_DAYS,
    compute_all_statuses,
    compute_status,
    days_until_expiration,
    get_lead_time,
    should_notify,
)

__all__ = [
    "Category",
    "Status",
    "LeadTimeConfig",
    "DEFAULT_LEAD_TIMES",
    "InventoryItem",
    "UserProfile",
    "ReminderPayload",
    "compute_status",
    "compute_all_statuses",
    "days_until_expiration",
    "get_lead_time",
    "should_notify",
    "INVALID_DAYS",
    "ReminderScheduler",
    "NotificationPlatform",
    "create_platform",
    "MessageCatalog",
    "InventoryService",
    "SystemClock",
    "FixedClock",
    "ShelfLifeConfig",
    "load_config",
]
