"""TOML configuration loader."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .models import LeadTimeConfig

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_DB_PATH = "~/.config/shelflife/inventory.db"


@dataclass
class DatabaseConfig:
    path: str = DEFAULT_DB_PATH


@dataclass
class NotificationConfig:
    backend: str = "apscheduler"
    channel: str = "log"
    locale: str = "en"
    concurrent_reschedule: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class ShelfLifeConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    lead_times: LeadTimeConfig = field(default_factory=LeadTimeConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> ShelfLifeConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The database path and locale can be overridden via environment variables
    when the file leaves them unset.

    Raises:
        ValueError: If a lead time in the file is negative or not an integer.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    dbs = raw.get("database", {})
    lts = raw.get("lead_times", {})
    ntf = raw.get("notifications", {})
    lgs = raw.get("logging", {})

    # Resolve file → environment variable → default
    db_path = dbs.get("path", "") or os.environ.get(
        "SHELFLIFE_DB_PATH", ""
    ) or DEFAULT_DB_PATH
    locale = ntf.get("locale", "") or os.environ.get(
        "SHELFLIFE_LOCALE", ""
    ) or "en"

    defaults = LeadTimeConfig()

    return ShelfLifeConfig(
        database=DatabaseConfig(path=db_path),
        lead_times=LeadTimeConfig(
            food=lts.get("food", defaults.food),
            medicine=lts.get("medicine", defaults.medicine),
            cosmetics=lts.get("cosmetics", defaults.cosmetics),
        ),
        notifications=NotificationConfig(
            backend=ntf.get("backend", "apscheduler"),
            channel=ntf.get("channel", "log"),
            locale=locale,
            concurrent_reschedule=ntf.get("concurrent_reschedule", True),
        ),
        logging=LoggingConfig(
            level=str(lgs.get("level", "INFO")).upper(),
        ),
    )
