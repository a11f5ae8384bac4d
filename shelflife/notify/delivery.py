"""Delivery channels that present a fired reminder to the user."""

from __future__ import annotations

import logging
import shutil
import subprocess

from ..models import ReminderPayload

logger = logging.getLogger(__name__)


class LogChannel:
    """Write fired reminders to the log."""

    def setup(self) -> None:
        logger.info("Reminder delivery via log")

    def deliver(self, payload: ReminderPayload) -> None:
        logger.warning(
            "%s: %s [item=%s]", payload.title, payload.body, payload.item_id
        )


class DesktopChannel:
    """Show fired reminders as desktop notifications using notify-send."""

    def __init__(self, urgency: str = "critical", app_name: str = "shelflife") -> None:
        self._urgency = urgency
        self._app_name = app_name

    def setup(self) -> None:
        """Check that notify-send is available.

        Raises:
            RuntimeError: If notify-send is not installed.
        """
        if shutil.which("notify-send") is None:
            raise RuntimeError(
                "notify-send was not found. Install libnotify:\n"
                "  Ubuntu/Debian: sudo apt install libnotify-bin\n"
                "  Fedora/RHEL:   sudo dnf install libnotify"
            )

    def deliver(self, payload: ReminderPayload) -> None:
        cmd = [
            "notify-send",
            "--app-name", self._app_name,
            "--urgency", self._urgency,
            payload.title,
            payload.body,
        ]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=10,
            )
            if result.returncode != 0:
                raise RuntimeError(
                    f"notify-send failed: {result.stderr.strip()}"
                )
        except subprocess.TimeoutExpired:
            raise RuntimeError("notify-send timed out")


def create_channel(name: str) -> LogChannel | DesktopChannel:
    match name:
        case "log":
            return LogChannel()
        case "desktop":
            return DesktopChannel()
        case _:
            raise ValueError(
                f"Unknown delivery channel: {name!r} (choose log / desktop)"
            )
