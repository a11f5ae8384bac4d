"""Local reminder platform backed by APScheduler."""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta

from ..clock import SystemClock
from . import NotificationPlatform, ReminderPayload
from .delivery import LogChannel

logger = logging.getLogger(__name__)

_REMINDER_PREFIX = "reminder:"


class APSchedulerPlatform(NotificationPlatform):
    """One-shot reminders as APScheduler date-triggered jobs.

    Reminders live in the scheduler's in-memory job store, so they do not
    survive a process restart. Callers rebuild them with a reschedule pass.
    """

    def __init__(self, channel=None, clock=None, scheduler=None) -> None:
        """Initialize the platform.

        Args:
            channel: Delivery channel with ``setup()`` and ``deliver(payload)``.
            clock: Source of "now" for converting offsets to run dates.
            scheduler: An existing AsyncIOScheduler to register jobs on.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.jobstores.base import JobLookupError
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.date import DateTrigger
        except ImportError:
            raise ImportError(
                "apscheduler is required: pip install 'apscheduler<4'"
            )

        self._channel = channel or LogChannel()
        self._clock = clock or SystemClock()
        self._scheduler = scheduler or AsyncIOScheduler()
        self._DateTrigger = DateTrigger
        self._JobLookupError = JobLookupError
        self._initialized = False
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._initialized:
            return
        try:
            self._channel.setup()
        except Exception:
            # Reminders still fire; delivery failures are logged by _fire
            logger.exception("Delivery channel setup failed")
        if not self._scheduler.running:
            self._scheduler.start()
        self._initialized = True
        self._running = True
        logger.info("Reminder scheduler started")

    async def schedule(self, payload: ReminderPayload, fire_after_seconds: int) -> str:
        if fire_after_seconds <= 0:
            raise ValueError(
                f"fire_after_seconds must be positive, got {fire_after_seconds}"
            )

        reminder_id = uuid.uuid4().hex
        run_date = self._clock.now() + timedelta(seconds=fire_after_seconds)
        self._scheduler.add_job(
            self._fire,
            trigger=self._DateTrigger(run_date=run_date),
            args=[payload],
            id=reminder_id,
            name=f"{_REMINDER_PREFIX}{payload.item_id}",
        )
        logger.debug("Reminder %s for item %s at %s", reminder_id, payload.item_id, run_date)
        return reminder_id

    async def cancel(self, reminder_id: str) -> None:
        try:
            self._scheduler.remove_job(reminder_id)
        except self._JobLookupError:
            # Already fired or never existed
            return
        logger.debug("Reminder %s cancelled", reminder_id)

    async def shutdown(self) -> None:
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Reminder scheduler stopped")
        self._initialized = False

    def add_cron_job(self, func, expr: str, job_id: str, name: str = "") -> None:
        """Register a recurring maintenance job from a 5-field cron expression."""
        from apscheduler.triggers.cron import CronTrigger

        parts = expr.split()
        if len(parts) != 5:
            raise ValueError(f"Invalid cron expression: {expr!r}")
        self._scheduler.add_job(
            func,
            trigger=CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            ),
            id=job_id,
            name=name or job_id,
            replace_existing=True,
        )
        logger.info("Registered job %s: %s", job_id, expr)

    def pending(self) -> list[dict]:
        """Return info about reminders that have not fired yet."""
        reminders = []
        for job in self._scheduler.get_jobs():
            if not job.name.startswith(_REMINDER_PREFIX):
                continue
            payload = job.args[0]
            reminders.append({
                "id": job.id,
                "item_id": payload.item_id,
                "item_name": payload.item_name,
                "run_date": str(job.trigger.run_date),
            })
        return reminders

    async def _fire(self, payload: ReminderPayload) -> None:
        try:
            self._channel.deliver(payload)
        except Exception:
            logger.exception("Failed to deliver reminder for item %s", payload.item_id)
