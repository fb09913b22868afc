"""Reminder polling for the client.

Every contact starts out ``pending``. The first tick that finds its reminder
instant between zero and sixty seconds in the past emits one notification and
moves it to ``fired``, where it stays for the rest of the session even if the
reminder is edited later. A tick that lands after the window has closed simply
misses the reminder.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable

from friendreminder.client import ContactCache
from friendreminder.models import FriendContact

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 5.0
DUE_WINDOW = timedelta(seconds=60)


class ReminderState(str, Enum):
    PENDING = "pending"
    FIRED = "fired"


@dataclass(frozen=True)
class ReminderNotification:
    contact_id: str
    name: str
    contact_point: str
    contact_detail: str

    title = "Friend Reminder"

    @classmethod
    def for_contact(cls, contact: FriendContact) -> ReminderNotification:
        return cls(
            contact_id=contact.id,
            name=contact.name,
            contact_point=contact.contact_point,
            contact_detail=contact.contact_detail,
        )

    @property
    def message(self) -> str:
        return f"Reminder: Contact {self.name} via {self.contact_point} ({self.contact_detail})"


def is_due(remind_at: datetime, now: datetime) -> bool:
    return timedelta(0) <= now - remind_at < DUE_WINDOW


class ReminderScheduler:
    def __init__(
        self,
        cache: ContactCache,
        notify: Callable[[ReminderNotification], None],
        interval_seconds: float = POLL_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._cache = cache
        self._notify = notify
        self._interval = interval_seconds
        self._clock = clock
        self._states: dict[str, ReminderState] = {}
        self._task: asyncio.Task[None] | None = None

    def state_of(self, contact_id: str) -> ReminderState:
        return self._states.get(contact_id, ReminderState.PENDING)

    def tick(self, now: datetime | None = None) -> list[ReminderNotification]:
        now = now or self._clock()
        fired: list[ReminderNotification] = []
        for contact in self._cache.contacts:
            if not contact.id or self.state_of(contact.id) is ReminderState.FIRED:
                continue
            remind_at = contact.remind_at()
            if remind_at is None or not is_due(remind_at, now):
                continue
            notification = ReminderNotification.for_contact(contact)
            self._states[contact.id] = ReminderState.FIRED
            fired.append(notification)
            try:
                self._notify(notification)
            except Exception:
                logger.exception("Notification sink failed for contact %s", contact.id)
        return fired

    async def _run(self) -> None:
        while True:
            try:
                self.tick()
            except Exception:
                logger.exception("Reminder check failed")
            await asyncio.sleep(self._interval)

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run(), name="reminder-scheduler")
            logger.debug("Reminder scheduler started (every %ss)", self._interval)
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        logger.debug("Reminder scheduler stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def __aenter__(self) -> ReminderScheduler:
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
