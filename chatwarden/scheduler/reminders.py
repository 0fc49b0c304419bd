"""Cancellable one-shot reminder tasks."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import UTC, datetime

from loguru import logger

from chatwarden.core.errors import TransportError
from chatwarden.core.models import Reminder
from chatwarden.core.ports import TransportPort
from chatwarden.state.store import StateStore


class ReminderScheduler:
    """Owns one asyncio task per pending reminder.

    A reminder fires at most once: its task sends ``⏰ Reminder: <text>`` to
    the recipient and removes the record from the store. Send failures are
    logged and never retried.
    """

    def __init__(self, store: StateStore, transport: TransportPort | None = None):
        self._store = store
        self._transport = transport
        self._tasks: dict[int, asyncio.Task[None]] = {}

    def bind_transport(self, transport: TransportPort) -> None:
        self._transport = transport

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, reminder: Reminder) -> asyncio.Task[None]:
        self._store.add_reminder(reminder)
        task = asyncio.create_task(self._fire_later(reminder), name=f"reminder-{reminder.id}")
        self._tasks[reminder.id] = task
        task.add_done_callback(lambda t, rid=reminder.id: self._on_task_done(rid, t))
        logger.info(
            "reminder_scheduled id={} recipient={} fire_at={}",
            reminder.id,
            reminder.recipient,
            reminder.fire_at.isoformat(),
        )
        return task

    def cancel(self, reminder_id: int) -> bool:
        task = self._tasks.pop(reminder_id, None)
        removed = self._store.pop_reminder(reminder_id) is not None
        if task is not None and not task.done():
            task.cancel()
        return removed or task is not None

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks.clear()

    async def _fire_later(self, reminder: Reminder) -> None:
        delay = (reminder.fire_at - datetime.now(UTC)).total_seconds()
        if delay > 0:
            await asyncio.sleep(delay)
        if self._store.pop_reminder(reminder.id) is None:
            return
        if self._transport is None:
            logger.warning("reminder_dropped id={} reason=no_transport", reminder.id)
            return
        try:
            await self._transport.send(reminder.recipient, f"⏰ Reminder: {reminder.text}")
        except TransportError as e:
            logger.warning("reminder_send_failed id={} recipient={} error={}", reminder.id, reminder.recipient, e)
            return
        logger.info("reminder_fired id={} recipient={}", reminder.id, reminder.recipient)

    def _on_task_done(self, reminder_id: int, task: asyncio.Task[None]) -> None:
        if self._tasks.get(reminder_id) is task:
            del self._tasks[reminder_id]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("reminder task {} failed: {}", reminder_id, exc)
