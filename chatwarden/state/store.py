"""In-memory state shared by the moderation pipeline and command handlers."""

from __future__ import annotations

import asyncio
import itertools
import time
from collections import defaultdict, deque
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TypeAlias

from chatwarden.core.models import AfkRecord, Poll, Reminder

Clock: TypeAlias = Callable[[], float]


class KeyedLocks:
    """Lazily created ``asyncio.Lock`` per key."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def for_key(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)


class StateStore:
    """Process-lifetime moderation and command state.

    Every per-sender record is created lazily. ``clock`` returns monotonic
    seconds and is injectable so rate windows can be tested without sleeping.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or time.monotonic
        self.started_at = self._clock()
        self.locks = KeyedLocks()

        self.rate_windows: dict[str, deque[float]] = defaultdict(deque)
        self.warnings: dict[str, int] = {}
        # dict keys give an insertion-ordered set
        self.banned: dict[str, None] = {}
        self.muted: set[str] = set()
        self.locked_groups: set[str] = set()
        self.afk: dict[str, AfkRecord] = {}
        self.polls: dict[int, Poll] = {}
        self.reminders: dict[int, Reminder] = {}
        self.message_counts: dict[str, int] = defaultdict(int)

        self._poll_ids = itertools.count(1)
        self._reminder_ids = itertools.count(1)

    def uptime_seconds(self) -> int:
        return int(self._clock() - self.started_at)

    # ── Rate windows ─────────────────────────────────────────────────

    def check_rate(self, sender: str, *, limit: int, window_seconds: float = 60.0) -> bool:
        """Prune the sender window and record one message if under ``limit``.

        Returns ``False`` (nothing recorded) when the pruned window already
        holds ``limit`` entries.
        """
        now = self._clock()
        window = self.rate_windows[sender]
        while window and (now - window[0]) >= window_seconds:
            window.popleft()
        if len(window) >= limit:
            return False
        window.append(now)
        self.message_counts[sender] += 1
        return True

    # ── Warnings and bans ────────────────────────────────────────────

    def add_warning(self, sender: str) -> int:
        count = self.warnings.get(sender, 0) + 1
        self.warnings[sender] = count
        return count

    def ban(self, user_id: str) -> None:
        self.banned.setdefault(user_id, None)

    def unban(self, user_id: str) -> bool:
        if user_id not in self.banned:
            return False
        del self.banned[user_id]
        return True

    def is_banned(self, user_id: str) -> bool:
        return user_id in self.banned

    # ── Mutes and locks ──────────────────────────────────────────────

    def mute(self, user_id: str) -> None:
        self.muted.add(user_id)

    def unmute(self, user_id: str) -> bool:
        if user_id not in self.muted:
            return False
        self.muted.discard(user_id)
        return True

    def is_muted(self, user_id: str) -> bool:
        return user_id in self.muted

    def set_locked(self, group_id: str, locked: bool) -> None:
        if locked:
            self.locked_groups.add(group_id)
        else:
            self.locked_groups.discard(group_id)

    def is_locked(self, group_id: str | None) -> bool:
        return group_id is not None and group_id in self.locked_groups

    # ── AFK ──────────────────────────────────────────────────────────

    def set_afk(self, user_id: str, note: str) -> AfkRecord:
        record = AfkRecord(note=note, set_at=datetime.now(UTC))
        self.afk[user_id] = record
        return record

    # ── Polls and reminders ──────────────────────────────────────────

    def create_poll(self, *, question: str, creator: str, group_id: str | None) -> Poll:
        poll = Poll(id=next(self._poll_ids), question=question, creator=creator, group_id=group_id)
        self.polls[poll.id] = poll
        return poll

    def next_reminder_id(self) -> int:
        return next(self._reminder_ids)

    def add_reminder(self, reminder: Reminder) -> None:
        self.reminders[reminder.id] = reminder

    def pop_reminder(self, reminder_id: int) -> Reminder | None:
        return self.reminders.pop(reminder_id, None)

    # ── Counters ─────────────────────────────────────────────────────

    @property
    def total_messages(self) -> int:
        return sum(self.message_counts.values())

    @property
    def total_warnings(self) -> int:
        return sum(self.warnings.values())
