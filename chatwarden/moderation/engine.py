"""Ordered moderation checks and the warning ladder."""

from __future__ import annotations

from loguru import logger

from chatwarden.config.schema import ModerationConfig
from chatwarden.core.models import Verdict
from chatwarden.moderation.rules import (
    BANNED_WORD_REASON,
    LINK_BLOCKED_REASON,
    SPAM_REASON,
    blocked_links,
    find_banned_word,
)
from chatwarden.state.store import StateStore

BANNED_FOR_WARNINGS = "You have been banned for too many warnings."


class ModerationEngine:
    """Link filter, banned-word filter and spam rate limit, first match wins.

    ``config`` is shared with the ``link`` command, so allow-list edits apply
    to the next evaluated message.
    """

    def __init__(self, config: ModerationConfig, store: StateStore):
        self._config = config
        self._store = store

    @property
    def config(self) -> ModerationConfig:
        return self._config

    async def evaluate(self, body: str, sender: str) -> Verdict:
        try:
            return await self._evaluate(body, sender)
        except Exception as e:
            logger.warning("moderation_error sender={} error={}", sender, e)
            return Verdict.allow()

    async def _evaluate(self, body: str, sender: str) -> Verdict:
        links = blocked_links(body, self._config.allowed_links)
        if links:
            logger.info("moderation_block sender={} reason=link links={}", sender, links[:3])
            return Verdict(blocked=True, reason=LINK_BLOCKED_REASON, delete_message=True)

        word = find_banned_word(body, self._config.banned_words)
        if word is not None:
            logger.info("moderation_block sender={} reason=banned_word", sender)
            return Verdict(blocked=True, reason=BANNED_WORD_REASON, delete_message=True)

        async with self._store.locks.for_key(f"rate:{sender}"):
            allowed = self._store.check_rate(
                sender,
                limit=self._config.max_messages_per_minute,
                window_seconds=self._config.rate_window_seconds,
            )
        if not allowed:
            logger.info(
                "moderation_block sender={} reason=spam limit={}",
                sender,
                self._config.max_messages_per_minute,
            )
            return Verdict(blocked=True, reason=SPAM_REASON, delete_message=False)
        return Verdict.allow()

    async def warn(self, sender: str, reason: str) -> str:
        """Record one warning; ban the sender when the threshold is reached."""
        async with self._store.locks.for_key(f"warn:{sender}"):
            count = self._store.add_warning(sender)
            limit = self._config.max_warnings
            if count >= limit:
                self._store.ban(sender)
                logger.info("warning_ban sender={} warnings={}", sender, count)
                return BANNED_FOR_WARNINGS
        logger.info("warning_issued sender={} warnings={} reason={}", sender, count, reason)
        return f"⚠️ Warning #{count} of {limit}: {reason}"
