"""Early gates: own messages and locked groups."""

from __future__ import annotations

from loguru import logger

from chatwarden.core.identity import AdminSet
from chatwarden.core.pipeline import NextFn, PipelineContext
from chatwarden.state.store import StateStore


class SelfMessageFilterMiddleware:
    """Drop messages the bot sent itself."""

    async def __call__(self, ctx: PipelineContext, next: NextFn) -> None:
        if ctx.event.is_from_self:
            ctx.metric("inbound_dropped", labels=(("reason", "self"),))
            ctx.halt()
            return
        await next(ctx)


class GroupLockMiddleware:
    """Silently drop non-admin messages in locked groups, before moderation."""

    def __init__(self, *, store: StateStore, admins: AdminSet) -> None:
        self._store = store
        self._admins = admins

    async def __call__(self, ctx: PipelineContext, next: NextFn) -> None:
        event = ctx.event
        if self._store.is_locked(event.group_id) and not self._admins.is_admin(event.sender_id):
            logger.debug("group_lock_drop group={} sender={}", event.group_id, event.sender_id)
            ctx.metric("inbound_dropped", labels=(("reason", "group_locked"),))
            ctx.halt()
            return
        await next(ctx)
