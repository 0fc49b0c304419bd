"""Moderation middleware: reply with the block reason and request deletion."""

from __future__ import annotations

from chatwarden.core.intents import DeleteMessageIntent
from chatwarden.core.pipeline import NextFn, PipelineContext
from chatwarden.moderation.engine import ModerationEngine


class ModerationMiddleware:
    def __init__(self, *, engine: ModerationEngine) -> None:
        self._engine = engine

    async def __call__(self, ctx: PipelineContext, next: NextFn) -> None:
        verdict = await self._engine.evaluate(ctx.event.content, ctx.event.sender_id)
        ctx.verdict = verdict
        if not verdict.blocked:
            await next(ctx)
            return

        ctx.reply(verdict.reason)
        if verdict.delete_message:
            ctx.intents.append(DeleteMessageIntent(reason=verdict.reason))
        ctx.metric("moderation_blocked", labels=(("delete", str(verdict.delete_message).lower()),))
        ctx.halt()
