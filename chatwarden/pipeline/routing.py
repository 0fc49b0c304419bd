"""Prefix routing: AI chat and command dispatch."""

from __future__ import annotations

from chatwarden.commands.ai import chat_reply
from chatwarden.commands.contracts import CommandServices
from chatwarden.commands.router import CommandRouter
from chatwarden.core.pipeline import NextFn, PipelineContext


class AIChatMiddleware:
    """Answer bodies starting with the AI-chat prefix (case-insensitive)."""

    def __init__(self, *, services: CommandServices, prefix: str = "ai ") -> None:
        self._services = services
        self._prefix = prefix.lower()

    async def __call__(self, ctx: PipelineContext, next: NextFn) -> None:
        body = ctx.event.content
        if not self._prefix or not body.lower().startswith(self._prefix):
            await next(ctx)
            return

        question = body[len(self._prefix):].strip()
        ctx.reply(await chat_reply(self._services, question, ctx.event.sender_id))
        ctx.metric("ai_chat_handled")
        ctx.halt()


class CommandMiddleware:
    """Dispatch bodies starting with the command prefix."""

    def __init__(self, *, router: CommandRouter, prefix: str = "!") -> None:
        self._router = router
        self._prefix = prefix

    async def __call__(self, ctx: PipelineContext, next: NextFn) -> None:
        event = ctx.event
        if not event.content.startswith(self._prefix):
            await next(ctx)
            return

        reply = await self._router.dispatch(
            event.content[len(self._prefix):],
            event.sender_id,
            group_id=event.group_id,
            message=event,
        )
        if reply is not None:
            ctx.reply(reply)
        ctx.metric("command_dispatched")
        ctx.halt()
