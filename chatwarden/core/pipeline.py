"""Middleware pipeline for inbound message processing.

A composable chain of independently testable middleware classes using the
pipeline-chain pattern: each middleware calls ``next()`` to pass through, or
calls ``ctx.halt()`` to short-circuit.

Usage::

    pipeline = Pipeline([
        SelfMessageFilterMiddleware(),
        GroupLockMiddleware(store=store, admins=admins),
        ModerationMiddleware(engine=engine),
        AIChatMiddleware(services=services, prefix="ai "),
        CommandMiddleware(router=router, prefix="!"),
    ])
    intents = await pipeline.run(event)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from chatwarden.core.intents import PipelineIntent, RecordMetricIntent, SendReplyIntent
from chatwarden.core.models import InboundEvent, Verdict


@dataclass
class PipelineContext:
    """Mutable state flowing through the middleware chain.

    Attributes:
        event: The inbound message being processed.
        verdict: Set by the moderation middleware.
        intents: Accumulated output intents.  Each middleware appends to this.
        halted: When ``True``, the pipeline stops executing further middleware.
    """

    event: InboundEvent
    verdict: Verdict | None = None
    intents: list[PipelineIntent] = field(default_factory=list)
    halted: bool = False

    # ── Convenience helpers ──────────────────────────────────────────

    def metric(
        self,
        name: str,
        value: int = 1,
        labels: tuple[tuple[str, str], ...] = (),
    ) -> None:
        """Append a metric intent (shorthand used by most middleware)."""
        self.intents.append(RecordMetricIntent(name=name, value=value, labels=labels))

    def reply(self, text: str) -> None:
        """Append the single reply for this message."""
        self.intents.append(SendReplyIntent(text=text))

    def halt(self) -> None:
        """Signal the pipeline to stop after this middleware."""
        self.halted = True


NextFn = Callable[[PipelineContext], Awaitable[None]]
"""Signature for the ``next`` callback passed to each middleware."""


@runtime_checkable
class Middleware(Protocol):
    """Protocol for pipeline middleware.

    Implementations must be callable with ``(ctx, next)`` and may:

    1. Modify ``ctx`` and call ``await next(ctx)`` to pass through.
    2. Call ``ctx.halt()`` and append intents to short-circuit.
    """

    async def __call__(self, ctx: PipelineContext, next: NextFn) -> None: ...


class Pipeline:
    """Ordered chain of middleware that processes an inbound message."""

    __slots__ = ("_layers",)

    def __init__(self, layers: list[Middleware]) -> None:
        self._layers = list(layers)

    async def run(self, event: InboundEvent) -> list[PipelineIntent]:
        """Process *event* through the full middleware chain and return intents."""
        ctx = PipelineContext(event=event)
        await self._execute(ctx, index=0)
        return ctx.intents

    async def _execute(self, ctx: PipelineContext, index: int) -> None:
        if ctx.halted or index >= len(self._layers):
            return
        layer = self._layers[index]
        await layer(ctx, lambda c: self._execute(c, index + 1))

    def __len__(self) -> int:
        return len(self._layers)

    def __repr__(self) -> str:
        names = [type(m).__name__ for m in self._layers]
        return f"Pipeline({' → '.join(names)})"
