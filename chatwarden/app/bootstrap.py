"""Application wiring: the bot service and its composition root."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, assert_never

from loguru import logger

from chatwarden.commands import COMMAND_FAILED, CommandServices, build_router
from chatwarden.core.errors import TransportError
from chatwarden.core.identity import AdminSet, user_part
from chatwarden.core.intents import DeleteMessageIntent, PipelineIntent, RecordMetricIntent, SendReplyIntent
from chatwarden.core.models import HandleResult, InboundEvent, StatusSnapshot
from chatwarden.core.pipeline import Pipeline
from chatwarden.moderation.engine import ModerationEngine
from chatwarden.pipeline import (
    AIChatMiddleware,
    CommandMiddleware,
    GroupLockMiddleware,
    ModerationMiddleware,
    SelfMessageFilterMiddleware,
)
from chatwarden.providers.openai_compatible import OpenAICompatibleProvider
from chatwarden.scheduler.reminders import ReminderScheduler
from chatwarden.state.store import StateStore
from chatwarden.telemetry import InMemoryTelemetry

if TYPE_CHECKING:
    from chatwarden.config.schema import Config
    from chatwarden.core.ports import CompletionPort, TelemetryPort, TransportPort


def _collect(intents: list[PipelineIntent], telemetry: "TelemetryPort") -> HandleResult:
    reply: str | None = None
    delete = False
    for intent in intents:
        match intent:
            case SendReplyIntent():
                if reply is None:
                    reply = intent.text
            case DeleteMessageIntent():
                delete = True
            case RecordMetricIntent():
                telemetry.incr(intent.name, intent.value, intent.labels)
            case _:
                assert_never(intent)
    return HandleResult(reply=reply, delete=delete)


class BotService:
    """Runs inbound messages through the pipeline and applies the outcome."""

    def __init__(
        self,
        *,
        config: "Config",
        services: CommandServices,
        pipeline: Pipeline,
        scheduler: ReminderScheduler,
        telemetry: InMemoryTelemetry,
    ) -> None:
        self._config = config
        self._services = services
        self._pipeline = pipeline
        self._scheduler = scheduler
        self._telemetry = telemetry
        self._connection_status = "disconnected"

    @property
    def store(self) -> StateStore:
        return self._services.store

    @property
    def scheduler(self) -> ReminderScheduler:
        return self._scheduler

    @property
    def telemetry(self) -> InMemoryTelemetry:
        return self._telemetry

    @property
    def pipeline(self) -> Pipeline:
        return self._pipeline

    def bind_transport(self, transport: "TransportPort") -> None:
        self._services.transport = transport
        self._scheduler.bind_transport(transport)

    def set_connection_status(self, status: str) -> None:
        if status != self._connection_status:
            logger.info("connection_status {} -> {}", self._connection_status, status)
        self._connection_status = status

    async def handle_inbound_message(
        self,
        body: str,
        sender: str,
        group_id: str | None,
        is_from_self: bool,
        message_id: str | None = None,
    ) -> HandleResult:
        """Decide the reply and delete directive for one inbound message."""
        event = InboundEvent(
            chat_id=group_id or sender,
            sender_id=sender,
            content=body,
            group_id=group_id,
            message_id=message_id,
            is_from_self=is_from_self,
        )
        return await self.handle_event(event)

    async def handle_event(self, event: InboundEvent) -> HandleResult:
        try:
            intents = await self._pipeline.run(event)
        except Exception:
            logger.exception("inbound_failed chat={} sender={}", event.chat_id, event.sender_id)
            return HandleResult(reply=COMMAND_FAILED)
        return _collect(intents, self._telemetry)

    async def process(self, event: InboundEvent) -> HandleResult:
        """Handle ``event`` and apply the result through the transport."""
        result = await self.handle_event(event)
        transport = self._services.transport
        if transport is None:
            return result
        if result.reply is not None:
            try:
                await transport.reply(event, result.reply)
            except TransportError as e:
                logger.warning("reply_failed chat={} error={}", event.chat_id, e)
        if result.delete:
            try:
                await transport.delete(event)
            except TransportError as e:
                logger.warning("delete_failed chat={} message={} error={}", event.chat_id, event.message_id, e)
        return result

    async def handle_membership_event(self, group_id: str, user_id: str, joined: bool) -> str | None:
        """Greet a joining member or say goodbye to a leaving one."""
        templates = self._config.templates
        template = templates.welcome if joined else templates.goodbye
        if not template:
            return None
        text = template.replace("{{user}}", f"@{user_part(user_id)}")
        transport = self._services.transport
        if transport is None:
            return text
        try:
            await transport.send(group_id, text)
        except TransportError as e:
            logger.warning("greeting_failed group={} user={} error={}", group_id, user_id, e)
        self._telemetry.incr("membership_greeting", labels=(("joined", str(joined).lower()),))
        return text

    def status_snapshot(self) -> StatusSnapshot:
        store = self._services.store
        completion = self._services.completion
        return StatusSnapshot(
            status=self._connection_status,
            timestamp=datetime.now(UTC),
            features={
                "anti_link": True,
                "ai": bool(completion is not None and completion.configured),
                "moderation": True,
            },
            banned_users=len(store.banned),
            active_polls=len(store.polls),
            pending_reminders=len(store.reminders),
            locked_groups=len(store.locked_groups),
            uptime_seconds=store.uptime_seconds(),
        )

    async def aclose(self) -> None:
        await self._scheduler.shutdown()


def build_completion(config: "Config") -> OpenAICompatibleProvider:
    provider = config.providers.openai
    return OpenAICompatibleProvider(
        config.openai_api_key,
        api_base=provider.api_base,
        extra_headers=provider.extra_headers,
        model=config.ai.model,
        image_size=config.ai.image_size,
        timeout_seconds=config.ai.timeout_ms / 1000.0,
    )


def build_service(
    config: "Config",
    *,
    transport: "TransportPort | None" = None,
    completion: "CompletionPort | None" = None,
    clock: Callable[[], float] | None = None,
) -> BotService:
    """Compose store, moderation, commands and pipeline around ``config``."""
    store = StateStore(clock=clock)
    admins = AdminSet(config.admins)
    engine = ModerationEngine(config.moderation, store)
    scheduler = ReminderScheduler(store, transport)
    services = CommandServices(
        config=config,
        store=store,
        admins=admins,
        transport=transport,
        completion=completion if completion is not None else build_completion(config),
        scheduler=scheduler,
    )
    router = build_router(services)
    pipeline = Pipeline(
        [
            SelfMessageFilterMiddleware(),
            GroupLockMiddleware(store=store, admins=admins),
            ModerationMiddleware(engine=engine),
            AIChatMiddleware(services=services, prefix=config.commands.ai_prefix),
            CommandMiddleware(router=router, prefix=config.commands.prefix),
        ]
    )
    logger.debug("pipeline composed: {}", pipeline)
    return BotService(
        config=config,
        services=services,
        pipeline=pipeline,
        scheduler=scheduler,
        telemetry=InMemoryTelemetry(),
    )
