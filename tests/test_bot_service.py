from chatwarden.app.bootstrap import BotService, build_service
from chatwarden.commands.ai import CHAT_FAILURE, CHAT_NOT_CONFIGURED
from chatwarden.config.schema import Config
from chatwarden.core.errors import ProviderError
from chatwarden.core.models import InboundEvent
from chatwarden.core.pipeline import Pipeline
from chatwarden.moderation import BANNED_WORD_REASON, LINK_BLOCKED_REASON
from tests.fakes import ADMIN, GROUP, USER, FakeClock, FakeCompletion, FakeTransport


def _event(body: str, sender: str = USER, message_id: str = "m1") -> InboundEvent:
    return InboundEvent(chat_id=GROUP, sender_id=sender, content=body, group_id=GROUP, message_id=message_id)


async def test_own_messages_are_ignored(service: BotService) -> None:
    result = await service.handle_inbound_message("!ping", ADMIN, GROUP, True)
    assert result.reply is None
    assert not result.delete
    assert service.telemetry.get_counter("inbound_dropped", (("reason", "self"),)) == 1


async def test_plain_message_gets_no_reply(service: BotService) -> None:
    result = await service.handle_inbound_message("good morning", USER, GROUP, False)
    assert result.reply is None
    assert not result.delete


async def test_blocked_link_replies_and_deletes(service: BotService) -> None:
    result = await service.handle_inbound_message("join http://evil.test/x", USER, GROUP, False)
    assert result.reply == LINK_BLOCKED_REASON
    assert result.delete
    assert service.telemetry.get_counter("moderation_blocked", (("delete", "true"),)) == 1


async def test_moderation_runs_before_commands(service: BotService) -> None:
    result = await service.handle_inbound_message("!calc scam", ADMIN, GROUP, False)
    assert result.reply == BANNED_WORD_REASON
    assert result.delete


async def test_process_applies_reply_and_delete(service: BotService, transport: FakeTransport) -> None:
    await service.process(_event("cheap fraud deals"))
    assert transport.replies == [(GROUP, BANNED_WORD_REASON)]
    assert transport.deleted == ["m1"]


async def test_process_swallows_delete_failure(service: BotService, transport: FakeTransport) -> None:
    transport.fail_on.add("delete")
    result = await service.process(_event("cheap fraud deals"))
    assert result.delete
    assert transport.replies == [(GROUP, BANNED_WORD_REASON)]
    assert transport.deleted == []


async def test_process_swallows_reply_failure(service: BotService, transport: FakeTransport) -> None:
    transport.fail_on.add("reply")
    result = await service.process(_event("!ping"))
    assert result.reply is not None
    assert transport.replies == []


async def test_ai_prefix_chat(service: BotService, completion: FakeCompletion) -> None:
    completion.text = "Paris."
    result = await service.handle_inbound_message("AI what is the capital of France?", USER, None, False)
    assert result.reply == "Paris."
    prompt, temperature, max_tokens = completion.calls[0]
    assert "Message: what is the capital of France?" in prompt
    assert f"User: {USER}" in prompt
    assert (temperature, max_tokens) == (0.7, 150)
    assert service.telemetry.get_counter("ai_chat_handled") == 1


async def test_ai_chat_not_configured(config: Config, transport: FakeTransport) -> None:
    service = build_service(
        config,
        transport=transport,
        completion=FakeCompletion(configured=False),
        clock=FakeClock(),
    )
    result = await service.handle_inbound_message("ai hello", USER, None, False)
    assert result.reply == CHAT_NOT_CONFIGURED


async def test_ai_chat_provider_failure(service: BotService, completion: FakeCompletion) -> None:
    completion.error = ProviderError("timeout")
    result = await service.handle_inbound_message("ai hello", USER, None, False)
    assert result.reply == CHAT_FAILURE


async def test_translate_uses_fixed_parameters(service: BotService, completion: FakeCompletion) -> None:
    completion.text = "Hello world"
    result = await service.handle_inbound_message("!translate Hola mundo", USER, GROUP, False)
    assert result.reply == "🔤 *Translation*\n\nHello world"
    prompt, temperature, max_tokens = completion.calls[0]
    assert '"Hola mundo"' in prompt
    assert (temperature, max_tokens) == (0.3, 100)


async def test_translate_usage_and_failure(service: BotService, completion: FakeCompletion) -> None:
    result = await service.handle_inbound_message("!translate", USER, GROUP, False)
    assert result.reply == "Usage: !translate <text>\nExample: !translate Hello world"
    assert completion.calls == []

    completion.error = ProviderError("500")
    result = await service.handle_inbound_message("!translate Hola", USER, GROUP, False)
    assert result.reply == "Translation failed. Please try again."


async def test_prompt_command_not_configured(config: Config) -> None:
    service = build_service(config, completion=FakeCompletion(configured=False), clock=FakeClock())
    result = await service.handle_inbound_message("!weather London", USER, None, False)
    assert result.reply == "Weather feature is not configured. Please set OPENAI_API_KEY."


async def test_news_takes_no_arguments(service: BotService, completion: FakeCompletion) -> None:
    completion.text = "• headline"
    result = await service.handle_inbound_message("!news", USER, None, False)
    assert result.reply == "📰 *Latest News*\n\n• headline"
    assert completion.calls[0][1:] == (0.5, 300)


async def test_image_generation_is_admin_only(service: BotService, completion: FakeCompletion) -> None:
    result = await service.handle_inbound_message("!image a cat", USER, GROUP, False)
    assert result.reply == "Image generation is restricted to admins"
    assert completion.image_prompts == []

    result = await service.handle_inbound_message("!image a cat", ADMIN, GROUP, False)
    assert result.reply == (
        "🖼️ *Image Generated*\n\nPrompt: a cat\n\nHere's your image:\nhttps://images.test/cat.png"
    )
    assert completion.image_prompts == ["a cat"]


async def test_membership_greetings(service: BotService, transport: FakeTransport) -> None:
    text = await service.handle_membership_event(GROUP, "5551234@c.us", joined=True)
    assert text == "Welcome to the group, @5551234! We're glad to have you here."
    await service.handle_membership_event(GROUP, "5551234@c.us", joined=False)
    assert transport.sent == [
        (GROUP, "Welcome to the group, @5551234! We're glad to have you here."),
        (GROUP, "Goodbye, @5551234. We'll miss you!"),
    ]
    assert service.telemetry.get_counter("membership_greeting", (("joined", "true"),)) == 1


async def test_status_snapshot(service: BotService) -> None:
    await service.handle_inbound_message("!lock", ADMIN, GROUP, False)
    await service.handle_inbound_message("!ban 2000", ADMIN, GROUP, False)
    service.set_connection_status("connected")

    snapshot = service.status_snapshot()
    assert snapshot.status == "connected"
    assert snapshot.features == {"anti_link": True, "ai": True, "moderation": True}
    assert snapshot.banned_users == 1
    assert snapshot.locked_groups == 1
    assert snapshot.active_polls == 0
    assert snapshot.pending_reminders == 0


async def test_command_metric_recorded(service: BotService) -> None:
    await service.handle_inbound_message("!ping", USER, GROUP, False)
    await service.handle_inbound_message("!nothing", USER, GROUP, False)
    assert service.telemetry.get_counter("command_dispatched") == 2


async def test_pipeline_failure_returns_generic_reply(service: BotService, monkeypatch) -> None:
    async def broken(self, event):
        raise RuntimeError("boom")

    monkeypatch.setattr(Pipeline, "run", broken)
    result = await service.handle_inbound_message("!ping", USER, GROUP, False)
    assert result.reply == "Sorry, there was an error processing your command."


async def test_group_commands_without_transport(config: Config) -> None:
    service = build_service(config, completion=FakeCompletion(), clock=FakeClock())
    for body in ("!ban 2000", "!kick 2000", "!members"):
        result = await service.handle_inbound_message(body, ADMIN, GROUP, False)
        assert result.reply == "This command only works in groups"
