import pytest

from chatwarden.app.bootstrap import BotService
from chatwarden.commands import COMMAND_FAILED, CommandRouter, CommandSpec
from chatwarden.commands.parsing import DURATION_HELP
from chatwarden.core.errors import ValidationError
from chatwarden.core.identity import AdminSet
from chatwarden.moderation import LINK_BLOCKED_REASON
from chatwarden.state import StateStore
from tests.fakes import ADMIN, GROUP, OTHER, USER, FakeTransport

SECOND_GROUP = "120363999999@g.us"


async def _say(service: BotService, body: str, sender: str = USER, group: str | None = GROUP) -> str | None:
    result = await service.handle_inbound_message(body, sender, group, False)
    return result.reply


async def test_unknown_command() -> None:
    router = CommandRouter([], admins=AdminSet([ADMIN]), store=StateStore())
    assert await router.dispatch("nope", USER) == "Unknown command. Type '!help' for available commands."
    assert await router.dispatch("", USER) == "Unknown command. Type '!help' for available commands."


async def test_command_names_are_case_insensitive(service: BotService) -> None:
    reply = await _say(service, "!PING")
    assert reply is not None
    assert reply.startswith("🏓 Pong! Bot is running. Uptime: ")
    assert reply.endswith(" seconds")


async def test_router_converts_handler_errors() -> None:
    async def invalid(ctx):
        raise ValidationError("Usage: !thing <x>")

    async def crash(ctx):
        raise RuntimeError("boom")

    router = CommandRouter(
        [CommandSpec("thing", invalid), CommandSpec("crash", crash)],
        admins=AdminSet([ADMIN]),
        store=StateStore(),
    )
    assert await router.dispatch("thing", USER) == "Usage: !thing <x>"
    assert await router.dispatch("crash now", USER) == COMMAND_FAILED


async def test_router_refuses_non_admin_before_handler_runs() -> None:
    calls = []

    async def purge(ctx):
        calls.append(ctx.sender)
        return "purged"

    router = CommandRouter(
        [CommandSpec("purge", purge, admin_only=True), CommandSpec("wipe", purge, admin_only=True, refusal="No.")],
        admins=AdminSet([ADMIN]),
        store=StateStore(),
    )
    assert await router.dispatch("purge", USER) == "Only admins can use !purge"
    assert await router.dispatch("wipe all", USER) == "No."
    assert calls == []
    assert await router.dispatch("purge", ADMIN) == "purged"
    assert calls == [ADMIN]


async def test_router_rejects_duplicate_names() -> None:
    async def handler(ctx):
        return "x"

    with pytest.raises(ValueError):
        CommandRouter(
            [CommandSpec("a", handler), CommandSpec("A", handler)],
            admins=AdminSet([]),
            store=StateStore(),
        )


async def test_router_splits_on_first_whitespace_run() -> None:
    seen = {}

    async def echo(ctx):
        seen["name"] = ctx.name
        seen["args"] = ctx.args
        return "ok"

    router = CommandRouter([CommandSpec("echo", echo)], admins=AdminSet([]), store=StateStore())
    await router.dispatch("ECHO   hello   world", USER)
    assert seen == {"name": "echo", "args": "hello   world"}


async def test_lock_requires_admin(service: BotService) -> None:
    assert await _say(service, "!lock", sender=USER) == "Only admins can lock the group"
    assert not service.store.is_locked(GROUP)


async def test_locked_group_drops_non_admin_messages(service: BotService) -> None:
    assert await _say(service, "!lock", sender=ADMIN) == "🔒 Group has been locked. Only admins can send messages now."
    assert service.store.is_locked(GROUP)

    assert await _say(service, "!ping", sender=OTHER) is None
    assert OTHER not in service.store.rate_windows

    assert not service.store.is_locked(SECOND_GROUP)
    reply = await _say(service, "!ping", sender=OTHER, group=SECOND_GROUP)
    assert reply is not None and reply.startswith("🏓 Pong!")
    assert await _say(service, "!ping", sender="1000@lid") is None

    reply = await _say(service, "!ping", sender=ADMIN)
    assert reply is not None and reply.startswith("🏓 Pong!")

    assert await _say(service, "!unlock", sender=ADMIN) == (
        "🔓 Group has been unlocked. Everyone can send messages now."
    )
    assert (await _say(service, "!ping", sender=OTHER)).startswith("🏓 Pong!")


async def test_lock_outside_group(service: BotService) -> None:
    assert await _say(service, "!lock", sender=ADMIN, group=None) == "This command only works in groups"


async def test_link_allow_block_round_trip(service: BotService) -> None:
    message = "docs at https://docs.example.org/page"
    result = await service.handle_inbound_message(message, USER, GROUP, False)
    assert result.reply == LINK_BLOCKED_REASON

    assert await _say(service, "!link allow example.org", sender=ADMIN) == "✅ Domain example.org added to whitelist."
    result = await service.handle_inbound_message(message, USER, GROUP, False)
    assert result.reply is None

    assert await _say(service, "!link block example.org", sender=ADMIN) == (
        "🚫 Domain example.org removed from whitelist."
    )
    result = await service.handle_inbound_message(message, USER, GROUP, False)
    assert result.reply == LINK_BLOCKED_REASON
    assert result.delete

    assert await _say(service, "!link block example.org", sender=ADMIN) == "Domain not in whitelist."
    assert await _say(service, "!link allow example.org", sender=USER) == "Only admins can manage links"


async def test_link_listing(service: BotService) -> None:
    whitelist = await _say(service, "!link whitelist", sender=ADMIN)
    assert whitelist.startswith("📋 *Allowed Domains*\n\n1. whatsapp.com")
    blacklist = await _say(service, "!link blacklist", sender=ADMIN)
    assert "1. badword1" in blacklist
    assert await _say(service, "!link", sender=ADMIN) == "Usage: !link allow|block|whitelist|blacklist <domain>"


async def test_currency_conversion(service: BotService) -> None:
    assert await _say(service, "!currency 100 USD to EUR") == (
        "💱 *Currency Conversion*\n\n100 USD = 93.00 EUR\n(Rate: 1 USD = 0.9300 EUR)"
    )
    assert await _say(service, "!currency 5 USD to CHF") == (
        "Unsupported currency. Supported: USD, EUR, GBP, JPY, INR"
    )


async def test_calc_command(service: BotService) -> None:
    assert await _say(service, "!calc 2+2*5") == "🧮 *Calculation*\n\n2+2*5 = 12"
    assert await _say(service, "!calc 1/0") == "❌ Invalid mathematical expression"
    assert await _say(service, "!calc __import__('os')") == "❌ Invalid mathematical expression"
    big = "1" + "0" * 200
    assert await _say(service, f"!calc {big}*{big}") == "❌ Invalid mathematical expression"


async def test_ban_removes_member_and_records_ban(service: BotService, transport: FakeTransport) -> None:
    assert await _say(service, "!ban 2000", sender=ADMIN) == f"🚫 User {USER} has been banned from the group"
    assert transport.removed == [(GROUP, [USER])]
    assert service.store.is_banned(USER)

    assert await _say(service, "!unban @2000", sender=ADMIN) == f"✅ User {USER} has been unbanned"
    assert await _say(service, "!unban @2000", sender=ADMIN) == "User is not banned"


async def test_ban_requires_membership(service: BotService, transport: FakeTransport) -> None:
    assert await _say(service, "!ban 9999", sender=ADMIN) == "User is not in this group"
    assert transport.removed == []
    assert not service.store.is_banned("9999@c.us")


async def test_ban_refused_for_non_admin(service: BotService, transport: FakeTransport) -> None:
    assert await _say(service, f"!ban {OTHER}", sender=USER) == "Only admins can ban users"
    assert transport.removed == []


async def test_kick_transport_failure(service: BotService, transport: FakeTransport) -> None:
    transport.fail_on.add("remove")
    assert await _say(service, "!kick 3000", sender=ADMIN) == "Failed to kick user"
    transport.fail_on.clear()
    assert await _say(service, "!kick 3000", sender=ADMIN) == f"👢 User {OTHER} has been kicked from the group"


async def test_ban_outside_group(service: BotService) -> None:
    assert await _say(service, "!ban 2000", sender=ADMIN, group=None) == "This command only works in groups"


async def test_promote_and_demote(service: BotService, transport: FakeTransport) -> None:
    assert await _say(service, "!promote 2000", sender=ADMIN) == f"⬆️ User {USER} has been promoted to admin"
    assert await _say(service, "!demote 2000", sender=ADMIN) == f"⬇️ User {USER} has been demoted"
    assert transport.promoted == [(GROUP, [USER])]
    assert transport.demoted == [(GROUP, [USER])]


async def test_mute_suppresses_commands(service: BotService) -> None:
    assert await _say(service, "!mute 2000", sender=ADMIN) == f"🔇 User {USER} has been muted"
    assert await _say(service, "!ping", sender=USER) is None
    assert await _say(service, "!unmute 2000", sender=ADMIN) == f"🔊 User {USER} has been unmuted"
    assert (await _say(service, "!ping", sender=USER)).startswith("🏓 Pong!")
    assert await _say(service, "!unmute 2000", sender=ADMIN) == "User is not muted"


async def test_muted_sender_still_moderated(service: BotService) -> None:
    await _say(service, "!mute 2000", sender=ADMIN)
    result = await service.handle_inbound_message("total scam", USER, GROUP, False)
    assert result.delete


async def test_tagall_mentions_non_admins(service: BotService) -> None:
    assert await _say(service, "!tagall", sender=ADMIN) == "@2000 @3000\n\n*This is a tag all message*"
    assert await _say(service, "!tagall", sender=USER) == "Only admins can tag all members"


async def test_members_lists_participants(service: BotService, transport: FakeTransport) -> None:
    from chatwarden.core.models import Participant

    transport.participants[GROUP] = [Participant(f"{n}@c.us") for n in range(12)]
    reply = await _say(service, "!members")
    assert reply.startswith("👥 *Group Members (12)*\n\n1. 0@c.us")
    assert "10. 9@c.us" in reply
    assert reply.endswith("And 2 more...")


async def test_poll_and_afk(service: BotService) -> None:
    assert await _say(service, "!poll") == "Usage: !poll <question>\nExample: !poll What's your favorite color?"
    reply = await _say(service, "!poll Pizza or pasta?")
    assert reply == "📊 *POLL CREATED*\n\n*Question:* Pizza or pasta?\n\nVote with:\n!vote 1 option"
    assert service.store.polls[1].creator == USER
    assert service.store.polls[1].group_id == GROUP

    assert await _say(service, "!afk") == "💤 You are now AFK: AFK"
    assert await _say(service, "!afk lunch") == "💤 You are now AFK: lunch"
    assert service.store.afk[USER].note == "lunch"


async def test_welcome_template_update(service: BotService) -> None:
    current = await _say(service, "!welcome", sender=ADMIN)
    assert current.startswith("Current welcome message:\nWelcome to the group, {{user}}!")
    assert current.endswith("Use {{user}} for mentioning the new member")
    assert await _say(service, "!welcome Hi {{user}}", sender=ADMIN) == "✅ Welcome message updated!"
    assert await _say(service, "!goodbye Bye", sender=USER) == "Only admins can set goodbye messages"


async def test_remind_validates_and_schedules(service: BotService) -> None:
    assert await _say(service, "!remind 10x stretch") == DURATION_HELP
    assert await _say(service, "!remind") == DURATION_HELP

    assert await _say(service, "!remind 10m stretch your legs") == "⏰ Reminder set for 10m from now."
    (reminder,) = service.store.reminders.values()
    assert reminder.recipient == USER
    assert reminder.text == "stretch your legs"
    assert service.scheduler.pending == 1

    await service.aclose()
    assert service.scheduler.pending == 0


async def test_stats_and_fun(service: BotService) -> None:
    await _say(service, "hello")
    stats = await _say(service, "!stats")
    assert "Messages processed: 2" in stats
    assert "Your messages: 2" in stats

    assert (await _say(service, "!joke")).startswith("🤣 *Joke*\n\n")
    assert await _say(service, "!horoscope LEO") == (
        "🌟 *Horoscope for Leo*\n\nYour creativity is at its peak. Channel it into your projects."
    )
    assert await _say(service, "!horoscope pluto") == "Please enter a valid zodiac sign. Example: !horoscope leo"


async def test_member_changes_share_one_lock_per_group(service: BotService) -> None:
    assert (await _say(service, "!kick 3000", sender=ADMIN)).startswith("👢")
    held = len(service.store.locks)
    assert await _say(service, "!ban 2000", sender=ADMIN) == f"🚫 User {USER} has been banned from the group"
    assert await _say(service, "!ban 9999", sender=ADMIN) == "User is not in this group"
    assert len(service.store.locks) == held
