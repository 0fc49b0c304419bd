"""Informational commands: help, ping, group info and statistics."""

from __future__ import annotations

from chatwarden.commands.contracts import CommandContext, CommandServices, CommandSpec
from chatwarden.core.errors import PreconditionError, TransportError

GROUP_ONLY = "This command only works in groups"
MEMBERS_PREVIEW = 10

HELP_TEXT = """
🚀 *WhatsApp Bot Help* 🚀

*Core Commands:*
{p}help - Show this help message
{p}ping - Check bot status
{p}groupinfo - Get group information
{p}admins - List group admins
{p}members - List group members

*Moderation Commands:*
{p}ban <user> - Ban user
{p}unban <user> - Unban user
{p}kick <user> - Kick user
{p}mute <user> - Mute user
{p}unmute <user> - Unmute user
{p}promote <user> - Promote user to group admin
{p}demote <user> - Demote group admin
{p}lock - Lock group (only admins)
{p}unlock - Unlock group (only admins)
{p}link allow|block|whitelist|blacklist <domain> - Manage links
{p}welcome <message> - Set welcome message
{p}goodbye <message> - Set goodbye message

*Productivity Commands:*
{p}remind <time> <message> - Set reminder
{p}poll <question> - Create poll
{p}translate <text> - Translate text
{p}weather <location> - Get weather
{p}calc <expression> - Calculator
{p}define <word> - Dictionary lookup
{p}wiki <query> - Wikipedia search
{p}news - Get top headlines
{p}currency <amount> - Currency converter

*Entertainment Commands:*
{p}joke - Get a random joke
{p}quote - Get a random quote
{p}fact - Get a random fact
{p}horoscope <sign> - Get horoscope
{p}ai <query> - AI chat
{p}image <prompt> - Generate image (admin only)
{p}tagall - Tag all members (admin only)
{p}afk <message> - Set AFK status

*System Commands:*
{p}stats - View statistics
{p}aihelp - AI capabilities overview

Type '{p}aihelp' for more details on AI features.
"""

AI_HELP_TEXT = (
    "🤖 *AI Capabilities*\n\n"
    "• *Natural language understanding*: Conversational AI that understands context\n"
    "• *Content moderation*: Automatic message filtering\n"
    "• *Translation*: Real-time language conversion\n"
    "• *Image generation*: Visual content from a text prompt\n"
    "• *Weather forecasts*: Weather information\n"
    "• *News summaries*: Top headlines\n"
    "• *Calculations*: Math operations\n"
    "• *Dictionary lookups*: Word definitions and examples\n"
    "• *Jokes & quotes*: Entertainment on demand\n"
    "• *Facts & horoscopes*: Interesting information\n"
    "• *Wikipedia search*: Knowledge at your fingertips\n\n"
    "Type '{p}ai <your question>' to use the AI assistant"
)


class GeneralCommands:
    def __init__(self, services: CommandServices):
        self._services = services

    @property
    def _prefix(self) -> str:
        return self._services.config.commands.prefix

    def specs(self) -> list[CommandSpec]:
        return [
            CommandSpec("help", self.help),
            CommandSpec("ping", self.ping),
            CommandSpec("groupinfo", self.groupinfo),
            CommandSpec("admins", self.admins),
            CommandSpec("members", self.members),
            CommandSpec("stats", self.stats),
            CommandSpec("aihelp", self.aihelp),
        ]

    async def help(self, ctx: CommandContext) -> str:
        return HELP_TEXT.format(p=self._prefix)

    async def ping(self, ctx: CommandContext) -> str:
        return f"🏓 Pong! Bot is running. Uptime: {self._services.store.uptime_seconds()} seconds"

    async def groupinfo(self, ctx: CommandContext) -> str:
        info = self._services.config.group_info
        allowed = ", ".join(self._services.config.moderation.allowed_links)
        return (
            "👥 *Group Information*\n\n"
            f"*Name:* {info.name}\n"
            f"*Description:* {info.description}\n"
            f"*Members:* {info.members}\n"
            f"*Anti-Link:* Enabled (Allowed: {allowed})"
        )

    async def admins(self, ctx: CommandContext) -> str:
        lines = [f"{i}. {admin}" for i, admin in enumerate(self._services.admins.entries, start=1)]
        return "🛡️ *Group Admins*\n\n" + "\n".join(lines)

    async def members(self, ctx: CommandContext) -> str:
        transport = self._services.transport
        if ctx.group_id is None or transport is None:
            raise PreconditionError(GROUP_ONLY)
        try:
            participants = await transport.get_participants(ctx.group_id)
        except TransportError as e:
            raise PreconditionError("Failed to retrieve group members") from e

        lines = [f"{i}. {p.id}" for i, p in enumerate(participants[:MEMBERS_PREVIEW], start=1)]
        text = f"👥 *Group Members ({len(participants)})*\n\n" + "\n".join(lines)
        if len(participants) > MEMBERS_PREVIEW:
            text += f"\n\nAnd {len(participants) - MEMBERS_PREVIEW} more..."
        return text

    async def stats(self, ctx: CommandContext) -> str:
        store = self._services.store
        return (
            "📊 *Bot Statistics*\n\n"
            f"Messages processed: {store.total_messages}\n"
            f"Warnings issued: {store.total_warnings}\n"
            f"Active polls: {len(store.polls)}\n"
            f"Your messages: {store.message_counts.get(ctx.sender, 0)}\n"
            f"Your warnings: {store.warnings.get(ctx.sender, 0)}"
        )

    async def aihelp(self, ctx: CommandContext) -> str:
        return AI_HELP_TEXT.format(p=self._prefix)
