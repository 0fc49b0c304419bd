"""Admin-gated group management commands."""

from __future__ import annotations

from loguru import logger

from chatwarden.commands.contracts import CommandContext, CommandServices, CommandSpec
from chatwarden.commands.general import GROUP_ONLY
from chatwarden.core.errors import PreconditionError, TransportError, ValidationError
from chatwarden.core.identity import normalize_user_id, user_part
from chatwarden.core.models import Participant

NOT_IN_GROUP = "User is not in this group"
TAGALL_LIMIT = 30


class ModerationCommands:
    """Bans, kicks, mutes, promotions, group locks and link management."""

    def __init__(self, services: CommandServices):
        self._services = services

    def specs(self) -> list[CommandSpec]:
        return [
            CommandSpec("ban", self.ban, admin_only=True, refusal="Only admins can ban users"),
            CommandSpec("unban", self.unban, admin_only=True, refusal="Only admins can unban users"),
            CommandSpec("kick", self.kick, admin_only=True, refusal="Only admins can kick users"),
            CommandSpec("mute", self.mute, admin_only=True, refusal="Only admins can mute users"),
            CommandSpec("unmute", self.unmute, admin_only=True, refusal="Only admins can unmute users"),
            CommandSpec("promote", self.promote, admin_only=True, refusal="Only admins can promote users"),
            CommandSpec("demote", self.demote, admin_only=True, refusal="Only admins can demote users"),
            CommandSpec("lock", self.lock, admin_only=True, refusal="Only admins can lock the group"),
            CommandSpec("unlock", self.unlock, admin_only=True, refusal="Only admins can unlock the group"),
            CommandSpec("link", self.link, admin_only=True, refusal="Only admins can manage links"),
            CommandSpec("tagall", self.tagall, admin_only=True, refusal="Only admins can tag all members"),
            CommandSpec(
                "welcome", self.welcome, admin_only=True, refusal="Only admins can set welcome messages"
            ),
            CommandSpec(
                "goodbye", self.goodbye, admin_only=True, refusal="Only admins can set goodbye messages"
            ),
        ]

    # ── helpers ──────────────────────────────────────────────────────

    @property
    def _prefix(self) -> str:
        return self._services.config.commands.prefix

    def _target(self, ctx: CommandContext) -> str:
        if not ctx.argv:
            raise ValidationError(f"Usage: {self._prefix}{ctx.name} <user>")
        return normalize_user_id(ctx.argv[0], domain=self._services.config.commands.user_domain)

    def _require_group(self, ctx: CommandContext) -> str:
        if ctx.group_id is None or self._services.transport is None:
            raise PreconditionError(GROUP_ONLY)
        return ctx.group_id

    async def _participants(self, group_id: str, failure: str) -> list[Participant]:
        transport = self._services.transport
        if transport is None:
            raise PreconditionError(GROUP_ONLY)
        try:
            return await transport.get_participants(group_id)
        except TransportError as e:
            logger.warning("participants_failed group={} error={}", group_id, e)
            raise PreconditionError(failure) from e

    async def _require_member(self, group_id: str, user_id: str, failure: str) -> None:
        participants = await self._participants(group_id, failure)
        if not any(p.id == user_id for p in participants):
            raise PreconditionError(NOT_IN_GROUP)

    # ── membership ───────────────────────────────────────────────────

    async def ban(self, ctx: CommandContext) -> str:
        user_id = self._target(ctx)
        group_id = self._require_group(ctx)
        failure = "Failed to ban user"
        async with self._services.store.locks.for_key(f"member:{group_id}"):
            await self._require_member(group_id, user_id, failure)
            try:
                await self._services.transport.remove_participants(group_id, [user_id])
            except TransportError as e:
                logger.warning("ban_failed group={} user={} error={}", group_id, user_id, e)
                raise PreconditionError(failure) from e
            self._services.store.ban(user_id)
        return f"🚫 User {user_id} has been banned from the group"

    async def unban(self, ctx: CommandContext) -> str:
        user_id = self._target(ctx)
        if not self._services.store.unban(user_id):
            return "User is not banned"
        return f"✅ User {user_id} has been unbanned"

    async def kick(self, ctx: CommandContext) -> str:
        user_id = self._target(ctx)
        group_id = self._require_group(ctx)
        failure = "Failed to kick user"
        async with self._services.store.locks.for_key(f"member:{group_id}"):
            await self._require_member(group_id, user_id, failure)
            try:
                await self._services.transport.remove_participants(group_id, [user_id])
            except TransportError as e:
                logger.warning("kick_failed group={} user={} error={}", group_id, user_id, e)
                raise PreconditionError(failure) from e
        return f"👢 User {user_id} has been kicked from the group"

    async def promote(self, ctx: CommandContext) -> str:
        user_id = self._target(ctx)
        group_id = self._require_group(ctx)
        failure = "Failed to promote user"
        await self._require_member(group_id, user_id, failure)
        try:
            await self._services.transport.promote_participants(group_id, [user_id])
        except TransportError as e:
            logger.warning("promote_failed group={} user={} error={}", group_id, user_id, e)
            raise PreconditionError(failure) from e
        return f"⬆️ User {user_id} has been promoted to admin"

    async def demote(self, ctx: CommandContext) -> str:
        user_id = self._target(ctx)
        group_id = self._require_group(ctx)
        failure = "Failed to demote user"
        await self._require_member(group_id, user_id, failure)
        try:
            await self._services.transport.demote_participants(group_id, [user_id])
        except TransportError as e:
            logger.warning("demote_failed group={} user={} error={}", group_id, user_id, e)
            raise PreconditionError(failure) from e
        return f"⬇️ User {user_id} has been demoted"

    async def tagall(self, ctx: CommandContext) -> str:
        group_id = self._require_group(ctx)
        participants = await self._participants(group_id, "Failed to tag all members")
        mentions = [
            f"@{user_part(p.id)}" for p in participants if not p.is_admin and not p.is_super_admin
        ][:TAGALL_LIMIT]
        return " ".join(mentions) + "\n\n*This is a tag all message*"

    # ── flags ────────────────────────────────────────────────────────

    async def mute(self, ctx: CommandContext) -> str:
        user_id = self._target(ctx)
        self._services.store.mute(user_id)
        return f"🔇 User {user_id} has been muted"

    async def unmute(self, ctx: CommandContext) -> str:
        user_id = self._target(ctx)
        if not self._services.store.unmute(user_id):
            return "User is not muted"
        return f"🔊 User {user_id} has been unmuted"

    async def lock(self, ctx: CommandContext) -> str:
        if ctx.group_id is None:
            raise PreconditionError(GROUP_ONLY)
        self._services.store.set_locked(ctx.group_id, True)
        logger.info("group_locked group={} by={}", ctx.group_id, ctx.sender)
        return "🔒 Group has been locked. Only admins can send messages now."

    async def unlock(self, ctx: CommandContext) -> str:
        if ctx.group_id is None:
            raise PreconditionError(GROUP_ONLY)
        self._services.store.set_locked(ctx.group_id, False)
        logger.info("group_unlocked group={} by={}", ctx.group_id, ctx.sender)
        return "🔓 Group has been unlocked. Everyone can send messages now."

    # ── configuration ────────────────────────────────────────────────

    async def link(self, ctx: CommandContext) -> str:
        usage = f"Usage: {self._prefix}link allow|block|whitelist|blacklist <domain>"
        argv = ctx.argv
        if not argv:
            return usage
        action = argv[0].lower()
        domain = argv[1] if len(argv) > 1 else ""
        moderation = self._services.config.moderation

        if action == "allow":
            if not domain:
                return f"Specify a domain to allow. Example: {self._prefix}link allow example.com"
            async with self._services.store.locks.for_key("config:allowed_links"):
                moderation.allowed_links.append(domain)
            return f"✅ Domain {domain} added to whitelist."
        if action == "block":
            if not domain:
                return f"Specify a domain to block. Example: {self._prefix}link block example.com"
            async with self._services.store.locks.for_key("config:allowed_links"):
                if domain not in moderation.allowed_links:
                    return "Domain not in whitelist."
                moderation.allowed_links.remove(domain)
            return f"🚫 Domain {domain} removed from whitelist."
        if action == "whitelist":
            lines = [f"{i}. {d}" for i, d in enumerate(moderation.allowed_links, start=1)]
            return "📋 *Allowed Domains*\n\n" + "\n".join(lines)
        if action == "blacklist":
            lines = [f"{i}. {w}" for i, w in enumerate(moderation.banned_words, start=1)]
            return "🚫 *Banned Words*\n\n" + "\n".join(lines)
        return usage

    async def welcome(self, ctx: CommandContext) -> str:
        templates = self._services.config.templates
        if not ctx.args:
            return (
                f"Current welcome message:\n{templates.welcome}\n\n"
                f"Usage: {self._prefix}welcome <message>\n"
                "Use {{user}} for mentioning the new member"
            )
        templates.welcome = ctx.args
        return "✅ Welcome message updated!"

    async def goodbye(self, ctx: CommandContext) -> str:
        templates = self._services.config.templates
        if not ctx.args:
            return (
                f"Current goodbye message:\n{templates.goodbye}\n\n"
                f"Usage: {self._prefix}goodbye <message>\n"
                "Use {{user}} for mentioning the leaving member"
            )
        templates.goodbye = ctx.args
        return "✅ Goodbye message updated!"
