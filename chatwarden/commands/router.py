"""Prefix command registry and dispatcher."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from chatwarden.commands.contracts import CommandContext, CommandSpec
from chatwarden.core.errors import AuthorizationError, ChatWardenError
from chatwarden.core.identity import AdminSet
from chatwarden.core.models import InboundEvent
from chatwarden.state.store import StateStore

UNKNOWN_COMMAND = "Unknown command. Type '{prefix}help' for available commands."
COMMAND_FAILED = "Sorry, there was an error processing your command."


class CommandRouter:
    """Static command registry with a per-command admin gate.

    Handlers raise ``ChatWardenError`` subclasses carrying a user-facing
    message; any other exception is logged and answered with a generic
    apology.
    """

    def __init__(
        self,
        specs: Iterable[CommandSpec],
        *,
        admins: AdminSet,
        store: StateStore,
        prefix: str = "!",
    ):
        self._specs: dict[str, CommandSpec] = {}
        for spec in specs:
            key = spec.name.strip().lower()
            if key in self._specs:
                raise ValueError(f"duplicate command '{key}'")
            self._specs[key] = spec
        self._admins = admins
        self._store = store
        self._prefix = prefix

    async def dispatch(
        self,
        command_line: str,
        sender: str,
        *,
        group_id: str | None = None,
        message: InboundEvent | None = None,
    ) -> str | None:
        """Run one command line (body without prefix) and return the reply.

        Returns ``None`` when the sender is muted.
        """
        parts = command_line.strip().split(None, 1)
        name = parts[0].lower() if parts else ""
        args = parts[1].strip() if len(parts) > 1 else ""

        if self._store.is_muted(sender):
            logger.info("command_ignored sender={} command={} reason=muted", sender, name)
            return None

        spec = self._specs.get(name)
        if spec is None:
            logger.debug("command_unknown sender={} command={}", sender, name)
            return UNKNOWN_COMMAND.format(prefix=self._prefix)

        is_admin = self._admins.is_admin(sender)
        ctx = CommandContext(
            name=name,
            args=args,
            sender=sender,
            group_id=group_id,
            message=message,
            is_admin=is_admin,
        )
        try:
            if spec.admin_only and not is_admin:
                raise AuthorizationError(spec.refusal or f"Only admins can use {self._prefix}{name}")
            reply = await spec.handler(ctx)
        except AuthorizationError as e:
            logger.info("command_refused sender={} command={}", sender, name)
            return str(e)
        except ChatWardenError as e:
            logger.info("command_rejected sender={} command={} error={}", sender, name, e)
            return str(e)
        except Exception:
            logger.exception("command_failed sender={} command={}", sender, name)
            return COMMAND_FAILED
        logger.info("command_handled sender={} command={}", sender, name)
        return reply
