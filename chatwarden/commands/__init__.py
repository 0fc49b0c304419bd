"""Prefix command registry, parsers and command groups."""

from chatwarden.commands.ai import AICommands, chat_reply
from chatwarden.commands.contracts import CommandContext, CommandServices, CommandSpec
from chatwarden.commands.fun import FunCommands
from chatwarden.commands.general import GeneralCommands
from chatwarden.commands.moderation import ModerationCommands
from chatwarden.commands.router import COMMAND_FAILED, UNKNOWN_COMMAND, CommandRouter
from chatwarden.commands.utility import UtilityCommands


def build_router(services: CommandServices) -> CommandRouter:
    """Register every command group against one router."""
    prefix = services.config.commands.prefix
    specs = [
        *GeneralCommands(services).specs(),
        *ModerationCommands(services).specs(),
        *UtilityCommands(services).specs(),
        *AICommands(services).specs(),
        *FunCommands(prefix=prefix).specs(),
    ]
    return CommandRouter(specs, admins=services.admins, store=services.store, prefix=prefix)


__all__ = [
    "AICommands",
    "COMMAND_FAILED",
    "CommandContext",
    "CommandRouter",
    "CommandServices",
    "CommandSpec",
    "FunCommands",
    "GeneralCommands",
    "ModerationCommands",
    "UNKNOWN_COMMAND",
    "UtilityCommands",
    "build_router",
    "chat_reply",
]
