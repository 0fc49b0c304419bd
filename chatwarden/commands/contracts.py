"""Command handler contracts shared by the router and command groups."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from chatwarden.core.models import InboundEvent

if TYPE_CHECKING:
    from chatwarden.config.schema import Config
    from chatwarden.core.identity import AdminSet
    from chatwarden.core.ports import CompletionPort, TransportPort
    from chatwarden.scheduler.reminders import ReminderScheduler
    from chatwarden.state.store import StateStore


@dataclass(frozen=True, slots=True)
class CommandContext:
    """Normalized invocation of one command."""

    name: str
    args: str
    sender: str
    group_id: str | None = None
    message: InboundEvent | None = None
    is_admin: bool = False

    @property
    def argv(self) -> list[str]:
        return self.args.split()


CommandHandler: TypeAlias = Callable[[CommandContext], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Static metadata for one registered command."""

    name: str
    handler: CommandHandler
    admin_only: bool = False
    refusal: str = ""


@dataclass(slots=True)
class CommandServices:
    """Collaborators injected into every command group."""

    config: Config
    store: StateStore
    admins: AdminSet
    transport: TransportPort | None = None
    completion: CompletionPort | None = None
    scheduler: ReminderScheduler | None = None
