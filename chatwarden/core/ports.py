"""Port interfaces consumed by the moderation and command core."""

from __future__ import annotations

from typing import Protocol

from chatwarden.core.models import InboundEvent, Participant


class TransportPort(Protocol):
    """Messaging transport capabilities. Each call raises ``TransportError`` on failure."""

    async def reply(self, message: InboundEvent, text: str) -> None:
        """Reply to one inbound message in its chat."""

    async def delete(self, message: InboundEvent) -> None:
        """Delete one inbound message for everyone."""

    async def get_participants(self, group_id: str) -> list[Participant]:
        """Return the current participant list of a group."""

    async def remove_participants(self, group_id: str, ids: list[str]) -> None:
        """Remove participants from a group."""

    async def promote_participants(self, group_id: str, ids: list[str]) -> None:
        """Grant group admin rights."""

    async def demote_participants(self, group_id: str, ids: list[str]) -> None:
        """Revoke group admin rights."""

    async def send(self, target_id: str, text: str) -> None:
        """Send a standalone message to a chat or user."""


class CompletionPort(Protocol):
    """Natural-language completion capability.

    Raises ``ConfigurationError`` when credentials are missing and
    ``ProviderError`` on failure or timeout.
    """

    @property
    def configured(self) -> bool:
        """Whether credentials are available."""

    async def complete(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        """Return completion text for one prompt."""

    async def generate_image(self, prompt: str) -> str:
        """Return a URL for one generated image."""


class TelemetryPort(Protocol):
    """Counter telemetry sink."""

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase named counter with optional labels."""
