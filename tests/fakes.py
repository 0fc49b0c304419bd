"""Fake ports and shared identities for tests."""

from __future__ import annotations

from chatwarden.core.errors import ConfigurationError, TransportError
from chatwarden.core.models import InboundEvent, Participant

ADMIN = "1000@c.us"
USER = "2000@c.us"
OTHER = "3000@c.us"
GROUP = "120363000000@g.us"


class FakeTransport:
    def __init__(self, participants: dict[str, list[Participant]] | None = None) -> None:
        self.participants = participants or {
            GROUP: [
                Participant(ADMIN, is_admin=True, is_super_admin=True),
                Participant(USER),
                Participant(OTHER),
                Participant("4000@c.us", is_admin=True),
            ]
        }
        self.replies: list[tuple[str, str]] = []
        self.deleted: list[str | None] = []
        self.sent: list[tuple[str, str]] = []
        self.removed: list[tuple[str, list[str]]] = []
        self.promoted: list[tuple[str, list[str]]] = []
        self.demoted: list[tuple[str, list[str]]] = []
        self.fail_on: set[str] = set()

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise TransportError(operation, "boom")

    async def reply(self, message: InboundEvent, text: str) -> None:
        self._maybe_fail("reply")
        self.replies.append((message.chat_id, text))

    async def delete(self, message: InboundEvent) -> None:
        self._maybe_fail("delete")
        self.deleted.append(message.message_id)

    async def get_participants(self, group_id: str) -> list[Participant]:
        self._maybe_fail("get_participants")
        return list(self.participants.get(group_id, []))

    async def remove_participants(self, group_id: str, ids: list[str]) -> None:
        self._maybe_fail("remove")
        self.removed.append((group_id, list(ids)))
        self.participants[group_id] = [p for p in self.participants.get(group_id, []) if p.id not in ids]

    async def promote_participants(self, group_id: str, ids: list[str]) -> None:
        self._maybe_fail("promote")
        self.promoted.append((group_id, list(ids)))

    async def demote_participants(self, group_id: str, ids: list[str]) -> None:
        self._maybe_fail("demote")
        self.demoted.append((group_id, list(ids)))

    async def send(self, target_id: str, text: str) -> None:
        self._maybe_fail("send")
        self.sent.append((target_id, text))


class FakeCompletion:
    def __init__(
        self,
        text: str = "ok",
        *,
        configured: bool = True,
        error: Exception | None = None,
        image_url: str = "https://images.test/cat.png",
    ) -> None:
        self.text = text
        self._configured = configured
        self.error = error
        self.image_url = image_url
        self.calls: list[tuple[str, float, int]] = []
        self.image_prompts: list[str] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def complete(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        self.calls.append((prompt, temperature, max_tokens))
        if not self._configured:
            raise ConfigurationError("no key")
        if self.error is not None:
            raise self.error
        return self.text

    async def generate_image(self, prompt: str) -> str:
        self.image_prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.image_url


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
